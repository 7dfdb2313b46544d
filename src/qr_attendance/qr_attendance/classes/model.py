from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..common.row_schema import req_int, req_str


@dataclass(frozen=True)
class SchoolClass:
    """A subject/class that teachers issue QR sessions for."""

    class_id: int
    name: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SchoolClass":
        return cls(class_id=req_int(row, "class_id", "classes"), name=req_str(row, "name", "classes"))
