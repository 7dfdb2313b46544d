from __future__ import annotations

import io
from typing import BinaryIO

import qrcode
from PIL import Image, UnidentifiedImageError

from ..core.constants import QR_BACK_COLOR, QR_FILL_COLOR
from ..core.exceptions import ScanDecodeError


def render_qr_png(data: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """Render `data` as a PNG QR code in the brand colours."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color=QR_FILL_COLOR, back_color=QR_BACK_COLOR)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(stream: BinaryIO) -> str:
    """Decode the first QR code found in an uploaded image."""
    # pyzbar loads the zbar shared library on import; only needed on this path.
    from pyzbar.pyzbar import decode as pyzbar_decode

    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ScanDecodeError("Unreadable image file") from e

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ScanDecodeError("No QR code found in the image")

    return decoded[0].data.decode("utf-8").strip()
