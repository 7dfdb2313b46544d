class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class DuplicateRegistrationError(AuthenticationError):
    """Raised when signing up with an email that already has an account."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class RecordSchemaError(DomainError):
    """Raised when a row fetched from the store does not match its schema."""


class SessionIssueError(DomainError):
    """Raised when a QR session could not be persisted."""


class ScanDecodeError(ValidationError):
    """Raised when an uploaded image does not contain a readable QR code."""


class QrVerificationError(DomainError):
    """Base for scan rejections; `code` is the stable kind sent to clients."""

    code = "qr-verification-failed"


class InvalidTokenError(QrVerificationError):
    code = "invalid-or-unknown-token"


class ExpiredTokenError(QrVerificationError):
    code = "expired-token"


class DuplicateAttendanceError(QrVerificationError):
    code = "duplicate-attendance"
