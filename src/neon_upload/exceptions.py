"""Upload errors surfaced to clients as ``{error, details?}`` JSON."""

from __future__ import annotations


class UploadError(Exception):
    """Base class for every error the upload endpoint reports."""

    status_code: int = 500

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class UploadValidationError(UploadError):
    """Raised when the submitted file is missing, unsupported or too large."""

    status_code = 400


class UploadInternalError(UploadError):
    """Raised when the upload fails for a reason the client cannot fix."""

    status_code = 500

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__("Upload failed", details=str(cause) or type(cause).__name__)
