"""
Custom exception classes for the application
"""
from typing import Any, Dict, List, Optional, Union

Details = Union[List[Dict[str, Any]], Dict[str, Any]]


class AppError(Exception):
    """
    Base exception for the ATS.

    Every subclass carries the HTTP status and the machine readable code the
    transport layer puts in the error envelope.
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Details] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return error


class ValidationError(AppError):
    """Malformed input; details enumerate ``{field, message}`` pairs"""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed", details: Optional[Details] = None):
        super().__init__(message, details=details)


class NotFoundError(AppError):
    """Resource not found errors"""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", identifier: Optional[Any] = None):
        message = f"{resource} not found"
        if identifier is not None:
            message += f": {identifier}"
        self.resource = resource
        super().__init__(message)


class DuplicateError(AppError):
    """Unique constraint violation on ``field``"""

    status_code = 409
    code = "DUPLICATE_ERROR"

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f"A record with this {field} already exists",
            details={"field": field},
        )


class DatabaseError(AppError):
    """Unexpected persistence failure. The cause is logged, never returned."""

    status_code = 500
    code = "DATABASE_ERROR"


class FileUploadError(AppError):
    """Disallowed type, oversize or malformed upload"""

    status_code = 400
    code = "FILE_UPLOAD_ERROR"
