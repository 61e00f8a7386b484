"""
Error types shared by the repository, the pure grading/validation functions
and the routers.
"""

from typing import Any, Dict, Optional


class RegistrarError(Exception):
    """Base exception for all registrar errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(RegistrarError):
    """User-correctable input error, optionally tied to one field."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="VALIDATION_FAILED", details=details)
        self.field = field


class SubmissionRejected(ValidationError):
    """Raised when a submission attempt fails one of the participant rules."""
    pass


class DuplicateRecordError(ValidationError):
    """Raised when a business key is already taken."""
    pass


class NotFoundError(RegistrarError):
    """Raised when a referenced student, course, assignment or submission is missing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="NOT_FOUND", details=details)


class PersistenceError(RegistrarError):
    """Raised when a call to the document store fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="PERSISTENCE_ERROR", details=details)
