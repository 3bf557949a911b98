"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Every exception carries a stable error code; the HTTP status is resolved
by the exception handlers from the class hierarchy.
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        code: str = "SYS_INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict | None = None,
        code: str = "VAL_VALIDATION_ERROR",
    ) -> None:
        super().__init__(message, code=code, details=details)


class InvalidIdentifierError(ValidationError):
    """Raised when a note identifier is malformed."""

    def __init__(self, message: str = "Invalid note ID format", details: dict | None = None) -> None:
        super().__init__(message, details=details, code="VAL_INVALID_IDENTIFIER")


class InvalidCategoryError(ValidationError):
    """Raised for an unknown category or a category the operation does not allow."""

    def __init__(self, message: str = "Invalid category", details: dict | None = None) -> None:
        super().__init__(message, details=details, code="VAL_INVALID_CATEGORY")


class BatchTooLargeError(ValidationError):
    """Raised when a reorder batch exceeds the configured ceiling."""

    def __init__(self, message: str = "Reorder batch too large", details: dict | None = None) -> None:
        super().__init__(message, details=details, code="VAL_BATCH_TOO_LARGE")


class AuthenticationError(ApplicationError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class AuthorizationError(ApplicationError):
    """Raised when the acting user does not own the resource."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message, code="AUTHZ_FORBIDDEN")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(
        self,
        message: str = "Resource conflict",
        code: str = "RES_CONFLICT",
        details: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class SetMismatchError(ConflictError):
    """
    Raised when a reorder batch does not match the partition's live membership.

    Details name the ids that could not be found in the partition
    (``missing_ids``) and the ids present in the partition but absent
    from the batch (``unlisted_ids``).
    """

    def __init__(
        self,
        message: str = "Reorder batch does not match the notes in this category",
        missing_ids: list[str] | None = None,
        unlisted_ids: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if missing_ids:
            details["missing_ids"] = missing_ids
        if unlisted_ids:
            details["unlisted_ids"] = unlisted_ids
        super().__init__(message, code="RES_SET_MISMATCH", details=details)


class PreconditionFailedError(ConflictError):
    """Raised when an operation requires a state the resource is not in."""

    def __init__(self, message: str = "Precondition failed") -> None:
        super().__init__(message, code="RES_PRECONDITION_FAILED")


class TransactionConflictError(ConflictError):
    """Raised when the database aborted a transaction due to concurrent modification."""

    def __init__(
        self,
        message: str = "The note was changed by another request. Please try again.",
    ) -> None:
        super().__init__(message, code="DB_TRANSACTION_CONFLICT")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error", code: str = "SYS_DATABASE_ERROR") -> None:
        super().__init__(message, code=code)


class StorageUnavailableError(DatabaseError):
    """Raised when the database cannot be reached."""

    def __init__(
        self,
        message: str = "Storage is temporarily unavailable. Please try again.",
    ) -> None:
        super().__init__(message, code="SYS_STORAGE_UNAVAILABLE")
