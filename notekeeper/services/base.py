"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, own the transaction scope of every
mutation, and translate storage failures into application errors.

Usage:
    from notekeeper.services.base import BaseService

    class NoteService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)

        async def toggle_pin(self, user_id: str, note_id: str) -> Note:
            async with self._atomic("toggle_pin") as tx:
                ...
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import (
    DBAPIError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.database import transaction
from notekeeper.core.exceptions import (
    ApplicationError,
    DatabaseError,
    StorageUnavailableError,
    TransactionConflictError,
)
from notekeeper.core.logging import get_logger

logger = get_logger(__name__)

# serialization_failure, deadlock_detected
CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})


def _sqlstate(error: DBAPIError) -> str | None:
    orig = error.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def is_conflict(error: SQLAlchemyError) -> bool:
    """Whether the database aborted the statement because of a concurrent writer."""
    if not isinstance(error, DBAPIError):
        return False
    if _sqlstate(error) in CONFLICT_SQLSTATES:
        return True
    return "database is locked" in str(error.orig).lower()


def is_unavailable(error: SQLAlchemyError) -> bool:
    """Whether the failure means the database could not be reached."""
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True
    return isinstance(error, (InterfaceError, OperationalError))


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session management
    - Logging context
    - Transaction scopes with storage error translation

    Subclasses should:
    - Call super().__init__(session) in their __init__
    - Run every mutation inside ``self._atomic(...)``
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the service with a database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    @asynccontextmanager
    async def _atomic(self, operation: str) -> AsyncIterator[AsyncSession]:
        """
        Run a block in one transaction scope.

        Everything written inside the block commits together or not at all.
        SQLAlchemy errors escaping the block are logged with the driver
        message and re-raised as application errors carrying a generic
        message.

        Args:
            operation: Description of the operation for logging

        Raises:
            TransactionConflictError: The database aborted on a concurrent write
            StorageUnavailableError: The database could not be reached
            DatabaseError: Any other storage failure
        """
        try:
            async with transaction(self._session) as tx:
                yield tx
        except SQLAlchemyError as e:
            raise self._translate(operation, e) from e

    def _translate(self, operation: str, error: SQLAlchemyError) -> ApplicationError:
        context = {
            "service": self.__class__.__name__,
            "operation": operation,
            "error": str(error),
        }
        if is_conflict(error):
            self._logger.warning("Transaction conflict", extra=context)
            return TransactionConflictError()
        if is_unavailable(error):
            self._logger.error("Storage unavailable", extra=context)
            return StorageUnavailableError()
        self._logger.error("Database error", extra=context)
        return DatabaseError(f"Database operation failed: {operation}")

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
