"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.config import get_app_config, get_settings
from notekeeper.core.crypto import FernetCipher, NoteCipher
from notekeeper.core.database import get_db_session
from notekeeper.core.exceptions import AuthenticationError
from notekeeper.core.logging import get_logger
from notekeeper.core.security import authenticate
from notekeeper.services.note import NoteService

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_bearer = HTTPBearer(auto_error=False)


async def get_request_id(
    request: Request,
    x_request_id: str | None = Header(None),
) -> str:
    """
    Get the request ID assigned by RequestContextMiddleware.

    Falls back to the X-Request-ID header, or a fresh id, when the
    middleware is not installed.
    """
    state_id = getattr(request.state, "request_id", None)
    return state_id or x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """
    Resolve the acting user from the bearer token.

    Returns:
        The user id carried in the token's subject

    Raises:
        AuthenticationError: If the token is missing or invalid
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")
    return authenticate(credentials.credentials)


CurrentUser = Annotated[str, Depends(get_current_user)]


@lru_cache
def get_note_cipher() -> NoteCipher:
    """Cipher for note text, keyed by NOTE_SECRET_KEY."""
    return FernetCipher(get_settings().note_secret_key)


def get_note_service(
    db: DbSession,
    cipher: NoteCipher = Depends(get_note_cipher),
) -> NoteService:
    """Build a NoteService for the request."""
    notes_config = get_app_config().notes
    return NoteService(
        db,
        cipher,
        reorder_max_batch=notes_config.reorder_max_batch,
        search_max_results=notes_config.search_max_results,
    )


Notes = Annotated[NoteService, Depends(get_note_service)]
