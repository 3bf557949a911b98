"""
Integration Test Fixtures.

Fixtures for integration tests - uses real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.database import get_db_session
from notekeeper.core.dependencies import get_current_user, get_note_cipher
from notekeeper.models.note import NoteCategory
from notekeeper.schemas.note import NoteCreate
from notekeeper.services.note import NoteService


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def note_service(db_session: AsyncSession, cipher) -> NoteService:
    """NoteService on the test session with small, test-friendly limits."""
    return NoteService(db_session, cipher, reorder_max_batch=10, search_max_results=20)


@pytest.fixture
def seed(note_service: NoteService, user_id: str):
    """
    Create notes so that they end up in the given top-to-bottom order.

    Usage:
        ids = await seed("a", "b", "c")                  # regular: a@0, b@1, c@2
        ids = await seed("p", category="pinned")
    """

    async def _seed(
        *titles: str,
        category: str = "regular",
        owner: str | None = None,
    ) -> dict[str, str]:
        ids = {}
        for title in reversed(titles):
            note = await note_service.create_note(
                owner or user_id,
                NoteCreate(title=title, category=category),
            )
            ids[title] = note.id
        return ids

    return _seed


@pytest.fixture
def layout(note_service: NoteService, user_id: str):
    """
    Read a category as (title, rank) pairs, most prominent first.

    Usage:
        assert await layout("regular") == [("a", 0), ("c", 1)]
    """

    async def _layout(category: str, owner: str | None = None) -> list[tuple[str, int]]:
        notes = await note_service.list_notes(owner or user_id, category)
        return [(note.title, note.rank) for note in notes]

    return _layout


@pytest.fixture
def assert_dense(note_service: NoteService, user_id: str):
    """Check that every category of the user has ranks exactly 0..n-1."""

    async def _assert_dense(owner: str | None = None) -> None:
        for category in NoteCategory:
            notes = await note_service.list_notes(owner or user_id, category)
            ranks = [note.rank for note in notes]
            assert ranks == list(range(len(notes))), (
                f"{category.value} ranks not dense: {ranks}"
            )

    return _assert_dense


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
    user_id: str,
    cipher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client acting as ``user_id``.

    The database session, the acting user and the cipher are overridden;
    everything else runs as in production.

    Usage:
        async def test_list(client: AsyncClient):
            response = await client.get("/api/v1/notes")
            assert response.status_code == 200
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    from notekeeper.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_current_user] = lambda: user_id
    app.dependency_overrides[get_note_cipher] = lambda: cipher

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def anonymous_client(
    db_session: AsyncSession,
    cipher,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with real bearer-token authentication."""

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    from notekeeper.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_note_cipher] = lambda: cipher

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
