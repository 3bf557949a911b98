"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from cryptography.fernet import Fernet

from notekeeper.core.config_schema import JwtSchema, NotesSchema, SecuritySchema

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-testing-purposes"


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_processor(mock_db_session: AsyncMock):
            processor = ReorderBatchProcessor(mock_db_session, max_batch=10)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


# =============================================================================
# Settings Stub Fixtures
# =============================================================================


@pytest.fixture
def stub_settings() -> SimpleNamespace:
    """
    Secrets with test values.

    Usage:
        def test_with_settings(stub_settings):
            with patch("module.get_settings", return_value=stub_settings):
                ...
    """
    return SimpleNamespace(
        db_password="test_pass",
        jwt_secret=TEST_JWT_SECRET,
        note_secret_key=Fernet.generate_key().decode(),
    )


@pytest.fixture
def stub_app_config() -> SimpleNamespace:
    """YAML configuration built from the real schema classes."""
    return SimpleNamespace(
        security=SecuritySchema(
            jwt=JwtSchema(
                algorithm="HS256",
                access_token_expire_minutes=30,
                audience="test-api",
            ),
        ),
        notes=NotesSchema(reorder_max_batch=10, search_max_results=20),
    )
