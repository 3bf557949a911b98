"""
Integration Tests for Note Search.
"""

from datetime import datetime, timedelta
from unittest.mock import patch

from notekeeper.schemas.note import NoteCreate, NoteUpdate


def _clock(start: datetime = datetime(2024, 1, 1)):
    """utc_now replacement that advances one minute per call."""
    ticks = iter(range(10_000))
    return lambda: start + timedelta(minutes=next(ticks))


async def _create(note_service, user_id, **fields):
    return await note_service.create_note(user_id, NoteCreate(**fields))


class TestSearch:
    async def test_matches_title_content_and_labels(self, note_service, user_id):
        with patch("notekeeper.services.transitions.utc_now", side_effect=_clock()):
            by_title = await _create(note_service, user_id, title="Garden plans")
            by_content = await _create(note_service, user_id, content="plant the garden")
            by_label = await _create(note_service, user_id, title="x", labels=["garden"])
            await _create(note_service, user_id, title="unrelated")

        results = await note_service.search_notes(user_id, "garden")

        assert [n.id for n in results] == [by_label.id, by_content.id, by_title.id]

    async def test_case_insensitive(self, note_service, user_id):
        note = await _create(note_service, user_id, title="Tax Return")

        results = await note_service.search_notes(user_id, "  tAX  ")

        assert [n.id for n in results] == [note.id]

    async def test_blank_query_returns_nothing(self, note_service, user_id):
        await _create(note_service, user_id, title="something")

        assert await note_service.search_notes(user_id, "") == []
        assert await note_service.search_notes(user_id, "   ") == []

    async def test_excludes_bin(self, note_service, user_id):
        kept = await _create(note_service, user_id, title="recipe one", category="archived")
        binned = await _create(note_service, user_id, title="recipe two")
        await note_service.toggle_delete(user_id, binned.id)

        results = await note_service.search_notes(user_id, "recipe")

        assert [n.id for n in results] == [kept.id]

    async def test_only_own_notes(self, note_service, user_id, other_user_id):
        await _create(note_service, other_user_id, title="shared word")

        assert await note_service.search_notes(user_id, "shared") == []

    async def test_result_cap(self, note_service, user_id):
        with patch("notekeeper.services.transitions.utc_now", side_effect=_clock()):
            created = [
                await _create(note_service, user_id, title=f"item {i}") for i in range(25)
            ]

        results = await note_service.search_notes(user_id, "item")

        assert len(results) == 20
        assert results[0].id == created[-1].id

    async def test_edit_moves_note_to_front(self, note_service, user_id):
        with patch("notekeeper.services.transitions.utc_now", side_effect=_clock()):
            first = await _create(note_service, user_id, title="todo a")
            second = await _create(note_service, user_id, title="todo b")
        later = datetime(2030, 1, 1)

        with patch("notekeeper.services.transitions.utc_now", return_value=later):
            await note_service.update_note(user_id, first.id, NoteUpdate(content="now"))

        results = await note_service.search_notes(user_id, "todo")

        assert [n.id for n in results] == [first.id, second.id]
