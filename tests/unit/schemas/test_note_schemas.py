"""
Unit Tests for Note Schemas.
"""

import pytest
from pydantic import ValidationError

from notekeeper.models.note import NoteColor
from notekeeper.schemas.note import NoteCreate, NoteUpdate, ReorderRequest


class TestNoteCreate:
    def test_defaults(self):
        data = NoteCreate(title="Shopping")

        assert data.content == ""
        assert data.labels == []
        assert data.color is NoteColor.DEFAULT
        assert data.category == "regular"

    def test_content_alone_is_enough(self):
        assert NoteCreate(content="just a body").title == ""

    def test_blank_note_is_rejected(self):
        with pytest.raises(ValidationError, match="title or content"):
            NoteCreate(title="  ", content="\n")

    def test_title_length_limit(self):
        NoteCreate(title="t" * 180)
        with pytest.raises(ValidationError):
            NoteCreate(title="t" * 181)

    def test_content_length_limit(self):
        NoteCreate(content="c" * 30000)
        with pytest.raises(ValidationError):
            NoteCreate(content="c" * 30001)

    def test_labels_are_trimmed(self):
        assert NoteCreate(title="x", labels=["  home ", "work"]).labels == ["home", "work"]

    @pytest.mark.parametrize("label", ["", "   ", "elevenchars"])
    def test_label_length_limits(self, label):
        with pytest.raises(ValidationError, match="label"):
            NoteCreate(title="x", labels=[label])

    def test_label_count_limit(self):
        NoteCreate(title="x", labels=["l"] * 50)
        with pytest.raises(ValidationError):
            NoteCreate(title="x", labels=["l"] * 51)

    def test_color_outside_palette_is_rejected(self):
        with pytest.raises(ValidationError):
            NoteCreate(title="x", color="ultraviolet")

    def test_category_is_not_resolved_here(self):
        """Unknown names are reported by the service as invalid categories."""
        assert NoteCreate(title="x", category="starred").category == "starred"


class TestNoteUpdate:
    def test_all_fields_optional(self):
        data = NoteUpdate()

        assert data.model_dump(exclude_unset=True) == {}

    def test_blanking_both_text_fields_is_rejected(self):
        with pytest.raises(ValidationError, match="title or content"):
            NoteUpdate(title="", content=" ")

    def test_blanking_one_text_field_is_allowed(self):
        assert NoteUpdate(title="").title == ""

    def test_labels_validated_when_present(self):
        assert NoteUpdate(labels=[" a "]).labels == ["a"]
        with pytest.raises(ValidationError):
            NoteUpdate(labels=["much-too-long"])


class TestReorderRequest:
    def test_requires_category_and_ids(self):
        with pytest.raises(ValidationError):
            ReorderRequest(note_ids=[])

    def test_accepts_empty_batch(self):
        assert ReorderRequest(category="pinned", note_ids=[]).note_ids == []
