"""
Unit Tests for Core Utilities.
"""

import uuid

import pytest

from notekeeper.core.exceptions import InvalidIdentifierError
from notekeeper.core.utils import parse_note_id, utc_now


class TestParseNoteId:
    def test_returns_canonical_form(self):
        value = uuid.uuid4()

        assert parse_note_id(str(value).upper()) == str(value)

    @pytest.mark.parametrize("value", ["", "123", "not-a-uuid", "zzzzzzzz-zzzz-zzzz-zzzz-zzzzzzzzzzzz"])
    def test_rejects_malformed_ids(self, value):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            parse_note_id(value)

        assert exc_info.value.code == "VAL_INVALID_IDENTIFIER"
        assert exc_info.value.details == {"note_id": value}


def test_utc_now_is_naive():
    assert utc_now().tzinfo is None
