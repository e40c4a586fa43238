"""
Identifier and text validation.
"""

from uuid import UUID, uuid4

import pytest

from app.core.errors import InvalidIdentifier, ValidationFailed
from app.utils.identifiers import parse_identifier, parse_optional_identifier, require_text


class TestParseIdentifier:

    def test_accepts_canonical_and_bare_forms(self):
        value = uuid4()
        assert parse_identifier(str(value), "video_id") == value
        assert parse_identifier(value.hex.upper(), "video_id") == value
        assert parse_identifier(f"  {value}  ", "video_id") == value

    def test_passes_uuid_through(self):
        value = uuid4()
        assert parse_identifier(value, "video_id") is value

    @pytest.mark.parametrize("raw", ["", "   ", "not-a-uuid", "507f1f77bcf86cd799439011", None, 42])
    def test_rejects_malformed_values(self, raw):
        with pytest.raises(InvalidIdentifier) as info:
            parse_identifier(raw, "video_id")
        assert info.value.field == "video_id"
        assert info.value.status_code == 400

    def test_optional_identifier_treats_blank_as_absent(self):
        assert parse_optional_identifier(None, "user_id") is None
        assert parse_optional_identifier("  ", "user_id") is None
        assert isinstance(parse_optional_identifier(str(uuid4()), "user_id"), UUID)
        with pytest.raises(InvalidIdentifier):
            parse_optional_identifier("nope", "user_id")


class TestRequireText:

    def test_strips_surrounding_whitespace(self):
        assert require_text("  hello  ", "content") == "hello"

    @pytest.mark.parametrize("raw", [None, "", "  ", "\n\t"])
    def test_blank_text_fails(self, raw):
        with pytest.raises(ValidationFailed) as info:
            require_text(raw, "content")
        assert "content" in info.value.message
