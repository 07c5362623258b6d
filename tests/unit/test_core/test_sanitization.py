"""Tests for input sanitization utilities."""
import uuid

import pytest

from app.core.sanitization import (
    MAX_NAME_LENGTH,
    MAX_SCAN_LENGTH,
    parse_token,
    sanitize_name,
    sanitize_optional,
    sanitize_text,
)


@pytest.mark.unit
class TestSanitizeText:
    """Tests for sanitize_text function."""

    def test_sanitize_basic_text(self):
        assert sanitize_text("Hello World") == "Hello World"

    def test_sanitize_with_html_tags(self):
        """Test that HTML tags are stripped."""
        result = sanitize_text("<script>alert('xss')</script>")
        assert result == "alert('xss')"

    def test_sanitize_keeps_ampersand_and_quotes(self):
        assert sanitize_text('Tom & "Jerry"') == 'Tom & "Jerry"'

    def test_sanitize_collapses_whitespace(self):
        assert sanitize_text("  Spring \n\t Gala  ") == "Spring Gala"

    def test_sanitize_rejects_too_long(self):
        with pytest.raises(ValueError, match="maximum length"):
            sanitize_text("x" * 11, max_length=10)

    def test_sanitize_rejects_stray_brackets(self):
        with pytest.raises(ValueError, match="HTML-like"):
            sanitize_text("a < b")

    def test_sanitize_rejects_non_string(self):
        with pytest.raises(ValueError, match="must be a string"):
            sanitize_text(42)


@pytest.mark.unit
class TestSanitizeNames:
    """Required and optional fields."""

    def test_name(self):
        assert sanitize_name(" Ada ") == "Ada"

    def test_empty_name_uses_field_label(self):
        with pytest.raises(ValueError, match="Title cannot be empty"):
            sanitize_name("<b></b>", field="Title")

    def test_name_too_long(self):
        with pytest.raises(ValueError):
            sanitize_name("x" * (MAX_NAME_LENGTH + 1))

    def test_optional_blank_is_none(self):
        assert sanitize_optional("   ", 50) is None
        assert sanitize_optional(None, 50) is None
        assert sanitize_optional(" +1 555 ", 50) == "+1 555"


@pytest.mark.unit
class TestParseToken:
    """Scanned text to canonical invite token."""

    def test_canonical(self):
        token = str(uuid.uuid4())
        assert parse_token(token) == token

    def test_normalizes_case_and_whitespace(self):
        token = str(uuid.uuid4())
        assert parse_token(f"\t{token.upper()}  \r\n") == token

    @pytest.mark.parametrize("scanned, message", [
        ("", "empty"),
        ("  \n", "empty"),
        ("x" * (MAX_SCAN_LENGTH + 1), "too long"),
        ("not-a-uuid", "not an invitation code"),
        ("7f0c1b9e3c5d4a439a2e1d2f5c6b7a80", "not an invitation code"),
        ("{7f0c1b9e-3c5d-4a43-9a2e-1d2f5c6b7a80}", "not an invitation code"),
        ("7f0c1b9e-3c5d-4a43-9a2e-1d2f5c6b7a8g", "not an invitation code"),
    ])
    def test_rejects(self, scanned, message):
        with pytest.raises(ValueError, match=message):
            parse_token(scanned)

    def test_rejects_non_string(self):
        with pytest.raises(ValueError):
            parse_token(None)
