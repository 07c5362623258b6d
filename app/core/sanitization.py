"""Input sanitization utilities."""
import re
import uuid
from typing import Optional


# Maximum length constraints for security
MAX_NAME_LENGTH = 200       # Contact names, event titles, template names
MAX_SUBTITLE_LENGTH = 500
MAX_PHONE_LENGTH = 50
MAX_EMAIL_LENGTH = 254
MAX_ADDRESS_LENGTH = 500
MAX_SCAN_LENGTH = 512       # Anything a barcode decoder hands us beyond this is junk

# Canonical token form: 8-4-4-4-12 hex digits, as produced by str(uuid.UUID)
TOKEN_PATTERN = re.compile(
    r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$'
)


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize text input.

    Strips HTML tags and normalizes whitespace. Names end up printed into
    image metadata and export file names, so markup is never kept.

    Args:
        text: The input text to sanitize
        max_length: Optional maximum length to enforce
        strip_html: Whether to strip HTML tags (default True)

    Returns:
        Sanitized text with HTML tags removed and whitespace normalized

    Raises:
        ValueError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    # Reject inputs that still contain HTML-like patterns after stripping
    if '<' in sanitized or '>' in sanitized:
        raise ValueError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def sanitize_name(name: str, field: str = "Name") -> str:
    """
    Sanitize a required display name (contact name, event title, template name).

    Raises:
        ValueError: If the name is empty after sanitization or too long
    """
    sanitized = sanitize_text(name, max_length=MAX_NAME_LENGTH)

    if not sanitized:
        raise ValueError(f"{field} cannot be empty")

    return sanitized


def sanitize_optional(text: Optional[str], max_length: int) -> Optional[str]:
    """Sanitize an optional field, collapsing blank input to None."""
    if text is None:
        return None
    sanitized = sanitize_text(text, max_length=max_length)
    return sanitized or None


def parse_token(scanned_text: str) -> str:
    """
    Parse scanned QR text into a canonical invite token.

    The token is the invite id rendered as a hyphenated UUID string. Scanners
    may hand back surrounding whitespace or uppercase hex; both are accepted
    and normalized. Anything else is rejected before it reaches the database.

    Args:
        scanned_text: Raw text from a barcode decoder (untrusted)

    Returns:
        The canonical lowercase token

    Raises:
        ValueError: If the text is not a canonical UUID string
    """
    if not isinstance(scanned_text, str):
        raise ValueError("Scanned code must be a string")

    token = scanned_text.strip()

    if not token:
        raise ValueError("Scanned code is empty")

    if len(token) > MAX_SCAN_LENGTH:
        raise ValueError("Scanned code is too long")

    # uuid.UUID also accepts braces, urn: prefixes and unhyphenated hex,
    # none of which we ever print into a QR code
    if not TOKEN_PATTERN.match(token):
        raise ValueError("Scanned code is not an invitation code")

    return str(uuid.UUID(token))
