"""General utility functions."""
import re
from datetime import datetime, timezone

def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)

def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def safe_filename(name: str, fallback: str = "invite") -> str:
    """Make a display name usable as a single path component."""
    cleaned = name.replace("/", "-").replace("\\", "-")
    cleaned = re.sub(r'[\x00-\x1f]', '', cleaned).strip()
    return cleaned or fallback
