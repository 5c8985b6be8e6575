# chatrelay/services/validator.py
"""Input checks shared by the event router. Pure, never raise."""

import re

_ROOM_ID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def is_valid_room_id(value) -> bool:
    """True if value is a hyphenated 8-4-4-4-12 hex identifier (any case)."""
    if not isinstance(value, str):
        return False
    return _ROOM_ID_RE.fullmatch(value) is not None


def is_non_empty_text(value) -> bool:
    """True if value is a string with something left after trimming."""
    return isinstance(value, str) and len(value.strip()) > 0
