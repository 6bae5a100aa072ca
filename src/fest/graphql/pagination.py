"""Opaque cursors for event connections."""

import base64
import binascii

_PREFIX = "Event:"


def encode_cursor(event_id: int) -> str:
    """Encode an event id as an opaque cursor."""
    return base64.urlsafe_b64encode(f"{_PREFIX}{event_id}".encode()).decode("ascii")


def decode_cursor(cursor: str) -> int:
    """
    Decode a cursor produced by encode_cursor.

    Raises:
        ValueError: If the cursor is not a valid event cursor
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError) as e:
        raise ValueError(f"Invalid cursor: {cursor!r}") from e

    if not raw.startswith(_PREFIX) or not raw[len(_PREFIX) :].isdigit():
        raise ValueError(f"Invalid cursor: {cursor!r}")
    return int(raw[len(_PREFIX) :])
