#!/usr/bin/env python3
"""
Text and timestamp helpers for Facebook exports

Facebook writes JSON strings as UTF-8 bytes with every byte escaped as its
own code point (mojibake such as "Ã©" for "é"). decode_fb_string undoes that.
It is not idempotent, so apply it once and only to values read from the
export.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

# Textual dates found in the HTML export, most common first
HTML_DATE_FORMATS = [
    "%b %d, %Y %I:%M:%S %p",  # "Jan 02, 2021 3:04:05 pm"
    "%b %d, %Y %I:%M %p",  # "Jan 02, 2021 3:04 pm"
    "%b %d, %Y, %I:%M %p",  # "Jan 02, 2021, 3:04 PM" (older exports)
    "%B %d, %Y %I:%M:%S %p",
    "%B %d, %Y %I:%M %p",
]


def decode_fb_string(value):
    """Re-decode a Latin-1 escaped UTF-8 string.

    Anything that is not a non-empty string is returned unchanged.

    Example:
        >>> decode_fb_string("Caf\\u00c3\\u00a9")
        'Café'
        >>> decode_fb_string("plain")
        'plain'
    """
    if not value or not isinstance(value, str):
        return value
    try:
        return value.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return value


def epoch_to_datetime(seconds) -> Optional[datetime]:
    """Convert archive epoch seconds to an aware UTC datetime.

    Returns None for missing, zero or unparsable values.
    """
    if seconds in (None, "", 0):
        return None
    try:
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.debug(f"Ignoring invalid epoch timestamp: {seconds!r}")
        return None


def parse_html_date(text: Optional[str]) -> Optional[datetime]:
    """Parse a date string from the HTML export into UTC.

    Naive values are taken as UTC. Returns None when no format matches.
    """
    if not text:
        return None
    text = " ".join(text.split())

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in HTML_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        logger.debug(f"Unrecognised HTML date: {text!r}")
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_iso_datetime(text: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 instant (Graph API created_time) into UTC."""
    if not text:
        return None
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # Graph API writes offsets without a colon: 2021-01-01T12:00:00+0000
    if len(value) > 5 and value[-5] in "+-" and value[-4:].isdigit():
        value = value[:-2] + ":" + value[-2:]
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Render an instant for the wire: ISO-8601 with a Z suffix."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
