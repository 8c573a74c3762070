"""Flexible timestamp serialization.

CXF documents in the wild carry timestamps in two shapes:
- UNIX timestamps: integer seconds since the epoch (e.g. ``1700000000``)
- RFC 3339 strings: ``"2023-11-14T22:13:20Z"`` or with an explicit offset

Both are accepted on input. Output is always the UNIX integer so the
ambiguity isn't propagated to the next importer.
"""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime, timedelta, timezone
from typing import Any

from .exceptions import InvalidIso8601Error, InvalidTimestampError, InvalidTypeError

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# RFC 3339 section 5.6 date-time; "T" and "Z" may be lowercase
_RFC3339 = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"[Tt ]"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?:(?P<zulu>[Zz])|(?P<sign>[+-])(?P<offset_hour>[0-9]{2}):(?P<offset_minute>[0-9]{2}))",
    re.ASCII,
)


def decode(value: Any) -> datetime:
    """Decode a timestamp from a UNIX integer or an RFC 3339 string.

    Args:
        value: Decoded JSON value

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        InvalidTimestampError: If the integer is out of range
        InvalidIso8601Error: If the string doesn't parse
        InvalidTypeError: If the value is neither an integer nor a string
    """
    # bool is an int subclass but never a timestamp
    if isinstance(value, int) and not isinstance(value, bool):
        return _from_epoch(value)
    if isinstance(value, str):
        return _from_iso8601(value)
    raise InvalidTypeError("a UNIX timestamp or ISO8601 string", value)


def encode(moment: datetime) -> int:
    """Encode a datetime as whole seconds since the UNIX epoch.

    Naive datetimes are interpreted as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return math.floor((moment - EPOCH).total_seconds())


def decode_optional(value: Any) -> datetime | None:
    """Like decode(), but maps JSON null to None."""
    if value is None:
        return None
    return decode(value)


def encode_optional(moment: datetime | None) -> int | None:
    """Like encode(), but maps None to JSON null."""
    if moment is None:
        return None
    return encode(moment)


def _from_epoch(seconds: int) -> datetime:
    try:
        return EPOCH + timedelta(seconds=seconds)
    except OverflowError as e:
        raise InvalidTimestampError(seconds) from e


def _from_iso8601(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise InvalidIso8601Error("not an RFC 3339 date-time with offset")

    second = int(match["second"])
    if second == 60:
        # Leap second; datetime can't hold it and it encodes like :59
        second = 59
    fraction = match["fraction"] or ""
    microsecond = int(fraction[:6].ljust(6, "0"))

    try:
        if match["zulu"]:
            tz = UTC
        else:
            offset_hour, offset_minute = int(match["offset_hour"]), int(match["offset_minute"])
            if offset_hour > 23 or offset_minute > 59:
                raise ValueError("UTC offset out of range")
            offset = timedelta(hours=offset_hour, minutes=offset_minute)
            tz = timezone(-offset if match["sign"] == "-" else offset)
        parsed = datetime(
            int(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            second,
            microsecond,
            tzinfo=tz,
        )
        return parsed.astimezone(UTC)
    except (ValueError, OverflowError) as e:
        raise InvalidIso8601Error(str(e)) from e
