"""
Clock-time display formatting for delivery timestamps.

Unix seconds -> "hh:mm AM/PM" in a fixed display timezone.
"""

import math
from datetime import datetime, timezone
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class TimestampFormatError(ValueError):
    """Timestamp could not be turned into a display time."""
    pass


def _resolve_timezone(tz_name: str):
    if tz_name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise TimestampFormatError(f"Unknown display timezone: {tz_name}") from e


def format_clock_time(timestamp: Union[int, float, str], tz_name: str = "UTC") -> str:
    """
    Format a unix timestamp as a 12-hour clock time.

    Hour is zero padded, no seconds, uppercase AM/PM suffix:
    0 -> "12:00 AM" (UTC), 1700000000 -> "10:13 PM" (UTC).

    Args:
        timestamp: Unix time in seconds (int, float, or numeric string)
        tz_name: IANA timezone name used for display

    Returns:
        Formatted clock time

    Raises:
        TimestampFormatError: Missing, non-numeric or out-of-range timestamp
    """
    if timestamp is None or isinstance(timestamp, bool):
        raise TimestampFormatError(f"Invalid timestamp: {timestamp!r}")

    try:
        seconds = float(timestamp)
    except (TypeError, ValueError) as e:
        raise TimestampFormatError(f"Invalid timestamp: {timestamp!r}") from e

    if not math.isfinite(seconds):
        raise TimestampFormatError(f"Invalid timestamp: {timestamp!r}")

    tz = _resolve_timezone(tz_name)
    try:
        moment = datetime.fromtimestamp(seconds, tz=tz)
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampFormatError(f"Timestamp out of range: {timestamp!r}") from e

    # %p is locale dependent; build the suffix explicitly
    suffix = "AM" if moment.hour < 12 else "PM"
    return moment.strftime("%I:%M ") + suffix
