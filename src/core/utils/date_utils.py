"""
Air date utilities module.

Provides parsing helpers for the loosely formatted air dates reported by the
catalogue ("2013-10-06", "2013-10", "2013" or empty).

Features:
1. Parsed dates carry UTC timezone info
2. Bare years are reported separately as a production year
3. Unparseable values never raise
"""

from datetime import datetime, timezone
from typing import Optional


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime object to UTC time.

    Args:
        dt: The datetime object to convert.

    Returns:
        datetime: UTC time, or None if input is None.
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc)

    # Catalogue dates carry no timezone, treat them as UTC
    return dt.replace(tzinfo=timezone.utc)


def parse_air_date(air_date: Optional[str]) -> Optional[datetime]:
    """
    Parse a catalogue air date string.

    Args:
        air_date: Date string such as '2013-10-06' or '2013-10'.

    Returns:
        datetime: Datetime with UTC timezone info, or None if parsing fails.
    """
    if not air_date:
        return None

    value = air_date.strip()
    if parse_production_year(value) is not None:
        return None

    for fmt in ('%Y-%m-%d', '%Y-%m'):
        try:
            return to_utc(datetime.strptime(value, fmt))
        except ValueError:
            continue

    try:
        return to_utc(datetime.fromisoformat(value.replace('Z', '+00:00')))
    except ValueError:
        return None


def parse_production_year(air_date: Optional[str]) -> Optional[int]:
    """
    Return the year when the air date is a bare four-digit year.

    Args:
        air_date: Date string from the catalogue.

    Returns:
        int: The year, or None if the value is not a bare year.
    """
    if not air_date:
        return None

    value = air_date.strip()
    if len(value) == 4 and value.isdigit():
        return int(value)
    return None


def aired_before(air_date: Optional[str], reference: Optional[str]) -> bool:
    """
    Check if an air date is strictly earlier than a reference date.

    Both values are compared as ordinal strings, matching the catalogue's
    zero-padded ISO format.
    """
    if not air_date or not reference:
        return False
    return air_date < reference
