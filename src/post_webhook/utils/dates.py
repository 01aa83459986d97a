"""Date formatting helpers for post dates."""

import calendar
from datetime import datetime

MYSQL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_mysql_datetime(value: datetime) -> str:
    """Format a datetime the way it is stored, e.g. ``2026-10-05 14:03:00``."""
    return value.strftime(MYSQL_DATETIME_FORMAT)


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _hour12(value: datetime) -> int:
    return value.hour % 12 or 12


# PHP date() format characters
_FORMATTERS = {
    # Day
    "d": lambda dt: f"{dt.day:02d}",
    "D": lambda dt: calendar.day_abbr[dt.weekday()],
    "j": lambda dt: str(dt.day),
    "l": lambda dt: calendar.day_name[dt.weekday()],
    "N": lambda dt: str(dt.isoweekday()),
    "S": lambda dt: _ordinal_suffix(dt.day),
    "w": lambda dt: str(dt.isoweekday() % 7),
    "z": lambda dt: str(dt.timetuple().tm_yday - 1),
    # Week
    "W": lambda dt: f"{dt.isocalendar()[1]:02d}",
    # Month
    "F": lambda dt: calendar.month_name[dt.month],
    "m": lambda dt: f"{dt.month:02d}",
    "M": lambda dt: calendar.month_abbr[dt.month],
    "n": lambda dt: str(dt.month),
    "t": lambda dt: str(calendar.monthrange(dt.year, dt.month)[1]),
    # Year
    "L": lambda dt: "1" if calendar.isleap(dt.year) else "0",
    "Y": lambda dt: str(dt.year),
    "y": lambda dt: f"{dt.year % 100:02d}",
    # Time
    "a": lambda dt: "am" if dt.hour < 12 else "pm",
    "A": lambda dt: "AM" if dt.hour < 12 else "PM",
    "g": lambda dt: str(_hour12(dt)),
    "G": lambda dt: str(dt.hour),
    "h": lambda dt: f"{_hour12(dt):02d}",
    "H": lambda dt: f"{dt.hour:02d}",
    "i": lambda dt: f"{dt.minute:02d}",
    "s": lambda dt: f"{dt.second:02d}",
    # Full date/time
    "c": lambda dt: dt.isoformat(),
    "U": lambda dt: str(int(dt.timestamp())),
}


def format_php_date(value: datetime, date_format: str) -> str:
    """
    Format a datetime using PHP ``date()`` format characters.

    Site date formats are configured in this notation (``F j, Y`` renders
    ``October 5, 2026``). Unknown characters are copied verbatim and a
    backslash escapes the following character.

    Args:
        value: Datetime to format
        date_format: Format string in PHP date() notation

    Returns:
        Formatted date string
    """
    out = []
    escaped = False
    for char in date_format:
        if escaped:
            out.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _FORMATTERS:
            out.append(_FORMATTERS[char](value))
        else:
            out.append(char)
    return "".join(out)
