"""Date and time parsing utilities for TISS header values."""

import re
from datetime import datetime
from dateutil import parser as date_parser

# Only complete values are normalised; dateutil would otherwise fill missing
# parts from the current date.
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}([T ]\S+)?$")
DAY_FIRST_DATE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
TIME = re.compile(r"^\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$")


def parse_registration_date(date_str: str) -> str:
    """Normalise a transaction registration date to ISO format.

    TISS files carry "YYYY-MM-DD", but hand-edited or legacy exports also
    show up with "DD/MM/YYYY" or a full timestamp. Slash dates are read
    day-first.

    Args:
        date_str: Date string from the document

    Returns:
        Date as "YYYY-MM-DD"

    Raises:
        ValueError: If date string is incomplete or cannot be parsed
    """
    date_str = date_str.strip()
    day_first = bool(DAY_FIRST_DATE.match(date_str))
    if not day_first and not ISO_DATE.match(date_str):
        raise ValueError(f"Could not parse date '{date_str}': expected YYYY-MM-DD or DD/MM/YYYY")
    try:
        dt = date_parser.parse(date_str, dayfirst=day_first)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
    return dt.date().isoformat()


def parse_registration_time(time_str: str) -> str:
    """Normalise a transaction registration time to "HH:MM:SS".

    Accepts "HH:MM", "HH:MM:SS" and times with fractional seconds or an
    offset suffix, which is dropped.

    Raises:
        ValueError: If time string is incomplete or cannot be parsed
    """
    time_str = time_str.strip()
    if not TIME.match(time_str):
        raise ValueError(f"Could not parse time '{time_str}': expected HH:MM[:SS]")
    try:
        # Anchor on a fixed date so only the time part is taken from the input.
        dt = date_parser.parse(time_str, default=datetime(2000, 1, 1))
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse time '{time_str}': {e}")
    return dt.time().replace(microsecond=0).strftime("%H:%M:%S")


def competencia_from_date(date_str: str) -> str:
    """Derive the billing period (competencia, "YYYY-MM") from a date.

    Raises:
        ValueError: If date string cannot be parsed
    """
    return parse_registration_date(date_str)[:7]
