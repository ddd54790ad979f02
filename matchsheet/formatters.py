"""
Formatting utilities for dates, names and file names.

All text shown on the sheet goes through these helpers so the PNG and the
PDF print the same strings.
"""

from datetime import datetime

SPANISH_MONTHS_SHORT = [
    'ene', 'feb', 'mar', 'abr', 'may', 'jun',
    'jul', 'ago', 'sept', 'oct', 'nov', 'dic'
]


def format_match_date(iso_date: str) -> str:
    """
    Convert ISO date string (YYYY-MM-DD) to the sheet format (DD mmm YYYY).

    Args:
        iso_date: ISO format date string (e.g., "2024-05-01")

    Returns:
        Formatted date string (e.g., "01 may 2024"), or the input unchanged
        when it cannot be parsed
    """
    try:
        dt = datetime.strptime(iso_date.split('T')[0], "%Y-%m-%d")
    except (ValueError, AttributeError):
        return iso_date or ""
    return f"{dt.day:02d} {SPANISH_MONTHS_SHORT[dt.month - 1]} {dt.year}"


def surname(name: str) -> str:
    """Last word of a display name, used on pitch and bench tags"""
    parts = name.split()
    return parts[-1] if parts else ""


def export_filename(opponent: str, date: str, extension: str) -> str:
    """Download name for an export. Opponent and date are used verbatim."""
    return f"planilla-{opponent}-{date}.{extension}"
