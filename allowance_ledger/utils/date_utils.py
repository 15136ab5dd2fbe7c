"""Calendar helpers for weekly deposit scheduling"""

from datetime import date, datetime, timedelta
from typing import List

# date.weekday() numbering
SATURDAY = 5
SUNDAY = 6

DATE_FORMAT = "%Y-%m-%d"


def next_occurrence(anchor_weekday: int, day: date) -> date:
    """First date strictly after `day` that falls on `anchor_weekday`"""
    days_ahead = (anchor_weekday - day.weekday()) % 7
    return day + timedelta(days=days_ahead or 7)


def weekly_occurrences(anchor_weekday: int, after: date, through: date) -> List[date]:
    """
    Every `anchor_weekday` date in the half-open range (after, through].

    If `after` itself falls on the anchor day the sequence starts a week later.
    Dates are 7 days apart and ascending; the list is empty when nothing fits.
    """
    occurrences = []
    current = next_occurrence(anchor_weekday, after)
    while current <= through:
        occurrences.append(current)
        current += timedelta(days=7)
    return occurrences


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD calendar string (no timezone component)"""
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)
