"""Provider availability checks against requested booking windows."""

from datetime import date

from ..models import Provider


def time_to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def is_same_day(first: date, second: date) -> bool:
    """Compare calendar days only; time-of-day on datetimes is ignored."""
    return (first.year, first.month, first.day) == (second.year, second.month, second.day)


def is_available(provider: Provider, requested_date: date, start_time: str, end_time: str) -> bool:
    """Return True when a single same-day window fully contains the requested range.

    Adjacent windows are not merged: ``08:00-12:00`` plus ``12:00-16:00`` does
    not cover a ``10:00-14:00`` request.
    """
    request_start = time_to_minutes(start_time)
    request_end = time_to_minutes(end_time)

    for slot in provider.availability:
        if not is_same_day(slot.date, requested_date):
            continue
        if time_to_minutes(slot.start_time) <= request_start and time_to_minutes(slot.end_time) >= request_end:
            return True
    return False
