"""Picks technician visit slots and builds the calendar event for a service order."""

from datetime import datetime, timedelta
from typing import Any, Final

# Requests arriving at or after this hour are booked for the next day.
CUTOFF_HOUR: Final[int] = 15
VISIT_DESCRIPTION: Final[str] = "Visita técnica CP Digital"


def next_work_slot(hour: str, now: datetime | None = None) -> datetime:
    """
    Return the next visit slot at the given "HH:MM".

    The slot is today unless the cutoff hour has been reached or the slot time
    has already passed, in which case it moves to the next day.
    """
    now = now or datetime.now()  # noqa: DTZ005
    hours, minutes = (int(part) for part in hour.split(":"))
    slot = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    if now.hour >= CUTOFF_HOUR or slot <= now:
        slot += timedelta(days=1)
    return slot


def build_calendar_event(customer_name: str, equipment: str, order_id: int | str, tz: str, now: datetime | None = None) -> dict[str, Any]:
    """Build the one-hour visit event payload for a service order."""
    start = next_work_slot("10:00", now)
    return {
        "summary": f"{customer_name} – {equipment} – OS#{order_id}",
        "description": VISIT_DESCRIPTION,
        "start": {"dateTime": start.isoformat(), "timeZone": tz},
        "end": {"dateTime": (start + timedelta(hours=1)).isoformat(), "timeZone": tz},
    }
