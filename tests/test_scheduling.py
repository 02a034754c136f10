"""Tests for technician visit scheduling."""

from datetime import datetime

from copibot.scheduling import VISIT_DESCRIPTION, build_calendar_event, next_work_slot


def test_next_work_slot_same_day() -> None:
    """Before the slot and the cutoff, the visit is today."""
    assert next_work_slot("10:00", datetime(2025, 10, 6, 9, 15)) == datetime(2025, 10, 6, 10, 0)


def test_next_work_slot_after_cutoff() -> None:
    """At or after 15:00 the visit moves to the next day."""
    assert next_work_slot("16:30", datetime(2025, 10, 6, 15, 0)) == datetime(2025, 10, 7, 16, 30)


def test_next_work_slot_already_passed() -> None:
    """A slot earlier than now moves to the next day."""
    assert next_work_slot("10:00", datetime(2025, 10, 6, 12, 0)) == datetime(2025, 10, 7, 10, 0)


def test_build_calendar_event() -> None:
    """The event lasts one hour and names customer, equipment and order."""
    event = build_calendar_event("Ana", "Xerox B215", 42, "America/Mexico_City", now=datetime(2025, 10, 6, 10, 30))

    assert event["summary"] == "Ana – Xerox B215 – OS#42"
    assert event["description"] == VISIT_DESCRIPTION
    assert event["start"] == {"dateTime": "2025-10-07T10:00:00", "timeZone": "America/Mexico_City"}
    assert event["end"] == {"dateTime": "2025-10-07T11:00:00", "timeZone": "America/Mexico_City"}
