"""Appointment overlap detection.

Intervals are half-open, ``[start, end)``: an appointment ending at 10:30 does
not conflict with one starting at 10:30. Only appointments sharing the same
date are compared, since appointments never span midnight.
"""
from datetime import datetime
from typing import Optional

from .validators import parse_date, parse_time
from ..core.store import DocumentStore, Filter, OrderBy
from ..models.constants import AppointmentState, Collection


def combine(date: str, clock: str) -> datetime:
    """Combine an ISO date and an HH:MM time into a comparable instant."""
    return datetime.combine(parse_date(date), parse_time(clock))


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    return start_a < end_b and start_b < end_a


def has_conflict(
    store: DocumentStore,
    date: str,
    start_time: str,
    end_time: str,
    exclude_id: Optional[str] = None,
) -> bool:
    """Return True if [start_time, end_time) overlaps an active appointment on date."""
    candidate_start = combine(date, start_time)
    candidate_end = combine(date, end_time)

    appointments = store.query(
        Collection.APPOINTMENTS.value,
        filters=[Filter("date", "==", date)],
        order_by=OrderBy("startTime"),
    )
    for appointment in appointments:
        if exclude_id is not None and appointment["id"] == exclude_id:
            continue
        if appointment.get("state") == AppointmentState.CANCELLED.value:
            continue

        existing_start = combine(date, appointment["startTime"])
        existing_end = combine(date, appointment["endTime"])
        if intervals_overlap(candidate_start, candidate_end, existing_start, existing_end):
            return True

    return False
