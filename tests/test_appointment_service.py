from contextlib import contextmanager
from datetime import date, timedelta

import pytest

from dental_api.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from dental_api.models.constants import AppointmentState
from dental_api.schemas.appointment import AppointmentCreate, AppointmentUpdate
from dental_api.services.appointment_service import AppointmentService


class RecordingLock:
    """Records which dates were locked and what was checked while held."""

    def __init__(self):
        self.dates = []
        self.held = False

    @contextmanager
    def __call__(self, day):
        self.dates.append(day)
        self.held = True
        try:
            yield
        finally:
            self.held = False


@pytest.fixture
def refs(store):
    user = store.add("users", {"name": "Ana", "role": "user"})
    treatment = store.add("treatments", {"name": "Cleaning"})
    return user["id"], treatment["id"]


@pytest.fixture
def day():
    return (date.today() + timedelta(days=3)).isoformat()


def payload(refs, day, start, end):
    user_id, treatment_id = refs
    return AppointmentCreate(
        date=day, start_time=start, end_time=end, user_id=user_id, treatment_id=treatment_id
    )


class TestAppointmentService:

    def test_create_locks_the_date(self, store, refs, day):
        lock = RecordingLock()
        service = AppointmentService(store, lock)

        service.create_appointment(payload(refs, day, "09:00", "10:00"))
        assert lock.dates == [day]

    def test_conflict_checked_under_lock(self, store, refs, day, monkeypatch):
        lock = RecordingLock()
        service = AppointmentService(store, lock)
        service.create_appointment(payload(refs, day, "09:00", "10:00"))

        seen = []
        real_query = store.query

        def query(*args, **kwargs):
            seen.append(lock.held)
            return real_query(*args, **kwargs)

        monkeypatch.setattr(store, "query", query)
        with pytest.raises(ConflictError):
            service.create_appointment(payload(refs, day, "09:30", "10:30"))
        assert seen == [True]

    def test_reschedule_locks_target_date(self, store, refs, day):
        lock = RecordingLock()
        service = AppointmentService(store, lock)
        appointment = service.create_appointment(payload(refs, day, "09:00", "10:00"))

        other_day = (date.today() + timedelta(days=4)).isoformat()
        updated = service.update_appointment(appointment["id"], AppointmentUpdate(date=other_day))
        assert lock.dates == [day, other_day]
        assert updated["date"] == other_day
        assert updated["startTime"] == "09:00"

    def test_notes_update_skips_lock(self, store, refs, day):
        lock = RecordingLock()
        service = AppointmentService(store, lock)
        appointment = service.create_appointment(payload(refs, day, "09:00", "10:00"))

        service.update_appointment(appointment["id"], AppointmentUpdate(notes="Sensitive tooth"))
        assert lock.dates == [day]

    def test_only_supplied_fields_written(self, store, refs, day):
        service = AppointmentService(store, RecordingLock())
        appointment = service.create_appointment(payload(refs, day, "09:00", "10:00"))

        updated = service.update_appointment(appointment["id"], AppointmentUpdate(notes="x"))
        assert updated["state"] == "pending"
        assert updated["createdAt"] == appointment["createdAt"]
        assert updated["updatedAt"] >= appointment["updatedAt"]

    @pytest.mark.parametrize("day_offset, start, end", [
        (-1, "09:00", "10:00"),
        (3, "11:00", "10:00"),
        (3, "10:00", "10:00"),
    ])
    def test_rejected_before_schedule_lookup(self, store, refs, monkeypatch, day_offset, start, end):
        """Past dates and inverted ranges never reach the overlap query."""
        service = AppointmentService(store, RecordingLock())
        day = (date.today() + timedelta(days=day_offset)).isoformat()

        queried = []
        monkeypatch.setattr(store, "query", lambda *args, **kwargs: queried.append(args) or [])
        with pytest.raises(InvalidInputError):
            service.create_appointment(payload(refs, day, start, end))
        assert queried == []

    def test_overlap_reported_before_unknown_treatment(self, store, refs, day):
        service = AppointmentService(store, RecordingLock())
        appointment = service.create_appointment(payload(refs, day, "09:00", "10:00"))
        service.create_appointment(payload(refs, day, "10:00", "11:00"))

        with pytest.raises(ConflictError):
            service.update_appointment(
                appointment["id"], AppointmentUpdate(end_time="10:30", treatment_id="x" * 20)
            )

    def test_unknown_treatment_without_schedule_change(self, store, refs, day):
        service = AppointmentService(store, RecordingLock())
        appointment = service.create_appointment(payload(refs, day, "09:00", "10:00"))

        with pytest.raises(NotFoundError):
            service.update_appointment(appointment["id"], AppointmentUpdate(treatment_id="x" * 20))


class TestDeletedWhileWriting:
    """A record removed between the read and the write is not recreated."""

    @pytest.fixture
    def booked(self, store, refs, day, monkeypatch):
        service = AppointmentService(store, RecordingLock())
        appointment = service.create_appointment(payload(refs, day, "09:00", "10:00"))

        read = service.get_appointment

        def read_then_delete(appointment_id):
            record = read(appointment_id)
            store.delete("appointments", appointment_id)
            return record

        monkeypatch.setattr(service, "get_appointment", read_then_delete)
        return service, appointment

    def test_change_state(self, booked, store):
        service, appointment = booked
        with pytest.raises(NotFoundError):
            service.change_state(appointment["id"], AppointmentState.CONFIRMED)
        assert store.query("appointments") == []

    def test_update(self, booked, store):
        service, appointment = booked
        with pytest.raises(NotFoundError):
            service.update_appointment(appointment["id"], AppointmentUpdate(end_time="10:30"))
        assert store.query("appointments") == []
