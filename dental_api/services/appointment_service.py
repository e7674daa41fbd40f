import logging
from contextlib import AbstractContextManager
from datetime import date as date_type
from typing import Any, Callable, Dict, List

from .scheduling import has_conflict
from .validators import parse_date, parse_time, validate_document_id
from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError
from ..core.store import DocumentStore, Filter, OrderBy, utc_timestamp
from ..models.constants import AppointmentState, Collection, Messages
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)

DateLock = Callable[[str], AbstractContextManager]

APPOINTMENTS = Collection.APPOINTMENTS.value


class AppointmentService:
    def __init__(self, store: DocumentStore, lock: DateLock):
        self.store = store
        self.lock = lock

    # Reads
    def list_appointments(self) -> List[Dict[str, Any]]:
        """All appointments, most recent date first."""
        return self.store.query(APPOINTMENTS, order_by=OrderBy("date", descending=True))

    def get_appointment(self, appointment_id: str) -> Dict[str, Any]:
        validate_document_id(appointment_id)
        appointment = self.store.get(APPOINTMENTS, appointment_id)
        if appointment is None:
            raise NotFoundError(Messages.APPOINTMENT_NOT_FOUND)
        return appointment

    def list_by_date(self, day: str) -> List[Dict[str, Any]]:
        try:
            day = parse_date(day).isoformat()
        except ValueError:
            raise InvalidInputError(Messages.INVALID_DATE)
        return self.store.query(
            APPOINTMENTS,
            filters=[Filter("date", "==", day)],
            order_by=OrderBy("startTime"),
        )

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        validate_document_id(user_id)
        if self.store.get(Collection.USERS.value, user_id) is None:
            raise NotFoundError(Messages.USER_NOT_FOUND)
        return self.store.query(
            APPOINTMENTS,
            filters=[Filter("userId", "==", user_id)],
            order_by=OrderBy("date", descending=True),
        )

    # Writes
    def create_appointment(self, data: AppointmentCreate) -> Dict[str, Any]:
        """Book a new appointment once every invariant has been checked."""
        if parse_date(data.date) < date_type.today():
            raise InvalidInputError(Messages.APPOINTMENT_IN_PAST)
        self._check_time_range(data.start_time, data.end_time)

        if self.store.get(Collection.USERS.value, data.user_id) is None:
            raise NotFoundError(Messages.USER_NOT_FOUND)
        self._ensure_treatment(data.treatment_id)

        with self.lock(data.date):
            if has_conflict(self.store, data.date, data.start_time, data.end_time):
                logger.warning(
                    f"Rejected booking {data.date} {data.start_time}-{data.end_time}: slot taken"
                )
                raise ConflictError(Messages.APPOINTMENT_CONFLICT)

            now = utc_timestamp()
            appointment = self.store.add(APPOINTMENTS, {
                "date": data.date,
                "startTime": data.start_time,
                "endTime": data.end_time,
                "userId": data.user_id,
                "treatmentId": data.treatment_id,
                "state": AppointmentState.PENDING.value,
                "notes": data.notes or "",
                "createdAt": now,
                "updatedAt": now,
            })

        logger.info(
            f"Appointment {appointment['id']} created for {data.date} "
            f"{data.start_time}-{data.end_time}"
        )
        return appointment

    def update_appointment(self, appointment_id: str, data: AppointmentUpdate) -> Dict[str, Any]:
        current = self.get_appointment(appointment_id)

        fields = data.model_dump(exclude_none=True, by_alias=True, mode="json")

        if not data.touches_schedule():
            if data.treatment_id is not None:
                self._ensure_treatment(data.treatment_id)
            return self._write(appointment_id, fields)

        day = data.date or current["date"]
        start_time = data.start_time or current["startTime"]
        end_time = data.end_time or current["endTime"]
        self._check_time_range(start_time, end_time)

        with self.lock(day):
            if has_conflict(self.store, day, start_time, end_time, exclude_id=appointment_id):
                logger.warning(
                    f"Rejected reschedule of {appointment_id} to {day} "
                    f"{start_time}-{end_time}: slot taken"
                )
                raise ConflictError(Messages.APPOINTMENT_CONFLICT)
            # Overlap is reported ahead of a missing treatment
            if data.treatment_id is not None:
                self._ensure_treatment(data.treatment_id)
            return self._write(appointment_id, fields)

    def change_state(self, appointment_id: str, state: AppointmentState) -> Dict[str, Any]:
        """Set the state without re-checking the schedule."""
        self.get_appointment(appointment_id)
        return self._write(appointment_id, {"state": state.value})

    def delete_appointment(self, appointment_id: str) -> None:
        self.get_appointment(appointment_id)
        self.store.delete(APPOINTMENTS, appointment_id)
        logger.info(f"Appointment {appointment_id} deleted")

    def _write(self, appointment_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        fields["updatedAt"] = utc_timestamp()
        appointment = self.store.update(APPOINTMENTS, appointment_id, fields)
        if appointment is None:
            raise NotFoundError(Messages.APPOINTMENT_NOT_FOUND)
        logger.info(f"Appointment {appointment_id} updated: {sorted(fields)}")
        return appointment

    def _ensure_treatment(self, treatment_id: str) -> None:
        if self.store.get(Collection.TREATMENTS.value, treatment_id) is None:
            raise NotFoundError(Messages.TREATMENT_NOT_FOUND)

    @staticmethod
    def _check_time_range(start_time: str, end_time: str) -> None:
        if parse_time(end_time) <= parse_time(start_time):
            raise InvalidInputError(Messages.INVALID_TIME_RANGE)
