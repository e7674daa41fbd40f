from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ...api.deps import get_booking_lock, get_current_user, get_professional_user, get_store
from ...core.store import DocumentStore
from ...models.constants import Messages
from ...schemas.appointment import (
    AppointmentCreate, AppointmentOut, AppointmentResponse,
    AppointmentStateUpdate, AppointmentUpdate
)
from ...schemas.common import DataResponse, ListResponse, MessageResponse
from ...services.appointment_service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(
    store: DocumentStore = Depends(get_store),
    lock=Depends(get_booking_lock)
) -> AppointmentService:
    return AppointmentService(store, lock)


@router.get("", response_model=ListResponse[AppointmentOut])
async def list_appointments(
    current_user: Dict[str, Any] = Depends(get_professional_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """All appointments, most recent date first."""
    appointments = service.list_appointments()
    return {"data": appointments, "count": len(appointments)}


@router.get("/date/{date}", response_model=ListResponse[AppointmentOut])
async def list_appointments_by_date(
    date: str,
    current_user: Dict[str, Any] = Depends(get_professional_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """The schedule for one day, earliest slot first."""
    appointments = service.list_by_date(date)
    return {"data": appointments, "count": len(appointments)}


@router.get("/user/{user_id}", response_model=ListResponse[AppointmentOut])
async def list_appointments_by_user(
    user_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointments = service.list_by_user(user_id)
    return {"data": appointments, "count": len(appointments)}


@router.get("/{appointment_id}", response_model=DataResponse[AppointmentOut])
async def get_appointment(
    appointment_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    return {"data": service.get_appointment(appointment_id)}


# Booking writes block on the per-date lock, so they run in the threadpool
@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    appointment_data: AppointmentCreate,
    current_user: Dict[str, Any] = Depends(get_professional_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Book an appointment; 409 if the slot overlaps an active booking."""
    appointment = service.create_appointment(appointment_data)
    return {"message": Messages.APPOINTMENT_CREATED, "appointment": appointment}


@router.put("/{appointment_id}", response_model=AppointmentResponse)
def update_appointment(
    appointment_id: str,
    appointment_data: AppointmentUpdate,
    current_user: Dict[str, Any] = Depends(get_professional_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointment = service.update_appointment(appointment_id, appointment_data)
    return {"message": Messages.APPOINTMENT_UPDATED, "appointment": appointment}


@router.patch("/{appointment_id}/state", response_model=AppointmentResponse)
async def change_appointment_state(
    appointment_id: str,
    state_data: AppointmentStateUpdate,
    current_user: Dict[str, Any] = Depends(get_professional_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointment = service.change_state(appointment_id, state_data.state)
    return {"message": Messages.APPOINTMENT_UPDATED, "appointment": appointment}


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: str,
    current_user: Dict[str, Any] = Depends(get_professional_user),
    service: AppointmentService = Depends(get_appointment_service)
):
    service.delete_appointment(appointment_id)
    return {"message": Messages.APPOINTMENT_DELETED}
