from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import CamelModel
from ..models.constants import AppointmentState
from ..services.validators import normalize_date, normalize_time


class AppointmentBase(CamelModel):
    date: str
    start_time: str
    end_time: str

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        try:
            return normalize_date(v)
        except ValueError:
            raise ValueError("date must be formatted as YYYY-MM-DD")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        try:
            return normalize_time(v)
        except ValueError:
            raise ValueError("time must be formatted as HH:MM")


class AppointmentCreate(AppointmentBase):
    user_id: str = Field(..., min_length=1)
    treatment_id: str = Field(..., min_length=1)
    notes: Optional[str] = ""


class AppointmentUpdate(CamelModel):
    """Partial update; only the supplied fields are written."""
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    treatment_id: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None
    state: Optional[AppointmentState] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            return normalize_date(v)
        except ValueError:
            raise ValueError("date must be formatted as YYYY-MM-DD")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            return normalize_time(v)
        except ValueError:
            raise ValueError("time must be formatted as HH:MM")

    def touches_schedule(self) -> bool:
        return any(
            value is not None for value in (self.date, self.start_time, self.end_time)
        )


class AppointmentStateUpdate(BaseModel):
    state: AppointmentState


class AppointmentOut(AppointmentBase):
    id: str
    user_id: str
    treatment_id: str
    state: AppointmentState
    notes: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AppointmentResponse(BaseModel):
    success: bool = True
    message: str
    appointment: AppointmentOut
