from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import CamelModel
from ..models.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH


class TreatmentBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str = Field(..., min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    price: float = Field(..., gt=0)
    duration: Optional[int] = Field(None, gt=0, description="Duration in minutes")
    image: Optional[str] = None

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class TreatmentCreate(TreatmentBase):
    pass


class TreatmentUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    duration: Optional[int] = None
    image: Optional[str] = None


class TreatmentOut(TreatmentBase):
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TreatmentResponse(BaseModel):
    success: bool = True
    message: str
    treatment: TreatmentOut
