from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ...api.deps import get_professional_user, get_store
from ...core.store import DocumentStore
from ...models.constants import Messages
from ...schemas.common import DataResponse, ListResponse, MessageResponse
from ...schemas.treatment import TreatmentCreate, TreatmentOut, TreatmentResponse, TreatmentUpdate
from ...services.treatment_service import TreatmentService

router = APIRouter(prefix="/treatments", tags=["Treatments"])


@router.get("", response_model=ListResponse[TreatmentOut])
async def list_treatments(store: DocumentStore = Depends(get_store)):
    """Public treatment catalog, ordered by name."""
    treatments = TreatmentService(store).list_treatments()
    return {"data": treatments, "count": len(treatments)}


@router.get("/{treatment_id}", response_model=DataResponse[TreatmentOut])
async def get_treatment(treatment_id: str, store: DocumentStore = Depends(get_store)):
    return {"data": TreatmentService(store).get_treatment(treatment_id)}


@router.post("", response_model=TreatmentResponse, status_code=status.HTTP_201_CREATED)
async def create_treatment(
    treatment_data: TreatmentCreate,
    current_user: Dict[str, Any] = Depends(get_professional_user),
    store: DocumentStore = Depends(get_store)
):
    treatment = TreatmentService(store).create_treatment(treatment_data)
    return {"message": Messages.TREATMENT_CREATED, "treatment": treatment}


@router.put("/{treatment_id}", response_model=TreatmentResponse)
async def update_treatment(
    treatment_id: str,
    treatment_data: TreatmentUpdate,
    current_user: Dict[str, Any] = Depends(get_professional_user),
    store: DocumentStore = Depends(get_store)
):
    treatment = TreatmentService(store).update_treatment(treatment_id, treatment_data)
    return {"message": Messages.TREATMENT_UPDATED, "treatment": treatment}


@router.delete("/{treatment_id}", response_model=MessageResponse)
async def delete_treatment(
    treatment_id: str,
    current_user: Dict[str, Any] = Depends(get_professional_user),
    store: DocumentStore = Depends(get_store)
):
    TreatmentService(store).delete_treatment(treatment_id)
    return {"message": Messages.TREATMENT_DELETED}
