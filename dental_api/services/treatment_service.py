import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .validators import validate_document_id
from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError
from ..core.store import DocumentStore, Filter, OrderBy, utc_timestamp
from ..models.constants import Collection, Messages
from ..schemas.common import format_validation_errors
from ..schemas.treatment import TreatmentCreate, TreatmentUpdate

logger = logging.getLogger(__name__)

TREATMENTS = Collection.TREATMENTS.value


class TreatmentService:
    def __init__(self, store: DocumentStore):
        self.store = store

    def list_treatments(self) -> List[Dict[str, Any]]:
        return self.store.query(TREATMENTS, order_by=OrderBy("name"))

    def get_treatment(self, treatment_id: str) -> Dict[str, Any]:
        validate_document_id(treatment_id)
        treatment = self.store.get(TREATMENTS, treatment_id)
        if treatment is None:
            raise NotFoundError(Messages.TREATMENT_NOT_FOUND)
        return treatment

    def create_treatment(self, data: TreatmentCreate) -> Dict[str, Any]:
        self._ensure_unique_name(data.name)

        now = utc_timestamp()
        fields = data.model_dump(exclude_none=True, by_alias=True)
        treatment = self.store.add(TREATMENTS, {**fields, "createdAt": now, "updatedAt": now})
        logger.info(f"Treatment {treatment['id']} created: {data.name}")
        return treatment

    def update_treatment(self, treatment_id: str, data: TreatmentUpdate) -> Dict[str, Any]:
        current = self.get_treatment(treatment_id)
        changes = data.model_dump(exclude_none=True, by_alias=True)

        # The merged document must still be a valid treatment
        try:
            merged = TreatmentCreate.model_validate({**current, **changes})
        except ValidationError as e:
            raise InvalidInputError(
                Messages.INVALID_DATA, errors=format_validation_errors(e.errors())
            )

        if merged.name != current.get("name"):
            self._ensure_unique_name(merged.name, exclude_id=treatment_id)

        fields = merged.model_dump(exclude_none=True, by_alias=True)
        fields["updatedAt"] = utc_timestamp()
        treatment = self.store.update(TREATMENTS, treatment_id, fields)
        if treatment is None:
            raise NotFoundError(Messages.TREATMENT_NOT_FOUND)
        logger.info(f"Treatment {treatment_id} updated")
        return treatment

    def delete_treatment(self, treatment_id: str) -> None:
        self.get_treatment(treatment_id)
        self.store.delete(TREATMENTS, treatment_id)
        logger.info(f"Treatment {treatment_id} deleted")

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        matches = self.store.query(TREATMENTS, filters=[Filter("name", "==", name)])
        if any(match["id"] != exclude_id for match in matches):
            raise ConflictError(Messages.TREATMENT_ALREADY_EXISTS)
