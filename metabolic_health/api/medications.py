from typing import List

from fastapi import APIRouter, Depends

from metabolic_health.api.deps import get_current_user, get_storage
from metabolic_health.db.storage import Storage
from metabolic_health.schemas.medications import Medication, MedicationCreate, MedicationUpdate
from metabolic_health.schemas.user import UserPublic
from metabolic_health.services import records

router = APIRouter()


@router.post("", status_code=201, response_model=Medication)
async def create_medication(
    body: MedicationCreate,
    user: UserPublic = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return records.create_medication(storage, user.id, body)


@router.get("", response_model=List[Medication])
async def list_medications(user: UserPublic = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    """Active medications only."""
    return records.list_medications(storage, user.id)


@router.patch("/{medication_id}", response_model=Medication)
async def update_medication(
    medication_id: str,
    body: MedicationUpdate,
    user: UserPublic = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return records.update_medication(storage, user.id, medication_id, body)
