"""Side-effect log: record a symptom, list recent entries, per-symptom progress."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from metabolic_health.api.deps import get_current_user, get_storage
from metabolic_health.core.analytics import symptom_progress
from metabolic_health.db.storage import Storage
from metabolic_health.schemas.symptoms import SymptomCreate, SymptomEntry, SymptomProgress
from metabolic_health.schemas.user import UserPublic
from metabolic_health.services import records

router = APIRouter()


@router.post("", status_code=201, response_model=SymptomEntry)
async def log_symptom(
    body: SymptomCreate,
    user: UserPublic = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return records.log_symptom(storage, user.id, body)


@router.get("", response_model=List[SymptomEntry])
async def list_symptoms(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    user: UserPublic = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Newest first."""
    return records.list_symptoms(storage, user.id, limit=limit)


@router.get("/progress", response_model=List[SymptomProgress])
async def progress(user: UserPublic = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    return symptom_progress(records.list_symptoms(storage, user.id))
