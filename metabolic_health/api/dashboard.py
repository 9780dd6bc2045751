from fastapi import APIRouter, Depends

from metabolic_health.api.deps import get_current_user, get_storage
from metabolic_health.core.analytics import dashboard_stats
from metabolic_health.db.storage import Storage
from metabolic_health.schemas.dashboard import DashboardStats
from metabolic_health.schemas.user import UserPublic

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def stats(user: UserPublic = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    """Recomputed on every call: symptomsToday, adherenceRate, contentViewed."""
    return dashboard_stats(storage, storage, user.id)
