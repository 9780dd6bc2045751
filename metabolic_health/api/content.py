"""Educational content catalog (public, read-only). ?tags=nausea,fatigue matches any tag."""
from typing import List, Optional

from fastapi import APIRouter, Depends

from metabolic_health.api.deps import get_storage
from metabolic_health.db.storage import Storage
from metabolic_health.schemas.content import ContentItem

router = APIRouter()


@router.get("", response_model=List[ContentItem])
async def list_content(tags: Optional[str] = None, storage: Storage = Depends(get_storage)):
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    return storage.list_content(tag_list)
