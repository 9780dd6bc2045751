from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from metabolic_health.schemas.base import CamelModel

ContentType = Literal["nutrition", "exercise", "behavioral"]


class ContentCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: ContentType
    tags: List[str] = Field(default_factory=list)
    url: Optional[str] = None
    duration: Optional[str] = None


class ContentItem(ContentCreate):
    id: str
    created_at: Optional[datetime] = None
