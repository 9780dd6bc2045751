from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from metabolic_health.schemas.base import CamelModel

SymptomCategory = Literal[
    "nausea",
    "fatigue",
    "muscle-loss",
    "digestive",
    "headache",
    "dizziness",
    "injection-site",
]
Trend = Literal["improving", "stable", "worsening"]


class SymptomCreate(CamelModel):
    symptom: SymptomCategory
    severity: int = Field(ge=1, le=10)
    notes: Optional[str] = Field(default=None, max_length=2000)


class SymptomEntry(CamelModel):
    id: str
    user_id: str
    symptom: SymptomCategory
    severity: int
    notes: Optional[str] = None
    timestamp: datetime


class SymptomTrend(CamelModel):
    progress: float
    trend: Trend
    avg_severity: float


class SymptomProgress(SymptomTrend):
    symptom: SymptomCategory
