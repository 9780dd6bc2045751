from datetime import datetime
from typing import Literal, Optional

from pydantic import ConfigDict, Field, model_validator

from metabolic_health.schemas.base import CamelModel

Frequency = Literal["daily", "weekly", "monthly"]


class MedicationCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    dosage: str = Field(min_length=1, max_length=100)
    frequency: Frequency
    time_of_day: Optional[str] = Field(default=None, max_length=50)
    is_active: bool = True


class MedicationUpdate(CamelModel):
    """Partial update. Only fields present in the request body are applied."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    dosage: Optional[str] = Field(default=None, min_length=1, max_length=100)
    frequency: Optional[Frequency] = None
    time_of_day: Optional[str] = Field(default=None, max_length=50)
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for field in ("name", "dosage", "frequency", "is_active"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class Medication(CamelModel):
    id: str
    user_id: str
    name: str
    dosage: str
    frequency: Frequency
    time_of_day: Optional[str] = None
    is_active: bool = True
    created_at: datetime
