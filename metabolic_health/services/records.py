"""Symptom log and medication schedule operations for the signed-in user."""
import logging
from typing import List, Optional

from metabolic_health.core.errors import NotFound
from metabolic_health.db.storage import RecordStore
from metabolic_health.schemas.medications import Medication, MedicationCreate, MedicationUpdate
from metabolic_health.schemas.symptoms import SymptomCreate, SymptomEntry

logger = logging.getLogger(__name__)


def log_symptom(records: RecordStore, user_id: str, data: SymptomCreate) -> SymptomEntry:
    entry = records.create_symptom(user_id, data)
    logger.debug("User %s logged %s severity=%s", user_id, entry.symptom, entry.severity)
    return entry


def list_symptoms(records: RecordStore, user_id: str, limit: Optional[int] = None) -> List[SymptomEntry]:
    return records.list_symptoms(user_id, limit=limit)


def create_medication(records: RecordStore, user_id: str, data: MedicationCreate) -> Medication:
    return records.create_medication(user_id, data)


def list_medications(records: RecordStore, user_id: str) -> List[Medication]:
    return records.list_medications(user_id)


def update_medication(records: RecordStore, user_id: str, medication_id: str, update: MedicationUpdate) -> Medication:
    """Apply the fields present in `update`. Unknown ids and other users' medications are NotFound."""
    med = records.update_medication(user_id, medication_id, update.changes())
    if med is None:
        raise NotFound("Medication not found")
    return med
