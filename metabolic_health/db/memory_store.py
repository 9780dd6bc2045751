"""In-process backend. Used by tests and by STORAGE_BACKEND=memory for local runs."""
import logging
import threading
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from metabolic_health.core.errors import DuplicateUser
from metabolic_health.db.storage import Storage, matches_tags, utcnow
from metabolic_health.schemas.content import ContentCreate, ContentItem
from metabolic_health.schemas.medications import Medication, MedicationCreate
from metabolic_health.schemas.symptoms import SymptomCreate, SymptomEntry
from metabolic_health.schemas.user import Preferences, UserRecord

logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    name = "memory"

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._lock = threading.Lock()
        self._users: Dict[str, UserRecord] = {}
        self._user_ids_by_email: Dict[str, str] = {}
        self._symptoms: List[SymptomEntry] = []
        self._medications: Dict[str, Medication] = {}
        self._content: List[ContentItem] = []

    def close(self) -> None:
        logger.debug("Discarding in-memory storage")

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            user_id = self._user_ids_by_email.get(email)
            return self._users[user_id].model_copy(deep=True) if user_id else None

    def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        condition: Optional[str] = None,
        preferences: Optional[Preferences] = None,
    ) -> UserRecord:
        with self._lock:
            if email in self._user_ids_by_email:
                raise DuplicateUser()
            user = UserRecord(
                id=str(uuid.uuid4()),
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                condition=condition,
                preferences=preferences,
                created_at=self._clock(),
            )
            self._users[user.id] = user
            self._user_ids_by_email[email] = user.id
            return user.model_copy(deep=True)

    def delete_user(self, user_id: str) -> None:
        """Drop a user record (admin/test use; not exposed over the API)."""
        with self._lock:
            user = self._users.pop(user_id, None)
            if user:
                self._user_ids_by_email.pop(user.email, None)

    def create_symptom(self, user_id: str, data: SymptomCreate) -> SymptomEntry:
        entry = SymptomEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            symptom=data.symptom,
            severity=data.severity,
            notes=data.notes,
            timestamp=self._clock(),
        )
        with self._lock:
            self._symptoms.append(entry)
        return entry.model_copy()

    def list_symptoms(
        self,
        user_id: str,
        limit: Optional[int] = None,
        since: Optional[datetime] = None,
    ) -> List[SymptomEntry]:
        with self._lock:
            rows = [
                e.model_copy()
                for e in self._symptoms
                if e.user_id == user_id and (since is None or e.timestamp >= since)
            ]
        rows.sort(key=lambda e: e.timestamp, reverse=True)
        return rows[:limit] if limit else rows

    def create_medication(self, user_id: str, data: MedicationCreate) -> Medication:
        med = Medication(
            id=str(uuid.uuid4()),
            user_id=user_id,
            created_at=self._clock(),
            **data.model_dump(),
        )
        with self._lock:
            self._medications[med.id] = med
        return med.model_copy()

    def list_medications(self, user_id: str) -> List[Medication]:
        with self._lock:
            rows = [m.model_copy() for m in self._medications.values() if m.user_id == user_id and m.is_active]
        rows.sort(key=lambda m: m.created_at, reverse=True)
        return rows

    def update_medication(self, user_id: str, medication_id: str, changes: Dict[str, Any]) -> Optional[Medication]:
        with self._lock:
            med = self._medications.get(medication_id)
            if med is None or med.user_id != user_id:
                return None
            updated = med.model_copy(update=changes)
            self._medications[medication_id] = updated
            return updated.model_copy()

    def list_content(self, tags: Optional[List[str]] = None) -> List[ContentItem]:
        with self._lock:
            return [c.model_copy(deep=True) for c in self._content if matches_tags(c.tags, tags)]

    def count_content(self) -> int:
        with self._lock:
            return len(self._content)

    def create_content(self, data: ContentCreate) -> ContentItem:
        item = ContentItem(id=str(uuid.uuid4()), created_at=self._clock(), **data.model_dump())
        with self._lock:
            self._content.append(item)
        return item.model_copy(deep=True)
