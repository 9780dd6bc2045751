"""
Store capabilities used by the core. Each backend implements all three interfaces;
the backend is picked once at startup by open_storage() and passed down from app.state.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from metabolic_health.schemas.content import ContentCreate, ContentItem
from metabolic_health.schemas.medications import Medication, MedicationCreate
from metabolic_health.schemas.symptoms import SymptomCreate, SymptomEntry
from metabolic_health.schemas.user import Preferences, UserRecord


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CredentialStore(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        condition: Optional[str] = None,
        preferences: Optional[Preferences] = None,
    ) -> UserRecord:
        """Persist a new user. Raises DuplicateUser if the email is taken."""


class RecordStore(ABC):
    @abstractmethod
    def create_symptom(self, user_id: str, data: SymptomCreate) -> SymptomEntry:
        """Persist a symptom entry; the timestamp is assigned here."""

    @abstractmethod
    def list_symptoms(
        self,
        user_id: str,
        limit: Optional[int] = None,
        since: Optional[datetime] = None,
    ) -> List[SymptomEntry]:
        """Entries for user_id, newest first. `since` keeps entries with timestamp >= since."""

    @abstractmethod
    def create_medication(self, user_id: str, data: MedicationCreate) -> Medication:
        ...

    @abstractmethod
    def list_medications(self, user_id: str) -> List[Medication]:
        """Active medications for user_id, newest first."""

    @abstractmethod
    def update_medication(self, user_id: str, medication_id: str, changes: Dict[str, Any]) -> Optional[Medication]:
        """Apply a partial update. Returns None if no medication with that id belongs to user_id."""


class ContentCatalog(ABC):
    @abstractmethod
    def list_content(self, tags: Optional[List[str]] = None) -> List[ContentItem]:
        """All items, or the items sharing at least one tag with `tags`."""

    @abstractmethod
    def count_content(self) -> int:
        ...

    @abstractmethod
    def create_content(self, data: ContentCreate) -> ContentItem:
        ...


class Storage(CredentialStore, RecordStore, ContentCatalog):
    """A full backend. close() releases connections at shutdown."""

    name = "abstract"

    def close(self) -> None:
        pass


def matches_tags(item_tags: List[str], tags: Optional[List[str]]) -> bool:
    if not tags:
        return True
    return bool(set(item_tags) & set(tags))


def open_storage(settings) -> Storage:
    """Build the backend named by settings.storage_backend."""
    if settings.storage_backend == "memory":
        from metabolic_health.db.memory_store import MemoryStorage

        return MemoryStorage()
    from metabolic_health.db.database import SqlStorage

    storage = SqlStorage(settings.database_url)
    storage.init_db()
    return storage
