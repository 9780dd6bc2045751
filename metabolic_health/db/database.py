import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from metabolic_health.core.errors import DuplicateUser, StorageError
from metabolic_health.db import models
from metabolic_health.db.models import Base
from metabolic_health.db.storage import Storage, matches_tags, utcnow
from metabolic_health.schemas.content import ContentCreate, ContentItem
from metabolic_health.schemas.medications import Medication, MedicationCreate
from metabolic_health.schemas.symptoms import SymptomCreate, SymptomEntry
from metabolic_health.schemas.user import Preferences, UserRecord

logger = logging.getLogger(__name__)


def _to_db_time(dt: datetime) -> datetime:
    """Columns hold naive UTC."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _from_db_time(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    return dt.replace(tzinfo=timezone.utc)


def _user(row: models.User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        condition=row.condition,
        preferences=Preferences.model_validate(row.preferences) if row.preferences else None,
        created_at=_from_db_time(row.created_at),
    )


def _symptom(row: models.SideEffect) -> SymptomEntry:
    return SymptomEntry(
        id=row.id,
        user_id=row.user_id,
        symptom=row.symptom,
        severity=row.severity,
        notes=row.notes,
        timestamp=_from_db_time(row.timestamp),
    )


def _medication(row: models.Medication) -> Medication:
    return Medication(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        dosage=row.dosage,
        frequency=row.frequency,
        time_of_day=row.time_of_day,
        is_active=row.is_active,
        created_at=_from_db_time(row.created_at),
    )


def _content(row: models.Content) -> ContentItem:
    return ContentItem(
        id=row.id,
        title=row.title,
        description=row.description,
        type=row.type,
        tags=list(row.tags or []),
        url=row.url,
        duration=row.duration,
        created_at=_from_db_time(row.created_at),
    )


class SqlStorage(Storage):
    """SQLAlchemy backend (SQLite by default; any DATABASE_URL SQLAlchemy accepts)."""

    name = "sql"

    def __init__(self, database_url: str, clock: Callable[[], datetime] = utcnow):
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = create_engine(database_url, connect_args=connect_args)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._clock = clock

    def init_db(self) -> None:
        """Create tables if they don't exist."""
        Base.metadata.create_all(bind=self.engine)

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Database operation failed")
            raise StorageError() from e
        finally:
            db.close()

    # Credentials

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self._session() as db:
            row = db.query(models.User).filter(models.User.id == user_id).first()
            return _user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self._session() as db:
            row = db.query(models.User).filter(models.User.email == email).first()
            return _user(row) if row else None

    def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        condition: Optional[str] = None,
        preferences: Optional[Preferences] = None,
    ) -> UserRecord:
        with self._session() as db:
            row = models.User(
                id=str(uuid.uuid4()),
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                condition=condition,
                preferences=preferences.model_dump(by_alias=True, exclude_none=True) if preferences else None,
                created_at=_to_db_time(self._clock()),
            )
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise DuplicateUser()
            db.refresh(row)
            return _user(row)

    # Records

    def create_symptom(self, user_id: str, data: SymptomCreate) -> SymptomEntry:
        with self._session() as db:
            row = models.SideEffect(
                id=str(uuid.uuid4()),
                user_id=user_id,
                symptom=data.symptom,
                severity=data.severity,
                notes=data.notes,
                timestamp=_to_db_time(self._clock()),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _symptom(row)

    def list_symptoms(
        self,
        user_id: str,
        limit: Optional[int] = None,
        since: Optional[datetime] = None,
    ) -> List[SymptomEntry]:
        with self._session() as db:
            q = db.query(models.SideEffect).filter(models.SideEffect.user_id == user_id)
            if since is not None:
                q = q.filter(models.SideEffect.timestamp >= _to_db_time(since))
            q = q.order_by(models.SideEffect.timestamp.desc())
            if limit:
                q = q.limit(limit)
            return [_symptom(row) for row in q.all()]

    def create_medication(self, user_id: str, data: MedicationCreate) -> Medication:
        with self._session() as db:
            row = models.Medication(
                id=str(uuid.uuid4()),
                user_id=user_id,
                name=data.name,
                dosage=data.dosage,
                frequency=data.frequency,
                time_of_day=data.time_of_day,
                is_active=data.is_active,
                created_at=_to_db_time(self._clock()),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _medication(row)

    def list_medications(self, user_id: str) -> List[Medication]:
        with self._session() as db:
            rows = (
                db.query(models.Medication)
                .filter(models.Medication.user_id == user_id, models.Medication.is_active.is_(True))
                .order_by(models.Medication.created_at.desc())
                .all()
            )
            return [_medication(row) for row in rows]

    def update_medication(self, user_id: str, medication_id: str, changes: Dict[str, Any]) -> Optional[Medication]:
        with self._session() as db:
            row = (
                db.query(models.Medication)
                .filter(models.Medication.id == medication_id, models.Medication.user_id == user_id)
                .first()
            )
            if not row:
                return None
            for field, value in changes.items():
                setattr(row, field, value)
            db.commit()
            db.refresh(row)
            return _medication(row)

    # Content

    def list_content(self, tags: Optional[List[str]] = None) -> List[ContentItem]:
        with self._session() as db:
            rows = db.query(models.Content).order_by(models.Content.created_at).all()
            return [_content(row) for row in rows if matches_tags(row.tags or [], tags)]

    def count_content(self) -> int:
        with self._session() as db:
            return db.query(models.Content).count()

    def create_content(self, data: ContentCreate) -> ContentItem:
        with self._session() as db:
            row = models.Content(
                id=str(uuid.uuid4()),
                title=data.title,
                description=data.description,
                type=data.type,
                tags=list(data.tags),
                url=data.url,
                duration=data.duration,
                created_at=_to_db_time(self._clock()),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _content(row)
