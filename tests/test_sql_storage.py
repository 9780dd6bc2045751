"""SqlStorage against a throwaway SQLite file."""
from datetime import timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from metabolic_health.core.errors import DuplicateUser
from metabolic_health.db.database import SqlStorage
from metabolic_health.db.seed import DEFAULT_CONTENT, seed_content
from metabolic_health.main import create_app
from metabolic_health.schemas.medications import MedicationCreate
from metabolic_health.schemas.symptoms import SymptomCreate
from metabolic_health.schemas.user import Preferences


@pytest.fixture
def sql_storage(tmp_path, clock):
    store = SqlStorage(f"sqlite:///{tmp_path / 'test.db'}", clock=clock)
    store.init_db()
    yield store
    store.close()


class TestSqlCredentials:
    def test_create_and_fetch_user(self, sql_storage):
        created = sql_storage.create_user(
            email="ann@example.com",
            password_hash="hash",
            first_name="Ann",
            last_name="Lee",
            preferences=Preferences(food_allergies=["nuts"]),
        )
        by_id = sql_storage.get_user(created.id)
        by_email = sql_storage.get_user_by_email("ann@example.com")
        assert by_id == by_email == created
        assert by_id.preferences.food_allergies == ["nuts"]
        assert sql_storage.get_user("missing") is None

    def test_duplicate_email(self, sql_storage):
        sql_storage.create_user("ann@example.com", "hash", "Ann", "Lee")
        with pytest.raises(DuplicateUser):
            sql_storage.create_user("ann@example.com", "hash2", "Ann", "Other")


class TestSqlRecords:
    def test_symptoms_newest_first_with_utc_timestamps(self, sql_storage, clock):
        clock.offset = -timedelta(days=8)
        sql_storage.create_symptom("u1", SymptomCreate(symptom="nausea", severity=3))
        clock.offset = timedelta(0)
        sql_storage.create_symptom("u1", SymptomCreate(symptom="fatigue", severity=5, notes="tired"))
        sql_storage.create_symptom("u2", SymptomCreate(symptom="headache", severity=7))

        entries = sql_storage.list_symptoms("u1")
        assert [e.severity for e in entries] == [5, 3]
        assert entries[0].notes == "tired"
        assert entries[0].timestamp.tzinfo == timezone.utc

        assert len(sql_storage.list_symptoms("u1", limit=1)) == 1
        recent = sql_storage.list_symptoms("u1", since=clock() - timedelta(days=7))
        assert [e.symptom for e in recent] == ["fatigue"]

    def test_medications(self, sql_storage):
        med = sql_storage.create_medication(
            "u1", MedicationCreate(name="Tirzepatide", dosage="2.5mg", frequency="weekly")
        )
        assert med.is_active is True
        assert [m.id for m in sql_storage.list_medications("u1")] == [med.id]

        assert sql_storage.update_medication("u2", med.id, {"is_active": False}) is None
        assert sql_storage.update_medication("u1", "missing", {"is_active": False}) is None

        updated = sql_storage.update_medication("u1", med.id, {"dosage": "5mg", "is_active": False})
        assert updated.dosage == "5mg"
        assert updated.is_active is False
        assert sql_storage.list_medications("u1") == []

    def test_content_seed_and_filter(self, sql_storage):
        assert seed_content(sql_storage) == len(DEFAULT_CONTENT)
        assert seed_content(sql_storage) == 0
        assert sql_storage.count_content() == len(DEFAULT_CONTENT)
        nausea = sql_storage.list_content(["nausea"])
        assert {c.title for c in nausea} == {"Low-Fat Smoothie Recipe", "Anti-Nausea Meal Planning"}


def test_api_on_sql_backend(sql_storage):
    seed_content(sql_storage)
    with TestClient(create_app(storage=sql_storage)) as client:
        resp = client.post(
            "/api/auth/register",
            json={"email": "ann@example.com", "password": "secret12", "firstName": "Ann", "lastName": "Lee"},
        )
        assert resp.status_code == 201
        headers = {"Authorization": f"Bearer {resp.json()['token']}"}
        assert client.post("/api/side-effects", json={"symptom": "nausea", "severity": 4}, headers=headers).status_code == 201
        stats = client.get("/api/dashboard/stats", headers=headers).json()
        assert stats == {"symptomsToday": 1, "adherenceRate": "95%", "contentViewed": 4}


def test_database_error_is_generic_500(sql_storage):
    with TestClient(create_app(storage=sql_storage)) as client:
        resp = client.post(
            "/api/auth/register",
            json={"email": "ann@example.com", "password": "secret12", "firstName": "Ann", "lastName": "Lee"},
        )
        headers = {"Authorization": f"Bearer {resp.json()['token']}"}
        with sql_storage.engine.begin() as conn:
            conn.execute(text("DROP TABLE side_effects"))

        resp = client.get("/api/side-effects", headers=headers)
        assert resp.status_code == 500
        assert resp.json() == {"message": "Storage failure"}
