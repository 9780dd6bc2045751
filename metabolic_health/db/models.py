from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)  # login key, stored lower-case
    password_hash = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    condition = Column(String, nullable=True)
    preferences = Column(JSON, nullable=True)  # {foodAllergies, exerciseLevel, energyLevels}
    created_at = Column(DateTime, default=datetime.utcnow)


class SideEffect(Base):
    __tablename__ = "side_effects"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    symptom = Column(String, nullable=False)
    severity = Column(Integer, nullable=False)  # 1-10
    notes = Column(Text, nullable=True)
    timestamp = Column(DateTime, nullable=False, index=True)  # naive UTC


class Medication(Base):
    __tablename__ = "medications"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    dosage = Column(String, nullable=False)
    frequency = Column(String, nullable=False)  # daily | weekly | monthly
    time_of_day = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False)  # naive UTC


class Content(Base):
    __tablename__ = "content"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String, nullable=False)  # nutrition | exercise | behavioral
    tags = Column(JSON, nullable=False, default=list)
    url = Column(String, nullable=True)
    duration = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
