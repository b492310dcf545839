# tests/conftest.py
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import lifelog.models  # noqa: F401  (registers tables)
from lifelog.auth import create_token
from lifelog.clock import FixedClock, get_clock
from lifelog.database import Base, get_db
from lifelog.main import app
from lifelog.models import DiaryEntry, EntryTag, Habit, HabitLog, Tag, User

TODAY = date(2024, 6, 15)


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(TODAY, tz_name="UTC")


@pytest.fixture
def client(session_factory, clock):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    u = User(email="alice@example.com", name="Alice Johnson")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def other_user(db):
    u = User(email="bob@example.com", name="Bob Smith")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def bearer(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_token({'user_id': user_id})}"}


@pytest.fixture
def auth_headers(user):
    return bearer(user.id)


@pytest.fixture
def make_entry(db):
    """Factory: insert a diary entry on a given day (09:00 UTC by default)."""

    def _make(user, day, mood="happy", expense=None, tags=(), hour=9):
        when = day if isinstance(day, datetime) else datetime(day.year, day.month, day.day, hour)
        entry = DiaryEntry(user_id=user.id, content="Today was a day.", mood=mood, expense=expense, entry_date=when)
        for name in tags:
            tag = db.query(Tag).filter_by(user_id=user.id, name=name).first()
            if tag is None:
                tag = Tag(user_id=user.id, name=name)
                db.add(tag)
                db.flush()
            entry.entry_tags.append(EntryTag(tag_id=tag.id))
        db.add(entry)
        db.commit()
        return entry

    return _make


@pytest.fixture
def make_habit(db):
    def _make(user, name="Drink water", is_active=True, logs=()):
        habit = Habit(user_id=user.id, name=name, is_active=is_active)
        db.add(habit)
        db.flush()
        for log_date, completed in logs:
            db.add(HabitLog(habit_id=habit.id, log_date=log_date, is_completed=completed))
        db.commit()
        return habit

    return _make
