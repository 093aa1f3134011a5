import os
import sys
from pathlib import Path

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]
TEST_DB_PATH = BASE_DIR / "test.db"

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("SEED_DEFAULT_USER", "false")

import healthify.main as main  # noqa: E402  (import after env vars are set)
from healthify.database import SessionLocal, get_db, init_db  # noqa: E402
from healthify.models.user import User  # noqa: E402
from healthify.models.water import DailyWaterLog  # noqa: E402
from healthify.services.auth_middleware import get_current_user  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _schema():
    init_db()
    yield


@pytest.fixture(autouse=True)
def _clean_tables():
    session = SessionLocal()
    try:
        session.query(DailyWaterLog).delete()
        session.query(User).delete()
        session.commit()
    finally:
        session.close()
    yield


@pytest.fixture()
def client(monkeypatch):
    """Provide a TestClient with startup seeding patched out for isolation."""
    monkeypatch.setattr(main, "run_seed", lambda: None)

    with TestClient(main.app) as test_client:
        yield test_client


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session):
    counter = {"value": 0}

    def _make_user(water_goal: int = 8, **fields) -> User:
        counter["value"] += 1
        user = User(
            email=fields.pop("email", f"user{counter['value']}@example.com"),
            name=fields.pop("name", "Test User"),
            is_active=fields.pop("is_active", True),
            water_goal=water_goal,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def login_as():
    """Resolve the current user by id for the duration of a test."""

    def _login_as(user_id: int):
        def _current_user(db: Session = Depends(get_db)):
            return db.query(User).filter(User.id == user_id).first()

        main.app.dependency_overrides[get_current_user] = _current_user

    yield _login_as
    main.app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture()
def user(make_user, login_as):
    account = make_user()
    login_as(account.id)
    return account
