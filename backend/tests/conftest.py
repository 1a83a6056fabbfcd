"""Shared fixtures: a fresh in-memory store per test and an API client."""
import pytest
from fastapi.testclient import TestClient

from hse.models.base import Base, SessionLocal, engine
from hse.seed_demo import DEMO_ADMIN_PASSWORD, DEMO_USER_PASSWORD, seed_demo_data

ADMIN = ("admin", DEMO_ADMIN_PASSWORD)
PHYSICIAN = ("dr_ahmadi", DEMO_USER_PASSWORD)
SAFETY_OFFICER = ("safety_officer", DEMO_USER_PASSWORD)
FIRE_CHIEF = ("fire_chief", DEMO_USER_PASSWORD)
ENV_SPECIALIST = ("env_spec", DEMO_USER_PASSWORD)


@pytest.fixture()
def db():
    """Empty schema on the shared in-memory connection."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def seeded_db(db):
    seed_demo_data()
    return db


@pytest.fixture()
def client(seeded_db):
    from hse.main import app
    return TestClient(app)
