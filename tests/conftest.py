import mongomock
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from placenet.core.auth import create_access_token, hash_password
from placenet.core.config import get_settings
from placenet.db.mongodb import set_mongo_db
from placenet.db.postgres import Database, set_database
from placenet.services.pipeline_service import reset_pipeline_engine
from placenet.services.realtime import reset_channel_hub
from placenet.services.repositories import (
    ApplicationRepository, JobRepository, UserRepository, new_id,
)

PASSWORD = "password123"


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def database():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db = Database(engine)
    db.create_tables()
    set_database(db)
    yield db
    set_database(None)
    engine.dispose()


@pytest.fixture
def mongo_db():
    db = mongomock.MongoClient()["placenet_test"]
    set_mongo_db(db)
    yield db
    set_mongo_db(None)


@pytest.fixture
def settings(monkeypatch, tmp_path):
    settings = get_settings()
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "demo_mode", True)
    return settings


@pytest.fixture
def client(database, mongo_db, settings):
    reset_pipeline_engine()
    reset_channel_hub()
    from placenet.main import app
    with TestClient(app) as test_client:
        yield test_client
    reset_pipeline_engine()
    reset_channel_hub()


# ------------------------------------------------------------
# Seed helpers
# ------------------------------------------------------------

@pytest.fixture
def make_user(database, password_hash):
    users = UserRepository(database)

    def _make(role="student", first_name="Test", last_name=None, email=None):
        return users.create(
            email=email or f"{role}-{new_id()[:8]}@example.com",
            password_hash=password_hash,
            role=role,
            first_name=first_name,
            last_name=last_name or role.title(),
        )
    return _make


@pytest.fixture
def make_job(database):
    jobs = JobRepository(database)

    def _make(recruiter_id, **overrides):
        data = {
            "title": "Backend Engineer",
            "company": "Acme",
            "location": "Bangalore",
            "type": "full-time",
            "description": "Build APIs",
            "requirements": ["2+ years"],
            "skills": ["Python", "SQL"],
            "is_active": True,
        }
        data.update(overrides)
        return jobs.create(recruiter_id, data)
    return _make


@pytest.fixture
def make_application(database):
    applications = ApplicationRepository(database)

    def _make(student_id, job_id, **overrides):
        data = {"cover_letter": "Hello", "resume_version": "current"}
        data.update(overrides)
        return applications.create(student_id, job_id, data)
    return _make


def auth_headers(user: dict) -> dict:
    token = create_access_token({"sub": user["id"], "role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


def caller(user: dict) -> dict:
    return {"user_id": user["id"], "email": user["email"], "role": user["role"]}


@pytest.fixture
def student(make_user):
    return make_user("student", first_name="Asha", last_name="Rao")


@pytest.fixture
def recruiter(make_user):
    return make_user("recruiter", first_name="Ravi", last_name="Iyer")


@pytest.fixture
def other_recruiter(make_user):
    return make_user("recruiter", first_name="Meera", last_name="Nair")


@pytest.fixture
def admin(make_user):
    return make_user("admin", first_name="Root", last_name="Admin")
