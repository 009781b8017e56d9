"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Record stores: in-memory SQLite and mongomock, so suites run on both
- FastAPI test client with the store and settings overridden
- Users, alumni profiles and job records
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_repositories
from app.core.auth import create_access_token, hash_password
from app.core.config import Settings, get_settings
from app.db.mongodb import init_mongo_indexes
from app.db.postgres import create_schema, create_sql_engine
from app.models.domain import Actor, User
from app.repositories.mongo_repository import build_mongo_repositories
from app.repositories.sql_repository import build_sql_repositories
from app.main import app


PASSWORD = "secret123"

# One bcrypt hash shared by every seeded user keeps the suite fast
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture(params=["sql", "mongo"])
def repos(request):
    """Fresh, empty record store for each test, once per backend."""
    if request.param == "sql":
        engine = create_sql_engine("sqlite://")
        create_schema(engine)
        yield build_sql_repositories(engine)
        engine.dispose()
    else:
        db = mongomock.MongoClient()["alumnidb_test"]
        init_mongo_indexes(db)
        yield build_mongo_repositories(db)


@pytest.fixture
def sql_repos():
    """SQL store only, for tests that do not need both backends."""
    engine = create_sql_engine("sqlite://")
    create_schema(engine)
    yield build_sql_repositories(engine)
    engine.dispose()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def client(repos, upload_dir):
    """
    FastAPI test client with overridden store and settings.
    """
    app.dependency_overrides[get_repositories] = lambda: repos
    app.dependency_overrides[get_settings] = lambda: Settings(upload_dir=str(upload_dir))

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================
# USERS & TOKENS
# ============================================================

def actor_for(user: User) -> Actor:
    return Actor(user_id=user.id, username=user.username, role=user.role)


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def make_user(repos):
    def _make(username: str, role: str = "user") -> User:
        return repos.users.create(username, f"{username}@example.com", PASSWORD_HASH, role)
    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin", role="admin")


@pytest.fixture
def owner(make_user):
    return make_user("budi")


@pytest.fixture
def stranger(make_user):
    return make_user("sari")


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def owner_headers(owner):
    return bearer(owner)


@pytest.fixture
def stranger_headers(stranger):
    return bearer(stranger)


# ============================================================
# RECORDS
# ============================================================

@pytest.fixture
def make_alumni(repos):
    counter = {"n": 0}

    def _make(user: User = None, **overrides):
        counter["n"] += 1
        values = {
            "user_id": user.id if user else None,
            "nim": f"2019{counter['n']:04d}",
            "name": f"Alumni {counter['n']}",
            "program": "Informatika",
            "cohort_year": 2019,
            "graduation_year": 2023,
            "email": f"alumni{counter['n']}@example.com",
            "phone": None,
            "address": None,
        }
        values.update(overrides)
        return repos.alumni.create(values)
    return _make


@pytest.fixture
def make_job(repos):
    def _make(alumni_id: int, **overrides):
        values = {
            "alumni_id": alumni_id,
            "company": "PT Maju Jaya",
            "position": "Backend Engineer",
            "industry": "Technology",
            "location": "Jakarta",
            "salary_range": "10-15 juta",
            "start_date": "2023-08-01",
            "end_date": None,
            "status": "active",
            "description": None,
        }
        values.update(overrides)
        return repos.jobs.create(values)
    return _make


@pytest.fixture
def owner_alumni(make_alumni, owner):
    return make_alumni(owner)


@pytest.fixture
def stranger_alumni(make_alumni, stranger):
    return make_alumni(stranger)


@pytest.fixture
def sample_job_data(owner_alumni):
    """Valid create payload for a job record"""
    return {
        "alumni_id": owner_alumni.id,
        "company": "PT Data Nusantara",
        "position": "Data Analyst",
        "industry": "Finance",
        "location": "Bandung",
        "salary_range": "8-12 juta",
        "start_date": "2023-09-01",
        "end_date": None,
        "status": "active",
        "description": "Reporting and dashboards",
    }


@pytest.fixture
def admin_actor(admin):
    return actor_for(admin)


@pytest.fixture
def owner_actor(owner):
    return actor_for(owner)


@pytest.fixture
def stranger_actor(stranger):
    return actor_for(stranger)


@pytest.fixture
def password():
    """Plain password of every seeded user"""
    return PASSWORD
