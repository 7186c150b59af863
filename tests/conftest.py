import os
import tempfile

# Point settings at an in-memory SQLite database before jobboard is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="jobboard-uploads-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from jobboard.core.auth import verify_token
from jobboard.db.postgres import engine, get_db_session
from jobboard.db.schema import create_tables, metadata
from jobboard.main import app
from jobboard.schemas.schemas import JobCreate, SignUpRequest
from jobboard.services import account_service, job_service


@pytest.fixture(scope="session", autouse=True)
def schema():
    create_tables(engine)
    yield


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def client():
    return TestClient(app)


def register(role, email, password="secret123", **profile):
    """Sign up through the service and return the session claims."""
    if role == "student":
        profile.setdefault("full_name", "Sam Student")
    else:
        profile.setdefault("company_name", "Acme Corp")
    with get_db_session() as db:
        account_service.sign_up(db, SignUpRequest(email=email, password=password, role=role, **profile))
    with get_db_session() as db:
        token = account_service.sign_in(db, email, password, role)
    return verify_token(token.access_token)


def post_job(claims, **overrides):
    fields = {
        "title": "Intern",
        "description": "Build things",
        "requirements": "Python\nSQL",
        "location": "Remote",
        "type": "internship",
        "work_mode": "remote",
    }
    fields.update(overrides)
    with get_db_session() as db:
        return job_service.create_job(db, claims, JobCreate(**fields))


def count_rows(table, **where):
    sql = f"SELECT COUNT(*) FROM {table}"
    if where:
        sql += " WHERE " + " AND ".join(f"{k} = :{k}" for k in where)
    with get_db_session() as db:
        return db.execute(text(sql), where).scalar()


@pytest.fixture
def employer():
    return register("employer", "employer@example.com")


@pytest.fixture
def other_employer():
    return register("employer", "rival@example.com", company_name="Rival Inc")


@pytest.fixture
def student():
    return register("student", "student@example.com", university="State U")


@pytest.fixture
def job(employer):
    return post_job(employer)


def auth_header(client, email, password, role):
    response = client.post("/api/auth/signin", json={"email": email, "password": password, "role": role})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class _EmptyResult:
    rowcount = 0

    def mappings(self):
        return self

    def first(self):
        return None


class LostRace:
    """
    Session wrapper whose first statement starting with `prefix` finds
    nothing, as if a concurrent request had not committed its row yet.
    Everything else goes to the real session.
    """

    def __init__(self, db, prefix):
        self.db = db
        self.prefix = prefix
        self.hidden = False

    def execute(self, statement, params=None):
        if not self.hidden and str(statement).strip().startswith(self.prefix):
            self.hidden = True
            return _EmptyResult()
        return self.db.execute(statement, params)

    def __getattr__(self, name):
        return getattr(self.db, name)
