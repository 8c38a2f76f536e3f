import pytest
from fastapi.testclient import TestClient

from jobboard.config import Settings
from jobboard.database import Base, build_engine, build_session_factory
from jobboard.main import create_app

TEST_SECRET = "test-secret-key"

JOB_FIELDS = {
    "title": "Backend Engineer",
    "url": "https://example.com/jobs/backend-engineer",
    "description": "Build Python APIs with FastAPI.",
    "company": "Acme",
    "companyURL": "https://example.com",
    "location": "Remote",
}


def make_settings(database_url: str, **overrides) -> Settings:
    values = {
        "JWT_SECRET": TEST_SECRET,
        "DATABASE_URL": database_url,
        "JOB_SEARCH_API_URL": None,
        "JOB_INFO_API_URL": None,
        "JOB_SEARCH_API_KEY": None,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    # never pick up a developer's .env in tests
    return Settings(_env_file=None, **values)


@pytest.fixture()
def test_db_url(tmp_path):
    # Use a temporary SQLite file shared by the app under test and direct sessions
    return f"sqlite:///{tmp_path / 'test_jobboard.db'}"


@pytest.fixture()
def settings(test_db_url):
    return make_settings(test_db_url)


@pytest.fixture()
def settings_with(test_db_url):
    """Settings for the test database with some values overridden."""
    def _settings_with(**overrides):
        return make_settings(test_db_url, **overrides)
    return _settings_with


@pytest.fixture()
def job_fields():
    return dict(JOB_FIELDS)


@pytest.fixture()
def db_session(test_db_url):
    engine = build_engine(test_db_url)
    TestingSessionLocal = build_session_factory(engine)
    # Create all tables
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
    # Ensure file handles are released on Windows
    engine.dispose()


@pytest.fixture()
def client(settings, db_session):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def signup(client):
    """Sign a user up over REST; returns (user json, auth headers)."""
    def _signup(email="user@example.com", name="Test User", password="password123"):
        r = client.post("/signup", json={"name": name, "email": email, "password": password})
        assert r.status_code == 201, r.text
        body = r.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}
    return _signup


@pytest.fixture()
def create_job(client):
    def _create_job(**overrides):
        payload = {**JOB_FIELDS, **overrides}
        r = client.post("/jobs", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["job"]
    return _create_job
