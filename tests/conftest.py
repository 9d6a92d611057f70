"""
Pytest configuration and fixtures
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# configuration is read at import time, so set it before importing the app
_db_dir = tempfile.mkdtemp(prefix="prompt_enhancer_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["FREE_TIER_DAILY_LIMIT"] = "3"
os.environ.pop("RESEND_API_KEY", None)

from fastapi.testclient import TestClient

from database import engine, sessionLocal
from database_models import Base
import auth.models  # noqa: F401
from analytics.engine import clear_analytics_cache
from main import app

TEST_PASSWORD = "s3cure-password"


@pytest.fixture(scope="function")
def db():
    """Clean schema per test and a session for direct inspection."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    clear_analytics_cache()

    session = sessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    return TestClient(app)


def register_and_login(client, email, role=None, password=TEST_PASSWORD):
    payload = {"email": email, "password": password}
    if role:
        payload["role"] = role

    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text

    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client, "writer@example.com", role="writer")


@pytest.fixture
def other_headers(client):
    return register_and_login(client, "designer@example.com", role="designer")


@pytest.fixture
def pro_headers(client):
    headers = register_and_login(client, "pro@example.com", role="developer")
    response = client.post("/api/users/upgrade", headers=headers)
    assert response.status_code == 200
    return headers


@pytest.fixture
def register(client):
    def _register(email, role=None):
        return register_and_login(client, email, role=role)
    return _register
