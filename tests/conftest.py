"""Shared fixtures: a throwaway SQLite database and an authenticated API client."""

import os
import tempfile
from pathlib import Path

# Settings are read at import time, so the environment is prepared first
_TMP = Path(tempfile.mkdtemp(prefix="barangay-tests-"))
_DB_PATH = _TMP / "test.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["CERTIFICATES_DIR"] = str(_TMP / "certificates")
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def certificates_dir():
    return Path(os.environ["CERTIFICATES_DIR"])


@pytest.fixture
def client():
    """API client on a fresh database."""
    if _DB_PATH.exists():
        _DB_PATH.unlink()
    from barangay.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    """Bearer header for a freshly signed-up clerk."""
    client.post("/api/users", json={"username": "clerk", "password": "s3cret", "role": "admin"})
    res = client.post("/api/users/login", json={"username": "clerk", "password": "s3cret"})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def resident(client, auth_headers):
    res = client.post(
        "/api/residents",
        json={
            "firstName": "Ana",
            "lastName": "Cruz",
            "birthDate": "2000-05-01",
            "purok": "Purok 3",
            "houseNumber": "12-B",
            "phoneNumber": "09170000001",
            "civilStatus": "Single",
        },
        headers=auth_headers,
    )
    assert res.status_code == 201, res.text
    return res.json()
