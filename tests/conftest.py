"""Shared fixtures: an app wired to in-memory SQLite and a temporary upload directory."""

from __future__ import annotations

from pathlib import Path
from typing import Generator, Optional

import pytest
from fastapi.testclient import TestClient

from userhub.config import Settings
from userhub.main import create_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        BCRYPT_ROUNDS=4,
        UPLOAD_DIR=str(upload_dir),
        ADMIN_EMAIL=ADMIN_EMAIL,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        ENVIRONMENT="test",
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def register(client: TestClient, image: Optional[tuple] = None, **fields):
    data = {"name": "Jane Doe", "email": "jane@example.com", "password": "secret-1"}
    data.update(fields)
    files = {"profile_image": image} if image else None
    return client.post("/api/auth/register", data=data, files=files)


def login(client: TestClient, email: str, password: str) -> dict:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def stored_files(directory: Path) -> list[str]:
    return sorted(p.name for p in directory.iterdir()) if directory.exists() else []


@pytest.fixture
def admin_token(client: TestClient) -> str:
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)["token"]


@pytest.fixture
def jane(client: TestClient) -> dict:
    """A registered plain user with a profile image, plus a token for them."""
    response = register(client, image=("avatar.png", PNG_BYTES, "image/png"), city="Pune")
    assert response.status_code == 201, response.text
    user = response.json()["user"]
    user["token"] = login(client, "jane@example.com", "secret-1")["token"]
    return user
