"""Fixtures for F4 tests - Web API and CLI."""

from typing import Callable

import jwt
import pytest
from fastapi.testclient import TestClient

from studybuddy.web.api import create_app

JWT_SECRET = "studybuddy-test-secret-0123456789abcdef"


@pytest.fixture
def jwt_secret(monkeypatch) -> str:
    """Signing secret visible to the API."""
    monkeypatch.setenv("STUDYBUDDY_JWT_SECRET", JWT_SECRET)
    return JWT_SECRET


@pytest.fixture
def client(db_path, jwt_secret):
    """Create test client on an isolated database."""
    app = create_app()
    return TestClient(app)


@pytest.fixture
def auth_headers(jwt_secret) -> Callable[..., dict[str, str]]:
    """Factory: bearer headers for a user id and role."""

    def _headers(user_id: int, role: str = "student") -> dict[str, str]:
        token = jwt.encode({"id": user_id, "userType": role}, jwt_secret, algorithm="HS256")
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def tutor_headers(auth_headers, course_setup):
    """Headers of the tutor owning course_setup."""
    return auth_headers(course_setup.tutor_user_id, "tutor")


@pytest.fixture
def student_headers(auth_headers):
    return auth_headers(7)
