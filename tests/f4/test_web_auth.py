"""Tests for token handling in the Web API (F4)."""

import jwt
import pytest

from studybuddy.web.auth import decode_principal

KEY = "signing-key-for-tests-0123456789abcdef"
OTHER_KEY = "another-signing-key-0123456789abcdef"


class TestDecodePrincipal:
    """Tests for decode_principal."""

    def test_valid_token(self):
        token = jwt.encode({"id": 3, "userType": "tutor"}, KEY, algorithm="HS256")

        principal = decode_principal(token, KEY)

        assert principal.id == 3
        assert principal.is_tutor is True

    def test_role_claim_accepted(self):
        token = jwt.encode({"id": 3, "role": "student"}, KEY, algorithm="HS256")

        assert decode_principal(token, KEY).role == "student"

    @pytest.mark.parametrize(
        "payload",
        [{"userType": "student"}, {"id": "3", "userType": "student"}, {"id": 3, "userType": "admin"}],
    )
    def test_missing_or_bad_claims(self, payload):
        from fastapi import HTTPException

        token = jwt.encode(payload, KEY, algorithm="HS256")

        with pytest.raises(HTTPException) as exc_info:
            decode_principal(token, KEY)
        assert exc_info.value.status_code == 401

    def test_wrong_secret(self):
        from fastapi import HTTPException

        token = jwt.encode({"id": 3, "userType": "student"}, OTHER_KEY, algorithm="HS256")

        with pytest.raises(HTTPException) as exc_info:
            decode_principal(token, KEY)
        assert exc_info.value.detail == "Invalid token."


class TestRequestAuthentication:
    """Tokens on real requests."""

    def test_no_token(self, client, course_setup):
        response = client.get(f"/api/quiz/accessible/{course_setup.course_id}")

        assert response.status_code == 401
        assert response.json()["detail"] == "Access denied. No token provided."

    def test_garbage_token(self, client, course_setup):
        response = client.get(
            f"/api/quiz/accessible/{course_setup.course_id}",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401

    def test_cookie_token(self, client, course_setup, jwt_secret):
        token = jwt.encode({"id": 7, "userType": "student"}, jwt_secret, algorithm="HS256")
        client.cookies.set("token", token)

        response = client.get(f"/api/quiz/accessible/{course_setup.course_id}")

        assert response.status_code == 200

    def test_missing_secret_rejects(self, client, course_setup, auth_headers, monkeypatch):
        headers = auth_headers(7)
        monkeypatch.delenv("STUDYBUDDY_JWT_SECRET")

        response = client.get(
            f"/api/quiz/accessible/{course_setup.course_id}", headers=headers
        )

        assert response.status_code == 401

    def test_student_cannot_use_tutor_routes(self, client, course_setup, student_headers):
        response = client.post(
            "/api/quiz/tutor/add-question",
            json={
                "course_id": course_setup.course_id,
                "chapter_id": course_setup.chapter_ids[0],
                "question_text": "Q?",
                "options": ["A", "B"],
                "correct_option": "A",
            },
            headers=student_headers,
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Access denied. Tutors only."
