"""Tests for health, course, enrollment and certificate endpoints (F4)."""

from fastapi.testclient import TestClient

from studybuddy import __version__
from studybuddy.db import database
from studybuddy.web.api import create_app


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == __version__
        # ISO format check
        assert "T" in data["timestamp"]


class TestCourses:
    """Tests for /api/courses."""

    def test_list_courses(self, client, course_setup):
        response = client.get("/api/courses")

        data = response.json()
        assert data["count"] == 1
        assert data["courses"][0]["title"] == "Python 101"
        assert data["courses"][0]["tutor_id"] == course_setup.tutor_user_id

    def test_create_course(self, client, auth_headers):
        response = client.post(
            "/api/courses",
            json={"title": "Statistics", "description": "Numbers", "price": 25},
            headers=auth_headers(300, "tutor"),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Statistics"
        assert data["price"] == 25.0
        assert data["tutor_id"] == 300

    def test_create_course_negative_price(self, client, auth_headers):
        response = client.post(
            "/api/courses",
            json={"title": "Statistics", "price": -3},
            headers=auth_headers(300, "tutor"),
        )

        assert response.status_code == 400

    def test_create_course_infinite_price(self, client, auth_headers):
        response = client.post(
            "/api/courses",
            json={"title": "Statistics", "price": "inf"},
            headers=auth_headers(300, "tutor"),
        )

        assert response.status_code == 400
        assert client.get("/api/courses").json()["count"] == 0

    def test_create_duplicate_title(self, client, course_setup, tutor_headers):
        response = client.post(
            "/api/courses", json={"title": "Python 101"}, headers=tutor_headers
        )

        assert response.status_code == 409

    def test_student_cannot_create(self, client, student_headers):
        response = client.post(
            "/api/courses", json={"title": "Mine"}, headers=student_headers
        )

        assert response.status_code == 403


class TestChapters:
    """Tests for /api/courses/{course_id}/chapters."""

    def test_list_chapters(self, client, course_setup):
        response = client.get(f"/api/courses/{course_setup.course_id}/chapters")

        data = response.json()
        assert data["count"] == 4
        assert [c["id"] for c in data["chapters"]] == course_setup.chapter_ids

    def test_add_chapter(self, client, course_setup, tutor_headers):
        response = client.post(
            f"/api/courses/{course_setup.course_id}/chapters",
            json={"title": "Chapter 5"},
            headers=tutor_headers,
        )

        assert response.status_code == 201
        assert response.json()["order_index"] == 4

    def test_add_chapter_unknown_course(self, client, course_setup, tutor_headers):
        response = client.post(
            "/api/courses/9999/chapters", json={"title": "Lost"}, headers=tutor_headers
        )

        assert response.status_code == 404

    def test_add_chapter_not_owner(self, client, course_setup, auth_headers):
        response = client.post(
            f"/api/courses/{course_setup.course_id}/chapters",
            json={"title": "Intruder"},
            headers=auth_headers(555, "tutor"),
        )

        assert response.status_code == 403


class TestEnrollments:
    """Tests for /api/enrollments and /api/certificates."""

    def test_enroll_and_list(self, client, course_setup, student_headers):
        response = client.post(
            "/api/enrollments/enroll",
            json={"course_id": course_setup.course_id},
            headers=student_headers,
        )

        assert response.status_code == 201
        assert response.json()["progress"] == 0

        courses = client.get("/api/enrollments/my-courses", headers=student_headers).json()
        assert courses["count"] == 1
        assert courses["courses"][0]["course_title"] == "Python 101"

    def test_enroll_twice(self, client, course_setup, student_headers):
        body = {"course_id": course_setup.course_id}
        client.post("/api/enrollments/enroll", json=body, headers=student_headers)

        response = client.post("/api/enrollments/enroll", json=body, headers=student_headers)

        assert response.status_code == 409
        assert response.json()["detail"] == "Already enrolled in this course."

    def test_enroll_unknown_course(self, client, course_setup, student_headers):
        response = client.post(
            "/api/enrollments/enroll", json={"course_id": 9999}, headers=student_headers
        )

        assert response.status_code == 404

    def test_no_certificates(self, client, course_setup, student_headers):
        response = client.get("/api/certificates", headers=student_headers)

        assert response.json() == {"certificates": [], "count": 0}


class TestStartupDatabase:
    """Database chosen at API startup."""

    def test_database_from_environment(self, tmp_path, monkeypatch, jwt_secret):
        db_file = tmp_path / "worker" / "studybuddy.db"
        monkeypatch.setattr(database, "_db_path", None)
        monkeypatch.setenv("STUDYBUDDY_DB", str(db_file))

        with TestClient(create_app()) as client:
            response = client.get("/api/courses")

        assert response.status_code == 200
        assert database.get_db_path() == db_file
        assert db_file.exists()
