"""Tests for final exam endpoints (F4)."""

import pytest


@pytest.fixture
def final_question_ids(client, course_setup, tutor_headers):
    """Two final exam questions, correct options A then B."""
    response = client.post(
        "/api/final-quiz/tutor/add-final-questions",
        json={
            "course_id": course_setup.course_id,
            "questions": [
                {"question_text": "F1?", "options": ["A", "B"], "correct_option": "A"},
                {"question_text": "F2?", "options": ["A", "B"], "correct_option": "B"},
            ],
        },
        headers=tutor_headers,
    )
    assert response.status_code == 201
    return response.json()["question_ids"]


class TestAddFinalQuestions:
    """Tests for POST /api/final-quiz/tutor/add-final-questions."""

    def test_saved(self, client, course_setup, final_question_ids, student_headers):
        response = client.get(
            f"/api/final-quiz/{course_setup.course_id}", headers=student_headers
        )

        data = response.json()
        assert data["count"] == 2
        assert [q["id"] for q in data["questions"]] == final_question_ids
        assert "correct_option" not in data["questions"][0]

    def test_empty_batch(self, client, course_setup, tutor_headers):
        response = client.post(
            "/api/final-quiz/tutor/add-final-questions",
            json={"course_id": course_setup.course_id, "questions": []},
            headers=tutor_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "course_id and questions[] required."

    def test_single_option_rejected(self, client, course_setup, tutor_headers):
        response = client.post(
            "/api/final-quiz/tutor/add-final-questions",
            json={
                "course_id": course_setup.course_id,
                "questions": [{"question_text": "F?", "options": ["A"], "correct_option": "A"}],
            },
            headers=tutor_headers,
        )

        assert response.status_code == 400


class TestSubmitFinal:
    """Tests for POST /api/final-quiz/{course_id}/submit."""

    def test_pass_issues_certificate(
        self, client, course_setup, final_question_ids, student_headers
    ):
        course_id = course_setup.course_id
        client.post(
            "/api/enrollments/enroll", json={"course_id": course_id}, headers=student_headers
        )

        response = client.post(
            f"/api/final-quiz/{course_id}/submit",
            json={
                "answers": [
                    {"question_id": final_question_ids[0], "selected_option": "A"},
                    {"question_id": final_question_ids[1], "selected_option": "B"},
                ]
            },
            headers=student_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "score": 100.0,
            "passed": True,
            "attempt": 1,
            "certificate_issued": True,
        }

        certificates = client.get("/api/certificates", headers=student_headers).json()
        assert certificates["count"] == 1
        assert certificates["certificates"][0]["course_title"] == "Python 101"

        courses = client.get("/api/enrollments/my-courses", headers=student_headers).json()
        assert courses["courses"][0]["progress"] == 100

        status = client.get(f"/api/final-quiz/{course_id}/status", headers=student_headers)
        assert status.json() == {"submitted": True, "passed": True, "score": 100.0}

    def test_fail(self, client, course_setup, final_question_ids, student_headers):
        response = client.post(
            f"/api/final-quiz/{course_setup.course_id}/submit",
            json={"answers": [{"question_id": final_question_ids[0], "selected_option": "B"}]},
            headers=student_headers,
        )

        data = response.json()
        assert data["score"] == 0.0
        assert data["passed"] is False
        assert data["certificate_issued"] is False

    def test_empty_answers(self, client, course_setup, final_question_ids, student_headers):
        response = client.post(
            f"/api/final-quiz/{course_setup.course_id}/submit",
            json={"answers": []},
            headers=student_headers,
        )

        assert response.status_code == 400

    def test_unknown_course(self, client, course_setup, student_headers):
        response = client.post(
            "/api/final-quiz/9999/submit",
            json={"answers": [{"question_id": 1, "selected_option": "A"}]},
            headers=student_headers,
        )

        assert response.status_code == 404

    def test_status_not_submitted(self, client, course_setup, student_headers):
        response = client.get(
            f"/api/final-quiz/{course_setup.course_id}/status", headers=student_headers
        )

        assert response.json() == {"submitted": False, "passed": False, "score": None}
