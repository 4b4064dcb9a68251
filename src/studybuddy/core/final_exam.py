"""Course final exam and certificate issuance.

Responsibilities:
- Serve the final exam question bank without correct options
- Score final exam submissions (same formula as chapter quizzes)
- On a pass, issue the course certificate (once) and set enrollment
  progress to 100, in the same transaction as the submission
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from studybuddy.config.app_config import ProgressionConfig, load_app_config
from studybuddy.core.errors import NotFoundError
from studybuddy.core.progression import PublicQuestion
from studybuddy.core.scoring import parse_answers, score_answers
from studybuddy.db import courses_repository, enrollments_repository, final_exam_repository
from studybuddy.db.database import get_db

logger = structlog.get_logger(__name__)

COMPLETED_PROGRESS = 100


@dataclass
class FinalExamResult:
    """Result of a final exam submission."""

    course_id: int
    score: float
    passed: bool
    attempt: int
    certificate_issued: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "course_id": self.course_id,
            "score": self.score,
            "passed": self.passed,
            "attempt": self.attempt,
            "certificate_issued": self.certificate_issued,
        }


@dataclass
class FinalExamStatus:
    """Latest final exam outcome for a student."""

    submitted: bool
    passed: bool
    score: float | None = None


def list_final_questions(course_id: int) -> list[PublicQuestion]:
    """Get the final exam questions of a course without correct options."""
    with get_db() as conn:
        questions = final_exam_repository.list_final_questions(conn, course_id)

    return [
        PublicQuestion(id=q.id, question_text=q.question_text, options=q.options)
        for q in questions
    ]


def submit_final_exam(
    student_id: int,
    course_id: int,
    raw_answers: Any,
    config: ProgressionConfig | None = None,
) -> FinalExamResult:
    """Score a final exam submission, issuing the certificate on a pass.

    Final exams have no attempt ceiling. Re-submitting after a pass keeps
    the single existing certificate.

    Raises:
        SubmissionValidationError: Empty or malformed answers
        NotFoundError: Unknown course
    """
    rules = config or load_app_config().progression
    answers = parse_answers(raw_answers, allow_empty=False)

    certificate_issued = False

    with get_db() as conn:
        if courses_repository.get_course(conn, course_id) is None:
            raise NotFoundError("Course not found.")

        questions = final_exam_repository.list_final_questions(conn, course_id)
        result = score_answers(questions, answers, rules.pass_mark)

        attempt = final_exam_repository.record_final_submission(
            conn,
            student_id=student_id,
            course_id=course_id,
            score=result.score,
            passed=result.passed,
        )

        if result.passed:
            certificate_issued = enrollments_repository.issue_certificate(
                conn, student_id, course_id
            )
            enrollments_repository.set_progress(
                conn, student_id, course_id, COMPLETED_PROGRESS
            )

    logger.info(
        "final_exam.submitted",
        student_id=student_id,
        course_id=course_id,
        score=result.score,
        passed=result.passed,
        attempt=attempt,
        certificate_issued=certificate_issued,
    )

    return FinalExamResult(
        course_id=course_id,
        score=result.score,
        passed=result.passed,
        attempt=attempt,
        certificate_issued=certificate_issued,
    )


def get_final_exam_status(student_id: int, course_id: int) -> FinalExamStatus:
    """Get the student's current final exam outcome for a course."""
    with get_db() as conn:
        submission = final_exam_repository.get_final_submission(conn, student_id, course_id)

    if submission is None:
        return FinalExamStatus(submitted=False, passed=False)

    return FinalExamStatus(
        submitted=True,
        passed=submission.passed,
        score=submission.score,
    )
