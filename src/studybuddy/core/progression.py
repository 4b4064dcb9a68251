"""Chapter quiz progression engine.

Responsibilities:
- Serve chapter quiz questions without their correct options
- Score quiz submissions and consume attempts atomically
- Record per-chapter results used to gate later chapters
- Compute which chapters of a course a student may open

Rules (configurable in progression section of app config):
- pass_mark: minimum score to pass (default 60, inclusive)
- max_attempts: scored submissions allowed per quiz (default 2)
- free_chapters: leading chapters that are always open (default 2)
- unlock_scan: "continue" keeps checking chapters after a locked one,
  "break" stops at the first locked chapter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from studybuddy.config.app_config import ProgressionConfig, load_app_config
from studybuddy.core.errors import AttemptsExhaustedError, NotFoundError
from studybuddy.core.scoring import (
    QuestionEvaluation,
    parse_answers,
    score_answers,
)
from studybuddy.db import courses_repository, quiz_repository
from studybuddy.db.database import get_db

logger = structlog.get_logger(__name__)

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class PublicQuestion:
    """A question as shown to a student (correct option withheld)."""

    id: int
    question_text: str
    options: list[str]


@dataclass
class QuizSubmissionResult:
    """Result of a chapter quiz submission."""

    quiz_id: int
    chapter_id: int
    score: float
    passed: bool
    attempt: int
    retry_available: bool
    evaluation: list[QuestionEvaluation]
    correct_answers: dict[int, str]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "quiz_id": self.quiz_id,
            "chapter_id": self.chapter_id,
            "score": self.score,
            "passed": self.passed,
            "attempt": self.attempt,
            "retry_available": self.retry_available,
            "evaluation": [e.to_dict() for e in self.evaluation],
            "correct_answers": self.correct_answers,
        }


@dataclass
class QuizStatus:
    """Latest submission summary for a chapter quiz."""

    submitted: bool
    score: float | None = None
    passed: bool | None = None
    attempt: int = 0
    retry_available: bool = False
    correct_answers: dict[int, str] = field(default_factory=dict)


def _progression(config: ProgressionConfig | None) -> ProgressionConfig:
    """Use the given rules or the loaded app config."""
    return config or load_app_config().progression


# =============================================================================
# QUESTIONS
# =============================================================================


def list_chapter_questions(chapter_id: int) -> list[PublicQuestion]:
    """Get the questions of a chapter quiz without correct options.

    A chapter without a quiz simply has no questions.
    """
    with get_db() as conn:
        questions = quiz_repository.list_chapter_questions(conn, chapter_id)

    return [
        PublicQuestion(id=q.id, question_text=q.question_text, options=q.options)
        for q in questions
    ]


# =============================================================================
# SUBMISSION
# =============================================================================


def submit_chapter_quiz(
    student_id: int,
    chapter_id: int,
    raw_answers: Any,
    config: ProgressionConfig | None = None,
) -> QuizSubmissionResult:
    """Score a chapter quiz submission and store the outcome.

    The attempt is consumed and the score stored by one conditional
    upsert; the chapter result is written in the same transaction. When
    the attempt ceiling is already reached nothing is written.

    Args:
        student_id: Authenticated student id
        chapter_id: Chapter whose quiz is being answered
        raw_answers: [{question_id, selected_option}, ...]
        config: Progression rules (defaults to app config)

    Raises:
        SubmissionValidationError: Malformed answers
        NotFoundError: No quiz for the chapter
        AttemptsExhaustedError: Attempt ceiling reached
    """
    rules = _progression(config)
    answers = parse_answers(raw_answers)

    with get_db() as conn:
        quiz_id = quiz_repository.get_quiz_id_for_chapter(conn, chapter_id)
        if quiz_id is None:
            raise NotFoundError("Quiz not found.")

        questions = quiz_repository.list_chapter_questions(conn, chapter_id)
        result = score_answers(questions, answers, rules.pass_mark)

        attempt = quiz_repository.record_submission(
            conn,
            student_id=student_id,
            quiz_id=quiz_id,
            score=result.score,
            passed=result.passed,
            max_attempts=rules.max_attempts,
        )
        if attempt is None:
            logger.info(
                "quiz.attempts_exhausted",
                student_id=student_id,
                quiz_id=quiz_id,
                max_attempts=rules.max_attempts,
            )
            raise AttemptsExhaustedError(quiz_id, rules.max_attempts)

        quiz_repository.upsert_chapter_result(conn, student_id, chapter_id, result.score)

    logger.info(
        "quiz.submitted",
        student_id=student_id,
        quiz_id=quiz_id,
        chapter_id=chapter_id,
        score=result.score,
        passed=result.passed,
        attempt=attempt,
    )

    return QuizSubmissionResult(
        quiz_id=quiz_id,
        chapter_id=chapter_id,
        score=result.score,
        passed=result.passed,
        attempt=attempt,
        retry_available=attempt < rules.max_attempts,
        evaluation=result.evaluation,
        correct_answers=result.correct_answers,
    )


def get_chapter_quiz_status(
    student_id: int,
    chapter_id: int,
    config: ProgressionConfig | None = None,
) -> QuizStatus:
    """Summarize the student's current submission for a chapter quiz.

    Correct options are only revealed once something was submitted.
    """
    rules = _progression(config)

    with get_db() as conn:
        quiz_id = quiz_repository.get_quiz_id_for_chapter(conn, chapter_id)
        if quiz_id is None:
            return QuizStatus(submitted=False)

        submission = quiz_repository.get_submission(conn, student_id, quiz_id)
        if submission is None:
            return QuizStatus(submitted=False)

        questions = quiz_repository.list_chapter_questions(conn, chapter_id)

    return QuizStatus(
        submitted=True,
        score=submission.score,
        passed=submission.passed,
        attempt=submission.attempts,
        retry_available=not submission.passed and submission.attempts < rules.max_attempts,
        correct_answers={q.id: q.correct_option for q in questions},
    )


# =============================================================================
# CHAPTER UNLOCKING
# =============================================================================


def compute_accessible(
    chapter_ids: list[int],
    scores: dict[int, float],
    config: ProgressionConfig,
) -> list[int]:
    """Decide which chapters are open, given chapters in course order.

    The first free_chapters are always open. A later chapter is open iff
    the stored score of the chapter right before it reaches the pass mark
    (no stored score counts as 0).
    """
    accessible: list[int] = []

    for position, chapter_id in enumerate(chapter_ids):
        if position < config.free_chapters:
            accessible.append(chapter_id)
            continue

        previous_score = scores.get(chapter_ids[position - 1], 0.0)
        if previous_score >= config.pass_mark:
            accessible.append(chapter_id)
        elif config.unlock_scan == "break":
            break

    return accessible


def accessible_chapters(
    student_id: int,
    course_id: int,
    config: ProgressionConfig | None = None,
) -> list[int]:
    """Get the chapter ids of a course the student may currently open.

    Unknown courses and courses without chapters yield an empty list.
    """
    rules = _progression(config)

    with get_db() as conn:
        chapters = courses_repository.list_chapters(conn, course_id)
        if not chapters:
            return []
        scores = quiz_repository.get_chapter_scores(conn, student_id)

    accessible = compute_accessible([c.id for c in chapters], scores, rules)

    logger.debug(
        "chapters.accessible",
        student_id=student_id,
        course_id=course_id,
        total=len(chapters),
        accessible=len(accessible),
    )
    return accessible
