"""Repository functions for chapter quizzes.

Tables: quizzes, quiz_questions, quiz_submissions, quiz_results.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class QuestionRecord:
    """Question record from database (chapter quiz or final exam)."""

    id: int
    question_text: str
    options: list[str]
    correct_option: str


@dataclass
class SubmissionRecord:
    """Current submission row for a (student, quiz) or (student, course)."""

    student_id: int
    score: float
    passed: bool
    attempts: int
    submitted_at: str


# =============================================================================
# OPTION (DE)SERIALIZATION
# =============================================================================


def encode_options(options: list[str]) -> str:
    """Serialize an option list for storage."""
    return json.dumps(options, ensure_ascii=False)


def decode_options(raw: Any) -> list[str]:
    """Decode a stored option list leniently.

    Rows written outside the authoring flow may hold malformed JSON or a
    non-list value; those degrade to an empty list.
    """
    if isinstance(raw, list):
        value = raw
    else:
        try:
            value = json.loads(raw) if raw else []
        except (json.JSONDecodeError, TypeError):
            logger.warning("quiz_questions.malformed_options", raw=str(raw)[:80])
            return []

    if not isinstance(value, list):
        logger.warning("quiz_questions.options_not_a_list", raw=str(raw)[:80])
        return []

    return [str(o) for o in value]


# =============================================================================
# QUIZZES AND QUESTIONS
# =============================================================================


def get_quiz_id_for_chapter(conn: sqlite3.Connection, chapter_id: int) -> int | None:
    """Resolve the quiz bound to a chapter."""
    row = conn.execute(
        "SELECT id FROM quizzes WHERE chapter_id = ?", (chapter_id,)
    ).fetchone()
    return row["id"] if row else None


def find_or_create_quiz(
    conn: sqlite3.Connection,
    course_id: int,
    chapter_id: int,
    title: str,
) -> tuple[int, bool]:
    """Get the quiz for (course, chapter), creating it if absent.

    Relies on UNIQUE(course_id, chapter_id) so concurrent callers end up
    with the same row.

    Returns:
        (quiz_id, created)
    """
    cursor = conn.execute(
        "INSERT OR IGNORE INTO quizzes (course_id, chapter_id, title) VALUES (?, ?, ?)",
        (course_id, chapter_id, title),
    )
    created = cursor.rowcount > 0

    row = conn.execute(
        "SELECT id FROM quizzes WHERE course_id = ? AND chapter_id = ?",
        (course_id, chapter_id),
    ).fetchone()

    if created:
        logger.info("quizzes.created", quiz_id=row["id"], course_id=course_id, chapter_id=chapter_id)

    return row["id"], created


def insert_question(
    conn: sqlite3.Connection,
    quiz_id: int,
    chapter_id: int,
    question_text: str,
    options: list[str],
    correct_option: str,
) -> int:
    """Insert a quiz question.

    Returns:
        New question id
    """
    cursor = conn.execute(
        """
        INSERT INTO quiz_questions
            (quiz_id, chapter_id, question_text, options, correct_option)
        VALUES (?, ?, ?, ?, ?)
        """,
        (quiz_id, chapter_id, question_text, encode_options(options), correct_option),
    )
    logger.debug("quiz_questions.inserted", question_id=cursor.lastrowid, quiz_id=quiz_id)
    return cursor.lastrowid


def list_chapter_questions(conn: sqlite3.Connection, chapter_id: int) -> list[QuestionRecord]:
    """Get all questions of a chapter quiz, in authoring order."""
    rows = conn.execute(
        """
        SELECT id, question_text, options, correct_option
          FROM quiz_questions
         WHERE chapter_id = ?
      ORDER BY id ASC
        """,
        (chapter_id,),
    ).fetchall()
    return [row_to_question(row) for row in rows]


# =============================================================================
# SUBMISSIONS AND RESULTS
# =============================================================================


def record_submission(
    conn: sqlite3.Connection,
    student_id: int,
    quiz_id: int,
    score: float,
    passed: bool,
    max_attempts: int,
) -> int | None:
    """Consume one attempt and store the score, in a single statement.

    The first submission inserts the row with attempts = 1. Later ones
    overwrite score/passed/submitted_at and increment attempts, but only
    while attempts < max_attempts.

    Returns:
        The attempt number just consumed, or None if the ceiling was
        already reached (nothing is written in that case).
    """
    rows = conn.execute(
        """
        INSERT INTO quiz_submissions (student_id, quiz_id, score, passed, attempts, submitted_at)
        VALUES (?, ?, ?, ?, 1, datetime('now'))
        ON CONFLICT(student_id, quiz_id) DO UPDATE SET
            score = excluded.score,
            passed = excluded.passed,
            attempts = quiz_submissions.attempts + 1,
            submitted_at = excluded.submitted_at
        WHERE quiz_submissions.attempts < ?
        RETURNING attempts
        """,
        (student_id, quiz_id, score, int(passed), max_attempts),
    ).fetchall()
    return rows[0]["attempts"] if rows else None


def get_submission(
    conn: sqlite3.Connection,
    student_id: int,
    quiz_id: int,
) -> SubmissionRecord | None:
    """Get the current submission of a student for a quiz."""
    row = conn.execute(
        """
        SELECT student_id, score, passed, attempts, submitted_at
          FROM quiz_submissions
         WHERE student_id = ? AND quiz_id = ?
        """,
        (student_id, quiz_id),
    ).fetchone()
    return row_to_submission(row) if row else None


def upsert_chapter_result(
    conn: sqlite3.Connection,
    student_id: int,
    chapter_id: int,
    score: float,
) -> None:
    """Record or replace the chapter score used for unlocking."""
    conn.execute(
        """
        INSERT INTO quiz_results (student_id, chapter_id, score, recorded_at)
        VALUES (?, ?, ?, datetime('now'))
        ON CONFLICT(student_id, chapter_id) DO UPDATE SET
            score = excluded.score,
            recorded_at = excluded.recorded_at
        """,
        (student_id, chapter_id, score),
    )


def get_chapter_scores(conn: sqlite3.Connection, student_id: int) -> dict[int, float]:
    """Get chapter_id -> stored score for every chapter the student attempted."""
    rows = conn.execute(
        "SELECT chapter_id, score FROM quiz_results WHERE student_id = ?",
        (student_id,),
    ).fetchall()
    return {row["chapter_id"]: float(row["score"]) for row in rows}


def row_to_question(row) -> QuestionRecord:
    """Convert database row to QuestionRecord."""
    return QuestionRecord(
        id=row["id"],
        question_text=row["question_text"],
        options=decode_options(row["options"]),
        correct_option=row["correct_option"],
    )


def row_to_submission(row) -> SubmissionRecord:
    """Convert database row to SubmissionRecord."""
    return SubmissionRecord(
        student_id=row["student_id"],
        score=float(row["score"]),
        passed=bool(row["passed"]),
        attempts=row["attempts"],
        submitted_at=row["submitted_at"],
    )
