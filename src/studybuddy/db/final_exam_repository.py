"""Repository functions for course final exams.

Tables: final_quiz_questions, final_quiz_submissions.
"""

from __future__ import annotations

import sqlite3

import structlog

from studybuddy.db.quiz_repository import (
    QuestionRecord,
    SubmissionRecord,
    encode_options,
    row_to_question,
    row_to_submission,
)

logger = structlog.get_logger(__name__)


def insert_final_questions(
    conn: sqlite3.Connection,
    course_id: int,
    questions: list[tuple[str, list[str], str]],
) -> list[int]:
    """Insert final exam questions for a course.

    Args:
        questions: (question_text, options, correct_option) tuples

    Returns:
        New question ids, in input order
    """
    ids = []
    for question_text, options, correct_option in questions:
        cursor = conn.execute(
            """
            INSERT INTO final_quiz_questions (course_id, question_text, options, correct_option)
            VALUES (?, ?, ?, ?)
            """,
            (course_id, question_text, encode_options(options), correct_option),
        )
        ids.append(cursor.lastrowid)

    logger.debug("final_quiz_questions.inserted", course_id=course_id, count=len(ids))
    return ids


def list_final_questions(conn: sqlite3.Connection, course_id: int) -> list[QuestionRecord]:
    """Get the final exam question bank of a course."""
    rows = conn.execute(
        """
        SELECT id, question_text, options, correct_option
          FROM final_quiz_questions
         WHERE course_id = ?
      ORDER BY id ASC
        """,
        (course_id,),
    ).fetchall()
    return [row_to_question(row) for row in rows]


def record_final_submission(
    conn: sqlite3.Connection,
    student_id: int,
    course_id: int,
    score: float,
    passed: bool,
) -> int:
    """Upsert the final exam submission of a student.

    Returns:
        Number of scored final exam submissions so far
    """
    rows = conn.execute(
        """
        INSERT INTO final_quiz_submissions (student_id, course_id, score, passed, attempts, submitted_at)
        VALUES (?, ?, ?, ?, 1, datetime('now'))
        ON CONFLICT(student_id, course_id) DO UPDATE SET
            score = excluded.score,
            passed = excluded.passed,
            attempts = final_quiz_submissions.attempts + 1,
            submitted_at = excluded.submitted_at
        RETURNING attempts
        """,
        (student_id, course_id, score, int(passed)),
    ).fetchall()
    return rows[0]["attempts"]


def get_final_submission(
    conn: sqlite3.Connection,
    student_id: int,
    course_id: int,
) -> SubmissionRecord | None:
    """Get the current final exam submission of a student."""
    row = conn.execute(
        """
        SELECT student_id, score, passed, attempts, submitted_at
          FROM final_quiz_submissions
         WHERE student_id = ? AND course_id = ?
        """,
        (student_id, course_id),
    ).fetchone()
    return row_to_submission(row) if row else None
