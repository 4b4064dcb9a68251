"""SQLite database connection and schema management.

Provides connection management and schema initialization for StudyBuddy.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

logger = structlog.get_logger(__name__)

# Default database location
DEFAULT_DB_PATH = Path("db/studybuddy.db")

# Environment variable naming the database file (CLI --db, API startup)
DB_ENV = "STUDYBUDDY_DB"

# Current database (module-level, set by init_db)
_db_path: Path | None = None


def init_db(db_path: Path | None = None) -> None:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to the path of the last
            init_db call, then db/studybuddy.db
    """
    global _db_path
    _db_path = db_path or _db_path or DEFAULT_DB_PATH

    # Ensure directory exists
    _db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))


def get_db_path() -> Path | None:
    """Path set by the last init_db call, or None if never initialized."""
    return _db_path


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Everything executed inside the block is one transaction: committed on
    normal exit, rolled back if the block raises.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Example:
        with get_db() as conn:
            cursor = conn.execute("SELECT * FROM courses")
            rows = cursor.fetchall()
    """
    db_path = _db_path or DEFAULT_DB_PATH

    # Ensure directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        -- Tutors: a user id that may own courses
        CREATE TABLE IF NOT EXISTS tutors (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL UNIQUE,
            created_at TEXT NOT NULL DEFAULT (datetime('now'))
        );

        CREATE TABLE IF NOT EXISTS courses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            tutor_id INTEGER NOT NULL REFERENCES tutors(id) ON DELETE CASCADE,
            title TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            price REAL NOT NULL DEFAULT 0 CHECK(price >= 0),
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(tutor_id, title)
        );

        -- Chapters ("sections"): order_index is 0-based and gapless per course
        CREATE TABLE IF NOT EXISTS course_sections (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            title TEXT NOT NULL,
            order_index INTEGER NOT NULL CHECK(order_index >= 0),
            UNIQUE(course_id, order_index)
        );

        -- One quiz per chapter
        CREATE TABLE IF NOT EXISTS quizzes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            chapter_id INTEGER NOT NULL REFERENCES course_sections(id) ON DELETE CASCADE,
            title TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(course_id, chapter_id)
        );

        -- options: JSON array of strings; correct_option is one of them verbatim
        CREATE TABLE IF NOT EXISTS quiz_questions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            quiz_id INTEGER NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
            chapter_id INTEGER NOT NULL,
            question_text TEXT NOT NULL,
            options TEXT NOT NULL DEFAULT '[]',
            correct_option TEXT NOT NULL
        );

        -- Current submission per (student, quiz); attempts counts scored submissions
        CREATE TABLE IF NOT EXISTS quiz_submissions (
            student_id INTEGER NOT NULL,
            quiz_id INTEGER NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
            score REAL NOT NULL CHECK(score >= 0 AND score <= 100),
            passed INTEGER NOT NULL CHECK(passed IN (0, 1)),
            attempts INTEGER NOT NULL DEFAULT 1,
            submitted_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(student_id, quiz_id)
        );

        -- Latest chapter score, read by the unlock computation
        CREATE TABLE IF NOT EXISTS quiz_results (
            student_id INTEGER NOT NULL,
            chapter_id INTEGER NOT NULL REFERENCES course_sections(id) ON DELETE CASCADE,
            score REAL NOT NULL CHECK(score >= 0 AND score <= 100),
            recorded_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(student_id, chapter_id)
        );

        CREATE TABLE IF NOT EXISTS final_quiz_questions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            question_text TEXT NOT NULL,
            options TEXT NOT NULL DEFAULT '[]',
            correct_option TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS final_quiz_submissions (
            student_id INTEGER NOT NULL,
            course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            score REAL NOT NULL CHECK(score >= 0 AND score <= 100),
            passed INTEGER NOT NULL CHECK(passed IN (0, 1)),
            attempts INTEGER NOT NULL DEFAULT 1,
            submitted_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(student_id, course_id)
        );

        -- Issued once, never updated
        CREATE TABLE IF NOT EXISTS certificates (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            student_id INTEGER NOT NULL,
            course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            issued_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(student_id, course_id)
        );

        CREATE TABLE IF NOT EXISTS enrollments (
            student_id INTEGER NOT NULL,
            course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
            progress REAL NOT NULL DEFAULT 0 CHECK(progress >= 0 AND progress <= 100),
            enrolled_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(student_id, course_id)
        );

        -- Indexes
        CREATE INDEX IF NOT EXISTS idx_sections_course ON course_sections(course_id, order_index);
        CREATE INDEX IF NOT EXISTS idx_quiz_questions_chapter ON quiz_questions(chapter_id);
        CREATE INDEX IF NOT EXISTS idx_final_questions_course ON final_quiz_questions(course_id);
        CREATE INDEX IF NOT EXISTS idx_quiz_results_student ON quiz_results(student_id);
        """
    )
