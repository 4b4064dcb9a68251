"""Repository functions for tutors, courses and chapters.

Every function takes an open connection so callers can group several
statements into one transaction (see studybuddy.db.database.get_db).
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class CourseRecord:
    """Course record from database."""

    id: int
    tutor_id: int
    tutor_user_id: int
    title: str
    description: str
    price: float
    created_at: str


@dataclass
class ChapterRecord:
    """Chapter (course section) record from database."""

    id: int
    course_id: int
    title: str
    order_index: int


def ensure_tutor(conn: sqlite3.Connection, user_id: int) -> int:
    """Get or create the tutor row for a user.

    Returns:
        Tutor row id
    """
    conn.execute(
        "INSERT OR IGNORE INTO tutors (user_id) VALUES (?)", (user_id,)
    )
    row = conn.execute(
        "SELECT id FROM tutors WHERE user_id = ?", (user_id,)
    ).fetchone()
    return row["id"]


def insert_course(
    conn: sqlite3.Connection,
    tutor_id: int,
    title: str,
    description: str,
    price: float,
) -> int:
    """Insert a new course.

    Raises:
        sqlite3.IntegrityError: If the tutor already has a course with this title

    Returns:
        New course id
    """
    cursor = conn.execute(
        "INSERT INTO courses (tutor_id, title, description, price) VALUES (?, ?, ?, ?)",
        (tutor_id, title, description, price),
    )
    logger.debug("courses.inserted", course_id=cursor.lastrowid, tutor_id=tutor_id)
    return cursor.lastrowid


_COURSE_SELECT = """
    SELECT c.id, c.tutor_id, t.user_id AS tutor_user_id, c.title,
           c.description, c.price, c.created_at
      FROM courses c
      JOIN tutors t ON c.tutor_id = t.id
"""


def get_course(conn: sqlite3.Connection, course_id: int) -> CourseRecord | None:
    """Get course by id."""
    row = conn.execute(_COURSE_SELECT + " WHERE c.id = ?", (course_id,)).fetchone()
    return _row_to_course(row) if row else None


def list_courses(conn: sqlite3.Connection) -> list[CourseRecord]:
    """Get all courses, newest first."""
    rows = conn.execute(_COURSE_SELECT + " ORDER BY c.id DESC").fetchall()
    return [_row_to_course(row) for row in rows]


def is_course_owner(conn: sqlite3.Connection, course_id: int, user_id: int) -> bool:
    """Check ownership through the course -> tutor -> user chain."""
    row = conn.execute(
        """
        SELECT c.id
          FROM courses c
          JOIN tutors t ON c.tutor_id = t.id
         WHERE c.id = ? AND t.user_id = ?
        """,
        (course_id, user_id),
    ).fetchone()
    return row is not None


def append_chapter(conn: sqlite3.Connection, course_id: int, title: str) -> ChapterRecord:
    """Append a chapter at the end of the course.

    order_index is computed inside the INSERT so positions stay gapless.
    """
    cursor = conn.execute(
        """
        INSERT INTO course_sections (course_id, title, order_index)
        SELECT ?, ?, COALESCE(MAX(order_index) + 1, 0)
          FROM course_sections
         WHERE course_id = ?
        """,
        (course_id, title, course_id),
    )
    row = conn.execute(
        "SELECT id, course_id, title, order_index FROM course_sections WHERE id = ?",
        (cursor.lastrowid,),
    ).fetchone()
    chapter = _row_to_chapter(row)
    logger.debug(
        "chapters.appended",
        course_id=course_id,
        chapter_id=chapter.id,
        order_index=chapter.order_index,
    )
    return chapter


def get_chapter(conn: sqlite3.Connection, chapter_id: int) -> ChapterRecord | None:
    """Get chapter by id."""
    row = conn.execute(
        "SELECT id, course_id, title, order_index FROM course_sections WHERE id = ?",
        (chapter_id,),
    ).fetchone()
    return _row_to_chapter(row) if row else None


def list_chapters(conn: sqlite3.Connection, course_id: int) -> list[ChapterRecord]:
    """Get the chapters of a course in course order."""
    rows = conn.execute(
        """
        SELECT id, course_id, title, order_index
          FROM course_sections
         WHERE course_id = ?
      ORDER BY order_index ASC
        """,
        (course_id,),
    ).fetchall()
    return [_row_to_chapter(row) for row in rows]


def _row_to_course(row) -> CourseRecord:
    """Convert database row to CourseRecord."""
    return CourseRecord(
        id=row["id"],
        tutor_id=row["tutor_id"],
        tutor_user_id=row["tutor_user_id"],
        title=row["title"],
        description=row["description"],
        price=row["price"],
        created_at=row["created_at"],
    )


def _row_to_chapter(row) -> ChapterRecord:
    """Convert database row to ChapterRecord."""
    return ChapterRecord(
        id=row["id"],
        course_id=row["course_id"],
        title=row["title"],
        order_index=row["order_index"],
    )
