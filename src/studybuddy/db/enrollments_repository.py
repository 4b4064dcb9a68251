"""Repository functions for enrollments and certificates."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class EnrollmentRecord:
    """Enrollment joined with its course."""

    student_id: int
    course_id: int
    course_title: str
    progress: float
    enrolled_at: str


@dataclass
class CertificateRecord:
    """Certificate joined with its course."""

    id: int
    student_id: int
    course_id: int
    course_title: str
    issued_at: str


# =============================================================================
# ENROLLMENTS
# =============================================================================


def insert_enrollment(conn: sqlite3.Connection, student_id: int, course_id: int) -> bool:
    """Enroll a student.

    Returns:
        True if enrolled, False if the student was already enrolled
    """
    cursor = conn.execute(
        "INSERT OR IGNORE INTO enrollments (student_id, course_id) VALUES (?, ?)",
        (student_id, course_id),
    )
    return cursor.rowcount > 0


def get_enrollment(
    conn: sqlite3.Connection,
    student_id: int,
    course_id: int,
) -> EnrollmentRecord | None:
    """Get one enrollment."""
    row = conn.execute(
        """
        SELECT e.student_id, e.course_id, c.title AS course_title, e.progress, e.enrolled_at
          FROM enrollments e
          JOIN courses c ON e.course_id = c.id
         WHERE e.student_id = ? AND e.course_id = ?
        """,
        (student_id, course_id),
    ).fetchone()
    return _row_to_enrollment(row) if row else None


def list_enrollments(conn: sqlite3.Connection, student_id: int) -> list[EnrollmentRecord]:
    """Get every course a student is enrolled in."""
    rows = conn.execute(
        """
        SELECT e.student_id, e.course_id, c.title AS course_title, e.progress, e.enrolled_at
          FROM enrollments e
          JOIN courses c ON e.course_id = c.id
         WHERE e.student_id = ?
      ORDER BY e.enrolled_at ASC, e.course_id ASC
        """,
        (student_id,),
    ).fetchall()
    return [_row_to_enrollment(row) for row in rows]


def set_progress(
    conn: sqlite3.Connection,
    student_id: int,
    course_id: int,
    progress: float,
) -> bool:
    """Set enrollment progress.

    Returns:
        True if an enrollment row was updated
    """
    cursor = conn.execute(
        "UPDATE enrollments SET progress = ? WHERE student_id = ? AND course_id = ?",
        (progress, student_id, course_id),
    )
    return cursor.rowcount > 0


# =============================================================================
# CERTIFICATES
# =============================================================================


def issue_certificate(conn: sqlite3.Connection, student_id: int, course_id: int) -> bool:
    """Issue a certificate, or do nothing if one already exists.

    Returns:
        True if a new certificate row was created
    """
    cursor = conn.execute(
        """
        INSERT OR IGNORE INTO certificates (student_id, course_id, issued_at)
        VALUES (?, ?, datetime('now'))
        """,
        (student_id, course_id),
    )
    issued = cursor.rowcount > 0
    if issued:
        logger.info("certificates.issued", student_id=student_id, course_id=course_id)
    return issued


def list_certificates(conn: sqlite3.Connection, student_id: int) -> list[CertificateRecord]:
    """Get every certificate of a student."""
    rows = conn.execute(
        """
        SELECT cert.id, cert.student_id, cert.course_id, c.title AS course_title, cert.issued_at
          FROM certificates cert
          JOIN courses c ON cert.course_id = c.id
         WHERE cert.student_id = ?
      ORDER BY cert.issued_at ASC, cert.id ASC
        """,
        (student_id,),
    ).fetchall()
    return [
        CertificateRecord(
            id=row["id"],
            student_id=row["student_id"],
            course_id=row["course_id"],
            course_title=row["course_title"],
            issued_at=row["issued_at"],
        )
        for row in rows
    ]


def _row_to_enrollment(row) -> EnrollmentRecord:
    """Convert database row to EnrollmentRecord."""
    return EnrollmentRecord(
        student_id=row["student_id"],
        course_id=row["course_id"],
        course_title=row["course_title"],
        progress=float(row["progress"]),
        enrolled_at=row["enrolled_at"],
    )
