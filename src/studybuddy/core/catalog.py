"""Courses, chapters, enrollments and certificates.

Thin operations around the repositories; the progression rules live in
studybuddy.core.progression and studybuddy.core.final_exam.
"""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog

from studybuddy.core.errors import (
    ConflictError,
    NotAuthorizedError,
    NotFoundError,
    SubmissionValidationError,
)
from studybuddy.db import courses_repository, enrollments_repository
from studybuddy.db.courses_repository import ChapterRecord, CourseRecord
from studybuddy.db.database import get_db
from studybuddy.db.enrollments_repository import CertificateRecord, EnrollmentRecord
from studybuddy.utils.validators import validate_course_fields

logger = structlog.get_logger(__name__)


# =============================================================================
# COURSES
# =============================================================================


def create_course(
    tutor_user_id: int,
    title: Any,
    description: Any,
    price: Any,
) -> CourseRecord:
    """Create a course owned by the tutor, registering the tutor if needed.

    Raises:
        SubmissionValidationError: Blank title or invalid price
        ConflictError: Tutor already has a course with this title
    """
    clean_title, price_value = validate_course_fields(title, price)
    clean_description = description.strip() if isinstance(description, str) else ""

    with get_db() as conn:
        tutor_id = courses_repository.ensure_tutor(conn, tutor_user_id)
        try:
            course_id = courses_repository.insert_course(
                conn, tutor_id, clean_title, clean_description, price_value
            )
        except sqlite3.IntegrityError:
            raise ConflictError("A course with this title already exists.")
        course = courses_repository.get_course(conn, course_id)

    logger.info("course.created", course_id=course_id, tutor_user_id=tutor_user_id)
    return course


def list_courses() -> list[CourseRecord]:
    """Get every course."""
    with get_db() as conn:
        return courses_repository.list_courses(conn)


def add_chapter(tutor_user_id: int, course_id: int, title: Any) -> ChapterRecord:
    """Append a chapter to a course the tutor owns.

    Raises:
        SubmissionValidationError: Blank title
        NotFoundError: Unknown course
        NotAuthorizedError: Tutor does not own the course
    """
    if not isinstance(title, str) or not title.strip():
        raise SubmissionValidationError("Chapter title is required.")

    with get_db() as conn:
        if courses_repository.get_course(conn, course_id) is None:
            raise NotFoundError("Course not found.")
        if not courses_repository.is_course_owner(conn, course_id, tutor_user_id):
            raise NotAuthorizedError("Unauthorized.")
        chapter = courses_repository.append_chapter(conn, course_id, title.strip())

    logger.info("chapter.added", course_id=course_id, chapter_id=chapter.id)
    return chapter


def list_chapters(course_id: int) -> list[ChapterRecord]:
    """Get the chapters of a course in order.

    Raises:
        NotFoundError: Unknown course
    """
    with get_db() as conn:
        if courses_repository.get_course(conn, course_id) is None:
            raise NotFoundError("Course not found.")
        return courses_repository.list_chapters(conn, course_id)


# =============================================================================
# ENROLLMENTS AND CERTIFICATES
# =============================================================================


def enroll(student_id: int, course_id: int) -> EnrollmentRecord:
    """Enroll a student in a course.

    Raises:
        NotFoundError: Unknown course
        ConflictError: Already enrolled
    """
    with get_db() as conn:
        if courses_repository.get_course(conn, course_id) is None:
            raise NotFoundError("Course not found.")
        if not enrollments_repository.insert_enrollment(conn, student_id, course_id):
            raise ConflictError("Already enrolled in this course.")
        enrollment = enrollments_repository.get_enrollment(conn, student_id, course_id)

    logger.info("enrollment.created", student_id=student_id, course_id=course_id)
    return enrollment


def list_enrollments(student_id: int) -> list[EnrollmentRecord]:
    """Get the courses a student is enrolled in, with progress."""
    with get_db() as conn:
        return enrollments_repository.list_enrollments(conn, student_id)


def list_certificates(student_id: int) -> list[CertificateRecord]:
    """Get the certificates earned by a student."""
    with get_db() as conn:
        return enrollments_repository.list_certificates(conn, student_id)
