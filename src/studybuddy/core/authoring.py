"""Tutor question authoring.

Responsibilities:
- Check course ownership (course -> tutor -> user)
- Find or create the quiz of a chapter on its first question
- Validate and store chapter quiz questions and final exam questions
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

import structlog

from studybuddy.core.errors import NotAuthorizedError, NotFoundError, SubmissionValidationError
from studybuddy.db import courses_repository, final_exam_repository, quiz_repository
from studybuddy.db.database import get_db
from studybuddy.utils.validators import validate_question

logger = structlog.get_logger(__name__)


@dataclass
class QuestionCreated:
    """Outcome of adding a chapter quiz question."""

    quiz_id: int
    question_id: int
    quiz_created: bool


def quiz_title(chapter_number: int) -> str:
    """Generated title of an implicitly created quiz (1-based chapter number)."""
    return f"Quiz for Chapter {chapter_number}"


def _ensure_owner(conn: sqlite3.Connection, tutor_user_id: int, course_id: int) -> None:
    """Raise unless the tutor owns the course."""
    if not courses_repository.is_course_owner(conn, course_id, tutor_user_id):
        logger.info("authoring.unauthorized", tutor_user_id=tutor_user_id, course_id=course_id)
        raise NotAuthorizedError("Unauthorized.")


def add_chapter_question(
    tutor_user_id: int,
    course_id: int,
    chapter_id: int,
    question_text: Any,
    options: Any,
    correct_option: Any,
) -> QuestionCreated:
    """Add a question to the quiz of a chapter.

    The first question of a chapter creates its quiz.

    Raises:
        SubmissionValidationError: Invalid question payload
        NotAuthorizedError: Tutor does not own the course
        NotFoundError: Chapter does not belong to the course
    """
    text, option_list, correct = validate_question(question_text, options, correct_option)

    with get_db() as conn:
        _ensure_owner(conn, tutor_user_id, course_id)

        chapter = courses_repository.get_chapter(conn, chapter_id)
        if chapter is None or chapter.course_id != course_id:
            raise NotFoundError("Chapter not found in this course.")

        quiz_id, created = quiz_repository.find_or_create_quiz(
            conn,
            course_id=course_id,
            chapter_id=chapter_id,
            title=quiz_title(chapter.order_index + 1),
        )
        question_id = quiz_repository.insert_question(
            conn,
            quiz_id=quiz_id,
            chapter_id=chapter_id,
            question_text=text,
            options=option_list,
            correct_option=correct,
        )

    logger.info(
        "authoring.question_added",
        course_id=course_id,
        chapter_id=chapter_id,
        quiz_id=quiz_id,
        question_id=question_id,
    )
    return QuestionCreated(quiz_id=quiz_id, question_id=question_id, quiz_created=created)


def add_final_questions(
    tutor_user_id: int,
    course_id: int,
    questions: Any,
) -> list[int]:
    """Add a batch of final exam questions to a course.

    Every question is validated before anything is stored; the batch is
    stored entirely or not at all.

    Args:
        questions: [{question_text, options, correct_option}, ...]

    Returns:
        New question ids

    Raises:
        SubmissionValidationError: Empty batch or an invalid question
        NotAuthorizedError: Tutor does not own the course
    """
    if not isinstance(questions, list) or not questions:
        raise SubmissionValidationError("course_id and questions[] required.")

    validated: list[tuple[str, list[str], str]] = []
    for item in questions:
        if not isinstance(item, dict):
            raise SubmissionValidationError("Each question must be an object.")
        validated.append(
            validate_question(
                item.get("question_text"),
                item.get("options"),
                item.get("correct_option"),
            )
        )

    with get_db() as conn:
        _ensure_owner(conn, tutor_user_id, course_id)
        ids = final_exam_repository.insert_final_questions(conn, course_id, validated)

    logger.info("authoring.final_questions_added", course_id=course_id, count=len(ids))
    return ids
