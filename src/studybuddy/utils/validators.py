"""Data validation helpers.

Question payloads are validated once, at write time:
- question text is a non-blank string
- options is a list of at least two non-blank strings
- correct_option is one of the options, verbatim

Functions:
- validate_question(text, options, correct) -> (text, options, correct)
- validate_course_fields(title, price) -> (title, price)
"""

from __future__ import annotations

import math
from typing import Any

from studybuddy.core.errors import SubmissionValidationError

MIN_OPTIONS = 2


class InvalidQuestionError(SubmissionValidationError):
    """Raised when a question payload cannot be stored."""

    pass


def validate_question(
    question_text: Any,
    options: Any,
    correct_option: Any,
) -> tuple[str, list[str], str]:
    """Validate and normalize one question.

    Question text is stripped; options and the correct option are kept
    verbatim since scoring compares them exactly.

    Returns:
        (question_text, options, correct_option)

    Raises:
        InvalidQuestionError: If any rule is broken
    """
    if not isinstance(question_text, str) or not question_text.strip():
        raise InvalidQuestionError("question_text is required.")

    if not isinstance(options, list) or any(not isinstance(o, str) for o in options):
        raise InvalidQuestionError("Options must be an array of strings.")

    if len(options) < MIN_OPTIONS:
        raise InvalidQuestionError(f"At least {MIN_OPTIONS} options are required.")

    if any(not o.strip() for o in options):
        raise InvalidQuestionError("Options cannot be blank.")

    if not isinstance(correct_option, str) or not correct_option.strip():
        raise InvalidQuestionError("correct_option is required.")

    if correct_option not in options:
        raise InvalidQuestionError("correct_option must be one of the options.")

    return question_text.strip(), list(options), correct_option


def validate_course_fields(title: Any, price: Any) -> tuple[str, float]:
    """Validate course title and price.

    Raises:
        SubmissionValidationError: On a blank title or a negative, non-finite or non-numeric price
    """
    if not isinstance(title, str) or not title.strip():
        raise SubmissionValidationError("Course title is required.")

    try:
        price_value = float(price)
    except (TypeError, ValueError):
        raise SubmissionValidationError("Invalid price. It must be a positive number.")

    if not math.isfinite(price_value) or price_value < 0:
        raise SubmissionValidationError("Invalid price. It must be a positive number.")

    return title.strip(), price_value
