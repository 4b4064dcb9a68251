"""Answer evaluation and scoring.

Responsibilities:
- Validate raw answer payloads ([{question_id, selected_option}])
- Evaluate answers against a question bank by verbatim option match
- Compute the percentage score and the pass/fail decision

Shared by chapter quizzes and course final exams.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from studybuddy.core.errors import SubmissionValidationError
from studybuddy.db.quiz_repository import QuestionRecord

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class Answer:
    """A student's answer to one question."""

    question_id: int
    selected_option: str | None


@dataclass
class QuestionEvaluation:
    """Evaluation of a single question."""

    question_id: int
    selected: str | None
    correct_option: str
    correct: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "question_id": self.question_id,
            "selected": self.selected,
            "correct_option": self.correct_option,
            "correct": self.correct,
        }


@dataclass
class ScoreResult:
    """Outcome of scoring a full answer set."""

    score: float
    passed: bool
    correct_count: int
    total_questions: int
    evaluation: list[QuestionEvaluation] = field(default_factory=list)

    @property
    def correct_answers(self) -> dict[int, str]:
        """Question id -> correct option, revealed after submission."""
        return {e.question_id: e.correct_option for e in self.evaluation}


# =============================================================================
# VALIDATION
# =============================================================================


def parse_answers(raw_answers: Any, allow_empty: bool = True) -> list[Answer]:
    """Validate a raw answers payload.

    Accepts both snake_case and the camelCase keys sent by older clients
    (questionId, selectedOption).

    Raises:
        SubmissionValidationError: If the payload is not a list of answers
    """
    if not isinstance(raw_answers, list):
        raise SubmissionValidationError("answers must be a list.")
    if not raw_answers and not allow_empty:
        raise SubmissionValidationError("Invalid submission payload.")

    answers: list[Answer] = []
    for item in raw_answers:
        if isinstance(item, Answer):
            answers.append(item)
            continue
        if not isinstance(item, dict):
            raise SubmissionValidationError("Each answer must be an object.")

        question_id = item.get("question_id", item.get("questionId"))
        selected = item.get("selected_option", item.get("selectedOption"))

        if isinstance(question_id, bool) or not isinstance(question_id, int):
            raise SubmissionValidationError("Each answer needs an integer question_id.")
        if selected is not None and not isinstance(selected, str):
            raise SubmissionValidationError("selected_option must be a string.")

        answers.append(Answer(question_id=question_id, selected_option=selected))

    return answers


# =============================================================================
# SCORING
# =============================================================================


def compute_score(correct_count: int, total_questions: int) -> float:
    """Percentage of correct answers, 0 when there are no questions."""
    if total_questions <= 0:
        return 0.0
    return 100 * correct_count / total_questions


def is_passing(score: float, pass_mark: float) -> bool:
    """Pass/fail decision; the boundary counts as a pass."""
    return score >= pass_mark


def score_answers(
    questions: Iterable[QuestionRecord],
    answers: list[Answer],
    pass_mark: float,
) -> ScoreResult:
    """Evaluate answers against a question bank.

    A question is correct when the selected option equals the stored
    correct option exactly (case-sensitive). Unanswered questions and
    answers to unknown question ids count as nothing. If a question is
    answered more than once, the first answer wins.
    """
    by_question: dict[int, Answer] = {}
    for answer in answers:
        by_question.setdefault(answer.question_id, answer)

    evaluation: list[QuestionEvaluation] = []
    for question in questions:
        answer = by_question.get(question.id)
        selected = answer.selected_option if answer else None
        evaluation.append(
            QuestionEvaluation(
                question_id=question.id,
                selected=selected,
                correct_option=question.correct_option,
                correct=selected is not None and selected == question.correct_option,
            )
        )

    correct_count = sum(1 for e in evaluation if e.correct)
    score = compute_score(correct_count, len(evaluation))

    return ScoreResult(
        score=score,
        passed=is_passing(score, pass_mark),
        correct_count=correct_count,
        total_questions=len(evaluation),
        evaluation=evaluation,
    )
