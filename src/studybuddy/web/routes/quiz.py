"""Chapter quiz endpoints."""

from fastapi import APIRouter, Depends, status

from studybuddy.core import authoring, progression
from studybuddy.core.errors import ProgressionError
from studybuddy.core.scoring import Answer
from studybuddy.web.auth import Principal, get_principal, require_tutor
from studybuddy.web.errors import to_http_error
from studybuddy.web.schemas import (
    AccessibleChaptersResponse,
    AddQuestionRequest,
    AddQuestionResponse,
    QuestionListResponse,
    QuestionResponse,
    QuizStatusResponse,
    QuizSubmitResponse,
    SubmitAnswersRequest,
)

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


@router.get("/accessible/{course_id}", response_model=AccessibleChaptersResponse)
async def get_accessible_chapters(
    course_id: int,
    principal: Principal = Depends(get_principal),
) -> AccessibleChaptersResponse:
    """List the chapters of a course the caller may open."""
    chapter_ids = progression.accessible_chapters(principal.id, course_id)
    return AccessibleChaptersResponse(chapter_ids=chapter_ids)


@router.post(
    "/tutor/add-question",
    response_model=AddQuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_question(
    request: AddQuestionRequest,
    principal: Principal = Depends(require_tutor),
) -> AddQuestionResponse:
    """Add a question to a chapter quiz (course owner only)."""
    try:
        created = authoring.add_chapter_question(
            tutor_user_id=principal.id,
            course_id=request.course_id,
            chapter_id=request.chapter_id,
            question_text=request.question_text,
            options=request.options,
            correct_option=request.correct_option,
        )
    except ProgressionError as e:
        raise to_http_error(e)

    return AddQuestionResponse(quiz_id=created.quiz_id, question_id=created.question_id)


@router.get("/{chapter_id}/questions", response_model=QuestionListResponse)
async def get_questions(
    chapter_id: int,
    principal: Principal = Depends(get_principal),
) -> QuestionListResponse:
    """List the questions of a chapter quiz, without answers."""
    questions = [
        QuestionResponse(id=q.id, question_text=q.question_text, options=q.options)
        for q in progression.list_chapter_questions(chapter_id)
    ]
    return QuestionListResponse(questions=questions, count=len(questions))


@router.post("/{chapter_id}/submit", response_model=QuizSubmitResponse)
async def submit_quiz(
    chapter_id: int,
    request: SubmitAnswersRequest,
    principal: Principal = Depends(get_principal),
) -> QuizSubmitResponse:
    """Submit answers to a chapter quiz."""
    answers = [
        Answer(question_id=a.question_id, selected_option=a.selected_option)
        for a in request.answers
    ]

    try:
        result = progression.submit_chapter_quiz(principal.id, chapter_id, answers)
    except ProgressionError as e:
        raise to_http_error(e)

    return QuizSubmitResponse.model_validate(result.to_dict())


@router.get("/{chapter_id}/status", response_model=QuizStatusResponse)
async def get_quiz_status(
    chapter_id: int,
    principal: Principal = Depends(get_principal),
) -> QuizStatusResponse:
    """Get the caller's latest submission for a chapter quiz."""
    quiz_status = progression.get_chapter_quiz_status(principal.id, chapter_id)

    return QuizStatusResponse(
        submitted=quiz_status.submitted,
        score=quiz_status.score,
        passed=quiz_status.passed,
        attempt=quiz_status.attempt,
        retry_available=quiz_status.retry_available,
        correct_answers=quiz_status.correct_answers,
    )
