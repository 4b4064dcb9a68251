"""Course final exam endpoints."""

from fastapi import APIRouter, Depends, status

from studybuddy.core import authoring, final_exam
from studybuddy.core.errors import ProgressionError
from studybuddy.core.scoring import Answer
from studybuddy.web.auth import Principal, get_principal, require_tutor
from studybuddy.web.errors import to_http_error
from studybuddy.web.schemas import (
    AddFinalQuestionsRequest,
    AddFinalQuestionsResponse,
    FinalStatusResponse,
    FinalSubmitResponse,
    QuestionListResponse,
    QuestionResponse,
    SubmitAnswersRequest,
)

router = APIRouter(prefix="/api/final-quiz", tags=["final-quiz"])


@router.post(
    "/tutor/add-final-questions",
    response_model=AddFinalQuestionsResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_final_questions(
    request: AddFinalQuestionsRequest,
    principal: Principal = Depends(require_tutor),
) -> AddFinalQuestionsResponse:
    """Add final exam questions to a course (course owner only)."""
    try:
        ids = authoring.add_final_questions(
            tutor_user_id=principal.id,
            course_id=request.course_id,
            questions=[q.model_dump() for q in request.questions],
        )
    except ProgressionError as e:
        raise to_http_error(e)

    return AddFinalQuestionsResponse(question_ids=ids)


@router.get("/{course_id}", response_model=QuestionListResponse)
async def get_final_questions(
    course_id: int,
    principal: Principal = Depends(get_principal),
) -> QuestionListResponse:
    """List the final exam questions of a course, without answers."""
    questions = [
        QuestionResponse(id=q.id, question_text=q.question_text, options=q.options)
        for q in final_exam.list_final_questions(course_id)
    ]
    return QuestionListResponse(questions=questions, count=len(questions))


@router.post("/{course_id}/submit", response_model=FinalSubmitResponse)
async def submit_final_quiz(
    course_id: int,
    request: SubmitAnswersRequest,
    principal: Principal = Depends(get_principal),
) -> FinalSubmitResponse:
    """Submit the final exam; a pass issues the course certificate."""
    answers = [
        Answer(question_id=a.question_id, selected_option=a.selected_option)
        for a in request.answers
    ]

    try:
        result = final_exam.submit_final_exam(principal.id, course_id, answers)
    except ProgressionError as e:
        raise to_http_error(e)

    return FinalSubmitResponse.model_validate(result.to_dict())


@router.get("/{course_id}/status", response_model=FinalStatusResponse)
async def get_final_quiz_status(
    course_id: int,
    principal: Principal = Depends(get_principal),
) -> FinalStatusResponse:
    """Get the caller's latest final exam outcome."""
    exam_status = final_exam.get_final_exam_status(principal.id, course_id)
    return FinalStatusResponse(
        submitted=exam_status.submitted,
        passed=exam_status.passed,
        score=exam_status.score,
    )
