"""Pydantic schemas for Web API.

Serialization models for quizzes, final exams, courses, enrollments and
certificates.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, Field

from studybuddy import __version__


class MessageResponse(BaseModel):
    """Plain confirmation."""

    message: str


# =============================================================================
# QUIZ SCHEMAS
# =============================================================================


class AnswerIn(BaseModel):
    """One answer in a submission."""

    question_id: int = Field(..., validation_alias=AliasChoices("question_id", "questionId"))
    selected_option: str | None = Field(
        default=None, validation_alias=AliasChoices("selected_option", "selectedOption")
    )


class SubmitAnswersRequest(BaseModel):
    """Request body for quiz and final exam submissions."""

    answers: list[AnswerIn]


class QuestionResponse(BaseModel):
    """A question as shown to students (no correct option)."""

    id: int
    question_text: str
    options: list[str]


class QuestionListResponse(BaseModel):
    """Response for list of questions."""

    questions: list[QuestionResponse]
    count: int


class EvaluationResponse(BaseModel):
    """Evaluation of one question after submission."""

    question_id: int
    selected: str | None
    correct_option: str
    correct: bool


class QuizSubmitResponse(BaseModel):
    """Response for a chapter quiz submission."""

    message: str = "Quiz submitted"
    score: float
    passed: bool
    attempt: int
    retry_available: bool
    evaluation: list[EvaluationResponse]
    correct_answers: dict[int, str]


class QuizStatusResponse(BaseModel):
    """Latest chapter quiz submission summary."""

    submitted: bool
    score: float | None = None
    passed: bool | None = None
    attempt: int = 0
    retry_available: bool = False
    correct_answers: dict[int, str] = Field(default_factory=dict)


class AccessibleChaptersResponse(BaseModel):
    """Chapters a student may open, in course order."""

    chapter_ids: list[int]


class AddQuestionRequest(BaseModel):
    """Request body for a tutor adding a chapter quiz question."""

    course_id: int
    chapter_id: int
    question_text: str
    options: list[str]
    correct_option: str


class AddQuestionResponse(BaseModel):
    """Response after adding a chapter quiz question."""

    message: str = "Question added successfully."
    quiz_id: int
    question_id: int


# =============================================================================
# FINAL EXAM SCHEMAS
# =============================================================================


class FinalQuestionIn(BaseModel):
    """One final exam question authored by a tutor."""

    question_text: str
    options: list[str]
    correct_option: str


class AddFinalQuestionsRequest(BaseModel):
    """Request body for a batch of final exam questions."""

    course_id: int
    questions: list[FinalQuestionIn]


class AddFinalQuestionsResponse(BaseModel):
    """Response after adding final exam questions."""

    message: str = "Final quiz questions saved."
    question_ids: list[int]


class FinalSubmitResponse(BaseModel):
    """Response for a final exam submission."""

    score: float
    passed: bool
    attempt: int
    certificate_issued: bool


class FinalStatusResponse(BaseModel):
    """Latest final exam outcome."""

    submitted: bool
    passed: bool
    score: float | None = None


# =============================================================================
# COURSE SCHEMAS
# =============================================================================


class CourseCreate(BaseModel):
    """Request body for creating a course."""

    title: str = Field(..., max_length=200)
    description: str = Field(default="", max_length=5000)
    price: float = 0


class CourseResponse(BaseModel):
    """Response for a course."""

    id: int
    title: str
    description: str
    price: float
    tutor_id: int
    created_at: str

    model_config = {"from_attributes": True}


class CourseListResponse(BaseModel):
    """Response for list of courses."""

    courses: list[CourseResponse]
    count: int


class ChapterCreate(BaseModel):
    """Request body for appending a chapter."""

    title: str = Field(..., max_length=200)


class ChapterResponse(BaseModel):
    """Response for a chapter."""

    id: int
    course_id: int
    title: str
    order_index: int

    model_config = {"from_attributes": True}


class ChapterListResponse(BaseModel):
    """Response for list of chapters."""

    chapters: list[ChapterResponse]
    count: int


# =============================================================================
# ENROLLMENT / CERTIFICATE SCHEMAS
# =============================================================================


class EnrollRequest(BaseModel):
    """Request body for enrolling in a course."""

    course_id: int


class EnrollmentResponse(BaseModel):
    """Response for an enrollment."""

    course_id: int
    course_title: str
    progress: float
    enrolled_at: str

    model_config = {"from_attributes": True}


class EnrollmentListResponse(BaseModel):
    """Response for list of enrollments."""

    courses: list[EnrollmentResponse]
    count: int


class CertificateResponse(BaseModel):
    """Response for a certificate."""

    certificate_id: int
    course_id: int
    course_title: str
    issued_at: str


class CertificateListResponse(BaseModel):
    """Response for list of certificates."""

    certificates: list[CertificateResponse]
    count: int


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
