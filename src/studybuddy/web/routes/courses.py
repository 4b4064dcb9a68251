"""Course and chapter endpoints."""

from fastapi import APIRouter, Depends, status

from studybuddy.core import catalog
from studybuddy.core.errors import ProgressionError
from studybuddy.db.courses_repository import ChapterRecord, CourseRecord
from studybuddy.web.auth import Principal, require_tutor
from studybuddy.web.errors import to_http_error
from studybuddy.web.schemas import (
    ChapterCreate,
    ChapterListResponse,
    ChapterResponse,
    CourseCreate,
    CourseListResponse,
    CourseResponse,
)

router = APIRouter(prefix="/api/courses", tags=["courses"])


def _course_response(course: CourseRecord) -> CourseResponse:
    return CourseResponse(
        id=course.id,
        title=course.title,
        description=course.description,
        price=course.price,
        tutor_id=course.tutor_user_id,
        created_at=course.created_at,
    )


def _chapter_response(chapter: ChapterRecord) -> ChapterResponse:
    return ChapterResponse.model_validate(chapter)


@router.get("", response_model=CourseListResponse)
async def list_courses() -> CourseListResponse:
    """List all courses."""
    courses = [_course_response(c) for c in catalog.list_courses()]
    return CourseListResponse(courses=courses, count=len(courses))


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    principal: Principal = Depends(require_tutor),
) -> CourseResponse:
    """Create a course owned by the calling tutor."""
    try:
        course = catalog.create_course(
            tutor_user_id=principal.id,
            title=course_data.title,
            description=course_data.description,
            price=course_data.price,
        )
    except ProgressionError as e:
        raise to_http_error(e)

    return _course_response(course)


@router.get("/{course_id}/chapters", response_model=ChapterListResponse)
async def list_chapters(course_id: int) -> ChapterListResponse:
    """List the chapters of a course in order."""
    try:
        chapters = [_chapter_response(c) for c in catalog.list_chapters(course_id)]
    except ProgressionError as e:
        raise to_http_error(e)

    return ChapterListResponse(chapters=chapters, count=len(chapters))


@router.post(
    "/{course_id}/chapters",
    response_model=ChapterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_chapter(
    course_id: int,
    chapter_data: ChapterCreate,
    principal: Principal = Depends(require_tutor),
) -> ChapterResponse:
    """Append a chapter to a course the calling tutor owns."""
    try:
        chapter = catalog.add_chapter(principal.id, course_id, chapter_data.title)
    except ProgressionError as e:
        raise to_http_error(e)

    return _chapter_response(chapter)
