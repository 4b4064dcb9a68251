"""Enrollment and certificate endpoints."""

from fastapi import APIRouter, Depends, status

from studybuddy.core import catalog
from studybuddy.core.errors import ProgressionError
from studybuddy.web.auth import Principal, get_principal
from studybuddy.web.errors import to_http_error
from studybuddy.web.schemas import (
    CertificateListResponse,
    CertificateResponse,
    EnrollmentListResponse,
    EnrollmentResponse,
    EnrollRequest,
)

router = APIRouter(prefix="/api/enrollments", tags=["enrollments"])
certificates_router = APIRouter(prefix="/api/certificates", tags=["certificates"])


@router.post("/enroll", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll(
    request: EnrollRequest,
    principal: Principal = Depends(get_principal),
) -> EnrollmentResponse:
    """Enroll the caller in a course."""
    try:
        enrollment = catalog.enroll(principal.id, request.course_id)
    except ProgressionError as e:
        raise to_http_error(e)

    return EnrollmentResponse.model_validate(enrollment)


@router.get("/my-courses", response_model=EnrollmentListResponse)
async def my_courses(principal: Principal = Depends(get_principal)) -> EnrollmentListResponse:
    """List the caller's enrolled courses with progress."""
    courses = [
        EnrollmentResponse.model_validate(e)
        for e in catalog.list_enrollments(principal.id)
    ]
    return EnrollmentListResponse(courses=courses, count=len(courses))


@certificates_router.get("", response_model=CertificateListResponse)
async def my_certificates(principal: Principal = Depends(get_principal)) -> CertificateListResponse:
    """List the caller's certificates."""
    certificates = [
        CertificateResponse(
            certificate_id=c.id,
            course_id=c.course_id,
            course_title=c.course_title,
            issued_at=c.issued_at,
        )
        for c in catalog.list_certificates(principal.id)
    ]
    return CertificateListResponse(certificates=certificates, count=len(certificates))
