"""Route handlers for Web API."""

from studybuddy.web.routes.health import router as health_router
from studybuddy.web.routes.quiz import router as quiz_router
from studybuddy.web.routes.final_quiz import router as final_quiz_router
from studybuddy.web.routes.courses import router as courses_router
from studybuddy.web.routes.enrollments import router as enrollments_router
from studybuddy.web.routes.enrollments import certificates_router

__all__ = [
    "health_router",
    "quiz_router",
    "final_quiz_router",
    "courses_router",
    "enrollments_router",
    "certificates_router",
]
