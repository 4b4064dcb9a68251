"""FastAPI application factory.

Main entry point for the StudyBuddy Web API.
"""

import os
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studybuddy import __version__
from studybuddy.config import configure_logging, load_app_config
from studybuddy.db.database import DB_ENV, get_db_path, init_db
from studybuddy.web.errors import storage_error_handler
from studybuddy.web.routes import (
    certificates_router,
    courses_router,
    enrollments_router,
    final_quiz_router,
    health_router,
    quiz_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    config = load_app_config()
    configure_logging(config.log_level)

    # A database chosen before startup (tests) wins, then STUDYBUDDY_DB, then config
    if get_db_path() is not None:
        init_db()
    else:
        init_db(Path(os.environ.get(DB_ENV) or config.database.path))

    logger.info(
        "api_startup",
        db_path=str(get_db_path()),
        pass_mark=config.progression.pass_mark,
        max_attempts=config.progression.max_attempts,
        unlock_scan=config.progression.unlock_scan,
    )
    yield
    # Shutdown (nothing to do for now)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="StudyBuddy API",
        description="Course progression, quizzes, final exams and certificates",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware for web clients (auth cookie needs credentials)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(sqlite3.Error, storage_error_handler)

    # Include routers
    app.include_router(health_router)
    app.include_router(quiz_router)
    app.include_router(final_quiz_router)
    app.include_router(courses_router)
    app.include_router(enrollments_router)
    app.include_router(certificates_router)

    return app


# Default app instance for uvicorn
app = create_app()
