"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Repository functions for courses, quizzes, final exams,
  certificates and enrollments
"""

from studybuddy.db.database import DB_ENV, get_db, get_db_path, init_db

__all__ = ["DB_ENV", "get_db", "get_db_path", "init_db"]
