"""Core business logic module.

Modules:
- errors: Error taxonomy shared by every operation
- scoring: Answer validation, evaluation and percentage scoring
- progression: Chapter quizzes, attempt ceiling and chapter unlocking
- final_exam: Course final exam, certificates and completion progress
- authoring: Tutor question authoring with ownership checks
- catalog: Courses, chapters, enrollments and certificate listing
"""

__all__ = [
    "errors",
    "scoring",
    "progression",
    "final_exam",
    "authoring",
    "catalog",
]
