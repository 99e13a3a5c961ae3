"""Domain models package"""

from .domain import (
    UserAttempt,
    ExamSummary,
    SubmissionSummary,
    CompletedExam,
    QuestionPreview,
)

__all__ = [
    "UserAttempt",
    "ExamSummary",
    "SubmissionSummary",
    "CompletedExam",
    "QuestionPreview",
]
