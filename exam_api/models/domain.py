"""
Domain models for the exam service.

Service-side entities that live next to the grading core's own models: the
legacy analytics row, exam and submission listings and completion entries.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field

from exam_grading import ExamPaper, QuestionOutcome, SubmissionRecord
from exam_grading.display import MSQPreview


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserAttempt(BaseModel):
    """
    One row of the legacy per-user analytics log.

    Written after every successful submission; nothing reads it back during
    grading.
    """
    user_id: str
    paper_id: str
    responses: Dict[str, Union[str, float, List[str], None]] = Field(default_factory=dict)
    time_spent: int = Field(0, ge=0, description="Seconds spent on the attempt")
    score: float
    max_score: float
    accuracy: float = Field(..., ge=0.0, le=100.0)
    created_at: datetime = Field(default_factory=_utcnow)


class ExamSummary(BaseModel):
    """Listing entry for an exam"""
    id: str
    title: str
    year: Optional[int] = None
    exam_type: str = ""
    duration_minutes: int = 0
    is_premium: bool = False
    question_count: int = 0
    max_marks: float = 0.0

    @classmethod
    def from_exam(cls, exam: ExamPaper) -> "ExamSummary":
        return cls(
            id=exam.id,
            title=exam.title,
            year=exam.year,
            exam_type=exam.exam_type,
            duration_minutes=exam.duration_minutes,
            is_premium=exam.is_premium,
            question_count=exam.question_count,
            max_marks=sum(question.marks for question in exam.iter_questions()),
        )


class SubmissionSummary(BaseModel):
    """Listing entry for one of a user's stored submissions"""
    id: str
    exam_id: str
    total_marks: float
    submitted_at: datetime
    review_expires_at: datetime
    reviewable: bool

    @classmethod
    def from_record(cls, record: SubmissionRecord, review_expires_at: datetime, reviewable: bool) -> "SubmissionSummary":
        return cls(
            id=record.id,
            exam_id=record.exam_id,
            total_marks=record.total_marks,
            submitted_at=record.submitted_at,
            review_expires_at=review_expires_at,
            reviewable=reviewable,
        )


class CompletedExam(BaseModel):
    """A user has submitted this exam at least once"""
    user_id: str
    exam_id: str
    completed_at: datetime = Field(default_factory=_utcnow)


class QuestionPreview(BaseModel):
    """
    Authoring-tool preview of one question against a sample response.

    ``preview_outcome`` uses the proportional MSQ scheme of the authoring
    tool, ``live_outcome`` the all-or-nothing scheme of exam sessions.
    """
    question_id: str
    preview_outcome: QuestionOutcome
    live_outcome: QuestionOutcome
    correct_answer_display: str
    accepted_display: str = ""
    msq_preview: Optional[MSQPreview] = None
