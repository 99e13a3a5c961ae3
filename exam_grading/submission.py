"""
Submission record builder.

Builds the durable, auditable artifact of one finished attempt (explicit
submit or timer expiry): one outcome per question, attempted or not, plus
totals and the pass flag. Persisting the record is the caller's business;
nothing here performs I/O.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .graders import Grader
from .models import ExamPaper
from .outcome import QuestionOutcome
from .scorer import GradingInput, grade_exam


class SubmissionRecord(BaseModel):
    """
    Immutable result of one completed exam attempt.

    ``id`` is assigned by the submission sink and is the durable handle used
    by the results and review screens.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    exam_id: str
    user_id: Optional[str] = None
    total_marks: float
    max_marks: float = 0.0
    total_questions: int
    passed: bool
    time_spent_seconds: int = 0
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    student_answers: list[QuestionOutcome] = Field(default_factory=list)

    def with_id(self, submission_id: str) -> "SubmissionRecord":
        """Copy of the record carrying the id given by the sink."""
        return self.model_copy(update={"id": submission_id})

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"student_answers"})
        data["student_answers"] = [outcome.to_dict() for outcome in self.student_answers]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubmissionRecord":
        data = dict(data)
        data["student_answers"] = [
            QuestionOutcome.from_dict(row) for row in data.get("student_answers") or []
        ]
        return cls.model_validate(data)


def build_submission_record(
    exam: ExamPaper,
    responses: Mapping,
    elapsed_seconds: float,
    user_id: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
    grader: Optional[Grader] = None,
) -> SubmissionRecord:
    """
    Grade a finished attempt and package it for storage.

    Args:
        exam: Full exam definition
        responses: Final response map (snapshotted before grading)
        elapsed_seconds: Time spent; negative or missing values count as 0
        user_id: Authenticated user, if any
        submitted_at: Submission time (now, UTC, when omitted)
        grader: Per-question grader (live scoring when omitted)

    Returns:
        SubmissionRecord without an id
    """
    time_spent = max(0, math.floor(elapsed_seconds or 0))
    result = grade_exam(
        GradingInput(exam=exam, responses=responses, elapsed_seconds=time_spent),
        grader=grader,
    )
    total_marks = sum(outcome.marks_earned for outcome in result.outcomes)

    fields: dict[str, Any] = {}
    if submitted_at is not None:
        fields["submitted_at"] = submitted_at

    return SubmissionRecord(
        exam_id=exam.id,
        user_id=user_id,
        total_marks=total_marks,
        max_marks=result.max_marks,
        total_questions=len(result.outcomes),
        passed=total_marks >= 0,
        time_spent_seconds=time_spent,
        student_answers=result.outcomes,
        **fields,
    )


class SubmissionStats(BaseModel):
    """Headline numbers of the results page, derived from a stored record"""

    correct_count: int
    incorrect_count: int
    skipped_count: int
    total_max: float
    accuracy: int


def summarize_submission(record: SubmissionRecord) -> SubmissionStats:
    """
    Results-page statistics for a stored record.

    Accuracy here is correct answers over all questions, rounded to the
    nearest percent, as the results page shows it.
    """
    answers = record.student_answers
    attempted = sum(1 for outcome in answers if outcome.attempted)
    correct = sum(1 for outcome in answers if outcome.correct)
    accuracy = 0
    if record.total_questions > 0:
        # half-up, not banker's rounding
        accuracy = math.floor(correct / record.total_questions * 100 + 0.5)

    return SubmissionStats(
        correct_count=correct,
        incorrect_count=attempted - correct,
        skipped_count=max(0, record.total_questions - attempted),
        total_max=record.max_marks,
        accuracy=accuracy,
    )
