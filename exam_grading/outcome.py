"""
Grading outcome data structures.

This module provides the per-question outcome produced by a grader and the
aggregates produced by the exam scorer:
- QuestionOutcome: attempted/correct flags, marks earned, selected vs correct options
- SectionResult: per-section totals and tallies
- CategoryAnalysis: per-topic analytics for the results view
- GradingResult: everything the results view needs for one grading pass

Marks are kept at full float precision; only display layers round.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .models import QuestionType


class QuestionOutcome(BaseModel):
    """
    Result of grading one question.

    Attributes:
        question_id: Question identifier
        question_type: NAT, MCQ or MSQ
        attempted: A non-empty response was present
        correct: Attempted and judged correct
        marks_earned: +marks, -negative_marks or 0
        selected_option_ids: Canonical ids of the chosen options (MCQ/MSQ)
        correct_option_ids: Canonical ids of the correct options (MCQ/MSQ)
        selected_value: Raw submitted string (NAT)
        correct_value: Raw answer key (NAT)
    """

    model_config = ConfigDict(frozen=True)

    question_id: str
    question_type: QuestionType
    attempted: bool = False
    correct: bool = False
    marks_earned: float = 0.0
    selected_option_ids: list[str] = Field(default_factory=list)
    correct_option_ids: list[str] = Field(default_factory=list)
    selected_value: Optional[str] = None
    correct_value: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return not self.attempted

    @property
    def wrong(self) -> bool:
        return self.attempted and not self.correct

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible representation for storage."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuestionOutcome":
        """
        Rebuild an outcome from a stored row.

        Rows written before the type was recorded default to MCQ, and older
        rows may miss ``marks_earned``.
        """
        data = dict(data)
        data.setdefault("question_type", QuestionType.MCQ.value)
        data["selected_option_ids"] = data.get("selected_option_ids") or []
        data["correct_option_ids"] = data.get("correct_option_ids") or []
        data["marks_earned"] = data.get("marks_earned") or 0.0
        return cls.model_validate(data)


class SectionResult(BaseModel):
    """Totals for one section"""

    section_id: str
    name: str
    score: float = 0.0
    max_score: float = 0.0
    correct: int = 0
    wrong: int = 0
    skipped: int = 0

    @property
    def attempted(self) -> int:
        return self.correct + self.wrong

    @computed_field
    @property
    def accuracy(self) -> float:
        """Percentage of attempted questions answered correctly (0 if none)."""
        if self.attempted == 0:
            return 0.0
        return self.correct / self.attempted * 100


class CategoryAnalysis(BaseModel):
    """Per-topic analytics, derived on every results view and never stored"""

    name: str
    total_questions: int = 0
    correct: int = 0
    total_marks: float = 0.0
    scored_marks: float = 0.0


class GradingResult(BaseModel):
    """Outcome of one grading pass over an exam"""

    exam_id: str
    outcomes: list[QuestionOutcome] = Field(default_factory=list)
    sections: list[SectionResult] = Field(default_factory=list)
    categories: list[CategoryAnalysis] = Field(default_factory=list)
    total_marks: float = 0.0
    max_marks: float = 0.0
    correct_count: int = 0
    wrong_count: int = 0
    skipped_count: int = 0
    accuracy: float = 0.0
    elapsed_seconds: float = 0.0

    @computed_field
    @property
    def passed(self) -> bool:
        return self.total_marks >= 0

    def outcome_for(self, question_id: str) -> Optional[QuestionOutcome]:
        for outcome in self.outcomes:
            if outcome.question_id == question_id:
                return outcome
        return None
