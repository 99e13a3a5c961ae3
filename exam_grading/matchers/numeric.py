"""
Numeric (NAT) answer matcher.

The key may list bare values and inclusive ``min-max`` ranges separated by
``or``. A student's entry is parsed the same way and collapsed to one
effective value before comparison.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field, field_validator

from ..answer_spec import NumericSpec, parse_numeric_spec
from ..evaluator import AnswerMatcher, SubmittedAnswer, is_attempted
from ..models import Question, QuestionType

# Absolute tolerance for bare accepted values
NAT_TOLERANCE = 0.01


class NumericMatcher(AnswerMatcher):
    """
    Matcher for numerical answer type questions.

    Supports:
    - Bare values compared with an absolute tolerance
    - Inclusive ranges
    - ``or`` alternatives mixing both
    - Student answers given as a range (collapsed to the midpoint)
    """

    question_type: ClassVar[QuestionType] = QuestionType.NAT

    spec: NumericSpec
    tolerance: float = Field(default=NAT_TOLERANCE, gt=0, description="Absolute tolerance for bare values")
    tolerance_mode: str = Field(default="absolute", description="Only 'absolute' is meaningful for NAT keys")

    @field_validator("tolerance_mode")
    @classmethod
    def validate_tolerance_mode(cls, v: str) -> str:
        if v != "absolute":
            raise ValueError(f"tolerance_mode must be 'absolute', got '{v}'")
        return v

    @classmethod
    def from_question(cls, question: Question, tolerance: float = NAT_TOLERANCE) -> "NumericMatcher":
        answer = question.correct_answer
        if isinstance(answer, list):
            answer = " or ".join(answer)
        return cls(question=question, spec=parse_numeric_spec(answer), tolerance=tolerance)

    def effective_value(self, submitted: SubmittedAnswer) -> float | None:
        """Representative number of a submission, or None if unparseable."""
        if not is_attempted(submitted) or not isinstance(submitted, (str, int, float)):
            return None
        return parse_numeric_spec(str(submitted)).effective_value()

    def matches(self, submitted: SubmittedAnswer) -> bool:
        if self.spec.is_empty:
            # Unparseable key fails closed
            return False
        value = self.effective_value(submitted)
        if value is None:
            return False
        return self.spec.accepts(value, self.tolerance)
