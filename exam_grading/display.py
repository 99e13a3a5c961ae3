"""
Display helpers for answer keys.

Formatting used by the results, review and authoring screens. Nothing here
affects correctness.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .answer_spec import NumericSpec, parse_multi_choice_spec, parse_numeric_spec, split_alternatives
from .graders import MSQ_PREVIEW_WRONG_PENALTY
from .models import Question

NOT_AVAILABLE = "N/A"


def _number(value: float) -> str:
    # 42.0 -> "42", 109.9 -> "109.9"
    return str(int(value)) if value == int(value) else repr(value)


def _alternatives(spec: NumericSpec) -> list[str]:
    parts = [_number(value) for value in spec.values]
    parts.extend(f"{_number(rng.low)} - {_number(rng.high)}" for rng in spec.ranges)
    return parts


def format_nat_answer(answer: Optional[str]) -> str:
    """
    Format a NAT key for display.

    Examples:
        >>> format_nat_answer("109.9-112.4")
        '109.9 - 112.4'
        >>> format_nat_answer(None)
        'N/A'
    """
    if not answer:
        return NOT_AVAILABLE
    spec = parse_numeric_spec(answer)
    if spec.is_empty:
        return answer
    return " or ".join(_alternatives(spec))


def nat_range_display(answer: Optional[str]) -> str:
    """Describe what a NAT key accepts, e.g. ``(Accepted range: 1 to 2)``."""
    if not answer:
        return ""
    spec = parse_numeric_spec(answer)
    if spec.is_empty:
        return answer

    parts = [f"Exact: {_number(value)}" for value in spec.values]
    parts.extend(f"Accepted range: {_number(rng.low)} to {_number(rng.high)}" for rng in spec.ranges)
    return f"({' or '.join(parts)})"


def format_mcq_answer(answer: Optional[str]) -> str:
    """``"a or b"`` -> ``"A or B"``; blank -> ``"N/A"``."""
    if not answer:
        return NOT_AVAILABLE
    options = [token.upper() for token in split_alternatives(answer)]
    return " or ".join(options) if options else answer


class PartialCredit(BaseModel):
    count: int
    marks: float


class MSQPreview(BaseModel):
    """Marking breakdown shown next to an MSQ in the authoring tool"""

    total_correct: int
    full_correct: float
    partial: list[PartialCredit]
    any_wrong: float = MSQ_PREVIEW_WRONG_PENALTY
    unanswered: float = 0.0


def msq_marking_preview(question: Question) -> MSQPreview:
    """
    Preview-scheme marks for every possible number of correct picks.

    A 3-mark MSQ with three correct options previews 1 and 2 marks for one
    and two correct picks.
    """
    accepted = parse_multi_choice_spec(question).accepted_labels
    total_correct = max(len(accepted), 1)
    partial = [
        PartialCredit(count=count, marks=count / total_correct * question.marks)
        for count in range(1, total_correct)
    ]
    return MSQPreview(
        total_correct=total_correct,
        full_correct=question.marks,
        partial=partial,
    )
