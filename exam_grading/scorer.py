"""
Exam scorer.

Applies a per-question grader across an exam's section/question tree and
aggregates section totals, overall totals and per-category analytics.

The scorer is a pure function of an immutable GradingInput: it grades any exam
handed to it (premium gating belongs to the caller) and keeps full float
precision throughout.
"""

from __future__ import annotations

import copy
import logging
from typing import Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .evaluator import normalize_response
from .graders import Grader, StandardGrader
from .models import ExamPaper
from .outcome import CategoryAnalysis, GradingResult, SectionResult

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

UserResponse = dict[str, Union[str, list[str], None]]


class GradingInput(BaseModel):
    """
    Snapshot handed to the scorer.

    Responses are deep-copied on construction so later changes to the
    caller's map cannot leak into a grading pass.
    """

    model_config = ConfigDict(frozen=True)

    exam: ExamPaper
    responses: UserResponse = Field(default_factory=dict)
    elapsed_seconds: float = Field(default=0.0, ge=0)

    @field_validator("responses", mode="before")
    @classmethod
    def snapshot_responses(cls, v: Optional[Mapping]) -> dict:
        if v is None:
            return {}
        snapshot = copy.deepcopy(dict(v))
        return {key: normalize_response(value) for key, value in snapshot.items()}


def grade_exam(grading_input: GradingInput, grader: Optional[Grader] = None) -> GradingResult:
    """
    Grade every question of an exam and aggregate the results.

    Args:
        grading_input: Exam, responses and elapsed time
        grader: Per-question grader (StandardGrader when omitted)

    Returns:
        GradingResult with outcomes in authored order, section totals,
        category analysis, overall totals and accuracy
    """
    grader = grader or StandardGrader()
    exam = grading_input.exam
    responses = grading_input.responses

    known_ids = {question.id for question in exam.iter_questions()}
    unknown = sorted(set(responses) - known_ids)
    if unknown:
        logger.debug("Ignoring responses for unknown questions %s in exam %s", unknown, exam.id)

    outcomes = []
    sections = []
    categories: dict[str, CategoryAnalysis] = {}

    for section in exam.sections:
        result = SectionResult(section_id=section.id, name=section.name)

        for question in section.questions:
            outcome = grader.grade(question, responses.get(question.id))
            outcomes.append(outcome)

            result.max_score += question.marks
            result.score += outcome.marks_earned
            if not outcome.attempted:
                result.skipped += 1
            elif outcome.correct:
                result.correct += 1
            else:
                result.wrong += 1

            name = question.category or UNCATEGORIZED
            bucket = categories.setdefault(name, CategoryAnalysis(name=name))
            bucket.total_questions += 1
            bucket.total_marks += question.marks
            if outcome.correct:
                bucket.correct += 1
                bucket.scored_marks += question.marks
            elif outcome.attempted:
                bucket.scored_marks -= abs(question.negative_marks)

        sections.append(result)

    correct_count = sum(s.correct for s in sections)
    wrong_count = sum(s.wrong for s in sections)

    return GradingResult(
        exam_id=exam.id,
        outcomes=outcomes,
        sections=sections,
        categories=list(categories.values()),
        total_marks=sum(s.score for s in sections),
        max_marks=sum(s.max_score for s in sections),
        correct_count=correct_count,
        wrong_count=wrong_count,
        skipped_count=sum(s.skipped for s in sections),
        accuracy=accuracy(correct_count, wrong_count),
        elapsed_seconds=grading_input.elapsed_seconds,
    )


def accuracy(correct: int, wrong: int) -> float:
    """Percentage correct among attempted questions, 0 when nothing was attempted."""
    attempted = correct + wrong
    if attempted == 0:
        return 0.0
    return correct / attempted * 100


def score_exam(exam: ExamPaper, responses: Mapping) -> tuple[float, float, float]:
    """
    Shorthand for the attempt log: ``(score, max_score, accuracy)``.
    """
    result = grade_exam(GradingInput(exam=exam, responses=responses))
    return result.total_marks, result.max_marks, result.accuracy
