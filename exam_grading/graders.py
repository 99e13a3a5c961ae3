"""
Per-question graders.

A grader turns a matcher verdict into a marks delta and an immutable
QuestionOutcome. Two marking schemes exist and are deliberately kept apart:

- StandardGrader: live session scoring. All-or-nothing for every type,
  ``+marks`` when correct, ``-negative_marks`` when attempted and wrong,
  0 when not attempted.
- ProportionalMSQGrader: the authoring tool preview. MSQ earns credit in
  proportion to the correct options picked, any wrong pick costs a flat mark.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from .evaluator import AnswerMatcher, SubmittedAnswer, create_matcher, is_attempted, normalize_response
from .matchers import MultiChoiceMatcher
from .models import Question, QuestionType
from .outcome import QuestionOutcome

# Flat penalty of the preview scheme for any wrong MSQ selection
MSQ_PREVIEW_WRONG_PENALTY = -1.0


class Grader(BaseModel, ABC):
    """
    Abstract base class for per-question graders.

    Subclasses decide the marks for an attempted answer; recording the
    selected and correct options is shared.
    """

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def marks_for(self, question: Question, matcher: AnswerMatcher, response: SubmittedAnswer, correct: bool) -> float:
        """
        Marks earned by an attempted answer.

        Args:
            question: Question being graded
            matcher: Matcher built for the question
            response: The attempted response
            correct: Matcher verdict

        Returns:
            Marks delta (may be negative)
        """

    def grade(self, question: Question, response: SubmittedAnswer) -> QuestionOutcome:
        """Grade one question against one raw response."""
        response = normalize_response(response)
        matcher = create_matcher(question)
        attempted = is_attempted(response)
        correct = attempted and matcher.matches(response)
        marks = self.marks_for(question, matcher, response, correct) if attempted else 0.0

        if question.type == QuestionType.NAT:
            return QuestionOutcome(
                question_id=question.id,
                question_type=question.type,
                attempted=attempted,
                correct=correct,
                marks_earned=marks,
                selected_value=str(response) if attempted else None,
                correct_value=matcher.correct_display() or None,
            )

        return QuestionOutcome(
            question_id=question.id,
            question_type=question.type,
            attempted=attempted,
            correct=correct,
            marks_earned=marks,
            selected_option_ids=selected_option_ids(question, response),
            correct_option_ids=correct_option_ids(question, matcher),
        )


class StandardGrader(Grader):
    """All-or-nothing marking used for live exam sessions."""

    def marks_for(self, question: Question, matcher: AnswerMatcher, response: SubmittedAnswer, correct: bool) -> float:
        if correct:
            return question.marks
        return -abs(question.negative_marks)


class ProportionalMSQGrader(StandardGrader):
    """
    Preview marking used by the authoring tool.

    For MSQ:
    - any incorrect selection => flat -1
    - all correct options selected => full marks
    - otherwise => (correct selected / total correct) * marks
    Other question types are marked like StandardGrader.
    """

    def marks_for(self, question: Question, matcher: AnswerMatcher, response: SubmittedAnswer, correct: bool) -> float:
        if question.type != QuestionType.MSQ or not isinstance(matcher, MultiChoiceMatcher):
            return super().marks_for(question, matcher, response, correct)
        return proportional_msq_marks(
            matcher.selected_labels(response),
            list(matcher.spec.accepted_labels),
            question.marks,
        )


def proportional_msq_marks(selected: list[str], accepted: list[str], full_marks: float) -> float:
    """
    Preview-tool MSQ marks for a selection.

    Examples:
        >>> proportional_msq_marks(["A", "B"], ["A", "B", "C"], 3)
        2.0
        >>> proportional_msq_marks(["A", "D"], ["A", "B"], 4)
        -1.0
    """
    if not selected:
        return 0.0
    accepted_set = set(accepted)
    correct_selected = sum(1 for label in selected if label in accepted_set)
    incorrect_selected = len(selected) - correct_selected
    total_correct = len(accepted) or 1

    if incorrect_selected > 0:
        return MSQ_PREVIEW_WRONG_PENALTY
    if correct_selected == total_correct:
        return float(full_marks)
    return correct_selected / total_correct * full_marks


def selected_option_ids(question: Question, response: SubmittedAnswer) -> list[str]:
    """
    Canonical ids of the selected options.

    MCQ yields a singleton (or nothing); MSQ the submission sorted by label.
    """
    if not is_attempted(response):
        return []
    if not isinstance(response, (list, tuple)):
        return [question.id_for(question.label_for(str(response)))]
    labels = sorted(question.label_for(str(token)) for token in response)
    return [question.id_for(label) for label in labels]


def correct_option_ids(question: Question, matcher: AnswerMatcher) -> list[str]:
    """
    Canonical ids of the correct options.

    Option flags win when present; otherwise the parsed answer key is used,
    with labels standing in for ids. A question with neither yields nothing.
    """
    flagged = [opt.id for opt in question.options if opt.is_correct]
    if flagged:
        return flagged
    labels = getattr(matcher.spec, "accepted_labels", ())
    return [question.id_for(label) for label in labels]
