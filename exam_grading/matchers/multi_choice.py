"""
Multiple-select (MSQ) answer matcher.

All-or-nothing: the submitted labels, sorted, must equal the sorted key
element by element. Duplicates are not collapsed.
"""

from __future__ import annotations

from typing import ClassVar

from ..answer_spec import MultiChoiceSpec, parse_multi_choice_spec
from ..evaluator import AnswerMatcher, SubmittedAnswer, is_attempted
from ..models import Question, QuestionType


class MultiChoiceMatcher(AnswerMatcher):
    """Matcher for multiple-select questions."""

    question_type: ClassVar[QuestionType] = QuestionType.MSQ

    spec: MultiChoiceSpec

    @classmethod
    def from_question(cls, question: Question) -> "MultiChoiceMatcher":
        return cls(question=question, spec=parse_multi_choice_spec(question))

    def selected_labels(self, submitted: SubmittedAnswer) -> list[str]:
        """Submitted tokens mapped to labels and sorted."""
        if not is_attempted(submitted) or isinstance(submitted, str):
            return []
        return sorted(self.question.label_for(str(token)) for token in submitted)

    def matches(self, submitted: SubmittedAnswer) -> bool:
        selected = self.selected_labels(submitted)
        if not selected:
            return False
        return selected == list(self.spec.accepted_labels)

    def correct_display(self) -> str:
        return ", ".join(self.spec.accepted_labels)
