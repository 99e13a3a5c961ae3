"""
Single-choice (MCQ) answer matcher.

Case-insensitive, whitespace-trimmed comparison against any accepted
alternative of the key (``"A or B"``).
"""

from __future__ import annotations

from typing import ClassVar

from ..answer_spec import ChoiceSpec, parse_choice_spec
from ..evaluator import AnswerMatcher, SubmittedAnswer, is_attempted
from ..models import Question, QuestionType


class ChoiceMatcher(AnswerMatcher):
    """Matcher for single-choice questions."""

    question_type: ClassVar[QuestionType] = QuestionType.MCQ

    spec: ChoiceSpec

    @classmethod
    def from_question(cls, question: Question) -> "ChoiceMatcher":
        return cls(question=question, spec=parse_choice_spec(question))

    def matches(self, submitted: SubmittedAnswer) -> bool:
        if not is_attempted(submitted) or not isinstance(submitted, str):
            return False
        label = self.question.label_for(submitted)
        return label in {accepted.upper() for accepted in self.spec.accepted_labels}

    def correct_display(self) -> str:
        return " or ".join(self.spec.accepted_labels)
