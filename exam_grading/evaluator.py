"""
Base answer matcher framework.

Provides the abstract base class for answer matchers and a registry for
dispatch on question type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, PrivateAttr

from .models import Question, QuestionType

SubmittedAnswer = Union[str, list[str], None]


def is_attempted(response: Any) -> bool:
    """
    True iff a response counts as attempted.

    ``None``, the empty string and an empty list are "not attempted"; any other
    value is attempted, valid or not.
    """
    if response is None:
        return False
    if isinstance(response, str):
        return response != ""
    if isinstance(response, (list, tuple)):
        return len(response) > 0
    return True


def normalize_response(response: Any) -> Any:
    """
    Bring a raw response into the submitted-answer shape.

    JSON clients may send a numeric entry as a number; it is graded as its
    string form. Every other value is returned unchanged.
    """
    if isinstance(response, (int, float)) and not isinstance(response, bool):
        return str(response)
    return response


class AnswerMatcher(BaseModel, ABC):
    """
    Abstract base class for answer matchers.

    A matcher is built once per question from its parsed answer spec and
    decides whether a single submitted value is correct. Matchers are pure:
    no side effects, no exceptions on malformed keys or submissions.

    Subclasses must implement:
    - from_question(): Parse the question's key into the matcher's spec
    - matches(): Core matching logic
    - question_type: Class variable for dispatch
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    question_type: ClassVar[QuestionType]

    question: Question

    @classmethod
    @abstractmethod
    def from_question(cls, question: Question) -> "AnswerMatcher":
        """Create a matcher with the question's answer key parsed."""

    @abstractmethod
    def matches(self, submitted: SubmittedAnswer) -> bool:
        """
        Decide correctness of one submitted answer.

        Args:
            submitted: Raw submitted value (string or list of strings)

        Returns:
            True if correct; blank submissions are never correct
        """

    def correct_display(self) -> str:
        """Display string for the accepted answer."""
        answer = self.question.correct_answer
        if isinstance(answer, list):
            return ", ".join(answer)
        return answer or ""


class MatcherRegistry(BaseModel):
    """
    Registry for answer matchers.

    Maps question types to matcher classes.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _matchers: dict[QuestionType, type[AnswerMatcher]] = PrivateAttr(default_factory=dict)

    def register(self, question_type: QuestionType, matcher_class: type[AnswerMatcher]) -> None:
        """
        Register a matcher for a question type.

        Raises:
            TypeError: If matcher_class is not an AnswerMatcher subclass
        """
        if not (isinstance(matcher_class, type) and issubclass(matcher_class, AnswerMatcher)):
            raise TypeError(f"matcher_class must be a subclass of AnswerMatcher, got {matcher_class}")
        self._matchers[QuestionType(question_type)] = matcher_class

    def get_matcher(self, question_type: QuestionType) -> type[AnswerMatcher] | None:
        return self._matchers.get(QuestionType(question_type))

    def create_matcher(self, question: Question) -> AnswerMatcher:
        """
        Create a matcher instance for a question.

        Raises:
            ValueError: If no matcher is registered for the question type
        """
        matcher_class = self.get_matcher(question.type)
        if matcher_class is None:
            raise ValueError(f"No matcher registered for type: {question.type}")
        return matcher_class.from_question(question)

    def get_registered_types(self) -> list[QuestionType]:
        return list(self._matchers.keys())


# Global registry instance, filled by exam_grading.matchers at import time
_global_registry = MatcherRegistry()


def register_matcher(question_type: QuestionType, matcher_class: type[AnswerMatcher]) -> None:
    """Register a matcher in the global registry."""
    _global_registry.register(question_type, matcher_class)


def get_matcher(question_type: QuestionType) -> type[AnswerMatcher] | None:
    """Get matcher class from the global registry."""
    return _global_registry.get_matcher(question_type)


def create_matcher(question: Question) -> AnswerMatcher:
    """Create matcher instance from the global registry."""
    return _global_registry.create_matcher(question)
