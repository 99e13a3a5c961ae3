"""
Review reconstructor.

Pairs stored outcomes with the question bank to produce a display-ready
comparison of selected and correct options. Stored ids may be rich option ids
or legacy positional labels; both resolve to the same label scheme.

Stateless and idempotent: safe to call on every navigation in the review UI.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from .models import Question, QuestionType
from .outcome import QuestionOutcome
from .submission import SubmissionRecord


class OptionState(str, Enum):
    """Highlight state of one option in the review screen"""
    CORRECT_SELECTED = "correct_selected"
    WRONG_SELECTED = "wrong_selected"
    CORRECT_NOT_SELECTED = "correct_not_selected"
    NEUTRAL = "neutral"


def classify_option(option_id: str, selected_ids: Iterable[str], correct_ids: Iterable[str]) -> OptionState:
    is_selected = option_id in set(selected_ids)
    is_correct = option_id in set(correct_ids)

    if is_selected and is_correct:
        return OptionState.CORRECT_SELECTED
    if is_selected:
        return OptionState.WRONG_SELECTED
    if is_correct:
        return OptionState.CORRECT_NOT_SELECTED
    return OptionState.NEUTRAL


class ReviewOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    text: str = ""
    image: Optional[str] = None
    alt_text: Optional[str] = None
    state: OptionState


class ReviewQuestion(BaseModel):
    """One question of the review screen"""

    model_config = ConfigDict(frozen=True)

    number: int
    question_id: str
    question_type: QuestionType
    text: str = ""
    image_url: Optional[str] = None
    attempted: bool
    correct: bool
    marks_earned: float
    options: list[ReviewOption]
    selected_labels: list[str]
    correct_labels: list[str]
    selected_value: Optional[str] = None
    correct_value: Optional[str] = None

    @property
    def selected_display(self) -> str:
        return ", ".join(self.selected_labels)

    @property
    def correct_display(self) -> str:
        return ", ".join(self.correct_labels)


def labels_for_ids(question: Question, option_ids: Iterable[str]) -> list[str]:
    """
    Resolve stored option ids to positional labels.

    Without options the ids already are labels; an id no option owns is kept
    as its own label.
    """
    ids = list(option_ids)
    if not question.options:
        return ids

    labels = []
    for option_id in ids:
        label = next((opt.label for opt in question.options if opt.id == option_id), None)
        labels.append(label if label is not None else option_id)
    return labels


def _ids_in_option_scheme(question: Question, option_ids: Iterable[str]) -> list[str]:
    # Legacy rows store labels even for questions that now carry rich ids
    known = {opt.id for opt in question.options}
    return [option_id if option_id in known else question.id_for(option_id) for option_id in option_ids]


def reconstruct_question(outcome: QuestionOutcome, question: Question, number: int = 1) -> ReviewQuestion:
    """Display-ready comparison for one stored outcome."""
    selected_ids = _ids_in_option_scheme(question, outcome.selected_option_ids)
    correct_ids = _ids_in_option_scheme(question, outcome.correct_option_ids)

    options = [
        ReviewOption(
            id=opt.id,
            label=opt.label,
            text=opt.text,
            image=opt.image,
            alt_text=opt.alt_text,
            state=classify_option(opt.id, selected_ids, correct_ids),
        )
        for opt in question.options
    ]

    return ReviewQuestion(
        number=number,
        question_id=question.id,
        question_type=question.type,
        text=question.text,
        image_url=question.image_url,
        attempted=outcome.attempted,
        correct=outcome.correct,
        marks_earned=outcome.marks_earned,
        options=options,
        selected_labels=labels_for_ids(question, selected_ids),
        correct_labels=labels_for_ids(question, correct_ids),
        selected_value=outcome.selected_value,
        correct_value=outcome.correct_value,
    )


def reconstruct_review(record: SubmissionRecord, questions: Iterable[Question]) -> list[ReviewQuestion]:
    """
    Review entries for a stored submission, in the record's order.

    Outcomes whose question is no longer in the bank are skipped.
    """
    bank = {question.id: question for question in questions}
    review = []
    for outcome in record.student_answers:
        question = bank.get(outcome.question_id)
        if question is None:
            continue
        review.append(reconstruct_question(outcome, question, number=len(review) + 1))
    return review
