"""
Exam paper data model.

Questions, options, sections and papers as handed to the grading core by the
exam source. Both the camelCase shape written by the authoring tool and the
snake_case rows of the question table are accepted.

Options are normalised once, at load time, into canonical entries carrying a
positional label (A, B, C, ...) and a stable id (the stored option id, or the
label itself for legacy plain-text options), so grading and review code never
branch on "legacy vs rich" again.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterator, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class QuestionType(str, Enum):
    """Question archetypes"""
    NAT = "NAT"  # numerical answer
    MCQ = "MCQ"  # single choice
    MSQ = "MSQ"  # multiple select


def option_label(position: int) -> str:
    """Positional label of an option: 0 -> "A", 1 -> "B", ..."""
    return chr(65 + position)


class _ExamModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class QuestionOption(_ExamModel):
    """
    One canonical answer option.

    ``label`` is always the positional label; ``id`` is the stored option id
    when the option carried one, the label otherwise.
    """

    label: str
    id: str
    type: str = "text"
    text: str = ""
    image: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("image", "imageData", "image_url", "imageUrl"),
    )
    alt_text: Optional[str] = Field(default=None, validation_alias=AliasChoices("alt_text", "altText"))
    is_correct: bool = Field(default=False, validation_alias=AliasChoices("is_correct", "isCorrect"))


class Question(_ExamModel):
    """
    One assessment item.

    ``correct_answer`` is a string for NAT/MCQ (possibly with ``or``
    alternatives and ranges) and a list of labels for MSQ.
    ``negative_marks`` is always stored as a non-negative magnitude.
    """

    id: str
    text: str = ""
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("image_url", "imageUrl"))
    type: QuestionType
    options: tuple[QuestionOption, ...] = ()
    correct_answer: Optional[Union[str, list[str]]] = Field(
        default=None,
        validation_alias=AliasChoices("correct_answer", "correctAnswer"),
    )
    marks: float = Field(default=0.0, ge=0)
    negative_marks: float = Field(
        default=0.0,
        validation_alias=AliasChoices("negative_marks", "negativeMarks"),
    )
    category: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_options(cls, data: Any) -> Any:
        """Fold legacy text options and rich option details into canonical options."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        rich = data.pop("optionDetails", None)
        rich_snake = data.pop("option_details", None)
        rich = rich or rich_snake
        raw_options = data.get("options") or []

        if not rich and raw_options and all(isinstance(opt, QuestionOption) for opt in raw_options):
            # Already canonical (e.g. model_copy / re-validation)
            return data

        if rich:
            data["options"] = [
                _canonical_rich_option(opt, position) for position, opt in enumerate(rich)
            ]
        elif raw_options and all(isinstance(opt, str) for opt in raw_options):
            accepted = _legacy_correct_labels(data)
            data["options"] = [
                {
                    "label": option_label(position),
                    "id": option_label(position),
                    "type": "text",
                    "text": text,
                    "is_correct": option_label(position) in accepted,
                }
                for position, text in enumerate(raw_options)
            ]
        elif raw_options:
            data["options"] = [
                _canonical_rich_option(opt, position) for position, opt in enumerate(raw_options)
            ]
        return data

    @field_validator("correct_answer", mode="before")
    @classmethod
    def stringify_correct_answer(cls, v: Any) -> Any:
        """Numeric NAT keys are stored as numbers by some authoring paths."""
        if isinstance(v, bool):
            return str(v)
        if isinstance(v, (int, float)):
            return str(v)
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v]
        return v

    @field_validator("negative_marks", mode="before")
    @classmethod
    def negative_marks_magnitude(cls, v: Any) -> float:
        """Some stored rows carry a pre-negated value."""
        if v is None:
            return 0.0
        return abs(float(v))

    @field_validator("marks", mode="before")
    @classmethod
    def default_marks(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @model_validator(mode="after")
    def check_answer_key(self) -> "Question":
        """Warn when option flags and the stored answer key disagree."""
        if self.type == QuestionType.NAT or not self.options or self.correct_answer is None:
            return self

        from .answer_spec import answer_key_tokens

        flagged = {opt.label for opt in self.options if opt.is_correct}
        tokens = answer_key_tokens(self.correct_answer, split_commas=self.type == QuestionType.MSQ)
        keyed = {self.label_for(token) for token in tokens}

        if flagged and keyed and flagged != keyed:
            logger.warning(
                "answer_key_mismatch question=%s flags=%s key=%s",
                self.id,
                sorted(flagged),
                sorted(keyed),
            )
        return self

    def label_for(self, token: str) -> str:
        """
        Map a submitted or stored token onto a positional label.

        Option ids resolve to their label; anything else is treated as a label
        already (trimmed, upper-cased).
        """
        cleaned = token.strip()
        for opt in self.options:
            if opt.id == cleaned:
                return opt.label
        return cleaned.upper()

    def id_for(self, label: str) -> str:
        """Canonical option id for a label, or the label when no option has it."""
        for opt in self.options:
            if opt.label == label:
                return opt.id
        return label

    def correct_labels(self) -> list[str]:
        return [opt.label for opt in self.options if opt.is_correct]


class Section(_ExamModel):
    """Named, ordered group of questions"""

    id: str
    name: str
    questions: tuple[Question, ...] = ()


class ExamPaper(_ExamModel):
    """A full mock test: ordered sections plus metadata"""

    id: str
    title: str = ""
    year: Optional[int] = None
    exam_type: str = Field(default="", validation_alias=AliasChoices("exam_type", "examType"))
    duration_minutes: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("duration_minutes", "durationMinutes"),
    )
    is_premium: bool = Field(default=False, validation_alias=AliasChoices("is_premium", "isPremium"))
    sections: tuple[Section, ...] = ()

    def iter_questions(self) -> Iterator[Question]:
        """Questions in authored order, section by section."""
        for section in self.sections:
            yield from section.questions

    @property
    def question_count(self) -> int:
        return sum(len(section.questions) for section in self.sections)

    def find_question(self, question_id: str) -> Optional[Question]:
        for question in self.iter_questions():
            if question.id == question_id:
                return question
        return None


def _canonical_rich_option(raw: Any, position: int) -> Any:
    if isinstance(raw, QuestionOption):
        return raw
    if isinstance(raw, str):
        raw = {"text": raw}
    option = dict(raw)
    label = option_label(position)
    option["label"] = label
    option["id"] = str(option.get("id") or label)
    return option


def _legacy_correct_labels(data: dict) -> set[str]:
    from .answer_spec import answer_key_tokens

    answer = data.get("correct_answer", data.get("correctAnswer"))
    if answer is None:
        return set()
    if isinstance(answer, (list, tuple)):
        return {str(item).strip().upper() for item in answer}
    question_type = getattr(data.get("type"), "value", data.get("type"))
    split_commas = str(question_type).upper() == QuestionType.MSQ.value
    return {token.strip().upper() for token in answer_key_tokens(str(answer), split_commas)}
