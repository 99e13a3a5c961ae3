"""
Shared pytest fixtures for the grading core tests.

This module provides:
- Question and exam factories in the shapes the authoring tool writes
- The two-question scenario exam used by the end-to-end tests
- A helper for asserting pydantic validation failures
"""

import pytest
from typing import Any, Type, TypeVar
from pydantic import BaseModel, ValidationError

from exam_grading import ExamPaper, Question


T = TypeVar('T', bound=BaseModel)


@pytest.fixture
def make_question():
    """Factory for questions; keyword arguments use the stored (camelCase or snake_case) shape."""
    def _factory(**kwargs: Any) -> Question:
        data = {"id": "q1", "type": "MCQ", "marks": 4, "negativeMarks": 1}
        data.update(kwargs)
        return Question.model_validate(data)
    return _factory


@pytest.fixture
def make_exam():
    """Factory for a single-section exam around the given questions."""
    def _factory(*questions: dict[str, Any], **kwargs: Any) -> ExamPaper:
        data = {
            "id": "exam-1",
            "title": "Mock Test 1",
            "sections": [{"id": "s1", "name": "Part A", "questions": list(questions)}],
        }
        data.update(kwargs)
        return ExamPaper.model_validate(data)
    return _factory


@pytest.fixture
def scenario_exam(make_exam) -> ExamPaper:
    """Q1 NAT 10-12 worth 4 (no penalty), Q2 MCQ "A or C" worth 4 (-1)."""
    return make_exam(
        {
            "id": "Q1",
            "type": "NAT",
            "marks": 4,
            "negativeMarks": 0,
            "correctAnswer": "10-12",
            "category": "Numeracy",
        },
        {
            "id": "Q2",
            "type": "MCQ",
            "marks": 4,
            "negativeMarks": 1,
            "correctAnswer": "A or C",
            "options": ["red", "green", "blue", "yellow"],
            "category": "Visual",
        },
    )


@pytest.fixture
def msq_question(make_question) -> Question:
    """MSQ worth 4 with correct set {A, C}."""
    return make_question(
        id="m1",
        type="MSQ",
        marks=4,
        negativeMarks=1,
        correctAnswer=["A", "C"],
        options=["one", "two", "three", "four"],
    )


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: Type[T],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        """
        Assert that validating data raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to validate
            expected_field: Expected field name in error (optional)

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class.model_validate(data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e['loc'] and e['loc'][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation
