"""
Tests for the review reconstructor.
"""

import pytest

from exam_grading import (
    OptionState,
    QuestionOutcome,
    QuestionType,
    StandardGrader,
    build_submission_record,
    reconstruct_question,
    reconstruct_review,
)
from exam_grading.review import classify_option, labels_for_ids


@pytest.fixture
def rich_question(make_question):
    return make_question(
        id="r1",
        type="MCQ",
        correctAnswer="B",
        optionDetails=[
            {"id": "o-1", "type": "text", "text": "circle", "isCorrect": False},
            {"id": "o-2", "type": "image", "imageData": "data:image/png;base64,AAA", "altText": "square", "isCorrect": True},
            {"id": "o-3", "type": "text", "text": "triangle", "isCorrect": False},
        ],
    )


class TestClassifyOption:
    """Test per-option highlight states."""

    @pytest.mark.parametrize(
        "option_id,expected",
        [
            ("A", OptionState.CORRECT_SELECTED),
            ("B", OptionState.WRONG_SELECTED),
            ("C", OptionState.CORRECT_NOT_SELECTED),
            ("D", OptionState.NEUTRAL),
        ],
    )
    def test_states(self, option_id, expected):
        assert classify_option(option_id, ["A", "B"], ["A", "C"]) == expected


class TestReconstructQuestion:
    """Test one review entry."""

    def test_legacy_msq(self, msq_question):
        outcome = StandardGrader().grade(msq_question, ["B", "A"])
        review = reconstruct_question(outcome, msq_question, number=3)

        assert review.number == 3
        assert [opt.state for opt in review.options] == [
            OptionState.CORRECT_SELECTED,
            OptionState.WRONG_SELECTED,
            OptionState.CORRECT_NOT_SELECTED,
            OptionState.NEUTRAL,
        ]
        assert review.selected_labels == ["A", "B"]
        assert review.correct_labels == ["A", "C"]
        assert review.selected_display == "A, B"
        assert review.correct_display == "A, C"
        assert not review.correct

    def test_rich_ids_map_to_labels(self, rich_question):
        outcome = StandardGrader().grade(rich_question, "o-2")
        review = reconstruct_question(outcome, rich_question)

        assert review.correct
        assert review.selected_labels == ["B"]
        assert review.correct_labels == ["B"]
        square = review.options[1]
        assert square.state == OptionState.CORRECT_SELECTED
        assert square.image == "data:image/png;base64,AAA"
        assert square.alt_text == "square"

    def test_legacy_label_rows_against_rich_question(self, rich_question):
        outcome = QuestionOutcome(
            question_id="r1",
            question_type=QuestionType.MCQ,
            attempted=True,
            correct=False,
            marks_earned=-1,
            selected_option_ids=["C"],
            correct_option_ids=["B"],
        )
        review = reconstruct_question(outcome, rich_question)
        assert review.selected_labels == ["C"]
        assert review.correct_labels == ["B"]
        assert review.options[2].state == OptionState.WRONG_SELECTED
        assert review.options[1].state == OptionState.CORRECT_NOT_SELECTED

    def test_without_options_ids_are_labels(self, make_question):
        question = make_question(correctAnswer="A or C")
        outcome = StandardGrader().grade(question, "B")
        review = reconstruct_question(outcome, question)
        assert review.options == []
        assert review.selected_labels == ["B"]
        assert review.correct_labels == ["A", "C"]

    def test_unknown_id_kept_as_label(self, msq_question):
        assert labels_for_ids(msq_question, ["A", "Z"]) == ["A", "Z"]

    def test_nat_values(self, make_question):
        question = make_question(type="NAT", correctAnswer="10-12")
        review = reconstruct_question(StandardGrader().grade(question, "11.5"), question)
        assert review.selected_value == "11.5"
        assert review.correct_value == "10-12"
        assert review.options == []


class TestReconstructReview:
    """Test full review reconstruction."""

    def test_ordered_and_numbered(self, scenario_exam):
        record = build_submission_record(scenario_exam, {"Q1": "11", "Q2": "C"}, 0)
        review = reconstruct_review(record, scenario_exam.iter_questions())
        assert [(q.number, q.question_id) for q in review] == [(1, "Q1"), (2, "Q2")]
        assert all(q.correct for q in review)

    def test_missing_questions_are_skipped(self, scenario_exam):
        record = build_submission_record(scenario_exam, {"Q1": "11", "Q2": "C"}, 0)
        q2 = scenario_exam.find_question("Q2")
        review = reconstruct_review(record, [q2])
        assert [(q.number, q.question_id) for q in review] == [(1, "Q2")]

    def test_idempotent(self, scenario_exam):
        record = build_submission_record(scenario_exam, {"Q2": "B"}, 0)
        questions = list(scenario_exam.iter_questions())
        assert reconstruct_review(record, questions) == reconstruct_review(record, questions)
