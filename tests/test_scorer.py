"""
Tests for the exam scorer.

End-to-end scenarios plus the aggregate invariants: idempotence, totals,
unattempted questions, section and category breakdowns.
"""

import pytest

from exam_grading import (
    UNCATEGORIZED,
    GradingInput,
    ProportionalMSQGrader,
    grade_exam,
    score_exam,
)


def grade(exam, responses, **kwargs):
    return grade_exam(GradingInput(exam=exam, responses=responses), **kwargs)


class TestEndToEnd:
    """The reference scenarios."""

    def test_one_right_one_wrong(self, scenario_exam):
        result = grade(scenario_exam, {"Q1": "11", "Q2": "B"})
        assert result.total_marks == 3
        assert result.max_marks == 8
        assert result.correct_count == 1
        assert result.wrong_count == 1
        assert result.skipped_count == 0
        assert result.passed

    def test_no_responses(self, scenario_exam):
        result = grade(scenario_exam, {})
        assert result.total_marks == 0
        assert result.skipped_count == 2
        assert result.accuracy == 0
        assert result.passed

    def test_msq_all_or_nothing(self, make_exam):
        exam = make_exam(
            {"id": "m1", "type": "MSQ", "marks": 4, "negativeMarks": 0, "correctAnswer": ["A", "C"]}
        )
        assert grade(exam, {"m1": ["A", "C"]}).total_marks == 4
        partial = grade(exam, {"m1": ["A"]})
        assert partial.total_marks == 0
        assert partial.wrong_count == 1

    def test_preview_grader_gives_msq_partial_credit(self, make_exam):
        exam = make_exam(
            {"id": "m1", "type": "MSQ", "marks": 4, "negativeMarks": 0, "correctAnswer": ["A", "C"]}
        )
        result = grade(exam, {"m1": ["A"]}, grader=ProportionalMSQGrader())
        assert result.total_marks == 2


class TestInvariants:
    """Aggregate properties that hold for any exam and responses."""

    def test_idempotent(self, scenario_exam):
        responses = {"Q1": "11", "Q2": "B"}
        assert grade(scenario_exam, responses) == grade(scenario_exam, responses)

    def test_totals_equal_sum_of_outcomes(self, scenario_exam):
        result = grade(scenario_exam, {"Q1": "9", "Q2": "A"})
        assert result.total_marks == sum(o.marks_earned for o in result.outcomes)
        assert result.total_marks == sum(s.score for s in result.sections)
        assert result.max_marks == sum(s.max_score for s in result.sections)

    def test_counts_cover_every_question(self, scenario_exam):
        result = grade(scenario_exam, {"Q2": "C"})
        assert result.correct_count + result.wrong_count + result.skipped_count == 2
        assert len(result.outcomes) == 2

    def test_unattempted_questions_earn_zero(self, scenario_exam):
        result = grade(scenario_exam, {"Q1": "", "Q2": None})
        assert all(not o.attempted and o.marks_earned == 0 for o in result.outcomes)

    def test_outcomes_in_authored_order(self, scenario_exam):
        result = grade(scenario_exam, {"Q2": "A", "Q1": "10"})
        assert [o.question_id for o in result.outcomes] == ["Q1", "Q2"]

    def test_unknown_question_ids_are_ignored(self, scenario_exam):
        result = grade(scenario_exam, {"Q1": "11", "ghost": "A"})
        assert result.total_marks == 4
        assert result.outcome_for("ghost") is None

    def test_full_precision(self, make_exam):
        exam = make_exam(
            {"id": "a", "type": "MCQ", "marks": 0.1, "correctAnswer": "A"},
            {"id": "b", "type": "MCQ", "marks": 0.2, "correctAnswer": "A"},
        )
        assert grade(exam, {"a": "A", "b": "A"}).total_marks == 0.1 + 0.2

    def test_negative_total_fails(self, make_exam):
        exam = make_exam({"id": "a", "type": "MCQ", "marks": 1, "negativeMarks": 0.01, "correctAnswer": "A"})
        result = grade(exam, {"a": "B"})
        assert result.total_marks == pytest.approx(-0.01)
        assert not result.passed


class TestGradingInput:
    """Test response snapshotting."""

    def test_responses_are_copied(self, scenario_exam):
        responses = {"Q2": ["A"]}
        grading_input = GradingInput(exam=scenario_exam, responses=responses)
        responses["Q2"].append("B")
        responses["Q1"] = "11"
        assert grading_input.responses == {"Q2": ["A"]}

    def test_numeric_responses_become_strings(self, scenario_exam):
        grading_input = GradingInput(exam=scenario_exam, responses={"Q1": 11})
        assert grading_input.responses == {"Q1": "11"}
        assert grade_exam(grading_input).outcome_for("Q1").correct

    def test_none_responses(self, scenario_exam):
        assert GradingInput(exam=scenario_exam, responses=None).responses == {}


class TestBreakdowns:
    """Test section totals and category analysis."""

    def test_section_results(self, make_exam):
        exam = make_exam(
            sections=[
                {
                    "id": "s1",
                    "name": "Part A",
                    "questions": [
                        {"id": "a", "type": "MCQ", "marks": 2, "negativeMarks": 0.5, "correctAnswer": "A"},
                        {"id": "b", "type": "MCQ", "marks": 2, "negativeMarks": 0.5, "correctAnswer": "A"},
                    ],
                },
                {
                    "id": "s2",
                    "name": "Part B",
                    "questions": [
                        {"id": "c", "type": "NAT", "marks": 5, "correctAnswer": "3"},
                    ],
                },
            ]
        )
        result = grade(exam, {"a": "A", "b": "B"})
        part_a, part_b = result.sections
        assert (part_a.score, part_a.max_score) == (1.5, 4)
        assert (part_a.correct, part_a.wrong, part_a.skipped) == (1, 1, 0)
        assert part_a.accuracy == 50
        assert (part_b.score, part_b.max_score, part_b.skipped) == (0, 5, 1)
        assert part_b.accuracy == 0

    def test_category_analysis(self, scenario_exam, make_exam):
        exam = make_exam(
            {"id": "a", "type": "MCQ", "marks": 4, "negativeMarks": 1, "correctAnswer": "A", "category": "Drawing"},
            {"id": "b", "type": "MCQ", "marks": 4, "negativeMarks": 1, "correctAnswer": "A", "category": "Drawing"},
            {"id": "c", "type": "MCQ", "marks": 2, "correctAnswer": "A"},
        )
        result = grade(exam, {"a": "A", "b": "C", "c": "A"})
        categories = {c.name: c for c in result.categories}
        assert set(categories) == {"Drawing", UNCATEGORIZED}
        drawing = categories["Drawing"]
        assert drawing.total_questions == 2
        assert drawing.correct == 1
        assert drawing.total_marks == 8
        assert drawing.scored_marks == 3
        assert categories[UNCATEGORIZED].scored_marks == 2

    def test_accuracy_over_attempted(self, scenario_exam):
        result = grade(scenario_exam, {"Q1": "11"})
        assert result.accuracy == 100


def test_score_exam(scenario_exam):
    assert score_exam(scenario_exam, {"Q1": "11", "Q2": "B"}) == (3, 8, 50)
