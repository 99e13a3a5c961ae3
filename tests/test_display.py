"""
Tests for answer-key display helpers.
"""

import pytest

from exam_grading.display import (
    format_mcq_answer,
    format_nat_answer,
    msq_marking_preview,
    nat_range_display,
)


class TestFormatNatAnswer:

    @pytest.mark.parametrize(
        "answer,expected",
        [
            ("109.9-112.4", "109.9 - 112.4"),
            ("42", "42"),
            ("5 or 10-12", "5 or 10 - 12"),
            ("10-12 or 5", "5 or 10 - 12"),
            (None, "N/A"),
            ("", "N/A"),
            ("abc", "abc"),
        ],
    )
    def test_format(self, answer, expected):
        assert format_nat_answer(answer) == expected


class TestNatRangeDisplay:

    def test_range(self):
        assert nat_range_display("1-2") == "(Accepted range: 1 to 2)"

    def test_exact(self):
        assert nat_range_display("2.5") == "(Exact: 2.5)"

    def test_blank(self):
        assert nat_range_display(None) == ""


class TestFormatMcqAnswer:

    def test_alternatives(self):
        assert format_mcq_answer("a or c") == "A or C"

    def test_blank(self):
        assert format_mcq_answer("") == "N/A"


class TestMsqMarkingPreview:

    def test_breakdown(self, make_question):
        question = make_question(type="MSQ", marks=3, correctAnswer=["A", "B", "C"])
        preview = msq_marking_preview(question)
        assert preview.total_correct == 3
        assert preview.full_correct == 3
        assert [(p.count, p.marks) for p in preview.partial] == [(1, 1.0), (2, 2.0)]
        assert preview.any_wrong == -1
        assert preview.unanswered == 0

    def test_single_correct_option_has_no_partial_rows(self, make_question):
        preview = msq_marking_preview(make_question(type="MSQ", correctAnswer=["A"]))
        assert preview.partial == []
