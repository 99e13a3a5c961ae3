"""
exam_grading - Grading and answer-validation engine for mock entrance exams

Turns raw student responses into scores broken down per question, per section
and per topic category. Provides:
- Type-specific answer matchers (NAT tolerance/ranges/or-alternatives, MCQ, MSQ)
- Per-question graders (live all-or-nothing, preview with MSQ partial credit)
- Exam scorer with section totals and category analysis
- Submission record builder and review reconstructor

Everything here is pure and synchronous; storage lives with the caller.
"""

from .answer_spec import (
    AnswerSpec,
    ChoiceSpec,
    MultiChoiceSpec,
    NumericRange,
    NumericSpec,
    parse_answer_spec,
    parse_numeric_spec,
    split_alternatives,
)
from .evaluator import AnswerMatcher, MatcherRegistry, create_matcher, is_attempted, normalize_response
from .graders import Grader, ProportionalMSQGrader, StandardGrader, proportional_msq_marks
from .matchers import NAT_TOLERANCE, ChoiceMatcher, MultiChoiceMatcher, NumericMatcher
from .models import ExamPaper, Question, QuestionOption, QuestionType, Section, option_label
from .outcome import CategoryAnalysis, GradingResult, QuestionOutcome, SectionResult
from .review import OptionState, ReviewOption, ReviewQuestion, reconstruct_question, reconstruct_review
from .scorer import UNCATEGORIZED, GradingInput, grade_exam, score_exam
from .submission import SubmissionRecord, SubmissionStats, build_submission_record, summarize_submission

__version__ = "0.1.0"

__all__ = [
    # Data model
    "QuestionType",
    "QuestionOption",
    "Question",
    "Section",
    "ExamPaper",
    "option_label",
    # Answer specs
    "AnswerSpec",
    "NumericSpec",
    "NumericRange",
    "ChoiceSpec",
    "MultiChoiceSpec",
    "parse_answer_spec",
    "parse_numeric_spec",
    "split_alternatives",
    # Matchers
    "AnswerMatcher",
    "MatcherRegistry",
    "create_matcher",
    "is_attempted",
    "normalize_response",
    "NAT_TOLERANCE",
    "NumericMatcher",
    "ChoiceMatcher",
    "MultiChoiceMatcher",
    # Graders
    "Grader",
    "StandardGrader",
    "ProportionalMSQGrader",
    "proportional_msq_marks",
    # Scoring
    "GradingInput",
    "GradingResult",
    "QuestionOutcome",
    "SectionResult",
    "CategoryAnalysis",
    "UNCATEGORIZED",
    "grade_exam",
    "score_exam",
    # Submission and review
    "SubmissionRecord",
    "SubmissionStats",
    "build_submission_record",
    "summarize_submission",
    "OptionState",
    "ReviewOption",
    "ReviewQuestion",
    "reconstruct_question",
    "reconstruct_review",
]
