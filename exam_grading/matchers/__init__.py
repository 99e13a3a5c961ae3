"""
Type-specific answer matchers.

Each module implements the matcher for one question type. Importing this
package registers all of them in the global matcher registry.
"""

from ..evaluator import register_matcher
from ..models import QuestionType
from .choice import ChoiceMatcher
from .multi_choice import MultiChoiceMatcher
from .numeric import NAT_TOLERANCE, NumericMatcher

register_matcher(QuestionType.NAT, NumericMatcher)
register_matcher(QuestionType.MCQ, ChoiceMatcher)
register_matcher(QuestionType.MSQ, MultiChoiceMatcher)

__all__ = [
    "NAT_TOLERANCE",
    "NumericMatcher",
    "ChoiceMatcher",
    "MultiChoiceMatcher",
]
