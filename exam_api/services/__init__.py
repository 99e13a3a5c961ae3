"""Services package"""

from .grading_service import GradingService, get_grading_service
from .submission_service import SubmissionService, get_submission_service
from .review_service import ReviewService, get_review_service

__all__ = [
    "GradingService",
    "get_grading_service",
    "SubmissionService",
    "get_submission_service",
    "ReviewService",
    "get_review_service",
]
