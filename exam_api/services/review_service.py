"""
Review service.

Rebuilds the review screen for a stored submission. Reviews stay available
for a limited window after submission.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from exam_grading import ReviewQuestion, SubmissionRecord, reconstruct_review

from ..repositories.exam_repository import ExamRepositoryInterface
from ..repositories.submission_repository import SubmissionRepositoryInterface
from ..core.errors import ReviewExpiredError
from ..core.logging import get_logger, get_context_logger
from ..core.config import settings

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewService:
    """Service for reconstructing question-by-question reviews"""

    def __init__(
        self,
        exams: ExamRepositoryInterface,
        submissions: SubmissionRepositoryInterface,
        validity_hours: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.exams = exams
        self.submissions = submissions
        self.validity_hours = settings.REVIEW_VALIDITY_HOURS if validity_hours is None else validity_hours
        self.clock = clock

        logger.info(
            "ReviewService initialized",
            extra_data={"validity_hours": self.validity_hours}
        )

    def review_expires_at(self, record: SubmissionRecord) -> datetime:
        """End of the review window; naive timestamps are read as UTC"""
        submitted_at = record.submitted_at
        if submitted_at.tzinfo is None:
            submitted_at = submitted_at.replace(tzinfo=timezone.utc)
        return submitted_at + timedelta(hours=self.validity_hours)

    def is_expired(self, record: SubmissionRecord) -> bool:
        """Whether the review window of a record has closed"""
        return self.clock() > self.review_expires_at(record)

    async def get_review(self, submission_id: str) -> List[ReviewQuestion]:
        """
        Review entries of a stored submission.

        Raises:
            SubmissionNotFoundError: If the submission doesn't exist
            ReviewExpiredError: If the review window has closed
            ExamNotFoundError: If the exam was removed
        """
        log = get_context_logger(__name__, submission_id=submission_id)
        record = await self.submissions.get(submission_id)

        if self.is_expired(record):
            log.info(
                "Review expired",
                extra_data={"submitted_at": record.submitted_at.isoformat()}
            )
            raise ReviewExpiredError(submission_id, self.validity_hours)

        exam = await self.exams.get(record.exam_id)
        review = reconstruct_review(record, exam.iter_questions())

        log.debug(
            "Review reconstructed",
            extra_data={
                "exam_id": record.exam_id,
                "questions": len(review),
                "stored_outcomes": len(record.student_answers)
            }
        )

        return review


# Factory function
def get_review_service(
    exams: ExamRepositoryInterface,
    submissions: SubmissionRepositoryInterface
) -> ReviewService:
    """Create review service instance"""
    return ReviewService(exams, submissions)
