"""
Submission service.

Finalizes an attempt: checks premium access, builds the submission record,
persists it, then feeds the best-effort auxiliary sinks (attempt log and
completion log).
"""

from typing import Dict, List, Optional, Tuple, Union

from exam_grading import (
    SubmissionRecord,
    SubmissionStats,
    build_submission_record,
    score_exam,
    summarize_submission,
)

from ..models.domain import UserAttempt
from ..repositories.exam_repository import ExamRepositoryInterface
from ..repositories.submission_repository import SubmissionRepositoryInterface
from ..repositories.attempt_repository import AttemptRepositoryInterface
from ..repositories.completion_repository import CompletionRepositoryInterface
from ..repositories.access_gate import AccessGateInterface
from ..core.errors import ExamLockedError
from ..core.logging import get_logger

logger = get_logger(__name__)

Responses = Dict[str, Union[str, float, List[str], None]]


class SubmissionService:
    """
    Service for finalizing and reading back exam attempts.

    Only the submission repository is authoritative: a failed save fails the
    submission, while failures of the attempt or completion logs are logged
    and otherwise ignored.
    """

    def __init__(
        self,
        exams: ExamRepositoryInterface,
        submissions: SubmissionRepositoryInterface,
        access_gate: AccessGateInterface,
        attempts: Optional[AttemptRepositoryInterface] = None,
        completions: Optional[CompletionRepositoryInterface] = None
    ):
        self.exams = exams
        self.submissions = submissions
        self.access_gate = access_gate
        self.attempts = attempts
        self.completions = completions

        logger.info("SubmissionService initialized")

    async def submit(
        self,
        exam_id: str,
        responses: Responses,
        elapsed_seconds: float = 0.0,
        user_id: Optional[str] = None
    ) -> SubmissionRecord:
        """
        Grade and persist a finished attempt.

        Args:
            exam_id: Exam identifier
            responses: Final response map keyed by question id
            elapsed_seconds: Time spent on the attempt
            user_id: Authenticated user, if any

        Returns:
            The stored record, carrying its new id

        Raises:
            ExamNotFoundError: If the exam doesn't exist
            ExamLockedError: If the exam is premium and the user isn't
            PersistenceError: If the record could not be saved
        """
        exam = await self.exams.get(exam_id)

        if exam.is_premium and not await self.access_gate.is_premium_unlocked(user_id):
            logger.warning(
                "Premium exam submission refused",
                extra_data={"exam_id": exam_id, "user_id": user_id}
            )
            raise ExamLockedError(exam_id)

        record = build_submission_record(
            exam,
            responses,
            elapsed_seconds,
            user_id=user_id
        )

        submission_id = await self.submissions.save(record)
        record = record.with_id(submission_id)

        logger.info(
            "Exam submitted",
            extra_data={
                "submission_id": submission_id,
                "exam_id": exam_id,
                "user_id": user_id,
                "total_marks": record.total_marks,
                "passed": record.passed,
                "time_spent_seconds": record.time_spent_seconds
            }
        )

        if user_id is not None:
            await self._record_attempt(exam, responses, record, user_id)
            await self._mark_completed(user_id, exam_id)

        return record

    async def get_submission(self, submission_id: str) -> Tuple[SubmissionRecord, SubmissionStats]:
        """Stored record plus the results-page statistics"""
        record = await self.submissions.get(submission_id)
        return record, summarize_submission(record)

    async def list_submissions(self, user_id: str) -> List[SubmissionRecord]:
        """A user's stored submissions, newest first"""
        records = await self.submissions.list_for_user(user_id)

        logger.debug(
            "Listed submissions",
            extra_data={"user_id": user_id, "count": len(records)}
        )

        return list(reversed(records))

    async def completed_exam_ids(self, user_id: str) -> List[str]:
        """Exam ids the user has completed"""
        if self.completions is None:
            return []
        return await self.completions.completed_exam_ids(user_id)

    async def _record_attempt(self, exam, responses: Responses, record: SubmissionRecord, user_id: str) -> None:
        if self.attempts is None:
            return
        try:
            score, max_score, accuracy = score_exam(exam, responses)
            await self.attempts.record_attempt(
                UserAttempt(
                    user_id=user_id,
                    paper_id=exam.id,
                    responses=responses,
                    time_spent=record.time_spent_seconds,
                    score=score,
                    max_score=max_score,
                    accuracy=accuracy
                )
            )
        except Exception as e:
            logger.warning(
                "Failed to record attempt",
                extra_data={
                    "submission_id": record.id,
                    "user_id": user_id,
                    "error": str(e)
                }
            )

    async def _mark_completed(self, user_id: str, exam_id: str) -> None:
        if self.completions is None:
            return
        try:
            await self.completions.mark_completed(user_id, exam_id)
        except Exception as e:
            logger.warning(
                "Failed to mark exam completed",
                extra_data={
                    "exam_id": exam_id,
                    "user_id": user_id,
                    "error": str(e)
                }
            )


# Factory function
def get_submission_service(
    exams: ExamRepositoryInterface,
    submissions: SubmissionRepositoryInterface,
    access_gate: AccessGateInterface,
    attempts: Optional[AttemptRepositoryInterface] = None,
    completions: Optional[CompletionRepositoryInterface] = None
) -> SubmissionService:
    """Create submission service instance"""
    return SubmissionService(exams, submissions, access_gate, attempts, completions)
