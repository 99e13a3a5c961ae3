"""
Grading service.

Live results for an in-progress or finished session, and the authoring-tool
preview of a single question.
"""

from typing import Dict, List, Optional, Union
import traceback

from exam_grading import (
    GradingInput,
    GradingResult,
    ProportionalMSQGrader,
    Question,
    QuestionType,
    StandardGrader,
    create_matcher,
    grade_exam,
)
from exam_grading.display import format_mcq_answer, format_nat_answer, msq_marking_preview, nat_range_display

from ..models.domain import QuestionPreview
from ..repositories.exam_repository import ExamRepositoryInterface
from ..core.errors import GradingError
from ..core.logging import get_logger

logger = get_logger(__name__)

Responses = Dict[str, Union[str, float, List[str], None]]


class GradingService:
    """
    Service for grading operations.

    Scores responses against exams loaded from the exam repository. Nothing
    is persisted here; finalizing an attempt is the submission service's job.
    """

    def __init__(self, repository: ExamRepositoryInterface):
        self.repository = repository
        self.grader = StandardGrader()
        self.preview_grader = ProportionalMSQGrader()

        logger.info("GradingService initialized")

    async def grade_responses(
        self,
        exam_id: str,
        responses: Responses,
        elapsed_seconds: float = 0.0
    ) -> GradingResult:
        """
        Grade responses for the results view.

        Args:
            exam_id: Exam identifier
            responses: Response map keyed by question id
            elapsed_seconds: Time spent so far

        Returns:
            Full grading result with section and category breakdowns

        Raises:
            ExamNotFoundError: If the exam doesn't exist
            GradingError: If grading fails unexpectedly
        """
        logger.info(
            "Grading responses",
            extra_data={
                "exam_id": exam_id,
                "num_responses": len(responses)
            }
        )

        exam = await self.repository.get(exam_id)

        try:
            result = grade_exam(
                GradingInput(exam=exam, responses=responses, elapsed_seconds=max(0.0, elapsed_seconds)),
                grader=self.grader
            )
        except Exception as e:
            logger.error(
                "Failed to grade responses",
                extra_data={
                    "exam_id": exam_id,
                    "error": str(e),
                    "traceback": traceback.format_exc()
                }
            )
            raise GradingError(exam_id, str(e))

        logger.info(
            "Grading completed",
            extra_data={
                "exam_id": exam_id,
                "total_marks": result.total_marks,
                "max_marks": result.max_marks,
                "accuracy": result.accuracy
            }
        )

        return result

    def preview_question(
        self,
        question: Question,
        response: Union[str, float, List[str], None]
    ) -> QuestionPreview:
        """Grade one authored question the way the authoring tool previews it."""
        matcher = create_matcher(question)

        if question.type == QuestionType.NAT:
            answer = question.correct_answer if isinstance(question.correct_answer, str) else None
            correct_display = format_nat_answer(answer)
            accepted_display = nat_range_display(answer)
        elif question.type == QuestionType.MCQ and isinstance(question.correct_answer, str):
            correct_display = format_mcq_answer(question.correct_answer)
            accepted_display = ""
        else:
            correct_display = matcher.correct_display() or "N/A"
            accepted_display = ""

        preview = QuestionPreview(
            question_id=question.id,
            preview_outcome=self.preview_grader.grade(question, response),
            live_outcome=self.grader.grade(question, response),
            correct_answer_display=correct_display,
            accepted_display=accepted_display,
            msq_preview=msq_marking_preview(question) if question.type == QuestionType.MSQ else None,
        )

        logger.debug(
            "Question previewed",
            extra_data={
                "question_id": question.id,
                "preview_marks": preview.preview_outcome.marks_earned
            }
        )

        return preview


# Factory function
def get_grading_service(
    repository: ExamRepositoryInterface
) -> GradingService:
    """Create grading service instance"""
    return GradingService(repository)
