"""
FastAPI backend for the mock exam grading service.

Layers:
- Service layer for grading, submission and review logic
- Repository pattern for exams, submissions and the auxiliary logs
- Structured logging
- Uniform JSON error responses
- Dependency injection
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, Header
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union

from exam_grading import (
    ExamPaper,
    GradingResult,
    Question,
    ReviewQuestion,
    SubmissionRecord,
    SubmissionStats,
)

from .core import (
    settings,
    setup_logging,
    get_logger,
    register_error_handlers,
    AuthenticationError,
)
from .models import ExamSummary, QuestionPreview, SubmissionSummary
from .repositories import (
    ExamRepositoryInterface,
    SubmissionRepositoryInterface,
    AttemptRepositoryInterface,
    CompletionRepositoryInterface,
    AccessGateInterface,
    get_exam_repository,
    get_submission_repository,
    get_attempt_repository,
    get_completion_repository,
    get_access_gate,
)
from .services import (
    GradingService,
    SubmissionService,
    ReviewService,
    get_grading_service,
    get_submission_service,
    get_review_service,
)

# Setup logging
setup_logging()
logger = get_logger(__name__)


# Lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(
        "Starting exam grading API",
        extra_data={
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG
        }
    )
    yield
    logger.info("Shutting down exam grading API")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="REST API for grading, submitting and reviewing mock entrance exams",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

# Register error handlers
register_error_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


# Dependency injection
def get_exam_repository_dep() -> ExamRepositoryInterface:
    return get_exam_repository()


def get_submission_repository_dep() -> SubmissionRepositoryInterface:
    return get_submission_repository()


def get_attempt_repository_dep() -> AttemptRepositoryInterface:
    return get_attempt_repository()


def get_completion_repository_dep() -> CompletionRepositoryInterface:
    return get_completion_repository()


def get_access_gate_dep() -> AccessGateInterface:
    return get_access_gate()


def get_grading_service_dep(
    exams: ExamRepositoryInterface = Depends(get_exam_repository_dep)
) -> GradingService:
    """Get grading service instance"""
    return get_grading_service(exams)


def get_submission_service_dep(
    exams: ExamRepositoryInterface = Depends(get_exam_repository_dep),
    submissions: SubmissionRepositoryInterface = Depends(get_submission_repository_dep),
    access_gate: AccessGateInterface = Depends(get_access_gate_dep),
    attempts: AttemptRepositoryInterface = Depends(get_attempt_repository_dep),
    completions: CompletionRepositoryInterface = Depends(get_completion_repository_dep),
) -> SubmissionService:
    """Get submission service instance"""
    return get_submission_service(exams, submissions, access_gate, attempts, completions)


def get_review_service_dep(
    exams: ExamRepositoryInterface = Depends(get_exam_repository_dep),
    submissions: SubmissionRepositoryInterface = Depends(get_submission_repository_dep),
) -> ReviewService:
    """Get review service instance"""
    return get_review_service(exams, submissions)


def get_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Authenticated user id forwarded by the auth proxy, if any"""
    return x_user_id.strip() if x_user_id and x_user_id.strip() else None


def require_user_id(user_id: Optional[str] = Depends(get_user_id)) -> str:
    if user_id is None:
        raise AuthenticationError()
    return user_id


# API Request/Response Models
# NAT entries may arrive as JSON numbers
Answer = Union[str, float, List[str], None]


class ResponsesRequest(BaseModel):
    """Responses of one session"""
    responses: Dict[str, Answer] = Field(default_factory=dict, description="Responses by question id")
    elapsed_seconds: float = Field(0.0, description="Seconds spent on the attempt")


class PreviewRequest(BaseModel):
    """Authoring-tool preview of one question"""
    question: Question
    response: Answer = None


class SubmissionResponse(BaseModel):
    """Stored submission with results-page statistics"""
    submission: SubmissionRecord
    stats: SubmissionStats


class ReviewQuestionResponse(BaseModel):
    """One question of the review screen"""
    number: int
    question_id: str
    question_type: str
    text: str
    image_url: Optional[str]
    attempted: bool
    correct: bool
    marks_earned: float
    options: List[Dict[str, Optional[str]]]
    selected_labels: List[str]
    correct_labels: List[str]
    selected_display: str
    correct_display: str
    selected_value: Optional[str]
    correct_value: Optional[str]

    @classmethod
    def from_domain(cls, question: ReviewQuestion) -> "ReviewQuestionResponse":
        """Convert domain model to response"""
        return cls(
            number=question.number,
            question_id=question.question_id,
            question_type=question.question_type.value,
            text=question.text,
            image_url=question.image_url,
            attempted=question.attempted,
            correct=question.correct,
            marks_earned=question.marks_earned,
            options=[
                {
                    "id": opt.id,
                    "label": opt.label,
                    "text": opt.text,
                    "image": opt.image,
                    "alt_text": opt.alt_text,
                    "state": opt.state.value,
                }
                for opt in question.options
            ],
            selected_labels=question.selected_labels,
            correct_labels=question.correct_labels,
            selected_display=question.selected_display,
            correct_display=question.correct_display,
            selected_value=question.selected_value,
            correct_value=question.correct_value,
        )


class ReviewResponse(BaseModel):
    submission_id: str
    questions: List[ReviewQuestionResponse]


class CompletedExamsResponse(BaseModel):
    user_id: str
    exam_ids: List[str]


# API Routes

@app.get("/")
async def read_root():
    """API root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "exams": "/exams",
            "exam": "/exams/{exam_id}",
            "results": "/exams/{exam_id}/results",
            "submit": "/exams/{exam_id}/submissions",
            "submission": "/submissions/{submission_id}",
            "review": "/submissions/{submission_id}/review",
            "preview": "/questions/preview",
            "completed": "/users/me/completed-exams",
            "my_submissions": "/users/me/submissions",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/exams", response_model=List[ExamSummary])
async def list_exams(
    exams: ExamRepositoryInterface = Depends(get_exam_repository_dep)
):
    """List available exams"""
    logger.info("Listing exams")

    return [ExamSummary.from_exam(exam) for exam in await exams.list()]


@app.get("/exams/{exam_id}", response_model=ExamPaper)
async def get_exam(
    exam_id: str,
    exams: ExamRepositoryInterface = Depends(get_exam_repository_dep)
):
    """Get a full exam definition"""
    logger.info(
        "Getting exam",
        extra_data={"exam_id": exam_id}
    )

    return await exams.get(exam_id)


@app.post("/exams/{exam_id}/results", response_model=GradingResult)
async def grade_exam_responses(
    exam_id: str,
    request: ResponsesRequest,
    grading_service: GradingService = Depends(get_grading_service_dep)
):
    """
    Grade responses for the results view.

    Nothing is stored; use the submissions endpoint to finalize an attempt.
    """
    return await grading_service.grade_responses(
        exam_id,
        request.responses,
        request.elapsed_seconds
    )


@app.post("/exams/{exam_id}/submissions", response_model=SubmissionRecord, status_code=201)
async def submit_exam(
    exam_id: str,
    request: ResponsesRequest,
    user_id: Optional[str] = Depends(get_user_id),
    submission_service: SubmissionService = Depends(get_submission_service_dep)
):
    """
    Finalize an attempt.

    Returns the stored record; its id is the handle for the results and
    review endpoints.
    """
    logger.info(
        "Submitting exam",
        extra_data={
            "exam_id": exam_id,
            "user_id": user_id,
            "num_responses": len(request.responses)
        }
    )

    return await submission_service.submit(
        exam_id,
        request.responses,
        request.elapsed_seconds,
        user_id=user_id
    )


@app.get("/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: str,
    submission_service: SubmissionService = Depends(get_submission_service_dep)
):
    """Get a stored submission with its results-page statistics"""
    record, stats = await submission_service.get_submission(submission_id)
    return SubmissionResponse(submission=record, stats=stats)


@app.get("/submissions/{submission_id}/review", response_model=ReviewResponse)
async def review_submission(
    submission_id: str,
    review_service: ReviewService = Depends(get_review_service_dep)
):
    """Question-by-question review of a stored submission"""
    review = await review_service.get_review(submission_id)
    return ReviewResponse(
        submission_id=submission_id,
        questions=[ReviewQuestionResponse.from_domain(q) for q in review]
    )


@app.post("/questions/preview", response_model=QuestionPreview)
async def preview_question(
    request: PreviewRequest,
    grading_service: GradingService = Depends(get_grading_service_dep)
):
    """Preview the marking of an authored question against a sample response"""
    return grading_service.preview_question(request.question, request.response)


@app.get("/users/me/completed-exams", response_model=CompletedExamsResponse)
async def completed_exams(
    user_id: str = Depends(require_user_id),
    submission_service: SubmissionService = Depends(get_submission_service_dep)
):
    """Exams the current user has submitted at least once"""
    exam_ids = await submission_service.completed_exam_ids(user_id)
    return CompletedExamsResponse(user_id=user_id, exam_ids=exam_ids)


@app.get("/users/me/submissions", response_model=List[SubmissionSummary])
async def my_submissions(
    user_id: str = Depends(require_user_id),
    submission_service: SubmissionService = Depends(get_submission_service_dep),
    review_service: ReviewService = Depends(get_review_service_dep)
):
    """
    The current user's submissions, newest first.

    ``reviewable`` tells whether the review window is still open.
    """
    records = await submission_service.list_submissions(user_id)
    return [
        SubmissionSummary.from_record(
            record,
            review_expires_at=review_service.review_expires_at(record),
            reviewable=not review_service.is_expired(record)
        )
        for record in records
    ]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "exam_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
