"""
Application exceptions and error handling.

Defines custom exceptions and error handlers for consistent error responses.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from .logging import get_logger

logger = get_logger(__name__)


# Custom Exceptions

class ExamServiceError(Exception):
    """Base exception for exam service errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ExamNotFoundError(ExamServiceError):
    """Raised when an exam is not found"""

    def __init__(self, exam_id: str):
        super().__init__(
            message=f"Exam '{exam_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"exam_id": exam_id}
        )


class SubmissionNotFoundError(ExamServiceError):
    """Raised when a submission record is not found"""

    def __init__(self, submission_id: str):
        super().__init__(
            message=f"Submission '{submission_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"submission_id": submission_id}
        )


class PersistenceError(ExamServiceError):
    """
    Raised when the submission store cannot be written or read.

    The attempt must not be treated as submitted until a write succeeds.
    """

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Failed to {operation}: {error}",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"operation": operation, "error": error}
        )


class ExamLockedError(ExamServiceError):
    """Raised when a premium exam is requested without premium access"""

    def __init__(self, exam_id: str):
        super().__init__(
            message=f"Exam '{exam_id}' requires premium access",
            status_code=status.HTTP_403_FORBIDDEN,
            details={"exam_id": exam_id}
        )


class ReviewExpiredError(ExamServiceError):
    """Raised when a submission is older than the review window"""

    def __init__(self, submission_id: str, validity_hours: int):
        super().__init__(
            message=f"Review for submission '{submission_id}' expired after {validity_hours} hours",
            status_code=status.HTTP_410_GONE,
            details={"submission_id": submission_id, "validity_hours": validity_hours}
        )


class GradingError(ExamServiceError):
    """Raised when grading an exam fails unexpectedly"""

    def __init__(self, exam_id: str, error: str):
        super().__init__(
            message=f"Failed to grade exam '{exam_id}': {error}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"exam_id": exam_id, "error": error}
        )


class ValidationError(ExamServiceError):
    """Raised for validation errors"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details
        )


class AuthenticationError(ExamServiceError):
    """Raised when no authenticated identity accompanies a request"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED
        )


# Error Response Models

def create_error_response(
    error: Exception,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    include_details: bool = True
) -> JSONResponse:
    """Create standardized error response"""

    error_data = {
        "error": {
            "type": error.__class__.__name__,
            "message": str(error),
        }
    }

    if isinstance(error, ExamServiceError) and include_details:
        error_data["error"]["details"] = error.details

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Error occurred: {error}",
        extra_data={
            "error_type": error.__class__.__name__,
            "status_code": status_code,
            **(error.details if isinstance(error, ExamServiceError) else {})
        },
        exc_info=status_code >= 500
    )

    return JSONResponse(
        status_code=status_code,
        content=error_data
    )


# Exception Handlers

async def exam_service_error_handler(request: Request, exc: ExamServiceError) -> JSONResponse:
    """Handle ExamServiceError exceptions"""
    return create_error_response(exc, exc.status_code)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "type": "HTTPException",
                "message": exc.detail,
            }
        }
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors"""
    logger.warning(
        "Validation error",
        extra_data={"errors": exc.errors()}
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "type": "ValidationError",
                "message": "Request validation failed",
                "details": jsonable_encoder(exc.errors())
            }
        }
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors"""
    logger.exception(
        "Unexpected error occurred",
        extra_data={"path": request.url.path}
    )

    # Don't expose internal errors in production
    from .config import settings
    include_details = settings.DEBUG

    message = str(exc) if include_details else "An internal error occurred"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "type": "InternalServerError",
                "message": message,
            }
        }
    )


# Register all error handlers
def register_error_handlers(app):
    """Register error handlers with FastAPI app"""
    app.add_exception_handler(ExamServiceError, exam_service_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
