"""Repositories package"""

from .exam_repository import (
    ExamRepositoryInterface,
    FileSystemExamRepository,
    get_exam_repository,
)
from .submission_repository import (
    SubmissionRepositoryInterface,
    FileSystemSubmissionRepository,
    get_submission_repository,
)
from .attempt_repository import (
    AttemptRepositoryInterface,
    FileSystemAttemptRepository,
    get_attempt_repository,
)
from .completion_repository import (
    CompletionRepositoryInterface,
    FileSystemCompletionRepository,
    get_completion_repository,
)
from .access_gate import (
    AccessGateInterface,
    SettingsAccessGate,
    get_access_gate,
)

__all__ = [
    "ExamRepositoryInterface",
    "FileSystemExamRepository",
    "get_exam_repository",
    "SubmissionRepositoryInterface",
    "FileSystemSubmissionRepository",
    "get_submission_repository",
    "AttemptRepositoryInterface",
    "FileSystemAttemptRepository",
    "get_attempt_repository",
    "CompletionRepositoryInterface",
    "FileSystemCompletionRepository",
    "get_completion_repository",
    "AccessGateInterface",
    "SettingsAccessGate",
    "get_access_gate",
]
