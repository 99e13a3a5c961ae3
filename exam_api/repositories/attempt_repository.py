"""
Attempt log repository.

Legacy per-user analytics: one JSON line per finished attempt, appended to a
single file.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
import json

from ..models.domain import UserAttempt
from ..core.logging import get_logger
from ..core.config import settings

logger = get_logger(__name__)


class AttemptRepositoryInterface(ABC):
    """Abstract interface for the attempt log"""

    @abstractmethod
    async def record_attempt(self, attempt: UserAttempt) -> None:
        """Append one attempt"""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[UserAttempt]:
        """Attempts of one user in insertion order"""
        pass


class FileSystemAttemptRepository(AttemptRepositoryInterface):
    """JSON Lines attempt log"""

    def __init__(self, attempts_file: Optional[Path] = None):
        self.attempts_file = Path(attempts_file or settings.ATTEMPTS_FILE)
        self.attempts_file.parent.mkdir(exist_ok=True, parents=True)

        logger.info(
            "Initialized FileSystemAttemptRepository",
            extra_data={"attempts_file": str(self.attempts_file)}
        )

    async def record_attempt(self, attempt: UserAttempt) -> None:
        """Append one attempt; OSError propagates to the caller"""
        with self.attempts_file.open("a", encoding="utf-8") as fh:
            fh.write(attempt.model_dump_json() + "\n")

        logger.debug(
            "Attempt recorded",
            extra_data={"user_id": attempt.user_id, "paper_id": attempt.paper_id}
        )

    async def list_for_user(self, user_id: str) -> List[UserAttempt]:
        if not self.attempts_file.exists():
            return []

        attempts = []
        with self.attempts_file.open(encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                attempt = UserAttempt.model_validate(json.loads(line))
                if attempt.user_id == user_id:
                    attempts.append(attempt)
        return attempts


# Singleton instance
_attempt_repository: Optional[FileSystemAttemptRepository] = None


def get_attempt_repository() -> FileSystemAttemptRepository:
    """Get attempt repository instance (singleton)"""
    global _attempt_repository

    if _attempt_repository is None:
        _attempt_repository = FileSystemAttemptRepository()

    return _attempt_repository
