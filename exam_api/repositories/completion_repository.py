"""
Completion log repository.

Tracks which exams a user has submitted at least once, for the "completed"
badges of the exam list. Marking is an upsert keyed by (user, exam).
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
import json

from ..models.domain import CompletedExam
from ..core.logging import get_logger
from ..core.config import settings

logger = get_logger(__name__)


class CompletionRepositoryInterface(ABC):
    """Abstract interface for the completion log"""

    @abstractmethod
    async def mark_completed(self, user_id: str, exam_id: str) -> CompletedExam:
        """Record that a user completed an exam"""
        pass

    @abstractmethod
    async def completed_exam_ids(self, user_id: str) -> List[str]:
        """Exam ids the user has completed, in completion order"""
        pass


class FileSystemCompletionRepository(CompletionRepositoryInterface):
    """Completion log kept as one JSON document"""

    def __init__(self, completions_file: Optional[Path] = None):
        self.completions_file = Path(completions_file or settings.COMPLETIONS_FILE)
        self.completions_file.parent.mkdir(exist_ok=True, parents=True)

        logger.info(
            "Initialized FileSystemCompletionRepository",
            extra_data={"completions_file": str(self.completions_file)}
        )

    async def mark_completed(self, user_id: str, exam_id: str) -> CompletedExam:
        entries = self._load()

        for entry in entries:
            if entry.user_id == user_id and entry.exam_id == exam_id:
                # Keep the first completion time
                return entry

        entry = CompletedExam(user_id=user_id, exam_id=exam_id)
        entries.append(entry)
        self._store(entries)

        logger.debug(
            "Exam marked completed",
            extra_data={"user_id": user_id, "exam_id": exam_id}
        )
        return entry

    async def completed_exam_ids(self, user_id: str) -> List[str]:
        return [entry.exam_id for entry in self._load() if entry.user_id == user_id]

    def _load(self) -> List[CompletedExam]:
        if not self.completions_file.exists():
            return []
        data = json.loads(self.completions_file.read_text(encoding="utf-8") or "[]")
        return [CompletedExam.model_validate(row) for row in data]

    def _store(self, entries: List[CompletedExam]) -> None:
        rows = [entry.model_dump(mode="json") for entry in entries]
        tmp = self.completions_file.with_suffix(".tmp")
        tmp.write_text(json.dumps(rows, indent=2), encoding="utf-8")
        tmp.replace(self.completions_file)


# Singleton instance
_completion_repository: Optional[FileSystemCompletionRepository] = None


def get_completion_repository() -> FileSystemCompletionRepository:
    """Get completion repository instance (singleton)"""
    global _completion_repository

    if _completion_repository is None:
        _completion_repository = FileSystemCompletionRepository()

    return _completion_repository
