"""
Submission repository.

The durable sink for finished attempts. Records are append-only: each save
writes a new document under a fresh id and an existing document is never
overwritten.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional
from uuid import uuid4
import json

from exam_grading import SubmissionRecord

from ..core.errors import PersistenceError, SubmissionNotFoundError
from ..core.logging import get_logger
from ..core.config import settings

logger = get_logger(__name__)


class SubmissionRepositoryInterface(ABC):
    """Abstract interface for submission repository"""

    @abstractmethod
    async def save(self, record: SubmissionRecord) -> str:
        """Persist a record and return its new id"""
        pass

    @abstractmethod
    async def get(self, submission_id: str) -> SubmissionRecord:
        """Get a stored record by ID"""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[SubmissionRecord]:
        """Stored records of one user, oldest first"""
        pass


class FileSystemSubmissionRepository(SubmissionRepositoryInterface):
    """
    File system-based submission repository.

    One JSON document per submission, named ``<id>.json``.
    """

    def __init__(self, submissions_dir: Optional[Path] = None):
        self.submissions_dir = Path(submissions_dir or settings.SUBMISSIONS_DIR)
        self.submissions_dir.mkdir(exist_ok=True, parents=True)

        logger.info(
            "Initialized FileSystemSubmissionRepository",
            extra_data={"submissions_dir": str(self.submissions_dir)}
        )

    async def save(self, record: SubmissionRecord) -> str:
        """
        Persist a submission record.

        Raises:
            PersistenceError: If the document cannot be written
        """
        submission_id = uuid4().hex
        stored = record.with_id(submission_id)
        path = self.submissions_dir / f"{submission_id}.json"

        try:
            # "x" refuses to overwrite an existing document
            with path.open("x", encoding="utf-8") as fh:
                json.dump(stored.to_dict(), fh, indent=2)
        except OSError as e:
            logger.error(
                "Failed to save submission",
                extra_data={
                    "exam_id": record.exam_id,
                    "user_id": record.user_id,
                    "error": str(e)
                }
            )
            raise PersistenceError("save submission", str(e))

        logger.info(
            "Submission saved",
            extra_data={
                "submission_id": submission_id,
                "exam_id": record.exam_id,
                "total_marks": record.total_marks
            }
        )

        return submission_id

    async def get(self, submission_id: str) -> SubmissionRecord:
        """Get a stored record by ID"""

        path = self.submissions_dir / f"{submission_id}.json"
        if Path(submission_id).name != submission_id or not path.exists():
            logger.warning(
                "Submission not found",
                extra_data={"submission_id": submission_id}
            )
            raise SubmissionNotFoundError(submission_id)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("submission document is not a JSON object")
            data.setdefault("id", submission_id)
            return SubmissionRecord.from_dict(data)
        except (OSError, ValueError) as e:
            # ValueError covers both bad JSON and records that fail validation
            logger.error(
                "Failed to read submission",
                extra_data={"submission_id": submission_id, "error": str(e)}
            )
            raise PersistenceError("read submission", str(e))

    async def list_for_user(self, user_id: str) -> List[SubmissionRecord]:
        """Stored records of one user, oldest first"""

        records = []
        for path in self.submissions_dir.glob("*.json"):
            try:
                record = await self.get(path.stem)
            except PersistenceError:
                logger.warning(
                    "Skipping unreadable submission",
                    extra_data={"submission_id": path.stem, "user_id": user_id}
                )
                continue
            if record.user_id == user_id:
                records.append(record)

        records.sort(key=lambda r: r.submitted_at)
        return records


# Singleton instance
_submission_repository: Optional[FileSystemSubmissionRepository] = None


def get_submission_repository() -> FileSystemSubmissionRepository:
    """Get submission repository instance (singleton)"""
    global _submission_repository

    if _submission_repository is None:
        _submission_repository = FileSystemSubmissionRepository()

    return _submission_repository
