"""
Exam repository for data access.

Implements the Repository pattern for exam definitions. Exams are stored one
per file as JSON or YAML documents named after the exam id.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional
import json

import yaml
from pydantic import ValidationError as PydanticValidationError

from exam_grading import ExamPaper

from ..core.errors import ExamNotFoundError, ValidationError
from ..core.logging import get_logger
from ..core.config import settings

logger = get_logger(__name__)

EXAM_SUFFIXES = (".json", ".yaml", ".yml")


class ExamRepositoryInterface(ABC):
    """Abstract interface for exam repository"""

    @abstractmethod
    async def get(self, exam_id: str) -> ExamPaper:
        """Get exam by ID"""
        pass

    @abstractmethod
    async def list(self) -> List[ExamPaper]:
        """List all exams"""
        pass

    @abstractmethod
    async def exists(self, exam_id: str) -> bool:
        """Check if exam exists"""
        pass


class FileSystemExamRepository(ExamRepositoryInterface):
    """
    File system-based exam repository.

    Looks for ``<exam_id>.json``, ``<exam_id>.yaml`` and ``<exam_id>.yml``
    in that order. Parsed exams are cached for the life of the repository.
    """

    def __init__(self, exams_dir: Optional[Path] = None):
        self.exams_dir = Path(exams_dir or settings.EXAMS_DIR)
        self.exams_dir.mkdir(exist_ok=True, parents=True)

        # Cache for parsed exams
        self._exam_cache: dict[str, ExamPaper] = {}

        logger.info(
            "Initialized FileSystemExamRepository",
            extra_data={"exams_dir": str(self.exams_dir)}
        )

    async def get(self, exam_id: str) -> ExamPaper:
        """Get exam by ID"""

        # Check cache first
        if exam_id in self._exam_cache:
            return self._exam_cache[exam_id]

        exam_file = self._find_file(exam_id)

        if exam_file is None:
            logger.warning(
                "Exam not found",
                extra_data={"exam_id": exam_id}
            )
            raise ExamNotFoundError(exam_id)

        exam = self._load_exam(exam_id, exam_file)

        # Cache it
        self._exam_cache[exam_id] = exam

        logger.debug(
            "Exam loaded",
            extra_data={
                "exam_id": exam_id,
                "file": exam_file.name,
                "questions": exam.question_count
            }
        )

        return exam

    async def list(self) -> List[ExamPaper]:
        """List all exams"""

        exams = []
        seen = set()

        for exam_file in sorted(self.exams_dir.iterdir()):
            if exam_file.suffix not in EXAM_SUFFIXES or exam_file.stem in seen:
                continue
            seen.add(exam_file.stem)

            try:
                exams.append(await self.get(exam_file.stem))
            except Exception as e:
                logger.error(
                    "Failed to load exam",
                    extra_data={
                        "exam_id": exam_file.stem,
                        "error": str(e)
                    }
                )
                continue

        logger.info(
            "Listed exams",
            extra_data={"count": len(exams)}
        )

        return exams

    async def exists(self, exam_id: str) -> bool:
        """Check if exam exists"""
        return self._find_file(exam_id) is not None

    def _find_file(self, exam_id: str) -> Optional[Path]:
        # Exam ids never address anything outside the exams directory
        if not exam_id or Path(exam_id).name != exam_id:
            return None
        for suffix in EXAM_SUFFIXES:
            candidate = self.exams_dir / f"{exam_id}{suffix}"
            if candidate.exists():
                return candidate
        return None

    def _load_exam(self, exam_id: str, exam_file: Path) -> ExamPaper:
        """Parse an exam document"""

        text = exam_file.read_text(encoding="utf-8")
        try:
            if exam_file.suffix == ".json":
                data: Any = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValidationError(f"Exam '{exam_id}' is not valid {exam_file.suffix[1:]}: {e}")

        if not isinstance(data, dict):
            raise ValidationError(f"Exam '{exam_id}' must be a mapping")

        data.setdefault("id", exam_id)

        try:
            return ExamPaper.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Exam '{exam_id}' is malformed: {e.error_count()} errors")


# Singleton instance
_exam_repository: Optional[FileSystemExamRepository] = None


def get_exam_repository() -> FileSystemExamRepository:
    """Get exam repository instance (singleton)"""
    global _exam_repository

    if _exam_repository is None:
        _exam_repository = FileSystemExamRepository()

    return _exam_repository
