"""
Pytest configuration and fixtures.

Provides temp-dir repositories, a sample exam bank and an API client wired to
them through dependency overrides.
"""

import json
import pytest
from pathlib import Path
from typing import Iterator

import yaml
from fastapi.testclient import TestClient

from exam_api.main import (
    app,
    get_exam_repository_dep,
    get_submission_repository_dep,
    get_attempt_repository_dep,
    get_completion_repository_dep,
    get_access_gate_dep,
)
from exam_api.repositories import (
    FileSystemExamRepository,
    FileSystemSubmissionRepository,
    FileSystemAttemptRepository,
    FileSystemCompletionRepository,
    SettingsAccessGate,
)


PREMIUM_USER = "premium-user"

SAMPLE_EXAM = {
    "id": "mock-1",
    "title": "Mock Test 1",
    "year": 2024,
    "examType": "UCEED",
    "durationMinutes": 120,
    "isPremium": False,
    "sections": [
        {
            "id": "part-a",
            "name": "Part A",
            "questions": [
                {
                    "id": "Q1",
                    "type": "NAT",
                    "text": "Estimate the length of the pencil in cm",
                    "marks": 4,
                    "negativeMarks": 0,
                    "correctAnswer": "10-12",
                    "category": "Numeracy",
                },
                {
                    "id": "Q2",
                    "type": "MCQ",
                    "text": "Pick a primary colour",
                    "marks": 4,
                    "negativeMarks": 1,
                    "correctAnswer": "A or C",
                    "options": ["red", "green", "blue", "white"],
                    "category": "Visual",
                },
            ],
        },
        {
            "id": "part-b",
            "name": "Part B",
            "questions": [
                {
                    "id": "Q3",
                    "type": "MSQ",
                    "text": "Which are polygons?",
                    "marks": 4,
                    "negativeMarks": 1,
                    "correctAnswer": ["A", "C"],
                    "optionDetails": [
                        {"id": "opt-tri", "type": "text", "text": "triangle", "isCorrect": True},
                        {"id": "opt-cir", "type": "text", "text": "circle", "isCorrect": False},
                        {"id": "opt-sq", "type": "text", "text": "square", "isCorrect": True},
                    ],
                },
            ],
        },
    ],
}

PREMIUM_EXAM = {
    "id": "premium-1",
    "title": "Premium Test",
    "is_premium": True,
    "sections": [
        {
            "id": "s1",
            "name": "Only",
            "questions": [
                {"id": "P1", "type": "MCQ", "marks": 2, "correct_answer": "B", "options": ["x", "y"]},
            ],
        },
    ],
}


@pytest.fixture
def exams_dir(tmp_path: Path) -> Path:
    """Exam bank with one JSON and one YAML exam"""
    directory = tmp_path / "exams"
    directory.mkdir()
    (directory / "mock-1.json").write_text(json.dumps(SAMPLE_EXAM))
    (directory / "premium-1.yaml").write_text(yaml.safe_dump(PREMIUM_EXAM))
    return directory


@pytest.fixture
def exam_repository(exams_dir: Path) -> FileSystemExamRepository:
    return FileSystemExamRepository(exams_dir)


@pytest.fixture
def submission_repository(tmp_path: Path) -> FileSystemSubmissionRepository:
    return FileSystemSubmissionRepository(tmp_path / "submissions")


@pytest.fixture
def attempt_repository(tmp_path: Path) -> FileSystemAttemptRepository:
    return FileSystemAttemptRepository(tmp_path / "attempts.jsonl")


@pytest.fixture
def completion_repository(tmp_path: Path) -> FileSystemCompletionRepository:
    return FileSystemCompletionRepository(tmp_path / "completed_exams.json")


@pytest.fixture
def access_gate() -> SettingsAccessGate:
    return SettingsAccessGate([PREMIUM_USER])


@pytest.fixture
def client(
    exam_repository,
    submission_repository,
    attempt_repository,
    completion_repository,
    access_gate,
) -> Iterator[TestClient]:
    """FastAPI test client backed by the temp-dir repositories"""
    app.dependency_overrides[get_exam_repository_dep] = lambda: exam_repository
    app.dependency_overrides[get_submission_repository_dep] = lambda: submission_repository
    app.dependency_overrides[get_attempt_repository_dep] = lambda: attempt_repository
    app.dependency_overrides[get_completion_repository_dep] = lambda: completion_repository
    app.dependency_overrides[get_access_gate_dep] = lambda: access_gate

    yield TestClient(app)

    app.dependency_overrides.clear()
