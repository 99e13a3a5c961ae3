"""
Tests for the repositories.

Exam loading, append-only submission storage and the best-effort logs.
"""

import json
import pytest
from pathlib import Path

from exam_grading import build_submission_record

from exam_api.core.errors import (
    ExamNotFoundError,
    PersistenceError,
    SubmissionNotFoundError,
    ValidationError,
)
from exam_api.models import UserAttempt
from exam_api.repositories import FileSystemExamRepository, SettingsAccessGate


@pytest.mark.asyncio
async def test_get_json_exam(exam_repository):
    """Test loading an exam stored as JSON"""
    exam = await exam_repository.get("mock-1")

    assert exam.title == "Mock Test 1"
    assert exam.question_count == 3
    assert [o.id for o in exam.find_question("Q3").options] == ["opt-tri", "opt-cir", "opt-sq"]


@pytest.mark.asyncio
async def test_get_yaml_exam(exam_repository):
    """Test loading an exam stored as YAML with snake_case fields"""
    exam = await exam_repository.get("premium-1")

    assert exam.is_premium
    assert exam.find_question("P1").correct_answer == "B"


@pytest.mark.asyncio
async def test_get_exam_not_found(exam_repository):
    with pytest.raises(ExamNotFoundError):
        await exam_repository.get("nonexistent")


@pytest.mark.asyncio
async def test_exam_id_cannot_escape_directory(exam_repository):
    with pytest.raises(ExamNotFoundError):
        await exam_repository.get("../exams/mock-1")


@pytest.mark.asyncio
async def test_exam_cache(exam_repository, exams_dir):
    """Test that parsed exams are cached"""
    first = await exam_repository.get("mock-1")
    (exams_dir / "mock-1.json").unlink()

    assert await exam_repository.get("mock-1") is first


@pytest.mark.asyncio
async def test_list_exams_skips_broken_files(exam_repository, exams_dir):
    (exams_dir / "broken.json").write_text("{not json")
    (exams_dir / "notes.txt").write_text("ignored")

    exams = await exam_repository.list()

    assert sorted(e.id for e in exams) == ["mock-1", "premium-1"]


@pytest.mark.asyncio
async def test_malformed_exam_raises_validation_error(tmp_path: Path):
    (tmp_path / "bad.json").write_text(json.dumps({"sections": [{"id": "s"}]}))
    repository = FileSystemExamRepository(tmp_path)

    with pytest.raises(ValidationError):
        await repository.get("bad")


@pytest.mark.asyncio
async def test_exists(exam_repository):
    assert await exam_repository.exists("premium-1")
    assert not await exam_repository.exists("nonexistent")


@pytest.mark.asyncio
async def test_save_and_get_submission(exam_repository, submission_repository):
    exam = await exam_repository.get("mock-1")
    record = build_submission_record(exam, {"Q1": "11"}, 42, user_id="u1")

    submission_id = await submission_repository.save(record)
    stored = await submission_repository.get(submission_id)

    assert stored.id == submission_id
    assert stored.total_marks == record.total_marks
    assert stored.student_answers == record.student_answers


@pytest.mark.asyncio
async def test_saves_are_append_only(exam_repository, submission_repository):
    exam = await exam_repository.get("mock-1")
    record = build_submission_record(exam, {}, 0)

    first = await submission_repository.save(record)
    second = await submission_repository.save(record)

    assert first != second
    assert len(list(submission_repository.submissions_dir.glob("*.json"))) == 2


@pytest.mark.asyncio
async def test_save_failure_raises_persistence_error(exam_repository, submission_repository):
    exam = await exam_repository.get("mock-1")
    record = build_submission_record(exam, {}, 0)
    submission_repository.submissions_dir = submission_repository.submissions_dir / "missing"

    with pytest.raises(PersistenceError):
        await submission_repository.save(record)


@pytest.mark.asyncio
async def test_get_submission_not_found(submission_repository):
    with pytest.raises(SubmissionNotFoundError):
        await submission_repository.get("nonexistent")


@pytest.mark.asyncio
async def test_list_submissions_for_user(exam_repository, submission_repository):
    exam = await exam_repository.get("mock-1")
    await submission_repository.save(build_submission_record(exam, {}, 0, user_id="u1"))
    await submission_repository.save(build_submission_record(exam, {}, 0, user_id="u2"))

    records = await submission_repository.list_for_user("u1")

    assert [r.user_id for r in records] == ["u1"]


@pytest.mark.asyncio
async def test_corrupt_submission_raises_persistence_error(submission_repository):
    (submission_repository.submissions_dir / "broken.json").write_text("{not json")

    with pytest.raises(PersistenceError):
        await submission_repository.get("broken")


@pytest.mark.asyncio
async def test_non_object_submission_raises_persistence_error(submission_repository):
    (submission_repository.submissions_dir / "listed.json").write_text("[]")

    with pytest.raises(PersistenceError):
        await submission_repository.get("listed")


@pytest.mark.asyncio
async def test_list_submissions_skips_unreadable_documents(exam_repository, submission_repository):
    exam = await exam_repository.get("mock-1")
    submission_id = await submission_repository.save(build_submission_record(exam, {}, 0, user_id="u1"))
    (submission_repository.submissions_dir / "broken.json").write_text("{not json")

    records = await submission_repository.list_for_user("u1")

    assert [r.id for r in records] == [submission_id]


@pytest.mark.asyncio
async def test_attempt_log(attempt_repository):
    attempt = UserAttempt(
        user_id="u1",
        paper_id="mock-1",
        responses={"Q1": "11"},
        time_spent=30,
        score=4,
        max_score=12,
        accuracy=100,
    )

    await attempt_repository.record_attempt(attempt)
    await attempt_repository.record_attempt(attempt.model_copy(update={"user_id": "u2"}))

    attempts = await attempt_repository.list_for_user("u1")
    assert len(attempts) == 1
    assert attempts[0].responses == {"Q1": "11"}


@pytest.mark.asyncio
async def test_completion_log_upserts(completion_repository):
    first = await completion_repository.mark_completed("u1", "mock-1")
    again = await completion_repository.mark_completed("u1", "mock-1")
    await completion_repository.mark_completed("u1", "premium-1")
    await completion_repository.mark_completed("u2", "mock-1")

    assert again.completed_at == first.completed_at
    assert await completion_repository.completed_exam_ids("u1") == ["mock-1", "premium-1"]


@pytest.mark.asyncio
async def test_access_gate():
    gate = SettingsAccessGate(["vip"])

    assert await gate.is_premium_unlocked("vip")
    assert not await gate.is_premium_unlocked("someone")
    assert not await gate.is_premium_unlocked(None)
