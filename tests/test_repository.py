"""Tests for the job repositories."""

from __future__ import annotations

import json
from pathlib import Path

import pytest  # type: ignore

from jobmatch.search.repository import InMemoryJobRepository, JsonFileJobRepository


def test_in_memory_repository(jobs) -> None:
    repo = InMemoryJobRepository(jobs)
    assert len(repo.all()) == 6
    assert repo.get("j3").title == "Backend Node Developer"
    assert repo.get("missing") is None
    # Callers get a copy, not the backing list
    repo.all().clear()
    assert len(repo.all()) == 6


def test_json_file_accepts_wrapped_list(tmp_path: Path, job_documents) -> None:
    path = tmp_path / "export.json"
    path.write_text(json.dumps({"jobs": job_documents}), encoding="utf-8")
    repo = JsonFileJobRepository(str(path))
    assert [job.id for job in repo.all()] == ["j1", "j2", "j3", "j4", "j5", "j6"]


def test_json_file_rejects_non_list(tmp_path: Path) -> None:
    path = tmp_path / "export.json"
    path.write_text(json.dumps({"title": "not a list"}), encoding="utf-8")
    with pytest.raises(ValueError):
        JsonFileJobRepository(str(path))


def test_json_file_reports_bad_document_position(tmp_path: Path, job_documents) -> None:
    job_documents[1]["jobType"] = "freelance"
    path = tmp_path / "export.json"
    path.write_text(json.dumps(job_documents), encoding="utf-8")
    with pytest.raises(ValueError, match="job #1"):
        JsonFileJobRepository(str(path))
