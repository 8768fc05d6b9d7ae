"""Shared fixtures for the jobmatch test-suite.

The job fixtures mirror the stored document shape (camelCase keys) so
that ``Job.from_dict`` is exercised by every test that uses them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest  # type: ignore

from jobmatch.schema import Job

JOB_DOCUMENTS: List[Dict[str, Any]] = [
    {
        "_id": "j1",
        "title": "Python Developer",
        "company": "Acme Technologies",
        "location": "Remote",
        "description": "Build data services in Python.",
        "jobType": "remote",
        "experienceLevel": "mid",
        "salary": {"min": 60000, "max": 90000, "currency": "USD"},
        "skillsRequired": ["Python", "Django", "Docker"],
        "viewsCount": 50,
        "applicantsCount": 3,
        "createdAt": "2024-05-01T09:00:00Z",
        "applicationDeadline": "2024-07-01T00:00:00Z",
    },
    {
        "_id": "j2",
        "title": "Frontend Engineer",
        "company": "Globex",
        "location": "Remote",
        "description": "React single page applications.",
        "jobType": "remote",
        "experienceLevel": "entry",
        "salary": {"min": 40000, "max": 60000},
        "skillsRequired": ["javascript", "react"],
        "viewsCount": 120,
        "applicantsCount": 10,
        "createdAt": "2024-05-03T09:00:00Z",
        "applicationDeadline": "2024-06-01T00:00:00Z",
    },
    {
        "_id": "j3",
        "title": "Backend Node Developer",
        "company": "Initech",
        "location": "Berlin, Germany",
        "description": "APIs with Node and MongoDB.",
        "jobType": "full-time",
        "experienceLevel": "senior",
        "salary": {"min": 70000, "max": 100000},
        "skillsRequired": ["javascript", "node.js", "mongodb", "docker"],
        "viewsCount": 80,
        "applicantsCount": 7,
        "createdAt": "2024-05-02T09:00:00Z",
    },
    {
        "_id": "j4",
        "title": "Closed Python Role",
        "company": "Acme Technologies",
        "location": "Remote",
        "jobType": "remote",
        "experienceLevel": "senior",
        "salary": {"min": 80000, "max": 120000},
        "skillsRequired": ["python"],
        "viewsCount": 500,
        "isActive": False,
        "createdAt": "2024-05-04T09:00:00Z",
    },
    {
        "_id": "j5",
        "title": "Data Analyst",
        "company": "Umbrella",
        "location": "Berlin, Germany",
        "jobType": "part-time",
        "experienceLevel": "entry",
        "skillsRequired": ["sql", "python", "excel"],
        "viewsCount": 10,
        "applicantsCount": 1,
        "createdAt": "2024-04-20T09:00:00Z",
    },
    {
        "_id": "j6",
        "title": "DevOps Contractor",
        "company": "Hooli",
        "location": "Lahore, Pakistan",
        "jobType": "contract",
        "experienceLevel": "lead",
        "salary": {"min": 50000, "max": 70000},
        "skillsRequired": ["docker", "kubernetes", "aws"],
        "viewsCount": 30,
        "applicantsCount": 2,
        "createdAt": "2024-04-25T09:00:00Z",
    },
]


@pytest.fixture
def job_documents() -> List[Dict[str, Any]]:
    return json.loads(json.dumps(JOB_DOCUMENTS))


@pytest.fixture
def jobs(job_documents: List[Dict[str, Any]]) -> List[Job]:
    return [Job.from_dict(doc) for doc in job_documents]


@pytest.fixture
def make_job() -> Callable[..., Job]:
    """Factory for ad-hoc jobs with sensible defaults."""

    counter = {"n": 0}

    def _make(**overrides: Any) -> Job:
        counter["n"] += 1
        document: Dict[str, Any] = {
            "_id": f"job{counter['n']}",
            "title": f"Job {counter['n']}",
            "createdAt": f"2024-01-{counter['n']:02d}T00:00:00",
        }
        document.update(overrides)
        return Job.from_dict(document)

    return _make


@pytest.fixture
def jobs_file(tmp_path: Path, job_documents: List[Dict[str, Any]]) -> Path:
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps(job_documents), encoding="utf-8")
    return path
