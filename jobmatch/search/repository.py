"""
Job repositories.

The matching core never talks to the portal's database directly.  A
repository hands it plain :class:`~jobmatch.schema.Job` records and the
pure functions in :mod:`jobmatch.search` and :mod:`jobmatch.rank` do the
rest.  Two implementations are provided: an in-memory one (tests and
embedding callers) and one backed by a JSON export of the jobs
collection (the command line).
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..schema import Job

logger = logging.getLogger(__name__)


class JobRepository(ABC):
    """Abstract source of job records."""

    @abstractmethod
    def all(self) -> List[Job]:
        """Return every job, active or not."""
        raise NotImplementedError

    def get(self, job_id: str) -> Optional[Job]:
        """Return the job with ``job_id`` or ``None``."""
        for job in self.all():
            if job.id == job_id:
                return job
        return None


class InMemoryJobRepository(JobRepository):
    def __init__(self, jobs: Iterable[Job]) -> None:
        self._jobs = list(jobs)

    def all(self) -> List[Job]:
        return list(self._jobs)


class JsonFileJobRepository(JobRepository):
    """Jobs loaded from a JSON file holding a list of job documents.

    The file is read once, on construction.

    Raises:
        ValueError: If the file is not a JSON list or a document in it is
            malformed.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict) and "jobs" in data:
            data = data["jobs"]
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a list of jobs")
        jobs: List[Job] = []
        for position, document in enumerate(data):
            try:
                jobs.append(Job.from_dict(document))
            except ValueError as exc:
                raise ValueError(f"{path}: job #{position}: {exc}") from exc
        self._jobs = jobs
        logger.info("Loaded %d jobs from %s", len(jobs), path)

    def all(self) -> List[Job]:
        return list(self._jobs)
