"""
Similar-job lookup.

"More jobs like this" is a stricter sibling of the general search: a
candidate must be active, must not be the reference job itself, must
share at least one required skill with it and must have the same job
type.  Location is compared as an exact string by default, unlike the
substring match of the search filter; pass ``exact_location=False`` to
use the search semantics instead.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..schema import Job
from .query import build_sort, sort_jobs

logger = logging.getLogger(__name__)


def is_similar(reference: Job, job: Job, exact_location: bool = True) -> bool:
    if job.id == reference.id or not job.is_active:
        return False
    if job.job_type != reference.job_type:
        return False
    if exact_location:
        if job.location != reference.location:
            return False
    elif reference.location.lower() not in job.location.lower():
        return False
    reference_skills = {s.lower() for s in reference.skills_required}
    return any(s.lower() in reference_skills for s in job.skills_required)


def similar_jobs(reference: Job, jobs: Iterable[Job], limit: int = 5, exact_location: bool = True) -> List[Job]:
    """Newest jobs similar to ``reference``, at most ``limit`` of them."""
    candidates = [job for job in jobs if is_similar(reference, job, exact_location)]
    result = sort_jobs(candidates, build_sort("newest"))[:max(limit, 0)]
    logger.debug("Found %d similar jobs for %s", len(candidates), reference.id)
    return result
