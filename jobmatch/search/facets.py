"""
Facet statistics for job searches.

The search page shows counts next to each filter option (how many of the
matching jobs are remote, senior, in Berlin...), the most requested
skills and the salary range of the results.  These figures are computed
from the very same :class:`~jobmatch.search.query.QueryPlan` the search
uses, ignoring only the page window, so a facet never disagrees with the
result count shown beside it.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..schema import FacetStats, Job
from .query import FilterSpec, build_filter

logger = logging.getLogger(__name__)

TOP_LOCATIONS = 10
TOP_SKILLS = 20


def _ranked_counts(values: Iterable[Optional[str]], limit: Optional[int] = None) -> List[Tuple[str, int]]:
    # Counter.most_common keeps first-seen order among equal counts.
    return Counter(values).most_common(limit)


def _salary_stats(jobs: Sequence[Job]) -> Dict[str, float]:
    minimums = [job.salary.min for job in jobs if job.salary.min is not None]
    maximums = [job.salary.max for job in jobs if job.salary.max is not None]
    if not minimums and not maximums:
        return {"min": 0, "max": 0, "avg": 0}
    return {
        "min": min(minimums) if minimums else 0,
        "max": max(maximums) if maximums else 0,
        "avg": round(sum(minimums) / len(minimums), 2) if minimums else 0,
    }


def top_skills(jobs: Iterable[Job], limit: int = TOP_SKILLS) -> List[Tuple[str, int]]:
    """Most frequently required skills; each job counts a skill once."""
    counts: Counter = Counter()
    for job in jobs:
        counts.update(dict.fromkeys(job.skills_required, 1))
    return counts.most_common(limit)


def compute_facets(jobs: Iterable[Job], spec: FilterSpec) -> FacetStats:
    """Aggregate statistics over the jobs matching ``spec``.

    Pagination in ``spec`` is ignored; the statistics describe the full
    filtered population.
    """
    matched = build_filter(spec).apply(jobs)
    stats = FacetStats(
        total_jobs=len(matched),
        job_type_counts=dict(_ranked_counts(job.job_type for job in matched)),
        experience_level_counts=dict(_ranked_counts(job.experience_level for job in matched)),
        top_locations=_ranked_counts((job.location for job in matched), TOP_LOCATIONS),
        top_skills=top_skills(matched),
        salary=_salary_stats(matched),
    )
    logger.debug("Computed facets over %d jobs", stats.total_jobs)
    return stats


def skill_suggestions(jobs: Iterable[Job], spec: FilterSpec, limit: int = TOP_SKILLS) -> List[Tuple[str, int]]:
    """The most requested skills among the jobs matching ``spec``."""
    return top_skills(build_filter(spec).apply(jobs), limit)
