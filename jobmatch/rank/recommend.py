"""
Recommendation and ranking.

Composes the scorer with the search filters to answer the candidate
facing questions: which jobs fit me best (:func:`rank_jobs`,
:func:`recommend_jobs`), how do they split into high/medium/low matches
(:func:`bucket_by_tier`, :func:`personalized_feed`) and what is popular
right now (:func:`trending`).  Employers get :func:`rank_applicants`.

Callers pass in a bounded batch of jobs; everything here is a pure
function of its arguments.  Sorting is stable throughout, so when the
input batch is newest-first, equal scores stay newest-first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..schema import Application, Job, MatchResult
from ..search.query import FilterSpec, build_filter, build_sort, sort_jobs
from ..skills import SkillTables, load_tables
from .scorer import score

logger = logging.getLogger(__name__)

HIGH_MATCH = 70
MEDIUM_MATCH = 40


@dataclass
class RankedJob:
    job: Job
    match: MatchResult

    @property
    def score(self) -> int:
        return self.match.score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job": self.job.to_dict(),
            "matchScore": self.match.score,
            "matchDetails": self.match.to_dict(),
        }


def rank_jobs(
    candidate_skills: Sequence[str],
    jobs: Iterable[Job],
    min_score: int = 0,
    limit: Optional[int] = None,
    tables: Optional[SkillTables] = None,
) -> List[RankedJob]:
    """Score every job and order the results best first.

    Args:
        candidate_skills: The candidate's skills.
        jobs: Jobs to rank, newest first.
        min_score: Results scoring below this are dropped.
        limit: Maximum number of results; ``None`` keeps all.

    Returns:
        Ranked jobs by descending score; ties keep input order.
    """
    tables = tables or load_tables()
    scored = [RankedJob(job, score(candidate_skills, job.skills_required, tables)) for job in jobs]
    kept = [r for r in scored if r.score >= min_score]
    kept.sort(key=lambda r: r.score, reverse=True)
    if limit is not None:
        kept = kept[:max(limit, 0)]
    logger.debug("Ranked %d jobs, %d scored >= %d", len(scored), len(kept), min_score)
    return kept


@dataclass
class Tier:
    count: int
    jobs: List[RankedJob]

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "jobs": [r.to_dict() for r in self.jobs]}


@dataclass
class TierBuckets:
    high: Tier
    medium: Tier
    low: Tier

    def to_dict(self) -> Dict[str, Any]:
        return {
            "highMatch": self.high.to_dict(),
            "mediumMatch": self.medium.to_dict(),
            "lowMatch": self.low.to_dict(),
        }


def tier_of(match_score: int) -> str:
    if match_score >= HIGH_MATCH:
        return "high"
    if match_score >= MEDIUM_MATCH:
        return "medium"
    return "low"


def bucket_by_tier(ranked: Iterable[RankedJob], display_count: int = 5) -> TierBuckets:
    """Split scored jobs into high (≥70), medium (40–69) and low (<40).

    Each tier lists at most ``display_count`` jobs while ``count`` is the
    full size of the tier.
    """
    groups: Dict[str, List[RankedJob]] = {"high": [], "medium": [], "low": []}
    for item in ranked:
        groups[tier_of(item.score)].append(item)
    shown = max(display_count, 0)
    return TierBuckets(**{name: Tier(len(items), items[:shown]) for name, items in groups.items()})


TRENDING_FIELDS = {"views": "views_count", "applications": "applicants_count"}


def trending(jobs: Iterable[Job], by: str = "views", limit: int = 10) -> List[Job]:
    """Active jobs ordered by popularity, most popular first.

    ``by`` is ``"views"`` or ``"applications"``; anything else means views.
    """
    field_name = TRENDING_FIELDS.get(by, TRENDING_FIELDS["views"])
    active = [job for job in jobs if job.is_active]
    active.sort(key=lambda job: getattr(job, field_name), reverse=True)
    return active[:max(limit, 0)]


@dataclass
class Recommendations:
    jobs: List[RankedJob]
    total_available: int
    filters_applied: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": len(self.jobs),
            "totalAvailable": self.total_available,
            "jobs": [r.to_dict() for r in self.jobs],
            "filtersApplied": dict(self.filters_applied),
        }


def recommend_jobs(
    candidate_skills: Sequence[str],
    jobs: Iterable[Job],
    *,
    location: Optional[str] = None,
    job_type: Optional[str] = None,
    experience_level: Optional[str] = None,
    min_score: int = 30,
    limit: int = 10,
    batch_size: int = 100,
    tables: Optional[SkillTables] = None,
) -> Recommendations:
    """Recommend active jobs for a candidate.

    The newest ``batch_size`` jobs passing the location, job type and
    experience filters are scored; ``total_available`` counts those at or
    above ``min_score`` before ``limit`` is applied.
    """
    spec = FilterSpec(location=location, job_type=job_type, experience_level=experience_level)
    batch = build_filter(spec).apply(jobs)[:batch_size]
    qualifying = rank_jobs(candidate_skills, batch, min_score=min_score, tables=tables)
    logger.info(
        "Recommending %d of %d qualifying jobs (batch of %d)",
        min(limit, len(qualifying)),
        len(qualifying),
        len(batch),
    )
    return Recommendations(
        jobs=qualifying[:max(limit, 0)],
        total_available=len(qualifying),
        filters_applied={
            "minMatchScore": min_score,
            "location": location or "All",
            "jobType": job_type or "All",
            "experienceLevel": experience_level or "All",
        },
    )


@dataclass
class Feed:
    tiers: TierBuckets
    trending: List[Job]
    total_jobs_available: int

    def to_dict(self) -> Dict[str, Any]:
        data = self.tiers.to_dict()
        data["trending"] = {
            "count": len(self.trending),
            "jobs": [job.to_dict() for job in self.trending],
        }
        data["totalJobsAvailable"] = self.total_jobs_available
        return data


def personalized_feed(
    candidate_skills: Sequence[str],
    jobs: Iterable[Job],
    *,
    batch_size: int = 50,
    display_count: int = 5,
    trending_limit: int = 5,
    tables: Optional[SkillTables] = None,
) -> Feed:
    """Tiered matches over the newest active jobs plus a trending list."""
    jobs = list(jobs)
    batch = build_filter(FilterSpec()).apply(jobs)[:batch_size]
    tiers = bucket_by_tier(rank_jobs(candidate_skills, batch, tables=tables), display_count)
    logger.info(
        "Feed: %d high, %d medium, %d low matches over %d jobs",
        tiers.high.count,
        tiers.medium.count,
        tiers.low.count,
        len(batch),
    )
    return Feed(
        tiers=tiers,
        trending=trending(jobs, "views", trending_limit),
        total_jobs_available=len(batch),
    )


def rank_applicants(applications: Iterable[Application]) -> List[Application]:
    """Order applications by match score, then newest application first."""
    ordered = list(applications)
    ordered.sort(key=lambda app: app.applied_at or datetime.min, reverse=True)
    ordered.sort(key=lambda app: app.match_score, reverse=True)
    return ordered


def newest_first(jobs: Iterable[Job]) -> List[Job]:
    return sort_jobs(jobs, build_sort("newest"))
