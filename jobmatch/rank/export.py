"""
CSV export of ranked matches.

Flattens :class:`~jobmatch.rank.recommend.RankedJob` results into one
row per job and writes them with pandas.  Skill lists are joined with
``"; "`` so the file opens cleanly in a spreadsheet.  If the file
already exists it is overwritten.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

import pandas as pd

from .recommend import RankedJob, tier_of

logger = logging.getLogger(__name__)

MATCH_COLUMNS: List[str] = [
    "job_id",
    "title",
    "company",
    "location",
    "job_type",
    "match_score",
    "tier",
    "match_percentage",
    "bonus_points",
    "matched_skills",
    "missing_skills",
    "extra_skills",
]


def matches_frame(ranked: Iterable[RankedJob]) -> pd.DataFrame:
    rows = []
    for item in ranked:
        rows.append(
            {
                "job_id": item.job.id,
                "title": item.job.title,
                "company": item.job.company,
                "location": item.job.location,
                "job_type": item.job.job_type,
                "match_score": item.match.score,
                "tier": tier_of(item.match.score),
                "match_percentage": item.match.match_percentage,
                "bonus_points": item.match.bonus_points,
                "matched_skills": "; ".join(item.match.matched_skills),
                "missing_skills": "; ".join(item.match.missing_skills),
                "extra_skills": "; ".join(item.match.extra_skills),
            }
        )
    return pd.DataFrame(rows, columns=MATCH_COLUMNS)


def write_matches_csv(ranked: Iterable[RankedJob], path: str) -> pd.DataFrame:
    """Write ranked matches to ``path`` and return the written frame."""
    df = matches_frame(ranked)
    df.to_csv(path, index=False)
    logger.info("Wrote %d matches to %s", len(df), path)
    return df


def read_matches_csv(path: str) -> pd.DataFrame:
    return pd.read_csv(path, keep_default_na=False)
