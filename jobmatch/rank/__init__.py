"""
Ranking subsystem for jobmatch.

* `scorer` – skill match score between a candidate and one job, plus
  the skill-gap explanation built on it.
* `recommend` – ranks, tiers and filters batches of jobs for a
  candidate; trending jobs; applicant ordering.
* `export` – writes ranked matches to CSV.
"""

from .scorer import recommendation, score, skill_gap_analysis  # noqa: F401
from .recommend import (  # noqa: F401
    RankedJob,
    bucket_by_tier,
    personalized_feed,
    rank_applicants,
    rank_jobs,
    recommend_jobs,
    trending,
)
from .export import write_matches_csv  # noqa: F401
