"""Tests for ranking, recommendations, the job feed and similar jobs."""

from __future__ import annotations

import unittest
from datetime import datetime

from jobmatch.rank.recommend import (
    bucket_by_tier,
    newest_first,
    personalized_feed,
    rank_applicants,
    rank_jobs,
    recommend_jobs,
    tier_of,
    trending,
)
from jobmatch.schema import Application, Job
from jobmatch.search.similar import similar_jobs

CANDIDATE = ["JavaScript", "MongoDB", "React", "Node"]


def _ids(items):
    return [getattr(item, "job", item).id for item in items]


def test_rank_orders_by_score_and_applies_min_score(jobs) -> None:
    ranked = rank_jobs(CANDIDATE, newest_first(jobs), min_score=30)
    scores = [r.score for r in ranked]
    assert scores == sorted(scores, reverse=True)
    assert all(s >= 30 for s in scores)
    assert _ids(ranked)[:2] == ["j2", "j3"]


def test_rank_limit_and_zero_limit(jobs) -> None:
    assert len(rank_jobs(CANDIDATE, jobs, limit=2)) == 2
    assert rank_jobs(CANDIDATE, jobs, limit=0) == []


def test_equal_scores_keep_input_order(make_job) -> None:
    batch = [make_job(skillsRequired=["python"]) for _ in range(3)]
    assert _ids(rank_jobs(["python"], batch)) == [job.id for job in batch]
    assert _ids(rank_jobs(["python"], list(reversed(batch)))) == [job.id for job in reversed(batch)]


def test_tiers_count_everything_but_show_a_few(make_job) -> None:
    batch = [make_job(skillsRequired=["python"]) for _ in range(7)]
    batch += [make_job(skillsRequired=["python", "go"]), make_job(skillsRequired=["rust"])]
    tiers = bucket_by_tier(rank_jobs(["python"], batch), display_count=5)
    assert tiers.high.count == 7
    assert len(tiers.high.jobs) == 5
    assert tiers.medium.count == 1
    assert tiers.low.count == 1
    assert set(tiers.to_dict()) == {"highMatch", "mediumMatch", "lowMatch"}


def test_tier_boundaries() -> None:
    assert tier_of(70) == "high"
    assert tier_of(69) == "medium"
    assert tier_of(40) == "medium"
    assert tier_of(39) == "low"


class TestRecommendJobs(unittest.TestCase):
    def setUp(self) -> None:
        self.jobs = [
            Job.from_dict({"_id": "a", "title": "Node dev", "jobType": "remote", "location": "Remote",
                           "skillsRequired": ["node.js", "mongodb"], "createdAt": "2024-01-03"}),
            Job.from_dict({"_id": "b", "title": "Frontend", "jobType": "full-time", "location": "Berlin",
                           "skillsRequired": ["react", "javascript"], "createdAt": "2024-01-02"}),
            Job.from_dict({"_id": "c", "title": "Data", "jobType": "remote", "location": "Remote",
                           "skillsRequired": ["python", "sql"], "createdAt": "2024-01-01"}),
            Job.from_dict({"_id": "d", "title": "Old node", "jobType": "remote", "location": "Remote",
                           "skillsRequired": ["node"], "isActive": False, "createdAt": "2024-01-04"}),
        ]

    def test_filters_and_threshold(self) -> None:
        result = recommend_jobs(CANDIDATE, self.jobs, job_type="remote", min_score=30)
        self.assertEqual(_ids(result.jobs), ["a"])
        self.assertEqual(result.total_available, 1)
        self.assertEqual(result.filters_applied["jobType"], "remote")
        self.assertEqual(result.filters_applied["location"], "All")

    def test_total_available_ignores_limit(self) -> None:
        result = recommend_jobs(CANDIDATE, self.jobs, min_score=30, limit=1)
        self.assertEqual(len(result.jobs), 1)
        self.assertEqual(result.total_available, 2)
        self.assertEqual(result.to_dict()["results"], 1)

    def test_batch_size_caps_scored_jobs(self) -> None:
        result = recommend_jobs(CANDIDATE, self.jobs, min_score=0, batch_size=1)
        self.assertEqual(_ids(result.jobs), ["a"])


def test_personalized_feed(jobs) -> None:
    feed = personalized_feed(CANDIDATE, jobs, display_count=1, trending_limit=2)
    assert feed.total_jobs_available == 5
    assert feed.tiers.high.count + feed.tiers.medium.count + feed.tiers.low.count == 5
    assert len(feed.tiers.low.jobs) == 1
    assert [job.id for job in feed.trending] == ["j2", "j3"]
    assert feed.to_dict()["trending"]["count"] == 2


def test_trending_skips_inactive_jobs(jobs) -> None:
    assert [job.id for job in trending(jobs, "views", 3)] == ["j2", "j3", "j1"]
    assert [job.id for job in trending(jobs, "applications", 2)] == ["j2", "j3"]
    assert trending(jobs, "unknown", 1)[0].id == "j2"


def test_similar_jobs(jobs, make_job) -> None:
    reference = jobs[0]
    twin = make_job(jobType="remote", location="Remote", skillsRequired=["Docker"])
    elsewhere = make_job(jobType="remote", location="Remote (EU)", skillsRequired=["python"])
    unrelated = make_job(jobType="remote", location="Remote", skillsRequired=["cobol"])
    pool = jobs + [twin, elsewhere, unrelated]
    assert [job.id for job in similar_jobs(reference, pool)] == [twin.id]
    loose = similar_jobs(reference, pool, exact_location=False)
    assert [job.id for job in loose] == [elsewhere.id, twin.id]
    assert similar_jobs(reference, pool, limit=0) == []


def test_rank_applicants_by_score_then_newest() -> None:
    apps = [
        Application(id="1", job_id="j", job_seeker_id="u1", match_score=50, applied_at=datetime(2024, 1, 1)),
        Application(id="2", job_id="j", job_seeker_id="u2", match_score=80, applied_at=datetime(2024, 1, 1)),
        Application(id="3", job_id="j", job_seeker_id="u3", match_score=50, applied_at=datetime(2024, 1, 5)),
    ]
    assert [app.id for app in rank_applicants(apps)] == ["2", "3", "1"]
