"""Tests for facet statistics and skill suggestions."""

from __future__ import annotations

import pytest  # type: ignore

from jobmatch.search.facets import compute_facets, skill_suggestions, top_skills
from jobmatch.search.query import FilterSpec, search_jobs


def test_remote_with_minimum_salary(jobs) -> None:
    spec = FilterSpec(job_type="remote", min_salary=50000)
    page = search_jobs(jobs, spec)
    assert [job.id for job in page.jobs] == ["j1"]
    assert all(job.is_active and job.job_type == "remote" and job.salary.min >= 50000 for job in page.jobs)
    stats = compute_facets(jobs, spec)
    assert stats.job_type_counts == {"remote": page.total}
    assert stats.total_jobs == page.total


@pytest.mark.parametrize(
    "spec",
    [
        FilterSpec(),
        FilterSpec(location="berlin"),
        FilterSpec(skills=("docker",)),
        FilterSpec(exclude_job_type="remote", page=3, page_size=1),
        FilterSpec(search="nothing matches this"),
    ],
)
def test_facet_counts_sum_to_total(jobs, spec: FilterSpec) -> None:
    stats = compute_facets(jobs, spec)
    assert sum(stats.job_type_counts.values()) == stats.total_jobs
    assert sum(stats.experience_level_counts.values()) == stats.total_jobs
    assert stats.total_jobs == search_jobs(jobs, spec).total


def test_facets_ignore_pagination(jobs) -> None:
    assert compute_facets(jobs, FilterSpec(page=4, page_size=1)).total_jobs == 5


def test_locations_and_salary(jobs) -> None:
    stats = compute_facets(jobs, FilterSpec())
    assert stats.top_locations[0] == ("Remote", 2)
    assert ("Berlin, Germany", 2) in stats.top_locations
    assert stats.salary == {"min": 40000, "max": 100000, "avg": 55000.0}


def test_empty_population_has_zero_salary(jobs) -> None:
    stats = compute_facets(jobs, FilterSpec(search="nothing matches this"))
    assert stats.total_jobs == 0
    assert stats.salary == {"min": 0, "max": 0, "avg": 0}
    assert stats.top_skills == []


def test_top_skills_count_each_job_once(make_job) -> None:
    batch = [
        make_job(skillsRequired=["python", "python", "sql"]),
        make_job(skillsRequired=["python"]),
    ]
    assert top_skills(batch) == [("python", 2), ("sql", 1)]


def test_skill_suggestions_respect_filters(jobs) -> None:
    suggestions = dict(skill_suggestions(jobs, FilterSpec(location="berlin")))
    assert suggestions["python"] == 1
    assert suggestions["javascript"] == 1
    assert "kubernetes" not in suggestions


def test_to_dict_shape(jobs) -> None:
    data = compute_facets(jobs, FilterSpec(job_type="remote")).to_dict()
    assert data["totalJobs"] == 2
    assert data["jobTypeCounts"] == {"remote": 2}
    assert data["topLocations"] == [{"location": "Remote", "count": 2}]
    assert {"skill": "python", "count": 1} in data["topSkills"]
