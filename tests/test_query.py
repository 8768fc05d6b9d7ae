"""Tests for filter specs, query plans and paginated search."""

from __future__ import annotations

import math
from datetime import datetime

import pytest  # type: ignore

from jobmatch.search.query import (
    MAX_PAGE_SIZE,
    FilterSpec,
    build_filter,
    build_sort,
    search_jobs,
)


def _ids(jobs):
    return [job.id for job in jobs]


def test_default_search_returns_active_jobs_newest_first(jobs) -> None:
    page = search_jobs(jobs, FilterSpec())
    assert _ids(page.jobs) == ["j2", "j3", "j1", "j6", "j5"]
    assert page.total == 5
    assert page.pages == 1


def test_include_inactive_for_admin_callers(jobs) -> None:
    page = search_jobs(jobs, FilterSpec(include_inactive=True))
    assert page.total == 6
    assert page.jobs[0].id == "j4"


def test_free_text_matches_title_description_or_company(jobs) -> None:
    assert _ids(search_jobs(jobs, FilterSpec(search="mongodb")).jobs) == ["j3"]
    assert _ids(search_jobs(jobs, FilterSpec(search="ACME")).jobs) == ["j1"]


def test_free_text_can_include_location(jobs) -> None:
    assert search_jobs(jobs, FilterSpec(search="berlin")).total == 0
    assert _ids(search_jobs(jobs, FilterSpec(search="berlin", search_location=True)).jobs) == ["j3", "j5"]


def test_search_term_is_not_a_regex(jobs, make_job) -> None:
    odd = make_job(title="C++ (Senior) Developer")
    assert _ids(search_jobs(jobs + [odd], FilterSpec(search="c++ (senior")).jobs) == [odd.id]
    assert search_jobs(jobs, FilterSpec(search=".*")).total == 0


def test_structured_filters(jobs) -> None:
    assert _ids(search_jobs(jobs, FilterSpec(location="berlin")).jobs) == ["j3", "j5"]
    assert _ids(search_jobs(jobs, FilterSpec(experience_level="lead")).jobs) == ["j6"]
    assert _ids(search_jobs(jobs, FilterSpec(skills=("docker", "python"))).jobs) == ["j1"]
    assert _ids(search_jobs(jobs, FilterSpec(max_salary=70000)).jobs) == ["j2", "j6"]


def test_exclude_job_type_combines_with_job_type(jobs) -> None:
    assert "j1" not in _ids(search_jobs(jobs, FilterSpec(exclude_job_type="remote")).jobs)
    assert search_jobs(jobs, FilterSpec(job_type="remote", exclude_job_type="remote")).total == 0


def test_min_salary_zero_still_excludes_jobs_without_salary(jobs) -> None:
    ids = _ids(search_jobs(jobs, FilterSpec(min_salary=0)).jobs)
    assert "j5" not in ids
    assert len(ids) == 4


def test_date_filters(jobs) -> None:
    spec = FilterSpec(start_date=datetime(2024, 5, 1), end_date=datetime(2024, 5, 2, 23, 59))
    assert _ids(search_jobs(jobs, spec).jobs) == ["j3", "j1"]
    spec = FilterSpec(deadline_after=datetime(2024, 6, 15))
    assert _ids(search_jobs(jobs, spec).jobs) == ["j1"]


@pytest.mark.parametrize("sort_by", ["newest", "oldest", "salaryHigh", "salaryLow", "titleAsc", "viewsHigh"])
def test_pages_are_disjoint_and_cover_the_result(jobs, sort_by: str) -> None:
    seen = []
    first = search_jobs(jobs, FilterSpec(sort_by=sort_by, page_size=2))
    assert first.pages == math.ceil(first.total / 2)
    for number in range(1, first.pages + 1):
        seen.extend(_ids(search_jobs(jobs, FilterSpec(sort_by=sort_by, page=number, page_size=2)).jobs))
    assert len(seen) == len(set(seen)) == first.total


def test_page_past_the_end_is_empty(jobs) -> None:
    page = search_jobs(jobs, FilterSpec(page=9, page_size=2))
    assert page.jobs == []
    assert page.total == 5
    assert page.pages == 3


def test_sort_orders(jobs) -> None:
    assert _ids(search_jobs(jobs, FilterSpec(sort_by="oldest")).jobs) == ["j5", "j6", "j1", "j3", "j2"]
    # Missing salary sorts lowest
    assert _ids(search_jobs(jobs, FilterSpec(sort_by="salaryHigh")).jobs)[-1] == "j5"
    assert _ids(search_jobs(jobs, FilterSpec(sort_by="titleAsc")).jobs)[0] == "j3"
    assert _ids(search_jobs(jobs, FilterSpec(sort_by="viewsHigh")).jobs)[0] == "j2"


def test_unknown_sort_falls_back_to_newest() -> None:
    assert build_sort("bogus") == build_sort("newest") == (("created_at", -1), ("id", 1))


def test_equal_sort_keys_break_ties_by_id(make_job) -> None:
    same_day = "2024-03-01T00:00:00"
    batch = [make_job(_id=i, createdAt=same_day) for i in ("c", "a", "b")]
    assert _ids(search_jobs(batch, FilterSpec()).jobs) == ["a", "b", "c"]


class TestFromParams:
    def test_invalid_values_are_dropped(self) -> None:
        spec = FilterSpec.from_params(
            {
                "jobType": "freelance",
                "experienceLevel": "guru",
                "minSalary": "lots",
                "maxSalary": "nan",
                "startDate": "yesterday",
                "sortBy": "",
            }
        )
        assert spec.job_type is None
        assert spec.experience_level is None
        assert spec.min_salary is None
        assert spec.max_salary is None
        assert spec.start_date is None
        assert spec.sort_by == "newest"

    @pytest.mark.parametrize("value", ["nan", "inf", "-Infinity", "1e400"])
    def test_non_finite_salaries_are_dropped(self, value: str) -> None:
        spec = FilterSpec.from_params({"minSalary": value, "maxSalary": value})
        assert spec.min_salary is None
        assert spec.max_salary is None

    def test_pagination_is_clamped(self) -> None:
        assert FilterSpec.from_params({"page": "0", "limit": "500"}).page_size == MAX_PAGE_SIZE
        assert FilterSpec.from_params({"page": "-3"}).page == 1
        assert FilterSpec.from_params({"limit": "abc"}).page_size == 10

    def test_values_are_parsed(self) -> None:
        spec = FilterSpec.from_params(
            {
                "search": "  python ",
                "jobType": "remote",
                "skills": "python, docker",
                "minSalary": "50000",
                "startDate": "2024-05-01T00:00:00Z",
                "page": "2",
                "limit": "5",
            }
        )
        assert spec.search == "python"
        assert spec.job_type == "remote"
        assert spec.skills == ("python", "docker")
        assert spec.min_salary == 50000.0
        assert spec.start_date == datetime(2024, 5, 1)
        assert (spec.page, spec.page_size) == (2, 5)


def test_plan_renders_document_query() -> None:
    plan = build_filter(FilterSpec(search="a.b", job_type="remote", min_salary=5, max_salary=10, page=3, page_size=4))
    rendered = plan.to_mongo()
    query = rendered["filter"]
    assert query["isActive"] is True
    assert query["jobType"] == "remote"
    assert query["$or"][0] == {"title": {"$regex": r"a\.b", "$options": "i"}}
    assert query["salary.min"] == {"$gte": 5}
    assert query["salary.max"] == {"$lte": 10}
    assert rendered["sort"] == {"createdAt": -1, "_id": 1}
    assert (rendered["skip"], rendered["limit"]) == (8, 4)


def test_plan_merges_range_conditions_on_one_field() -> None:
    query = build_filter(FilterSpec(job_type="remote", exclude_job_type="contract",
                                    start_date=datetime(2024, 1, 1), end_date=datetime(2024, 2, 1))).to_mongo()["filter"]
    assert query["$and"][0]["createdAt"] == {"$gte": datetime(2024, 1, 1), "$lte": datetime(2024, 2, 1)}
    assert {"jobType": {"$ne": "contract"}} in query["$and"][1:]
