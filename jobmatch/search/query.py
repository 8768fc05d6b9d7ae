"""
Job search filters and query plans.

A search request is captured as an immutable :class:`FilterSpec`.
:func:`build_filter` turns it into a :class:`QueryPlan`: a flat list of
:class:`Condition` objects (all of which must hold), a sort order and a
page window.  The plan can be evaluated directly against in-memory
:class:`~jobmatch.schema.Job` records (:meth:`QueryPlan.apply`) or
rendered as a MongoDB-style query document (:meth:`QueryPlan.to_mongo`)
for a collaborator that pushes the filter down to its document store.
Both forms describe the same filter, so paginated results and the facet
statistics in :mod:`jobmatch.search.facets` always agree.

Text filters use case-insensitive substring semantics; user input is
never interpreted as a regular expression.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..schema import EXPERIENCE_LEVELS, JOB_TYPES, Job, SearchPage, parse_datetime

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
DEFAULT_SORT = "newest"

# Job attribute -> field name in the stored document.
DOCUMENT_FIELDS: Dict[str, str] = {
    "id": "_id",
    "title": "title",
    "description": "description",
    "company": "company",
    "location": "location",
    "job_type": "jobType",
    "experience_level": "experienceLevel",
    "skills_required": "skillsRequired",
    "salary.min": "salary.min",
    "salary.max": "salary.max",
    "created_at": "createdAt",
    "application_deadline": "applicationDeadline",
    "is_active": "isActive",
    "applicants_count": "applicantsCount",
    "views_count": "viewsCount",
}

SORT_OPTIONS: Dict[str, Tuple[Tuple[str, int], ...]] = {
    "newest": (("created_at", -1),),
    "oldest": (("created_at", 1),),
    "salaryHigh": (("salary.max", -1), ("salary.min", -1)),
    "salaryLow": (("salary.min", 1), ("salary.max", 1)),
    "titleAsc": (("title", 1),),
    "titleDesc": (("title", -1),),
    "companyAsc": (("company", 1),),
    "companyDesc": (("company", -1),),
    "applicantsHigh": (("applicants_count", -1),),
    "applicantsLow": (("applicants_count", 1),),
    "viewsHigh": (("views_count", -1),),
    "viewsLow": (("views_count", 1),),
}

TEXT_FIELDS = ("title", "description", "company")


def clamp_page(page: Any) -> int:
    try:
        return max(1, int(page))
    except (TypeError, ValueError):
        return 1


def clamp_page_size(size: Any) -> int:
    try:
        return min(max(1, int(size)), MAX_PAGE_SIZE)
    except (TypeError, ValueError):
        return DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class FilterSpec:
    """Filters, sort key and page window of one search request.

    ``page`` and ``page_size`` are clamped on construction (page ≥ 1,
    1 ≤ page_size ≤ 50).  ``include_inactive`` is reserved for
    administrative callers; ``search_location`` makes the free-text term
    also match the location, as the plain job listing does.
    """

    search: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    exclude_job_type: Optional[str] = None
    skills: Tuple[str, ...] = ()
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    deadline_after: Optional[datetime] = None
    sort_by: str = DEFAULT_SORT
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    include_inactive: bool = False
    search_location: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "skills", tuple(s.strip() for s in self.skills if s and s.strip()))
        object.__setattr__(self, "page", clamp_page(self.page))
        object.__setattr__(self, "page_size", clamp_page_size(self.page_size))

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        *,
        include_inactive: bool = False,
        search_location: bool = False,
    ) -> "FilterSpec":
        """Build a spec from raw request parameters.

        Keys follow the public query string (``search``, ``location``,
        ``jobType``, ``experienceLevel``, ``excludeJobType``, ``skills``,
        ``minSalary``, ``maxSalary``, ``startDate``, ``endDate``,
        ``deadlineAfter``, ``sortBy``, ``page``, ``limit``).  Values that
        cannot be used are dropped rather than rejected.
        """
        return cls(
            search=_text(params.get("search")),
            location=_text(params.get("location")),
            job_type=_choice(params.get("jobType"), JOB_TYPES, "jobType"),
            experience_level=_choice(params.get("experienceLevel"), EXPERIENCE_LEVELS, "experienceLevel"),
            exclude_job_type=_choice(params.get("excludeJobType"), JOB_TYPES, "excludeJobType"),
            skills=tuple(_skills(params.get("skills"))),
            min_salary=_float(params.get("minSalary"), "minSalary"),
            max_salary=_float(params.get("maxSalary"), "maxSalary"),
            start_date=_date(params.get("startDate"), "startDate"),
            end_date=_date(params.get("endDate"), "endDate"),
            deadline_after=_date(params.get("deadlineAfter"), "deadlineAfter"),
            sort_by=_text(params.get("sortBy")) or DEFAULT_SORT,
            page=params.get("page", 1),
            page_size=params.get("limit", params.get("pageSize", DEFAULT_PAGE_SIZE)),
            include_inactive=include_inactive,
            search_location=search_location,
        )


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _text(value: Any) -> Optional[str]:
    value = _first(value)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _choice(value: Any, allowed: Sequence[str], name: str) -> Optional[str]:
    text = _text(value)
    if text is None:
        return None
    if text not in allowed:
        logger.debug("Ignoring unknown %s %r", name, text)
        return None
    return text


def _skills(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(s).strip() for s in value if str(s).strip()]


def _float(value: Any, name: str) -> Optional[float]:
    text = _text(value)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError:
        logger.debug("Ignoring non-numeric %s %r", name, text)
        return None
    if not math.isfinite(number):
        logger.debug("Ignoring non-finite %s %r", name, text)
        return None
    return number


def _date(value: Any, name: str) -> Optional[datetime]:
    value = _first(value)
    try:
        return parse_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring invalid %s %r", name, value)
        return None


# ── Conditions ───────────────────────────────────────────────────────────


def get_field(job: Job, path: str) -> Any:
    """Resolve a dotted attribute path such as ``salary.min``."""
    value: Any = job
    for part in path.split("."):
        value = getattr(value, part, None)
        if value is None:
            return None
    return value


def _contains(haystack: Any, needle: str) -> bool:
    return haystack is not None and needle.lower() in str(haystack).lower()


def _eval_eq(value: Any, expected: Any) -> bool:
    return value == expected


def _eval_ne(value: Any, expected: Any) -> bool:
    return value != expected


def _eval_gte(value: Any, bound: Any) -> bool:
    return value is not None and value >= bound


def _eval_lte(value: Any, bound: Any) -> bool:
    return value is not None and value <= bound


def _eval_contains(value: Any, needle: str) -> bool:
    return _contains(value, needle)


def _eval_contains_all(values: Any, needles: Sequence[str]) -> bool:
    entries = list(values or [])
    return all(any(_contains(entry, needle) for entry in entries) for needle in needles)


_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "eq": _eval_eq,
    "ne": _eval_ne,
    "gte": _eval_gte,
    "lte": _eval_lte,
    "contains": _eval_contains,
    "contains_all": _eval_contains_all,
}


@dataclass(frozen=True)
class Condition:
    """One filter clause.

    ``fields`` holds one attribute path, or several for a free-text
    clause that holds when any of them matches.
    """

    fields: Tuple[str, ...]
    op: str
    value: Any

    def matches(self, job: Job) -> bool:
        evaluate = _OPERATORS[self.op]
        return any(evaluate(get_field(job, path), self.value) for path in self.fields)

    def to_mongo(self) -> Dict[str, Any]:
        clauses = [{DOCUMENT_FIELDS[path]: _mongo_operand(self.op, self.value)} for path in self.fields]
        return clauses[0] if len(clauses) == 1 else {"$or": clauses}


def _regex(text: str) -> Dict[str, str]:
    return {"$regex": re.escape(text), "$options": "i"}


def _mongo_operand(op: str, value: Any) -> Any:
    if op == "eq":
        return value
    if op == "ne":
        return {"$ne": value}
    if op == "gte":
        return {"$gte": value}
    if op == "lte":
        return {"$lte": value}
    if op == "contains":
        return _regex(value)
    if op == "contains_all":
        return {"$all": [_regex(v) for v in value]}
    raise ValueError(f"Unknown operator: {op}")


# ── Query plan ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class QueryPlan:
    conditions: Tuple[Condition, ...]
    sort: Tuple[Tuple[str, int], ...]
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    def matches(self, job: Job) -> bool:
        return all(condition.matches(job) for condition in self.conditions)

    def apply(self, jobs: Iterable[Job]) -> List[Job]:
        """Filter and sort ``jobs``; no pagination."""
        return sort_jobs([job for job in jobs if self.matches(job)], self.sort)

    def paginate(self, jobs: Sequence[Job]) -> List[Job]:
        return list(jobs[self.skip:self.skip + self.limit])

    def to_mongo(self) -> Dict[str, Any]:
        """Render the plan as ``{"filter", "sort", "skip", "limit"}``."""
        query: Dict[str, Any] = {}
        extra: List[Dict[str, Any]] = []
        for condition in self.conditions:
            rendered = condition.to_mongo()
            for key, value in rendered.items():
                if key in query and isinstance(query[key], dict) and isinstance(value, dict):
                    query[key] = {**query[key], **value}
                elif key in query:
                    extra.append({key: value})
                else:
                    query[key] = value
        if extra:
            query = {"$and": [query, *extra]}
        return {
            "filter": query,
            "sort": {DOCUMENT_FIELDS[path]: direction for path, direction in self.sort},
            "skip": self.skip,
            "limit": self.limit,
        }


def build_sort(sort_by: Optional[str]) -> Tuple[Tuple[str, int], ...]:
    """Sort keys for a named order; unknown names fall back to newest.

    The job id is appended as a final key so the order is total and
    consecutive pages never overlap.
    """
    keys = SORT_OPTIONS.get(sort_by or DEFAULT_SORT)
    if keys is None:
        logger.debug("Unknown sort key %r, using %s", sort_by, DEFAULT_SORT)
        keys = SORT_OPTIONS[DEFAULT_SORT]
    return keys + (("id", 1),)


def _sort_value(value: Any) -> Tuple[int, Any]:
    # Missing values sort lowest, like the document store does.
    return (0, 0) if value is None else (1, value)


def sort_jobs(jobs: Iterable[Job], sort: Sequence[Tuple[str, int]]) -> List[Job]:
    ordered = list(jobs)
    for path, direction in reversed(sort):
        ordered.sort(key=lambda job: _sort_value(get_field(job, path)), reverse=direction < 0)
    return ordered


def build_filter(spec: FilterSpec) -> QueryPlan:
    """Translate a :class:`FilterSpec` into a :class:`QueryPlan`."""
    conditions: List[Condition] = []
    if not spec.include_inactive:
        conditions.append(Condition(("is_active",), "eq", True))
    if spec.search:
        fields = TEXT_FIELDS + (("location",) if spec.search_location else ())
        conditions.append(Condition(fields, "contains", spec.search))
    if spec.location:
        conditions.append(Condition(("location",), "contains", spec.location))
    if spec.job_type:
        conditions.append(Condition(("job_type",), "eq", spec.job_type))
    if spec.exclude_job_type:
        conditions.append(Condition(("job_type",), "ne", spec.exclude_job_type))
    if spec.experience_level:
        conditions.append(Condition(("experience_level",), "eq", spec.experience_level))
    if spec.skills:
        conditions.append(Condition(("skills_required",), "contains_all", spec.skills))
    if spec.min_salary is not None:
        conditions.append(Condition(("salary.min",), "gte", spec.min_salary))
    if spec.max_salary is not None:
        conditions.append(Condition(("salary.max",), "lte", spec.max_salary))
    if spec.start_date is not None:
        conditions.append(Condition(("created_at",), "gte", spec.start_date))
    if spec.end_date is not None:
        conditions.append(Condition(("created_at",), "lte", spec.end_date))
    if spec.deadline_after is not None:
        conditions.append(Condition(("application_deadline",), "gte", spec.deadline_after))
    return QueryPlan(
        conditions=tuple(conditions),
        sort=build_sort(spec.sort_by),
        page=spec.page,
        page_size=spec.page_size,
    )


def search_jobs(jobs: Iterable[Job], spec: FilterSpec) -> SearchPage:
    """Run a search and return the requested page.

    ``total`` and ``pages`` describe the whole filtered population, not
    the returned slice.
    """
    plan = build_filter(spec)
    matched = plan.apply(jobs)
    total = len(matched)
    page = SearchPage(
        jobs=plan.paginate(matched),
        total=total,
        page=plan.page,
        pages=math.ceil(total / plan.page_size),
        page_size=plan.page_size,
    )
    logger.debug("Search matched %d jobs, returning page %d/%d", total, page.page, page.pages)
    return page
