"""
Records exchanged with the job-portal collaborators.

The portal's document store holds jobs, resumes and applications as
camelCase JSON documents.  These dataclasses are the in-memory form the
matching core works on; ``from_dict`` accepts the stored document shape
(``skillsRequired``, ``jobType``, ``_id``...) and ``to_dict`` renders
derived values back into the JSON shape the API layer serialises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

JOB_TYPES: Tuple[str, ...] = ("full-time", "part-time", "contract", "internship", "remote")
EXPERIENCE_LEVELS: Tuple[str, ...] = ("entry", "mid", "senior", "lead")


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO‑8601 string (or pass through a datetime).

    Aware values are converted to UTC and made naive so that every date
    in the core compares against every other.

    Raises:
        ValueError: If ``value`` is not a datetime or ISO‑8601 string.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Invalid date: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _number(value: Any, name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number") from None
    return int(number) if number.is_integer() else number


def _flag(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"{name} must be true or false")


def _string_list(value: Any, name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    items: List[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValueError(f"All {name} entries must be non-empty strings")
        items.append(item.strip())
    return items


@dataclass
class Salary:
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Salary":
        if not data:
            return cls()
        return cls(
            min=_number(data.get("min"), "salary.min"),
            max=_number(data.get("max"), "salary.max"),
            currency=data.get("currency") or "USD",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "currency": self.currency}


@dataclass
class Job:
    """A job posting together with its required-skill set."""

    id: str
    title: str
    company: str = ""
    location: str = ""
    description: str = ""
    job_type: str = "full-time"
    experience_level: str = "mid"
    salary: Salary = field(default_factory=Salary)
    skills_required: List[str] = field(default_factory=list)
    responsibilities: List[str] = field(default_factory=list)
    qualifications: List[str] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)
    application_deadline: Optional[datetime] = None
    is_active: bool = True
    employer_id: Optional[str] = None
    applicants_count: int = 0
    views_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Job":
        """Build a job from a stored document.

        Raises:
            ValueError: If the document is malformed (missing title,
                unknown job type or experience level, non-numeric salary, an
                ``isActive`` that is not a boolean or "true"/"false",
                blank skill entries or unparsable dates).
        """
        title = _pick(data, "title", default="")
        if not isinstance(title, str) or not title.strip():
            raise ValueError("Job title is required")
        job_type = _pick(data, "jobType", "job_type", default="full-time")
        if job_type not in JOB_TYPES:
            raise ValueError(f"Invalid job type: {job_type!r}")
        level = _pick(data, "experienceLevel", "experience_level", default="mid")
        if level not in EXPERIENCE_LEVELS:
            raise ValueError(f"Invalid experience level: {level!r}")
        skills = _string_list(_pick(data, "skillsRequired", "skills_required"), "skill")
        return cls(
            id=str(_pick(data, "id", "_id", default="")),
            title=title.strip(),
            company=str(_pick(data, "company", default="")).strip(),
            location=str(_pick(data, "location", default="")).strip(),
            description=str(_pick(data, "description", default="")),
            job_type=job_type,
            experience_level=level,
            salary=Salary.from_dict(_pick(data, "salary")),
            skills_required=[s.lower() for s in skills],
            responsibilities=_string_list(_pick(data, "responsibilities"), "responsibility"),
            qualifications=_string_list(_pick(data, "qualifications"), "qualification"),
            benefits=_string_list(_pick(data, "benefits"), "benefit"),
            application_deadline=parse_datetime(_pick(data, "applicationDeadline", "application_deadline")),
            is_active=_flag(_pick(data, "isActive", "is_active", default=True), "isActive"),
            employer_id=_pick(data, "employerId", "employer_id"),
            applicants_count=int(_number(_pick(data, "applicantsCount", "applicants_count", default=0), "applicantsCount") or 0),
            views_count=int(_number(_pick(data, "viewsCount", "views_count", default=0), "viewsCount") or 0),
            created_at=parse_datetime(_pick(data, "createdAt", "created_at")),
            updated_at=parse_datetime(_pick(data, "updatedAt", "updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "description": self.description,
            "jobType": self.job_type,
            "experienceLevel": self.experience_level,
            "salary": self.salary.to_dict(),
            "skillsRequired": list(self.skills_required),
            "responsibilities": list(self.responsibilities),
            "qualifications": list(self.qualifications),
            "benefits": list(self.benefits),
            "applicationDeadline": _format_datetime(self.application_deadline),
            "isActive": self.is_active,
            "employerId": self.employer_id,
            "applicantsCount": self.applicants_count,
            "viewsCount": self.views_count,
            "createdAt": _format_datetime(self.created_at),
            "updatedAt": _format_datetime(self.updated_at),
        }


@dataclass
class ResumeRecord:
    """One user's resume: the raw text plus the last extraction."""

    user_id: str
    extracted_text: str
    skills: List[str] = field(default_factory=list)
    education: List[str] = field(default_factory=list)
    experience: List[str] = field(default_factory=list)
    summary: str = ""
    original_name: str = ""
    uploaded_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResumeRecord":
        return cls(
            user_id=str(_pick(data, "userId", "user_id", default="")),
            extracted_text=str(_pick(data, "extractedText", "extracted_text", default="")),
            skills=list(_pick(data, "skills", default=[])),
            education=list(_pick(data, "education", default=[])),
            experience=list(_pick(data, "experience", default=[])),
            summary=str(_pick(data, "summary", default="")),
            original_name=str(_pick(data, "originalName", "original_name", default="")),
            uploaded_at=parse_datetime(_pick(data, "uploadedAt", "uploaded_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "originalName": self.original_name,
            "uploadedAt": _format_datetime(self.uploaded_at),
            "extractedText": self.extracted_text,
            "skills": list(self.skills),
            "education": list(self.education),
            "experience": list(self.experience),
            "summary": self.summary,
        }


@dataclass
class Application:
    id: str
    job_id: str
    job_seeker_id: str
    match_score: int = 0
    status: str = "pending"
    applied_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Application":
        return cls(
            id=str(_pick(data, "id", "_id", default="")),
            job_id=str(_pick(data, "jobId", "job_id", default="")),
            job_seeker_id=str(_pick(data, "jobSeekerId", "job_seeker_id", default="")),
            match_score=int(_number(_pick(data, "matchScore", "match_score", default=0), "matchScore") or 0),
            status=str(_pick(data, "status", default="pending")),
            applied_at=parse_datetime(_pick(data, "appliedAt", "applied_at")),
        )


@dataclass
class MatchResult:
    """Scored comparison of a candidate's skills with a job's skills."""

    score: int
    matched_skills: List[str]
    missing_skills: List[str]
    extra_skills: List[str]
    match_percentage: int
    bonus_points: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "matchedSkills": list(self.matched_skills),
            "missingSkills": list(self.missing_skills),
            "extraSkills": list(self.extra_skills),
            "matchPercentage": self.match_percentage,
            "bonusPoints": self.bonus_points,
        }


@dataclass
class ExtractedResumeFields:
    skills: List[str]
    education: List[str]
    experience: List[str]
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skills": list(self.skills),
            "education": list(self.education),
            "experience": list(self.experience),
            "summary": self.summary,
        }


@dataclass
class SearchPage:
    """One page of search results plus the totals of the whole result set."""

    jobs: List[Job]
    total: int
    page: int
    pages: int
    page_size: int

    @property
    def results(self) -> int:
        return len(self.jobs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": self.results,
            "total": self.total,
            "page": self.page,
            "pages": self.pages,
            "pageSize": self.page_size,
            "jobs": [job.to_dict() for job in self.jobs],
        }


@dataclass
class FacetStats:
    total_jobs: int
    job_type_counts: Dict[str, int]
    experience_level_counts: Dict[str, int]
    top_locations: List[Tuple[str, int]]
    top_skills: List[Tuple[str, int]]
    salary: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalJobs": self.total_jobs,
            "jobTypeCounts": dict(self.job_type_counts),
            "experienceLevelCounts": dict(self.experience_level_counts),
            "topLocations": [{"location": loc, "count": n} for loc, n in self.top_locations],
            "topSkills": [{"skill": skill, "count": n} for skill, n in self.top_skills],
            "salary": dict(self.salary),
        }
