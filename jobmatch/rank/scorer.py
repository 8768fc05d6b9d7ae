"""
Skill match scoring.

Compares the skills extracted from a candidate's résumé with the skills
a job requires and produces a :class:`~jobmatch.schema.MatchResult`:

* every required skill is either *matched* (some candidate skill is the
  same skill, see :mod:`jobmatch.skills.normalize`) or *missing*;
* ``match_percentage`` is the matched share of the required skills,
  rounded half up to an integer;
* candidate skills the job does not ask for, and which are not generic
  filler such as "software" or "it", are *extra* and earn two bonus
  points each, capped at ten;
* the final score is the percentage plus the bonus, capped at 100.

Results are recomputed on every call; nothing here is cached because
both the résumé and the job can change between requests.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..schema import MatchResult
from ..skills import SkillTables, load_tables, normalize

logger = logging.getLogger(__name__)

MAX_BONUS = 10
BONUS_PER_EXTRA = 2
_WORD_START_RE = re.compile(r"(^|[\s.])([a-z])")


def title_case(skill: str) -> str:
    """Capitalise the first letter of every word (and after a dot) for display."""
    return _WORD_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), skill.strip().lower())


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score(
    candidate_skills: Optional[Sequence[str]],
    job_skills: Optional[Sequence[str]],
    tables: Optional[SkillTables] = None,
) -> MatchResult:
    """Score a candidate's skills against a job's required skills.

    Args:
        candidate_skills: Skills from the candidate's résumé.  May be
            empty or ``None``.
        job_skills: Skills required by the job.  Duplicates (including
            alias spellings of one skill) count once.

    Returns:
        A :class:`MatchResult`.  Skill lists are title-cased; matched and
        missing follow the order of ``job_skills``, extra follows the
        order of ``candidate_skills``.
    """
    tables = tables or load_tables()
    job_skills = [s for s in (job_skills or []) if s and s.strip()]
    if not job_skills:
        return MatchResult(
            score=0,
            matched_skills=[],
            missing_skills=[title_case(s) for s in job_skills],
            extra_skills=[],
            match_percentage=0,
            bonus_points=0,
        )

    candidate_tokens = {normalize(s, tables) for s in (candidate_skills or []) if s and s.strip()}

    required: Dict[str, str] = {}
    for skill in job_skills:
        required.setdefault(normalize(skill, tables), skill)

    matched: List[str] = []
    missing: List[str] = []
    for token, skill in required.items():
        if token in candidate_tokens:
            matched.append(title_case(skill))
        else:
            missing.append(title_case(skill))

    extra: List[str] = []
    seen = set()
    for skill in candidate_skills or []:
        if not skill or not skill.strip():
            continue
        token = normalize(skill, tables)
        if token in required or token in seen or token in tables.generic_skills:
            continue
        seen.add(token)
        extra.append(title_case(skill))

    match_percentage = _round_half_up(100 * len(matched) / len(required))
    bonus_points = min(len(extra) * BONUS_PER_EXTRA, MAX_BONUS)
    final_score = min(match_percentage + bonus_points, 100)
    logger.debug(
        "Scored %d/%d required skills (+%d bonus) -> %d",
        len(matched),
        len(required),
        bonus_points,
        final_score,
    )
    return MatchResult(
        score=final_score,
        matched_skills=matched,
        missing_skills=missing,
        extra_skills=extra,
        match_percentage=match_percentage,
        bonus_points=bonus_points,
    )


def recommendation(match_score: int) -> str:
    """One-line advice for a match score."""
    if match_score >= 80:
        return "Excellent match! Highly recommended to apply."
    if match_score >= 60:
        return "Good match. You have most required skills."
    if match_score >= 40:
        return "Fair match. Consider learning missing skills."
    return "Low match. This job may not be the best fit for your current skill set."


@dataclass
class SkillGap:
    """What a candidate has and lacks for one job."""

    current_match: int
    match_percentage: int
    strengths: List[str]
    skills_to_learn: List[str]
    improvement_needed: int
    recommendation: str
    advice: List[str]

    @property
    def skill_gap(self) -> int:
        return len(self.skills_to_learn)

    def to_dict(self) -> Dict[str, object]:
        return {
            "currentMatch": self.current_match,
            "matchPercentage": self.match_percentage,
            "strengths": list(self.strengths),
            "skillsToLearn": list(self.skills_to_learn),
            "skillGap": self.skill_gap,
            "improvementNeeded": self.improvement_needed,
            "recommendation": self.recommendation,
            "advice": list(self.advice),
        }


def _advice(result: MatchResult) -> List[str]:
    missing = ", ".join(result.missing_skills)
    if result.score >= 80:
        return [
            "Excellent match! You have most of the required skills.",
            "Consider applying for this position.",
        ]
    if result.score >= 60:
        return [
            "Good match! You have many of the required skills.",
            f"You might want to learn: {missing}",
        ]
    if result.score >= 40:
        return [
            "Fair match. Consider upskilling in the missing areas.",
            f"Missing skills: {missing}",
        ]
    return [
        "Low match. This job may require significant upskilling.",
        "Consider jobs that better match your current skill set.",
    ]


def skill_gap_analysis(
    candidate_skills: Optional[Sequence[str]],
    job_skills: Optional[Sequence[str]],
    tables: Optional[SkillTables] = None,
) -> SkillGap:
    """Explain a match in terms of strengths and skills still to learn."""
    result = score(candidate_skills, job_skills, tables)
    return SkillGap(
        current_match=result.score,
        match_percentage=result.match_percentage,
        strengths=result.matched_skills,
        skills_to_learn=result.missing_skills,
        improvement_needed=100 - result.score,
        recommendation=recommendation(result.score),
        advice=_advice(result),
    )
