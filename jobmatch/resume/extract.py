"""
Rule-based résumé field extraction.

Given the plain text of a résumé, pull out the four fields the portal
stores on the résumé record: skills, education, experience and a short
summary.  This is deliberately simple pattern matching rather than
language understanding.  Each field is produced by an ordered pipeline
of independent checks over lines (education, experience) or sentences
(summary); no state is carried from one line to the next, so the same
text always yields the same fields and each rule can be tested on its
own.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Iterable, List, Optional

from ..schema import ExtractedResumeFields, ResumeRecord
from ..skills import SkillTables, load_tables

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Professional profile extracted from resume."

# ── Shared cleaning ──────────────────────────────────────────────────────

_BULLET_RE = re.compile(r"[|•▪●◦*]+\s*|(?:^|\s)[-–—]+(?=\s|$)\s*")
_URL_RE = re.compile(r"https?://\S+|www\.\S+", re.IGNORECASE)
_EMAIL_RE = re.compile(r"\S+@\S+")
_SPACE_RE = re.compile(r"\s+")
_YEAR_RANGE_RE = re.compile(r"\b((?:19|20)\d{2})\s*[-–—]\s*((?:19|20)\d{2})\b")


def clean_line(line: str) -> str:
    """Strip bullet markers, URLs and emails and collapse whitespace."""
    cleaned = _URL_RE.sub(" ", line)
    cleaned = _EMAIL_RE.sub(" ", cleaned)
    cleaned = _BULLET_RE.sub(" ", cleaned)
    cleaned = _SPACE_RE.sub(" ", cleaned)
    return cleaned.strip(" ,;:")


def _lines(text: str, min_len: int, max_len: int) -> List[str]:
    stripped = (line.strip() for line in text.splitlines())
    return [line for line in stripped if min_len < len(line) < max_len]


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


# ── Skills ───────────────────────────────────────────────────────────────


def extract_skills(text: str, tables: Optional[SkillTables] = None) -> List[str]:
    """Return dictionary skills that occur anywhere in ``text``.

    Matching is case-insensitive substring containment.  Hits are
    returned in category order, then dictionary order.
    """
    tables = tables or load_tables()
    lowered = text.lower()
    hits: List[str] = []
    for category in tables.extract_categories:
        for skill in tables.dictionary[category]:
            if skill in lowered:
                hits.append(skill)
    return _unique(hits)


# ── Education ────────────────────────────────────────────────────────────

_UNIVERSITY_FRAGMENTS = r"fast-nuces|nust|lums|comsats|giki|uet|mit|iit|ucla|nyu"

_DEGREE_PATTERNS = [
    re.compile(r"\bbachelor|\bundergraduate|\b(?:b\.?s\.?c?|b\.?c\.?s|b\.?tech|b\.?a)(?!\w)", re.IGNORECASE),
    re.compile(r"\bmaster|\bgraduate\b|\b(?:m\.?s\.?c?|m\.?c\.?s|m\.?tech|mba)(?!\w)", re.IGNORECASE),
    re.compile(r"\bph\.?d(?!\w)|\bdoctorate", re.IGNORECASE),
    re.compile(r"\bassociate|\bdiploma|\bcertification", re.IGNORECASE),
    re.compile(rf"\b(?:{_UNIVERSITY_FRAGMENTS})\b", re.IGNORECASE),
]
_EDUCATION_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_INSTITUTION_RE = re.compile(
    rf"university|college|institute|school|academy|\b(?:{_UNIVERSITY_FRAGMENTS})\b",
    re.IGNORECASE,
)


def is_education_line(line: str) -> bool:
    """A degree keyword plus either a year or an institution keyword."""
    has_degree = any(p.search(line) for p in _DEGREE_PATTERNS)
    if not has_degree:
        return False
    return bool(_EDUCATION_YEAR_RE.search(line) or _INSTITUTION_RE.search(line))


def clean_education_line(line: str) -> str:
    """Clean an education line, keeping its year range in parentheses."""
    years = _YEAR_RANGE_RE.search(line)
    cleaned = clean_line(_YEAR_RANGE_RE.sub(" ", line))
    if years:
        cleaned = f"{cleaned} ({years.group(1)}-{years.group(2)})"
    return cleaned


def extract_education(text: str) -> List[str]:
    entries = (
        clean_education_line(line)
        for line in _lines(text, 5, 100)
        if is_education_line(line)
    )
    return _unique(e for e in entries if len(e) > 10)


# ── Experience ───────────────────────────────────────────────────────────

_TITLE_RE = re.compile(
    r"\b(?:developer|engineer|programmer|software|frontend|backend|full[-\s]?stack"
    r"|intern|trainee|researcher|analyst|qa|tester|sde|sse|lead|manager|architect"
    r"|consultant|designer|scientist)\b",
    re.IGNORECASE,
)
_DATE_RE = re.compile(
    r"\b(?:20\d{2}|jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\b",
    re.IGNORECASE,
)
# Matched as plain substrings: "TechCorp" and "Incorporated" count.
COMPANY_INDICATORS = (
    "inc", "llc", "ltd", "corp", "gmbh", "technologies", "solutions", "systems", "labs",
    "google", "microsoft", "amazon", "facebook", "meta", "apple", "netflix",
    "pakistan", "karachi", "lahore", "islamabad", "remote",
)


def is_experience_line(line: str) -> bool:
    """A whole-word job title plus either a date or a company/location hint."""
    if not _TITLE_RE.search(line):
        return False
    lowered = line.lower()
    return bool(_DATE_RE.search(line) or any(ind in lowered for ind in COMPANY_INDICATORS))


def extract_experience(text: str) -> List[str]:
    entries = (
        clean_line(line)
        for line in _lines(text, 15, 120)
        if is_experience_line(line)
    )
    return _unique(e for e in entries if len(e) > 20)


# ── Summary ──────────────────────────────────────────────────────────────

_PROFILE_LINK_RE = re.compile(r"(?:linkedin|github)\.com\S*", re.IGNORECASE)
_PHONE_RE = re.compile(
    r"\(\+\d{1,3}\)\s*\d{3}[-\s]?\d{4,}"
    r"|\+?\d{1,3}[\s.-]?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}"
    r"|\(\d{3}\)\s*\d{3}[\s.-]?\d{4}"
    r"|\b\d{3}[\s.-]\d{3}[\s.-]\d{4}\b"
)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_YEARISH_RE = re.compile(r"\d{4}")
_CONTACT_WORDS = ("phone", "email", "linkedin", "github")
STRENGTH_KEYWORDS = (
    "passionate",
    "experienced",
    "skilled",
    "specialized",
    "expert",
    "professional",
    "developer",
    "engineer",
)


def _strip_contact(text: str) -> str:
    cleaned = _EMAIL_RE.sub(" ", text)
    cleaned = _URL_RE.sub(" ", cleaned)
    cleaned = _PROFILE_LINK_RE.sub(" ", cleaned)
    cleaned = _PHONE_RE.sub(" ", cleaned)
    cleaned = _BULLET_RE.sub(" ", cleaned)
    return _SPACE_RE.sub(" ", cleaned).strip()


def is_summary_sentence(sentence: str) -> bool:
    lowered = sentence.lower()
    if len(sentence) <= 30:
        return False
    if any(word in lowered for word in _CONTACT_WORDS):
        return False
    return not _YEARISH_RE.search(sentence)


def strength(sentence: str) -> int:
    lowered = sentence.lower()
    return sum(1 for kw in STRENGTH_KEYWORDS if kw in lowered)


def generate_summary(text: str, max_sentences: int = 3) -> str:
    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(_strip_contact(text))]
    candidates = [s for s in sentences if is_summary_sentence(s)]
    # sorted() is stable: equal strengths keep document order
    ranked = sorted(candidates, key=strength, reverse=True)
    chosen = _unique(ranked)[:max_sentences]
    if not chosen:
        return FALLBACK_SUMMARY
    return ". ".join(chosen) + "."


# ── Public API ───────────────────────────────────────────────────────────


def extract(text: Optional[str], tables: Optional[SkillTables] = None) -> ExtractedResumeFields:
    """Extract skills, education, experience and a summary from résumé text."""
    text = text or ""
    fields = ExtractedResumeFields(
        skills=extract_skills(text, tables),
        education=extract_education(text),
        experience=extract_experience(text),
        summary=generate_summary(text),
    )
    logger.debug(
        "Extracted %d skills, %d education and %d experience entries",
        len(fields.skills),
        len(fields.education),
        len(fields.experience),
    )
    return fields


def analyze_resume(resume: ResumeRecord, tables: Optional[SkillTables] = None) -> ResumeRecord:
    """Return a copy of ``resume`` with every extracted field replaced.

    Earlier extraction results are discarded, never merged.
    """
    fields = extract(resume.extracted_text, tables)
    return dataclasses.replace(
        resume,
        skills=fields.skills,
        education=fields.education,
        experience=fields.experience,
        summary=fields.summary,
    )
