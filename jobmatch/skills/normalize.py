"""
Skill normalization.

Raw skill strings come from two places: the dictionary hits of the
resume extractor and the free-form ``skillsRequired`` lists employers
type in.  Before they can be compared they are canonicalised into a
:data:`SkillToken`:

* lower-case and trim the raw string;
* if the result is a known spelling of an alias group (``"js"``,
  ``"ecmascript"``), replace it with the group's canonical key
  (``"javascript"``);
* otherwise the trimmed lower-case string is the token itself.

Two skills are the *same skill* iff their tokens are equal.  Because the
alias groups are disjoint, this is an equivalence relation: symmetric
and transitive by construction, and two different unknown skills are
never equal.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional

from .tables import SkillTables, load_tables

SkillToken = str


def normalize(raw: Optional[str], tables: Optional[SkillTables] = None) -> SkillToken:
    """Return the canonical token for ``raw``.

    Never raises; ``None`` and blank strings normalise to ``""``.
    """
    tables = tables or load_tables()
    key = (raw or "").strip().lower()
    return tables.alias_index.get(key, key)


def same_skill(a: Optional[str], b: Optional[str], tables: Optional[SkillTables] = None) -> bool:
    """Return True if ``a`` and ``b`` name the same skill."""
    return normalize(a, tables) == normalize(b, tables)


def alias_group(raw: Optional[str], tables: Optional[SkillTables] = None) -> Optional[FrozenSet[str]]:
    """Return the spellings of the alias group ``raw`` belongs to, if any."""
    tables = tables or load_tables()
    key = (raw or "").strip().lower()
    canonical = tables.alias_index.get(key)
    if canonical is None:
        return None
    return tables.alias_groups[canonical]


def normalize_all(skills: Optional[Iterable[str]], tables: Optional[SkillTables] = None) -> List[SkillToken]:
    """Normalise a sequence of skills, dropping blanks and duplicates.

    Order of first appearance is kept.
    """
    tables = tables or load_tables()
    tokens: List[SkillToken] = []
    seen = set()
    for raw in skills or []:
        token = normalize(raw, tables)
        if token and token not in seen:
            seen.add(token)
            tokens.append(token)
    return tokens
