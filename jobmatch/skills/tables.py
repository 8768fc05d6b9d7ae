"""
Static skill tables.

The alias groups, the skills dictionary and the list of generic terms
are shipped as ``jobmatch/data/skills.yaml`` and read once per process.
Everything returned from here is immutable so the tables can be shared
freely between concurrent callers.

A different table file can be supplied through the ``skills.tables``
configuration key (see :mod:`jobmatch.config`); :func:`load_tables`
caches one :class:`SkillTables` per path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

DEFAULT_TABLES = "skills.yaml"


@dataclass(frozen=True)
class SkillTables:
    """Read-only view of the skill tables.

    Attributes:
        alias_groups: Canonical key -> frozenset of spellings (canonical
            key included).
        alias_index: Spelling -> canonical key, the reverse of
            ``alias_groups``.
        dictionary: Category -> tuple of dictionary skills.
        extract_categories: Categories scanned by the resume extractor,
            in scan order.
        generic_skills: Terms that never count as a relevant extra skill.
    """

    alias_groups: Mapping[str, FrozenSet[str]]
    alias_index: Mapping[str, str]
    dictionary: Mapping[str, Tuple[str, ...]]
    extract_categories: Tuple[str, ...]
    generic_skills: FrozenSet[str]


def _clean(value: object) -> str:
    return str(value).strip().lower()


def _build_alias_tables(raw: Mapping[str, object]) -> Tuple[Dict[str, FrozenSet[str]], Dict[str, str]]:
    groups: Dict[str, FrozenSet[str]] = {}
    index: Dict[str, str] = {}
    for key, spellings in raw.items():
        canonical = _clean(key)
        members = {canonical}
        members.update(_clean(s) for s in (spellings or []))
        for spelling in members:
            owner = index.get(spelling)
            if owner is not None and owner != canonical:
                raise ValueError(
                    f"Skill alias {spelling!r} belongs to both {owner!r} and {canonical!r}"
                )
            index[spelling] = canonical
        groups[canonical] = frozenset(members)
    return groups, index


def parse_tables(data: Mapping[str, object]) -> SkillTables:
    """Validate a decoded YAML document and freeze it into :class:`SkillTables`.

    Raises:
        ValueError: If the document is not a mapping, a category listed in
            ``extract_categories`` does not exist, or two alias groups
            share a spelling.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Skill tables must be a mapping")
    groups, index = _build_alias_tables(data.get("alias_groups") or {})
    dictionary = {
        str(category): tuple(_clean(s) for s in (skills or []))
        for category, skills in (data.get("dictionary") or {}).items()
    }
    categories = tuple(str(c) for c in (data.get("extract_categories") or dictionary.keys()))
    unknown = [c for c in categories if c not in dictionary]
    if unknown:
        raise ValueError(f"Unknown skill categories: {', '.join(unknown)}")
    generic = frozenset(_clean(s) for s in (data.get("generic_skills") or []))
    return SkillTables(
        alias_groups=MappingProxyType(groups),
        alias_index=MappingProxyType(index),
        dictionary=MappingProxyType(dictionary),
        extract_categories=categories,
        generic_skills=generic,
    )


@lru_cache(maxsize=None)
def load_tables(path: Optional[str] = None) -> SkillTables:
    """Load and cache the skill tables.

    Args:
        path: Optional path to a YAML file with the same layout as the
            bundled ``skills.yaml``.  ``None`` loads the bundled file.

    Returns:
        The frozen tables.
    """
    if path is None:
        text = resources.files("jobmatch.data").joinpath(DEFAULT_TABLES).read_text(encoding="utf-8")
        source = DEFAULT_TABLES
    else:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        source = path
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse skill tables {source}: {exc}") from exc
    tables = parse_tables(data)
    logger.debug(
        "Loaded skill tables from %s: %d alias groups, %d categories",
        source,
        len(tables.alias_groups),
        len(tables.dictionary),
    )
    return tables
