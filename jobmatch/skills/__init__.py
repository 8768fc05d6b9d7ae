"""
Skill vocabulary for jobmatch.

* `tables` – loads the static alias groups, skills dictionary and
  generic-term list from YAML.
* `normalize` – canonicalises raw skill strings into comparable tokens
  and decides skill equivalence.
"""

from .tables import SkillTables, load_tables  # noqa: F401
from .normalize import SkillToken, alias_group, normalize, normalize_all, same_skill  # noqa: F401
