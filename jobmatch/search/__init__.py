"""
Search subsystem for jobmatch.

* `query` – turns a `FilterSpec` into a `QueryPlan` (conditions, sort
  order, page window) and runs paginated searches.
* `facets` – statistics over the same filtered population.
* `similar` – the stricter "similar jobs" lookup.
* `repository` – thin sources of job records.
"""

from .query import FilterSpec, QueryPlan, build_filter, build_sort, search_jobs  # noqa: F401
from .facets import compute_facets, skill_suggestions  # noqa: F401
from .similar import similar_jobs  # noqa: F401
from .repository import InMemoryJobRepository, JobRepository, JsonFileJobRepository  # noqa: F401
