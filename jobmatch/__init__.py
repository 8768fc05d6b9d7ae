"""
jobmatch – candidate/job matching and search ranking for a job portal.

The package holds the engineering-heavy core of the portal backend;
registration, HTTP routing and persistence live in the surrounding
application, which hands in validated records and stores what the core
computes.

The high‑level flow is:

1. **resume** – Read an uploaded résumé and extract skills, education,
   experience and a short summary with rule-based pattern matching.
2. **skills** – Canonicalise raw skill strings through a fixed alias
   table so that "JS" and "JavaScript" compare equal.
3. **rank** – Score a candidate's skills against each job's required
   skills, rank and tier the results, explain skill gaps.
4. **search** – Translate search filters into a query plan, page
   through the matching jobs and compute facet statistics over exactly
   the same population.
5. **cli** – Command line entry point wiring the above together over
   JSON job exports.

All core functions are pure and synchronous: they take in-memory
records, return plain dataclasses and share no mutable state.
"""

__version__ = "0.1.0"
