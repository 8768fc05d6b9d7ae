"""
Command line interface for jobmatch.

Every subcommand works over a JSON export of the portal's jobs
collection.  ``resume analyze`` turns a résumé file into a résumé JSON
that ``match``, ``feed`` and ``gap`` then read; ``search`` and
``facets`` take the same filter flags as the public job search; and
``report`` prints the CSV written by ``match --out``.  Command handlers
only load inputs and print results; the logic lives in `resume`,
`rank` and `search`.

Structured results are printed to stdout as JSON; ``match`` also writes
a CSV file.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import Settings, load_settings
from .rank.export import read_matches_csv, write_matches_csv
from .rank.recommend import newest_first, personalized_feed, recommend_jobs, trending
from .rank.scorer import skill_gap_analysis
from .resume.parse_resume import analyze_resume_file, load_resume_json, save_resume_json
from .search.facets import compute_facets
from .search.query import FilterSpec, search_jobs
from .search.repository import JsonFileJobRepository
from .search.similar import similar_jobs
from .skills import SkillTables, load_tables

logger = logging.getLogger("jobmatch.cli")


def _emit(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _tables(settings: Settings) -> SkillTables:
    return load_tables(settings.skills_tables)


def _filter_params(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect filter flags into the query-string shape FilterSpec expects."""
    params = {
        "search": args.search,
        "location": args.location,
        "jobType": args.job_type,
        "experienceLevel": args.experience_level,
        "excludeJobType": args.exclude_job_type,
        "skills": args.skills,
        "minSalary": args.min_salary,
        "maxSalary": args.max_salary,
        "startDate": args.start_date,
        "endDate": args.end_date,
        "deadlineAfter": args.deadline_after,
        "sortBy": args.sort,
        "page": args.page,
        "limit": args.limit,
    }
    return {key: value for key, value in params.items() if value is not None}


def _filter_spec(args: argparse.Namespace) -> FilterSpec:
    return FilterSpec.from_params(
        _filter_params(args),
        include_inactive=args.include_inactive,
        search_location=args.listing,
    )


def _require_job(repo: JsonFileJobRepository, job_id: str):
    job = repo.get(job_id)
    if job is None:
        raise ValueError(f"Job not found: {job_id}")
    return job


def cmd_resume_analyze(args: argparse.Namespace, settings: Settings) -> None:
    """Analyse a résumé file and write the extracted fields as JSON."""
    record = analyze_resume_file(args.file, user_id=args.user_id, tables=_tables(settings))
    save_resume_json(record, args.out)
    _emit({k: v for k, v in record.to_dict().items() if k != "extractedText"})


def cmd_match(args: argparse.Namespace, settings: Settings) -> None:
    """Rank jobs for a résumé and write the matches CSV."""
    resume = load_resume_json(args.resume)
    if not resume.skills:
        raise ValueError("The résumé has no skills; run 'resume analyze' first")
    jobs = newest_first(JsonFileJobRepository(args.jobs).all())
    recommendations = recommend_jobs(
        resume.skills,
        jobs,
        location=args.location,
        job_type=args.job_type,
        experience_level=args.experience_level,
        min_score=args.min_score if args.min_score is not None else settings.get("ranking", "min_score", 30),
        limit=args.topk if args.topk is not None else settings.get("ranking", "limit", 10),
        batch_size=settings.get("ranking", "batch_size", 100),
        tables=_tables(settings),
    )
    if not recommendations.jobs:
        logger.warning("No jobs matched the résumé above the minimum score")
    if args.out:
        write_matches_csv(recommendations.jobs, args.out)
    _emit(recommendations.to_dict())


def cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    if args.limit is None:
        args.limit = settings.get("search", "page_size", 10)
    page = search_jobs(JsonFileJobRepository(args.jobs).all(), _filter_spec(args))
    _emit(page.to_dict())


def cmd_facets(args: argparse.Namespace, settings: Settings) -> None:
    stats = compute_facets(JsonFileJobRepository(args.jobs).all(), _filter_spec(args))
    _emit(stats.to_dict())


def cmd_feed(args: argparse.Namespace, settings: Settings) -> None:
    resume = load_resume_json(args.resume)
    jobs = newest_first(JsonFileJobRepository(args.jobs).all())
    feed = personalized_feed(
        resume.skills,
        jobs,
        batch_size=settings.get("ranking", "feed_batch_size", 50),
        display_count=settings.get("ranking", "display_count", 5),
        trending_limit=settings.get("ranking", "trending_limit", 5),
        tables=_tables(settings),
    )
    _emit(feed.to_dict())


def cmd_similar(args: argparse.Namespace, settings: Settings) -> None:
    repo = JsonFileJobRepository(args.jobs)
    reference = _require_job(repo, args.job_id)
    exact = settings.get("search", "exact_similar_location", True) and not args.substring_location
    limit = args.limit if args.limit is not None else settings.get("search", "similar_limit", 5)
    jobs = similar_jobs(reference, repo.all(), limit=limit, exact_location=exact)
    _emit({"results": len(jobs), "referenceJob": reference.id, "jobs": [job.to_dict() for job in jobs]})


def cmd_trending(args: argparse.Namespace, settings: Settings) -> None:
    jobs = trending(JsonFileJobRepository(args.jobs).all(), by=args.by, limit=args.limit)
    _emit({"results": len(jobs), "sortBy": args.by, "jobs": [job.to_dict() for job in jobs]})


def cmd_gap(args: argparse.Namespace, settings: Settings) -> None:
    resume = load_resume_json(args.resume)
    job = _require_job(JsonFileJobRepository(args.jobs), args.job_id)
    gap = skill_gap_analysis(resume.skills, job.skills_required, _tables(settings))
    _emit({"job": {"id": job.id, "title": job.title, "company": job.company}, **gap.to_dict()})


def cmd_report(args: argparse.Namespace, settings: Settings) -> None:
    """Print a simple report from a matches CSV."""
    df = read_matches_csv(args.matches)
    limit = args.limit or len(df)
    for i, row in enumerate(df.head(limit).itertuples(index=False)):
        print(f"{i+1:02d}. {row.title} at {row.company} – {row.match_score}% ({row.tier})")
        if row.matched_skills:
            print(f"   Matched: {row.matched_skills}")
        if row.missing_skills:
            print(f"   Missing: {row.missing_skills}")
        print()


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--jobs", required=True, help="Path to jobs JSON export")
    parser.add_argument("--search", help="Free-text term (title, description, company)")
    parser.add_argument("--location", help="Location substring")
    parser.add_argument("--job-type", dest="job_type", help="full-time, part-time, contract, internship or remote")
    parser.add_argument("--experience-level", dest="experience_level", help="entry, mid, senior or lead")
    parser.add_argument("--exclude-job-type", dest="exclude_job_type", help="Job type to leave out")
    parser.add_argument("--skill", dest="skills", action="append", help="Required skill (repeatable, all must match)")
    parser.add_argument("--min-salary", dest="min_salary", help="Minimum salary.min")
    parser.add_argument("--max-salary", dest="max_salary", help="Maximum salary.max")
    parser.add_argument("--start-date", dest="start_date", help="Created on or after (ISO 8601)")
    parser.add_argument("--end-date", dest="end_date", help="Created on or before (ISO 8601)")
    parser.add_argument("--deadline-after", dest="deadline_after", help="Application deadline on or after (ISO 8601)")
    parser.add_argument("--sort", help="newest, oldest, salaryHigh, salaryLow, titleAsc, ... (default newest)")
    parser.add_argument("--page", type=int, default=1, help="Page number (from 1)")
    parser.add_argument("--limit", type=int, help="Page size (1-50)")
    parser.add_argument("--include-inactive", action="store_true", help="Also consider inactive jobs (admin)")
    parser.add_argument("--listing", action="store_true", help="Let the search term match the location too")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobmatch", description="Job matching and search CLI")
    parser.add_argument("--config", help="YAML config file (default: $JOBMATCH_CONFIG)")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (default from config)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Resume analyze
    resume_parser = subparsers.add_parser("resume", help="Résumé related commands")
    resume_sub = resume_parser.add_subparsers(dest="subcommand", required=True)
    analyze_cmd = resume_sub.add_parser("analyze", help="Extract fields from a résumé file")
    analyze_cmd.add_argument("--file", required=True, help="Path to résumé file (txt, pdf, docx)")
    analyze_cmd.add_argument("--out", required=True, help="Path to output JSON file")
    analyze_cmd.add_argument("--user-id", dest="user_id", default="", help="Owner of the résumé")
    analyze_cmd.set_defaults(func=cmd_resume_analyze)

    # Match
    match_cmd = subparsers.add_parser("match", help="Recommend jobs for a résumé")
    match_cmd.add_argument("--resume", required=True, help="Path to résumé JSON")
    match_cmd.add_argument("--jobs", required=True, help="Path to jobs JSON export")
    match_cmd.add_argument("--location", help="Location substring")
    match_cmd.add_argument("--job-type", dest="job_type", help="Exact job type")
    match_cmd.add_argument("--experience-level", dest="experience_level", help="Exact experience level")
    match_cmd.add_argument("--min-score", dest="min_score", type=int, help="Minimum match score")
    match_cmd.add_argument("--topk", type=int, help="Maximum number of matches to output")
    match_cmd.add_argument("--out", help="Output CSV path")
    match_cmd.set_defaults(func=cmd_match)

    # Search and facets
    search_cmd = subparsers.add_parser("search", help="Search jobs with filters")
    _add_filter_args(search_cmd)
    search_cmd.set_defaults(func=cmd_search)
    facets_cmd = subparsers.add_parser("facets", help="Facet statistics for a search")
    _add_filter_args(facets_cmd)
    facets_cmd.set_defaults(func=cmd_facets)

    # Feed
    feed_cmd = subparsers.add_parser("feed", help="Personalised job feed")
    feed_cmd.add_argument("--resume", required=True, help="Path to résumé JSON")
    feed_cmd.add_argument("--jobs", required=True, help="Path to jobs JSON export")
    feed_cmd.set_defaults(func=cmd_feed)

    # Similar
    similar_cmd = subparsers.add_parser("similar", help="Jobs similar to a given job")
    similar_cmd.add_argument("--jobs", required=True, help="Path to jobs JSON export")
    similar_cmd.add_argument("--job-id", dest="job_id", required=True, help="Reference job id")
    similar_cmd.add_argument("--limit", type=int, help="Maximum number of jobs")
    similar_cmd.add_argument(
        "--substring-location",
        action="store_true",
        help="Match location as a substring instead of exactly",
    )
    similar_cmd.set_defaults(func=cmd_similar)

    # Trending
    trending_cmd = subparsers.add_parser("trending", help="Most viewed or applied-to jobs")
    trending_cmd.add_argument("--jobs", required=True, help="Path to jobs JSON export")
    trending_cmd.add_argument("--by", choices=["views", "applications"], default="views")
    trending_cmd.add_argument("--limit", type=int, default=10)
    trending_cmd.set_defaults(func=cmd_trending)

    # Gap
    gap_cmd = subparsers.add_parser("gap", help="Skill gap analysis for one job")
    gap_cmd.add_argument("--resume", required=True, help="Path to résumé JSON")
    gap_cmd.add_argument("--jobs", required=True, help="Path to jobs JSON export")
    gap_cmd.add_argument("--job-id", dest="job_id", required=True, help="Job id")
    gap_cmd.set_defaults(func=cmd_gap)

    # Report
    report_cmd = subparsers.add_parser("report", help="Generate a text report from matches CSV")
    report_cmd.add_argument("--matches", required=True, help="Path to matches CSV")
    report_cmd.add_argument("--limit", type=int, default=20, help="Number of top matches to display")
    report_cmd.set_defaults(func=cmd_report)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as exc:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        logger.error("%s", exc)
        return 1
    level = (args.log_level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="[%(levelname)s] %(message)s")
    try:
        args.func(args, settings)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
