"""
Command-line entry point.

    python main.py search --keyword nurse --location Glasgow --band "Band 5"
    python main.py detail scot_12345
    python main.py featured --limit 5

An optional JSON file (a list of job objects) seeds the in-memory store.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from healthjobs.config.settings import settings
from healthjobs.core.errors import AggregatorError
from healthjobs.core.models import Listing, SearchFilters
from healthjobs.core.runner import JobAggregator
from healthjobs.core.store import InMemoryJobStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthjobs", description="Search NHS and healthcare vacancies."
    )
    parser.add_argument("--seed", type=Path, help="JSON file of jobs to load into the store")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Aggregate listings from every source")
    search.add_argument("--keyword")
    search.add_argument("--location")
    search.add_argument("--band")
    search.add_argument("--employer")
    search.add_argument("--contract-type")
    search.add_argument("--distance", type=int)
    search.add_argument("--page", type=int, default=1)
    search.add_argument("--visa", action="store_true", help="Only visa-sponsored jobs")

    detail = commands.add_parser("detail", help="Look up one job by id")
    detail.add_argument("job_id")

    featured = commands.add_parser("featured", help="Highest-paid listings across sources")
    featured.add_argument("--limit", type=int, default=settings.FEATURED_LIMIT)
    return parser


def format_listing(job: Listing) -> str:
    salary = ""
    if job.salary_min and job.salary_max:
        salary = f"£{job.salary_min:,} - £{job.salary_max:,}"
    elif job.salary_min:
        salary = f"£{job.salary_min:,}"
    closing = job.closing_date.date().isoformat() if job.closing_date else "-"
    parts = [job.title, job.employer, job.location, job.band, salary, f"closes {closing}"]
    return f"[{job.source}] {job.id}\n    " + " | ".join(p for p in parts if p) + f"\n    {job.url}"


async def load_seed(store: InMemoryJobStore, path: Optional[Path]):
    if path is None:
        return
    rows = json.loads(path.read_text(encoding="utf-8"))
    for row in rows:
        await store.create_job(row)
    logger.info(f"Seeded store with {len(rows)} jobs from {path}")


def _print(listings: List[Listing]):
    for job in listings:
        print(format_listing(job))
    print(f"\n{len(listings)} listings")


async def run(args: argparse.Namespace) -> int:
    store = InMemoryJobStore()
    await load_seed(store, args.seed)

    async with JobAggregator.create(store, settings) as aggregator:
        if args.command == "search":
            filters = SearchFilters(
                keyword=args.keyword,
                location=args.location,
                band=args.band,
                employer=args.employer,
                contract_type=args.contract_type,
                distance=args.distance,
                page=args.page,
                visa_sponsorship=args.visa,
            )
            _print(await aggregator.search(filters))
        elif args.command == "detail":
            job = await aggregator.get_by_id(args.job_id)
            if job is None:
                print(f"Job {args.job_id} not found")
                return 1
            print(format_listing(job))
            if job.description:
                print(f"\n{job.description}")
        elif args.command == "featured":
            _print(await aggregator.get_featured(args.limit))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return asyncio.run(run(args))
    except AggregatorError as e:
        logger.error(f"{e}")
        return 2
    except KeyboardInterrupt:
        return 130
