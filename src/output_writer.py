"""
Output Writer - Console summaries and JSON export of scraped jobs
"""

import json
import logging
from collections import Counter
from pathlib import Path
from datetime import datetime, timezone
from typing import List, Optional
from models import JobRecord, RunSummary

logger = logging.getLogger(__name__)


def export_timestamp(now: Optional[datetime] = None) -> str:
    """
    UTC ISO-8601 timestamp safe for filenames.

    Example:
      2025-03-04T05:06:07.089Z -> 2025-03-04T05-06-07-089Z
    """
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


class OutputWriter:
    """Handles console output and on-disk export of job records"""

    def __init__(self, config):
        self.config = config

    def _ensure_output_dir(self, path: Path) -> None:
        """Create output directory if it doesn't exist"""
        path.parent.mkdir(parents=True, exist_ok=True)

    def get_export_path(self, now: Optional[datetime] = None) -> Path:
        return self.config.get_output_dir() / f"jobs_{export_timestamp(now)}.json"

    def print_jobs(self, jobs: List[JobRecord]) -> None:
        """Print every accepted record"""
        print("\n=== SCRAPED JOBS ===")
        print(f"Total jobs found: {len(jobs)}")
        for i, job in enumerate(jobs, 1):
            print(f"\nJob {i}:")
            print(f"  Title: {job.job_title}")
            print(f"  Business: {job.business}")
            print(f"  Location: {job.location}")
            print(f"  Salary: {job.salary}")
            print(f"  Date: {job.date}")
            print(f"  URL: {job.job_url}")

    def write_json(self, jobs: List[JobRecord], now: Optional[datetime] = None) -> Path:
        """Export normalized jobs to a timestamped JSON file"""
        output_path = self.get_export_path(now)
        self._ensure_output_dir(output_path)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump([job.to_payload() for job in jobs], f, indent=2, ensure_ascii=False)

        logger.info(f"JSON written: {output_path}")
        print(f"\n💾 Results saved to {output_path}")
        return output_path

    def print_summary(self, summary: RunSummary, top_employers: int = 10) -> None:
        """Print run totals, jobs per location and the busiest employers"""
        print("\n" + "="*60)
        print("📊 SCRAPING SUMMARY")
        print("="*60)
        print(f"\n  Pages loaded: {summary.pages_loaded}")
        print(f"  Jobs scraped: {summary.jobs_scraped}")
        if summary.api_mode:
            print(f"  Session: {summary.session_id or '-'}")
            print(f"  Jobs submitted: {summary.jobs_submitted}")
            print(f"  Session completed: {summary.session_completed}")
        else:
            print("  API delivery: disabled (local-only run)")
        if summary.export_path:
            print(f"  JSON: {summary.export_path}")

        locations = Counter(job.location for job in summary.jobs if job.location)
        if locations:
            print("\n📍 Jobs by location:")
            for location, count in locations.most_common():
                print(f"   {location}: {count} jobs")

        employers = Counter(job.business for job in summary.jobs if job.business)
        if employers:
            print("\n🏢 Top employers:")
            for business, count in employers.most_common(top_employers):
                print(f"   {business}: {count} jobs")

        if summary.errors:
            print("\n⚠️  Errors:")
            for error in summary.errors:
                print(f"   ❌ {error}")

        print("\n" + "="*60 + "\n")
