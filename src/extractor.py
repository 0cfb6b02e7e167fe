"""
Extractor - Turns rendered listing items into JobRecord objects
"""

import logging
import re
from typing import Any, List, Optional

from listing_page import (
    ListingPage,
    FIELD_TITLE,
    FIELD_BUSINESS,
    FIELD_LOCATION,
    FIELD_SALARY,
    FIELD_DATE,
    FIELD_HREF,
)
from models import JobRecord

logger = logging.getLogger(__name__)

JOB_BANK_ID_PATTERN = re.compile(r"/jobpostingtfw/(\d+)")
SESSION_AND_QUERY_PATTERN = re.compile(r";jsessionid=.*|\?.*")
POSTING_PATH = "/jobsearch/jobpostingtfw"


def extract_job_bank_id(url: str) -> Optional[str]:
    """Pull the numeric posting id out of a detail-page URL"""
    if not url:
        return None
    match = JOB_BANK_ID_PATTERN.search(url)
    if not match:
        return None
    return match.group(1)


def canonical_job_url(base_url: str, url: str) -> str:
    """
    Drop session and tracking noise from a posting URL.

    Posting links become {base}/jobsearch/jobpostingtfw/{id}. Any other URL
    loses its ;jsessionid=... and ?query suffix.
    """
    job_bank_id = extract_job_bank_id(url)
    if job_bank_id:
        return f"{base_url.rstrip('/')}{POSTING_PATH}/{job_bank_id}"
    return SESSION_AND_QUERY_PATTERN.sub("", url)


def build_job_url(base_url: str, href: str) -> str:
    if not href:
        return ""
    if href.startswith("http"):
        return canonical_job_url(base_url, href)
    return canonical_job_url(base_url, f"{base_url.rstrip('/')}{href}")


def extract_job_from_item(page: ListingPage, item: Any, base_url: str) -> Optional[JobRecord]:
    """Build a record from one listing item, or None if title or URL is missing"""
    title = page.read_field(item, FIELD_TITLE).strip()
    job_url = build_job_url(base_url, page.read_field(item, FIELD_HREF).strip())

    if not title or not job_url:
        return None

    return JobRecord(
        job_title=title,
        business=page.read_field(item, FIELD_BUSINESS).strip(),
        location=page.read_field(item, FIELD_LOCATION).strip(),
        salary=page.read_field(item, FIELD_SALARY).strip(),
        date=page.read_field(item, FIELD_DATE).strip(),
        job_url=job_url,
        job_bank_id=extract_job_bank_id(job_url),
    )


def extract_jobs(page: ListingPage, base_url: str) -> List[JobRecord]:
    """Extract every acceptable job record from a fully loaded page"""
    jobs: List[JobRecord] = []
    items = page.listing_items()
    logger.info(f"Found {len(items)} listing items")

    for i, item in enumerate(items, 1):
        try:
            job = extract_job_from_item(page, item, base_url)
        except Exception as e:
            logger.warning(f"Failed to extract listing {i}: {e}")
            continue

        if job is None:
            logger.info(f"Skipping listing {i}: missing title or URL")
            continue

        jobs.append(job)
        logger.info(f"{i} job(s) loaded: {job.job_title}")

    logger.info(f"Scraped {len(jobs)} jobs from the page")
    return jobs
