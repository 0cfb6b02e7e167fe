"""
Ingestion API client - Scraping session lifecycle and chunked job submission

Sessions go start -> submit chunks -> complete. Chunks are posted one at a
time in order; the first failing chunk stops the submission and its error is
re-raised as-is, leaving earlier chunks stored on the backend.
"""

import logging
from typing import List, Optional

import requests

from models import JobRecord, ScrapingRun

logger = logging.getLogger(__name__)

CHUNK_SIZE = 500

STATS_PATH = "/api/jobs/stats"
SCRAPING_RUNS_PATH = "/api/jobs/scraping-runs"


class SessionNotStartedError(RuntimeError):
    """Raised when a session call is made before start_scraping_session()."""


def chunk_records(records: List[JobRecord], size: int = CHUNK_SIZE) -> List[List[JobRecord]]:
    """Split records into ordered chunks of at most `size` items"""
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [records[start:start + size] for start in range(0, len(records), size)]


class SessionClient:
    """Talks to the backend ingestion API for one scraping run"""

    def __init__(self, base_url: str, timeout: float = 30, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.scraping_run_id: Optional[str] = None

    @classmethod
    def from_config(cls, config) -> "SessionClient":
        return cls(config.get_api_base_url(), timeout=config.get_api_timeout())

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _post(self, path: str, payload=None) -> requests.Response:
        response = self.session.post(self._url(path), json=payload, timeout=self.timeout)
        response.raise_for_status()
        return response

    def _require_session(self) -> str:
        if not self.scraping_run_id:
            raise SessionNotStartedError(
                "No active scraping session. Call start_scraping_session() first."
            )
        return self.scraping_run_id

    def test_connection(self) -> bool:
        """Liveness probe against the stats endpoint; never raises"""
        logger.info("🔗 Testing API connection...")
        try:
            response = self.session.get(self._url(STATS_PATH), timeout=self.timeout)
            response.raise_for_status()
        except Exception as exc:
            logger.error(f"❌ API connection failed: {exc}")
            return False
        logger.info("✅ API connection successful")
        return True

    def start_scraping_session(self) -> str:
        """Create a scraping run on the backend and remember its id"""
        logger.info("🚀 Starting new scraping session...")
        try:
            response = self._post(SCRAPING_RUNS_PATH)
            run = ScrapingRun.model_validate(response.json())
        except Exception as exc:
            logger.error(f"❌ Failed to start scraping session: {exc}")
            raise

        self.scraping_run_id = run.id
        logger.info(f"✅ Scraping session started: {run.id}")
        return run.id

    def submit_jobs(self, records: List[JobRecord]) -> int:
        """
        Submit records in chunks of CHUNK_SIZE and return the processed total.

        Raises SessionNotStartedError without a session. An empty list is a
        no-op and makes no request.
        """
        run_id = self._require_session()

        if not records:
            logger.warning("⚠️  No jobs to submit")
            return 0

        chunks = chunk_records(records)
        total = len(records)
        processed = 0
        path = f"{SCRAPING_RUNS_PATH}/{run_id}/jobs"

        logger.info(f"📤 Submitting {total} jobs to API in {len(chunks)} chunk(s) of up to {CHUNK_SIZE}...")

        for index, chunk in enumerate(chunks, 1):
            try:
                response = self._post(path, [record.to_payload() for record in chunk])
            except Exception as exc:
                logger.error(f"❌ Failed to submit chunk {index}/{len(chunks)}: {exc}")
                raise

            jobs_processed = int(response.json().get("jobs_processed", 0))
            processed += jobs_processed
            logger.info(f"✅ Chunk {index}: submitted {jobs_processed} jobs ({processed}/{total} total)")

        logger.info(f"🎉 Successfully submitted all {processed} jobs to API")
        return processed

    def complete_scraping_session(self, total_pages: int, jobs_scraped: int, jobs_stored: int) -> None:
        """Report final counts and close the run on the backend"""
        run_id = self._require_session()

        logger.info("🏁 Completing scraping session...")
        payload = {
            "total_pages": total_pages,
            "jobs_scraped": jobs_scraped,
            "jobs_stored": jobs_stored,
        }
        try:
            self._post(f"{SCRAPING_RUNS_PATH}/{run_id}/complete", payload)
        except Exception as exc:
            logger.error(f"❌ Failed to complete scraping session: {exc}")
            raise
        logger.info("✅ Scraping session completed successfully")
