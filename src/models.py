"""
Data models for the Job Bank scraper
Defines structure for job records, scraping runs, and run summaries
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class JobRecord(BaseModel):
    """Represents a single job posting extracted from the listings page"""

    model_config = ConfigDict(populate_by_name=True)

    job_title: str = Field(alias="jobTitle")
    business: str = ""
    salary: str = ""
    location: str = ""
    job_url: str = Field(alias="jobUrl")
    date: str = ""

    # Numeric id from the detail-page path, None when the URL carries none
    job_bank_id: Optional[str] = Field(default=None, alias="jobBankId")

    def __str__(self) -> str:
        return f"{self.job_title} at {self.business} ({self.location})"

    def to_payload(self) -> dict:
        """Serialize with the camelCase keys the ingestion API expects"""
        return self.model_dump(by_alias=True, exclude_none=True)


class ScrapingRun(BaseModel):
    """Backend-owned scraping session, as returned by the start call"""

    id: str
    status: str = ""
    started_at: Optional[str] = None
    total_pages: int = 0
    jobs_scraped: int = 0
    jobs_stored: int = 0
    last_page_scraped: int = 0
    created_at: Optional[str] = None


class RunSummary(BaseModel):
    """What a single pipeline run produced"""

    requested_pages: int
    pages_loaded: int = 0
    api_mode: bool = False
    session_id: Optional[str] = None
    session_completed: bool = False
    jobs_scraped: int = 0
    jobs_submitted: int = 0
    export_path: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    jobs: List[JobRecord] = Field(default_factory=list)

    def __str__(self) -> str:
        mode = "API" if self.api_mode else "local-only"
        return f"{self.jobs_scraped} jobs from {self.pages_loaded} page(s), {mode} mode"
