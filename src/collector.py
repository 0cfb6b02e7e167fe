"""
Job Collector - Playwright browser lifecycle for the Job Bank listings page
Opens the LMIA results page and hands back a ListingPage for the pipeline
"""

import logging
from typing import Optional
from playwright.sync_api import sync_playwright, Page, Browser, BrowserContext, Playwright

from listing_page import ListingPage, PlaywrightListingPage

logger = logging.getLogger(__name__)

SEARCH_TITLE_SELECTOR = "#searchString"
SEARCH_LOCATION_SELECTOR = "#locationstring"
SEARCH_BUTTON_SELECTOR = "#searchButton"


def describe_search(job_title: str, province: str) -> str:
    if job_title:
        if province:
            return f"Searching for {job_title} jobs in {province} 🇨🇦🍁"
        return f"Searching for {job_title} jobs in all of Canada 🇨🇦🍁"
    if province:
        return f"Searching for all jobs in {province} 🇨🇦🍁"
    return "Searching for all jobs in Canada 🇨🇦🍁"


class JobCollector:
    """Owns the browser used to render the listings page"""

    def __init__(self, config):
        self.config = config
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    def start_browser(self) -> None:
        """Launch headless Chromium with a fresh context"""
        logger.info("Starting browser...")
        self.playwright = sync_playwright().start()
        self.browser = self.playwright.chromium.launch(
            headless=self.config.is_headless(),
            args=[
                "--disable-blink-features=AutomationControlled",
                "--disable-dev-shm-usage",
            ],
        )
        self.context = self.browser.new_context(viewport={"width": 1280, "height": 800})
        self.page = self.context.new_page()

        self.page.set_default_timeout(self.config.get_page_timeout())
        self.page.set_default_navigation_timeout(self.config.get_navigation_timeout())
        logger.info("Browser started successfully")

    def stop_browser(self) -> None:
        """Clean up browser resources"""
        try:
            if self.context:
                self.context.close()
        except Exception:
            logger.debug("Browser context close failed", exc_info=True)
        try:
            if self.browser:
                self.browser.close()
        except Exception:
            logger.debug("Browser close failed", exc_info=True)
        try:
            if self.playwright:
                self.playwright.stop()
        except Exception:
            logger.debug("Playwright stop failed", exc_info=True)
        logger.info("Browser closed 👋")

    def open_listings(self) -> ListingPage:
        """Navigate to the listings page and wait for it to be ready"""
        if self.page is None:
            raise RuntimeError("Browser not started. Call start_browser() first.")

        url = self.config.get_listings_url()
        logger.info(f"🎯 Navigating to LMIA jobs page: {url}")
        self.page.goto(url, wait_until="networkidle")

        listing_page = PlaywrightListingPage(self.page)
        ready_timeout = self.config.get_ready_timeout()
        if not listing_page.wait_for_control(ready_timeout):
            logger.warning("⚠️  Load-more control missing; only the first page will be scraped")

        job_title = self.config.get_job_title()
        province = self.config.get_province()
        if job_title or province:
            self.search(job_title, province)
            listing_page.wait_for_control(ready_timeout)

        return listing_page

    def search(self, job_title: str, province: str) -> None:
        """Narrow the listings with the site's own search form"""
        message = describe_search(job_title, province)
        logger.info(message)
        print(f"\n🔍 {message}")

        self.page.fill(SEARCH_LOCATION_SELECTOR, province)
        self.page.fill(SEARCH_TITLE_SELECTOR, job_title)
        self.page.click(SEARCH_BUTTON_SELECTOR)
        self.page.wait_for_load_state("networkidle")
