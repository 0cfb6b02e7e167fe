"""
Listing Page - Narrow view of the Job Bank results page

PageNavigator and the extractor only talk to this interface, which lets tests
swap in a fake page without a browser.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List

from playwright.sync_api import Page, TimeoutError as PlaywrightTimeoutError

logger = logging.getLogger(__name__)

MORE_RESULTS_SELECTOR = "#moreresultbutton"
RESULTS_COUNT_SELECTOR = "#results-count"
LISTING_ITEM_SELECTOR = "article"
TITLE_SELECTOR = ".noctitle"
DETAILS_LIST_SELECTOR = ".list-unstyled"

FIELD_TITLE = "title"
FIELD_BUSINESS = "business"
FIELD_LOCATION = "location"
FIELD_SALARY = "salary"
FIELD_DATE = "date"
FIELD_HREF = "href"

# Fields nested in the item's details sub-list, read by class name
DETAIL_FIELDS = (FIELD_BUSINESS, FIELD_LOCATION, FIELD_SALARY, FIELD_DATE)


class ListingPage(ABC):
    """What the pipeline needs from a rendered listings page"""

    @abstractmethod
    def wait_for_control(self, timeout_ms: int) -> bool:
        """Wait for the 'load more' control; False if it never shows up"""

    @abstractmethod
    def has_control(self) -> bool:
        """Check if the 'load more' control is currently available"""

    @abstractmethod
    def click_control(self) -> None:
        ...

    @abstractmethod
    def listing_items(self) -> List[Any]:
        """Return every listing item currently rendered"""

    @abstractmethod
    def read_field(self, item: Any, field: str) -> str:
        """Read one field of a listing item; empty string when missing"""

    @abstractmethod
    def results_count(self) -> str:
        """Human-readable total result count shown by the site"""


def _extract_text(element) -> str:
    if not element:
        return ""
    try:
        text = (element.text_content() or "").strip()
    except Exception:
        text = ""
    if not text:
        try:
            text = element.inner_text().strip()
        except Exception:
            text = ""
    return text


class PlaywrightListingPage(ListingPage):
    """ListingPage backed by a live Playwright page"""

    def __init__(self, page: Page):
        self.page = page

    def wait_for_control(self, timeout_ms: int) -> bool:
        try:
            self.page.wait_for_selector(MORE_RESULTS_SELECTOR, timeout=timeout_ms)
            return True
        except PlaywrightTimeoutError:
            logger.warning(f"Load-more control not found within {timeout_ms}ms")
            return False

    def has_control(self) -> bool:
        element = self.page.query_selector(MORE_RESULTS_SELECTOR)
        if not element:
            return False
        return element.is_visible()

    def click_control(self) -> None:
        element = self.page.query_selector(MORE_RESULTS_SELECTOR)
        if not element:
            raise RuntimeError("Load-more control disappeared before click")
        element.evaluate("(button) => button.click()")

    def listing_items(self) -> List[Any]:
        return self.page.query_selector_all(LISTING_ITEM_SELECTOR)

    def read_field(self, item: Any, field: str) -> str:
        if field == FIELD_TITLE:
            return _extract_text(item.query_selector(TITLE_SELECTOR))

        if field == FIELD_HREF:
            anchor = item.query_selector("a")
            if not anchor:
                return ""
            return (anchor.get_attribute("href") or "").strip()

        if field not in DETAIL_FIELDS:
            raise ValueError(f"Unknown listing field: {field}")

        details = item.query_selector(DETAILS_LIST_SELECTOR)
        if not details:
            return ""
        return _extract_text(details.query_selector(f".{field}"))

    def results_count(self) -> str:
        element = self.page.query_selector(RESULTS_COUNT_SELECTOR)
        return _extract_text(element) or "0"
