import pytest
import yaml
from typing import Any, Dict, List
from unittest.mock import MagicMock

from config_loader import ConfigLoader
from listing_page import ListingPage


class FakeListingPage(ListingPage):
    """In-memory listings page: each click reveals the next page of items."""

    def __init__(self, pages: List[List[Dict[str, Any]]]):
        self.pages = pages
        self.visible_pages = 1
        self.click_count = 0

    def wait_for_control(self, timeout_ms: int) -> bool:
        return self.has_control()

    def has_control(self) -> bool:
        return self.visible_pages < len(self.pages)

    def click_control(self) -> None:
        if not self.has_control():
            raise RuntimeError("clicked a missing control")
        self.visible_pages += 1
        self.click_count += 1

    def listing_items(self) -> List[Any]:
        items = []
        for page in self.pages[:self.visible_pages]:
            items.extend(page)
        return items

    def read_field(self, item: Any, field: str) -> str:
        value = item.get(field, "")
        if isinstance(value, Exception):
            raise value
        return value

    def results_count(self) -> str:
        return f"{sum(len(page) for page in self.pages)} jobs"


class FakeCollector:
    def __init__(self, page: ListingPage):
        self.page = page
        self.started = False
        self.stopped = False

    def start_browser(self) -> None:
        self.started = True

    def open_listings(self) -> ListingPage:
        return self.page

    def stop_browser(self) -> None:
        self.stopped = True


def make_listing(n: int, **overrides) -> Dict[str, Any]:
    listing = {
        "title": f"\n\t\tFood service supervisor {n}\n",
        "business": "Maple Leaf Diner Inc.",
        "location": "\n\t\tLocation\n\t\tToronto (ON)",
        "salary": "Salary:\n$17.50 hourly",
        "date": "March 04, 2025",
        "href": f"/jobsearch/jobpostingtfw/4473{n:04d}?source=searchresults",
    }
    listing.update(overrides)
    return listing


def make_pages(page_count: int, per_page: int) -> List[List[Dict[str, Any]]]:
    return [
        [make_listing(page * per_page + i) for i in range(per_page)]
        for page in range(page_count)
    ]


def make_response(payload=None, error: Exception = None) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload if payload is not None else {}
    if error is not None:
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def fake_page_factory():
    return lambda page_count=2, per_page=5: FakeListingPage(make_pages(page_count, per_page))


@pytest.fixture
def write_config(tmp_path):
    """Write a settings.yaml into tmp_path and load it."""

    def _write(overrides: Dict[str, Any] = None) -> ConfigLoader:
        settings = {
            "api": {"enabled": True, "base_url": "http://api.test", "timeout": 5},
            "scraper": {
                "listings_url": "https://www.jobbank.gc.ca/jobsearch/jobsearch?fsrc=32",
                "base_url": "https://www.jobbank.gc.ca",
                "number_of_pages": 2,
            },
            "browser": {"headless": True, "min_delay": 0.0, "max_delay": 0.0},
            "output": {"save_json": False, "directory": str(tmp_path / "output")},
            "logging": {"level": "INFO", "log_file": str(tmp_path / "logs" / "run.log")},
        }
        for section, values in (overrides or {}).items():
            settings.setdefault(section, {}).update(values)

        path = tmp_path / "settings.yaml"
        path.write_text(yaml.safe_dump(settings), encoding="utf-8")
        return ConfigLoader(str(path))

    return _write
