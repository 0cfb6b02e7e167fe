"""
Page Navigator - Reveals additional result pages behind the "load more" control

The listings page only renders the first page of results. Each click on the
control appends the next page to the same DOM, so extraction has to wait until
navigation is finished.
"""

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from listing_page import ListingPage

logger = logging.getLogger(__name__)


class NavigationState(str, Enum):
    AWAITING_CONTROL = "awaiting-control"
    CLICKING = "clicking"
    WAITING = "waiting"
    DONE = "done"
    CONTROL_ABSENT = "control-absent"


@dataclass(frozen=True)
class PacingPolicy:
    """Delay applied before every pagination click"""

    delay_seconds: float = 0.0

    @classmethod
    def randomized(cls, min_delay: float, max_delay: float, rng: Optional[random.Random] = None) -> "PacingPolicy":
        """Pick one delay for the whole run from [min_delay, max_delay]"""
        source = rng or random
        return cls(delay_seconds=source.uniform(min_delay, max_delay))

    @classmethod
    def from_config(cls, config) -> "PacingPolicy":
        return cls.randomized(config.get_min_delay(), config.get_max_delay())


class PageNavigator:
    """Clicks the load-more control until the requested page count is loaded"""

    def __init__(self, pacing: PacingPolicy, sleep: Callable[[float], None] = time.sleep):
        self.pacing = pacing
        self.sleep = sleep
        self.state = NavigationState.AWAITING_CONTROL
        self.clicks = 0

    def _wait(self) -> None:
        self.state = NavigationState.WAITING
        self.sleep(self.pacing.delay_seconds)

    def load_pages(self, page: ListingPage, number_of_pages: int) -> int:
        """
        Load result pages and return how many are now on screen.

        The first page is visible on arrival, so N pages take N-1 clicks.
        number_of_pages <= 0 keeps clicking until the control goes away.
        Running out of pages early is not an error.
        """
        load_all = number_of_pages <= 0
        target_clicks = max(number_of_pages - 1, 0)
        self.clicks = 0
        self.state = NavigationState.AWAITING_CONTROL

        while load_all or self.clicks < target_clicks:
            self._wait()

            self.state = NavigationState.AWAITING_CONTROL
            if not page.has_control():
                self.state = NavigationState.CONTROL_ABSENT
                logger.info(f"No more results after {self.clicks + 1} pages")
                print(f"   No more results after {self.clicks + 1} page(s) 😔")
                break

            self.state = NavigationState.CLICKING
            page.click_control()
            self.clicks += 1

            pages_loaded = self.clicks + 1
            if load_all:
                print(f"   {pages_loaded} 📄(s) loaded (loading all pages...)")
            else:
                print(f"   {pages_loaded} 📄(s) loaded out of {number_of_pages}")

        if self.state != NavigationState.CONTROL_ABSENT:
            self.state = NavigationState.DONE

        # Let the last appended page render before extraction
        if self.clicks:
            self.sleep(self.pacing.delay_seconds)

        pages_loaded = self.clicks + 1
        logger.info(f"Pagination finished: {pages_loaded} page(s) loaded ({self.state.value})")
        return pages_loaded
