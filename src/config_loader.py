"""

Configuration loader for the Job Bank scraper
Reads and validates settings.yaml
"""

import yaml
import os
from pathlib import Path
from typing import Dict, Any
from datetime import datetime
from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

DEFAULT_LISTINGS_URL = "https://www.jobbank.gc.ca/jobsearch/jobsearch?fsrc=32"
DEFAULT_BASE_URL = "https://www.jobbank.gc.ca"
DEFAULT_API_URL = "http://localhost:8080"


class ConfigValidationError(ValueError):
    """Raised when configuration fails invariant validation."""
    pass


def _validate_non_negative(value: Any, field: str) -> None:
    """Validate that a numeric value is non-negative."""
    if value is not None and float(value) < 0:
        raise ConfigValidationError(
            f"Invalid config: '{field}' must be non-negative, got {value}"
        )


def _validate_positive(value: Any, field: str) -> None:
    """Validate that a numeric value is positive (> 0)."""
    if value is not None and float(value) <= 0:
        raise ConfigValidationError(
            f"Invalid config: '{field}' must be positive (> 0), got {value}"
        )


def _validate_min_max_pair(min_val: Any, max_val: Any, min_field: str, max_field: str) -> None:
    """Validate that min_val <= max_val for a delay/range pair."""
    if min_val is not None and max_val is not None:
        if float(min_val) > float(max_val):
            raise ConfigValidationError(
                f"Invalid config: '{min_field}' ({min_val}) must be <= '{max_field}' ({max_val})"
            )


class ConfigLoader:
    """Loads and validates configuration from YAML file"""

    def __init__(self, config_path: str = "config/settings.yaml"):
        self.config_path = Path(config_path)
        self.config: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load config from YAML file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r') as f:
                self.config = yaml.safe_load(f) or {}
            logger.info(f"✓ Config loaded from {self.config_path}")
        except yaml.YAMLError as e:
            logger.error(f"Error parsing config file: {e}")
            raise

        self._validate_invariants()

    def _validate_invariants(self) -> None:
        """Validate configuration invariants. Raises ConfigValidationError on failure."""
        # Pacing range
        min_delay = self.get('browser.min_delay')
        max_delay = self.get('browser.max_delay')
        _validate_non_negative(min_delay, 'browser.min_delay')
        _validate_non_negative(max_delay, 'browser.max_delay')
        _validate_min_max_pair(min_delay, max_delay, 'browser.min_delay', 'browser.max_delay')

        _validate_positive(self.get('browser.page_timeout'), 'browser.page_timeout')
        _validate_positive(self.get('browser.navigation_timeout'), 'browser.navigation_timeout')
        _validate_positive(self.get('browser.ready_timeout'), 'browser.ready_timeout')
        _validate_positive(self.get('api.timeout'), 'api.timeout')

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by dot notation (e.g., 'scraper.number_of_pages')"""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k, default)
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Override a config value by dot notation (used for CLI flags)"""
        keys = key.split('.')
        section = self.config
        for k in keys[:-1]:
            if not isinstance(section.get(k), dict):
                section[k] = {}
            section = section[k]
        section[keys[-1]] = value

    # === API Config ===

    def is_api_enabled(self) -> bool:
        """Check if batches should be delivered to the ingestion API"""
        return bool(self.get('api.enabled', True))

    def get_api_base_url(self) -> str:
        """Get ingestion API base URL (JOBBANK_API_URL wins over the file)"""
        env_url = (os.getenv("JOBBANK_API_URL") or "").strip()
        return env_url or self.get('api.base_url', DEFAULT_API_URL)

    def get_api_timeout(self) -> float:
        """Get per-request HTTP timeout in seconds"""
        return float(self.get('api.timeout', 30))

    # === Scraper Config ===

    def get_listings_url(self) -> str:
        return self.get('scraper.listings_url', DEFAULT_LISTINGS_URL)

    def get_base_url(self) -> str:
        """Get origin prepended to relative detail-page links"""
        return self.get('scraper.base_url', DEFAULT_BASE_URL)

    def get_number_of_pages(self) -> int:
        """Get number of result pages to load (<= 0 loads all)"""
        return int(self.get('scraper.number_of_pages', -1))

    def get_job_title(self) -> str:
        return self.get('scraper.job_title', '') or ''

    def get_province(self) -> str:
        return self.get('scraper.province', '') or ''

    # === Browser Config ===

    def is_headless(self) -> bool:
        """Check if browser should run in headless mode"""
        return self.get('browser.headless', True)

    def get_min_delay(self) -> float:
        """Get lower bound of the pagination delay"""
        return float(self.get('browser.min_delay', 0.0))

    def get_max_delay(self) -> float:
        """Get upper bound of the pagination delay"""
        return float(self.get('browser.max_delay', 1.0))

    def get_page_timeout(self) -> int:
        """Get page action timeout in milliseconds"""
        return self.get('browser.page_timeout', 30) * 1000

    def get_navigation_timeout(self) -> int:
        """Get navigation timeout in milliseconds"""
        return self.get('browser.navigation_timeout', 45) * 1000

    def get_ready_timeout(self) -> int:
        """Get wait for the pagination control in milliseconds"""
        return self.get('browser.ready_timeout', 15) * 1000

    # === Output Config ===

    def is_json_export_enabled(self) -> bool:
        """Check if the normalized jobs should be written to disk"""
        return bool(self.get('output.save_json', False))

    def get_output_dir(self) -> Path:
        return Path(self.get('output.directory', 'output'))

    # === Logging Config ===

    def get_log_level(self) -> str:
        """Get logging level"""
        return self.get('logging.level', 'INFO')

    def get_log_file(self) -> Path:
        """Get log file path with timestamp"""
        template = self.get('logging.log_file', 'logs/jobbank_scraper.log')
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = template.replace('{timestamp}', timestamp)
        return Path(filename)

    def __repr__(self) -> str:
        return f"<Config: pages={self.get_number_of_pages()}, api={self.get_api_base_url()}>"


# Convenience function
def load_config(config_path: str = "config/settings.yaml") -> ConfigLoader:
    """Load configuration from file, picking up overrides from .env"""
    load_dotenv(override=False)
    return ConfigLoader(config_path)
