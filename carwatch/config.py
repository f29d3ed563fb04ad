# carwatch/config.py
"""Environment settings and the default search filters loaded from config.json."""
import json
import os
import threading
from dotenv import load_dotenv

from .errors import ConfigError, InvalidFilters
from .schemas import SearchFilters, validate_filters
from .utils import logger

load_dotenv()

FILTERS_PATH = os.getenv("FILTERS_PATH", "config.json")
SNAPSHOT_PATH = os.getenv("SNAPSHOT_PATH", os.path.join("data", "listings.json"))
HEADLESS = os.getenv("HEADLESS", "1") == "1"
NAV_TIMEOUT_MS = int(os.getenv("NAV_TIMEOUT_MS", "30000"))
SELECTOR_TIMEOUT_MS = int(os.getenv("SELECTOR_TIMEOUT_MS", "12000"))
SCRAPE_RETRIES = int(os.getenv("SCRAPE_RETRIES", "1"))
RETRY_DELAY = float(os.getenv("RETRY_DELAY", "5"))
SCHEDULE_CRON = os.getenv("SCHEDULE_CRON", "0 2 * * *")
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3000"))


class DefaultFilters:
    """Holds the default `SearchFilters`, read from disk on first use.

    The cached value is immutable; `reload()` and `invalidate()` are the only
    ways to replace it.
    """

    def __init__(self, path: str = FILTERS_PATH):
        self.path = path
        self._value: SearchFilters | None = None
        self._lock = threading.Lock()

    def get(self) -> SearchFilters:
        with self._lock:
            if self._value is None:
                self._value = self._load()
            return self._value

    def reload(self) -> SearchFilters:
        value = self._load()
        with self._lock:
            self._value = value
        logger.info("Reloaded default filters from %s", self.path)
        return value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None

    def _load(self) -> SearchFilters:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Unable to load default filters from {self.path}: {e}") from e
        try:
            return validate_filters(raw)
        except InvalidFilters as e:
            raise ConfigError(f"Invalid default filters in {self.path}: {e}") from e
