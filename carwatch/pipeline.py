# carwatch/pipeline.py
"""Run orchestration: filters -> query -> browser -> extraction -> scoring -> snapshot."""
import threading

from .browser import BrowsingSession
from .config import DefaultFilters, RETRY_DELAY, SCRAPE_RETRIES
from .errors import NavigationError, RunInProgress
from .extract import parse_listings
from .query import build_search_url
from .schemas import ScoredListing, SearchFilters
from .scoring import apply_scoring
from .snapshot import SnapshotStore
from .utils import logger, retry


class Pipeline:
    """Owns the snapshot write path and allows one run at a time.

    A run started while another is in flight is rejected with `RunInProgress`.
    """

    def __init__(
        self,
        defaults: DefaultFilters | None = None,
        store: SnapshotStore | None = None,
        session_factory=BrowsingSession,
        retries: int = SCRAPE_RETRIES,
        retry_delay: float = RETRY_DELAY,
    ):
        self.defaults = defaults or DefaultFilters()
        self.store = store or SnapshotStore()
        self.session_factory = session_factory
        self.retries = max(1, retries)
        self.retry_delay = retry_delay
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def run(self, filters: SearchFilters | None = None) -> list[ScoredListing]:
        if not self._lock.acquire(blocking=False):
            raise RunInProgress()
        try:
            return self._run(filters or self.defaults.get())
        finally:
            self._lock.release()

    def _run(self, filters: SearchFilters) -> list[ScoredListing]:
        logger.info("Running scraper with filters: %s", filters.model_dump(by_alias=True))
        url = build_search_url(filters)
        session = self.session_factory()
        fetch = retry(NavigationError, tries=self.retries, delay=self.retry_delay)(session.fetch)
        html = fetch(url)
        listings = parse_listings(html, filters.min_year)
        scored = apply_scoring(listings)
        self.store.write(scored)
        return scored

    def startup(self) -> list[ScoredListing]:
        try:
            return self.run()
        except Exception:
            logger.exception("Initial scrape failed, serving last snapshot")
            return self.store.read()

    def scheduled_run(self) -> None:
        logger.info("Running scheduled scrape")
        try:
            self.run()
        except RunInProgress:
            logger.warning("Skipping scheduled scrape, another run is in progress")
        except Exception:
            logger.exception("Scheduled scrape failed")

    def search(self, filters: SearchFilters) -> list[ScoredListing]:
        """On-demand run; the result also becomes the stored snapshot."""
        return self.run(filters)

    def listings(self) -> list[ScoredListing]:
        return self.store.read()
