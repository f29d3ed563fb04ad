# carwatch/browser.py
"""One isolated browser visit to a search page, with basic anti-detection.

Each `fetch` launches its own browser, picks a desktop fingerprint, blocks
heavy resources, waits a human-ish interval and returns the rendered HTML.
Retries are left to the caller.
"""
import random
import time
from playwright.sync_api import sync_playwright, Error as PWError, TimeoutError as PWTimeout
from playwright_stealth.stealth import Stealth

from .config import HEADLESS, NAV_TIMEOUT_MS, SELECTOR_TIMEOUT_MS
from .errors import AccessRestricted, NavigationError
from .extract import CARD_SELECTOR
from .utils import logger

FINGERPRINTS = (
    {
        "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
        "viewport": {"width": 1366, "height": 768},
    },
    {
        "user_agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36",
        "viewport": {"width": 1366, "height": 768},
    },
    {
        "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0",
        "viewport": {"width": 1360, "height": 768},
    },
    {
        "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36 Edg/122.0.0.0",
        "viewport": {"width": 1366, "height": 768},
    },
)
LOCALE = "fr-FR"
TIMEZONE = "Europe/Paris"
LAUNCH_ARGS = ["--disable-blink-features=AutomationControlled"]
BLOCKED_RESOURCE_TYPES = frozenset({"image", "media", "font"})
SOFT_BLOCK_MARKERS = ("captcha", "too many requests")

# seconds
DWELL_JITTER = (1.2, 2.2)
RELEASE_JITTER = (0.5, 1.3)


def block_heavy_resources(route):
    """Abort images, media and fonts; let everything else through."""
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        return route.abort()
    return route.continue_()


def detect_soft_block(text):
    lowered = (text or "").lower()
    for marker in SOFT_BLOCK_MARKERS:
        if marker in lowered:
            return marker
    return None


class BrowsingSession:
    def __init__(
        self,
        headless: bool = HEADLESS,
        nav_timeout_ms: int = NAV_TIMEOUT_MS,
        selector_timeout_ms: int = SELECTOR_TIMEOUT_MS,
        rng: random.Random | None = None,
        sleep=time.sleep,
        playwright_factory=sync_playwright,
        stealth: Stealth | None = None,
    ):
        self.headless = headless
        self.nav_timeout_ms = nav_timeout_ms
        self.selector_timeout_ms = selector_timeout_ms
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.playwright_factory = playwright_factory
        self.stealth = stealth or Stealth()

    def pick_fingerprint(self) -> dict:
        return dict(self.rng.choice(FINGERPRINTS))

    def pause(self, bounds) -> None:
        self.sleep(self.rng.uniform(*bounds))

    def fetch(self, url: str) -> str:
        """Return the rendered HTML of `url`.

        Raises `AccessRestricted` when the page looks like a captcha or rate
        limit, and `NavigationError` when the page could not be reached at all.
        Timeouts on navigation and on the result cards are logged and ignored.
        """
        fingerprint = self.pick_fingerprint()
        logger.info("Opening %s (ua=%s)", url, fingerprint["user_agent"])
        with self.playwright_factory() as p:
            browser = p.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
            try:
                context = browser.new_context(**fingerprint, locale=LOCALE, timezone_id=TIMEZONE)
                try:
                    context.route("**/*", block_heavy_resources)
                    page = context.new_page()
                    self.stealth.apply_stealth_sync(page)
                    return self._load(page, url)
                finally:
                    self.pause(RELEASE_JITTER)
                    context.close()
            finally:
                browser.close()

    def _load(self, page, url: str) -> str:
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=self.nav_timeout_ms)
        except PWTimeout:
            logger.warning("Navigation timed out after %d ms, using partial page", self.nav_timeout_ms)
        except PWError as e:
            raise NavigationError(f"Navigation to {url} failed: {e}") from e

        self.pause(DWELL_JITTER)
        try:
            page.wait_for_selector(CARD_SELECTOR, timeout=self.selector_timeout_ms)
        except PWTimeout:
            logger.warning("No result cards after %d ms, extracting from current DOM", self.selector_timeout_ms)

        text = page.evaluate("() => document.body ? document.body.innerText : ''")
        marker = detect_soft_block(text)
        if marker:
            raise AccessRestricted(marker)
        return page.content()
