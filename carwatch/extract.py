# carwatch/extract.py
"""Turn a rendered result page into `Listing` records.

Every rule works on BeautifulSoup nodes (select / text / attribute), so it can
be exercised against plain HTML without a browser.
"""
import re
from urllib.parse import urljoin
from bs4 import BeautifulSoup

from .query import BASE_URL
from .schemas import Listing, UNKNOWN_LOCATION
from .utils import logger

# try to detect available parser; prefer lxml if installed
try:
    import lxml  # type: ignore # noqa: F401
    _bs_parser = "lxml"
except ImportError:
    _bs_parser = "html.parser"

CARD_SELECTOR = '[data-qa-id="aditem_container"]'
TITLE_SELECTOR = '[data-qa-id="aditem_title"]'
PRICE_SELECTOR = '[data-qa-id="aditem_price"]'
FEATURES_SELECTOR = '[data-qa-id="aditem_features"] li'
LOCATION_SELECTOR = '[data-qa-id="aditem_location"]'
IMAGE_SELECTOR = "picture img"

DEFAULT_TITLE = "Annonce"
_YEAR_RE = re.compile(r"^\d{4}$")
_NON_DIGITS = re.compile(r"[^\d]")


def _text(node, selector):
    el = node.select_one(selector)
    return el.get_text(" ", strip=True) if el else ""


def _digits(text) -> int:
    digits = _NON_DIGITS.sub("", text or "")
    return int(digits) if digits else 0


def _absolute(href) -> str:
    href = (href or "").strip()
    return urljoin(BASE_URL, href) if href else ""


def _card_href(node) -> str:
    if node.name == "a" and node.get("href"):
        return _absolute(node["href"])
    anchor = node.select_one("a[href]")
    return _absolute(anchor["href"]) if anchor else ""


def _year(features) -> int:
    for token in features:
        if _YEAR_RE.match(token):
            return int(token)
    return 0


def _mileage(features) -> int:
    for token in features:
        if "km" in token.lower():
            return _digits(token)
    return 0


def extract_card(node) -> Listing:
    title = _text(node, TITLE_SELECTOR) or DEFAULT_TITLE
    price = _digits(_text(node, PRICE_SELECTOR))
    features = [li.get_text(" ", strip=True) for li in node.select(FEATURES_SELECTOR)]
    img = node.select_one(IMAGE_SELECTOR)
    url = _card_href(node)
    return Listing(
        # synthetic keys can collide for identical title/price without a url
        id=url or f"{title}-{price}",
        title=title,
        price=price,
        year=_year(features),
        mileage=_mileage(features),
        location=_text(node, LOCATION_SELECTOR) or UNKNOWN_LOCATION,
        image=_absolute(img.get("src")) if img else "",
        url=url,
    )


def keep_listing(listing: Listing, min_year: int) -> bool:
    return listing.price > 0 and listing.year >= min_year


def parse_listings(html: str, min_year: int) -> list[Listing]:
    soup = BeautifulSoup(html or "", _bs_parser)
    cards = soup.select(CARD_SELECTOR)
    extracted = [extract_card(card) for card in cards]
    kept = [item for item in extracted if keep_listing(item, min_year)]
    logger.info("Extracted %d cards, kept %d", len(extracted), len(kept))
    if len(kept) < len(extracted):
        logger.debug("Dropped %d cards without price or older than %d", len(extracted) - len(kept), min_year)
    return kept
