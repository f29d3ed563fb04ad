# carwatch/scoring.py
"""Rank a batch of listings against the batch's own average price."""
import math

from .schemas import Listing, ScoredListing

PRICE_WEIGHT = 0.5
MILEAGE_WEIGHT = 0.25
YEAR_WEIGHT = 0.25
MILEAGE_CEILING = 300000
YEAR_FLOOR = 1995
YEAR_SPAN = 30
NEUTRAL = 50.0


def _round(value: float) -> int:
    # half up, so 82.5 -> 83 rather than banker's rounding
    return int(math.floor(value + 0.5))


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def average_price(listings: list[Listing]) -> int:
    if not listings:
        return 0
    return _round(sum(item.price for item in listings) / len(listings))


def price_score(price: int, average: int) -> float:
    if not average:
        return NEUTRAL
    return _clamp(50 + ((average - price) / average) * 100)


def mileage_score(mileage: int) -> float:
    if mileage <= 0:
        return NEUTRAL
    return _clamp(100 - (mileage / MILEAGE_CEILING) * 100)


def year_score(year: int) -> float:
    if not year:
        return NEUTRAL
    return _clamp(((year - YEAR_FLOOR) / YEAR_SPAN) * 100)


def score_listing(listing: Listing, average: int) -> int:
    combined = (
        price_score(listing.price, average) * PRICE_WEIGHT
        + mileage_score(listing.mileage) * MILEAGE_WEIGHT
        + year_score(listing.year) * YEAR_WEIGHT
    )
    return int(_clamp(_round(combined)))


def _rank_key(item: ScoredListing):
    return (-item.score, item.price, item.id)


def apply_scoring(listings: list[Listing]) -> list[ScoredListing]:
    """Score every listing and sort best first.

    Equal scores are ordered by cheaper price, then by id, so the output is
    stable for a given batch.
    """
    average = average_price(listings)
    scored = [
        ScoredListing(
            **item.model_dump(),
            score=score_listing(item, average),
            price_delta=item.price - average if average else 0,
        )
        for item in listings
    ]
    return sorted(scored, key=_rank_key)
