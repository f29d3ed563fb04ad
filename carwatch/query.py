# carwatch/query.py
"""Map search filters onto a marketplace search URL. Pure, no I/O."""
import math
from urllib.parse import urlencode

from .schemas import DEFAULT_RADIUS_KM, SearchFilters

BASE_URL = "https://www.leboncoin.fr"
SEARCH_URL = f"{BASE_URL}/recherche"
CARS_CATEGORY = "2"
MIN_RADIUS_KM = 5
MAX_RADIUS_KM = 500


def clamp_radius_km(value) -> int:
    """Clamp a radius into [5, 500] km; unusable input falls back to the default."""
    try:
        km = float(value)
    except (TypeError, ValueError):
        return DEFAULT_RADIUS_KM
    if math.isnan(km):
        return DEFAULT_RADIUS_KM
    return int(round(min(MAX_RADIUS_KM, max(MIN_RADIUS_KM, km))))


def radius_meters(value) -> int:
    return clamp_radius_km(value) * 1000


def build_params(filters: SearchFilters) -> list[tuple[str, str]]:
    params = [
        ("category", CARS_CATEGORY),
        ("text", f"{filters.brand} {filters.model}".strip()),
        ("price", f"{filters.min_price}-{filters.max_price}"),
        ("reg", filters.region),
        ("mileage", f"0-{filters.max_mileage}"),
        ("year", f"{filters.min_year}-"),
    ]
    city = filters.city.strip()
    if city:
        params.append(("locations", f"{city}__{radius_meters(filters.radius_km)}"))
        params.append(("search_in", "around_city"))
    # leboncoin sorts by publication date with sort=time&order=desc
    params.append(("sort", "time"))
    params.append(("order", "desc"))
    return params


def build_search_url(filters: SearchFilters) -> str:
    return f"{SEARCH_URL}?{urlencode(build_params(filters))}"
