# carwatch/schemas.py
"""Pydantic models for search filters and listings.

Attributes are snake_case in Python and camelCase on the wire (API payloads,
config.json and the snapshot file). Both spellings are accepted on input.
"""
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import InvalidFilters

DEFAULT_RADIUS_KM = 30
UNKNOWN_LOCATION = "Inconnue"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchFilters(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
    )

    brand: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    min_price: int = Field(..., ge=0)
    max_price: int = Field(..., gt=0)
    min_year: int = Field(..., ge=1900)
    max_mileage: int = Field(..., ge=0)
    region: str = Field(..., min_length=1)
    city: str = ""
    # clamped when the query is built, not here
    radius_km: int = DEFAULT_RADIUS_KM

    @field_validator("min_price", "max_price", "min_year", "max_mileage", "radius_km", mode="before")
    @classmethod
    def _reject_bool(cls, v):
        if isinstance(v, bool):
            raise ValueError("must be an integer")
        return v

    @field_validator("city", mode="before")
    @classmethod
    def _city_default(cls, v):
        return "" if v is None else v

    @field_validator("radius_km", mode="before")
    @classmethod
    def _radius_default(cls, v):
        return DEFAULT_RADIUS_KM if v is None else v

    @field_validator("max_price")
    @classmethod
    def _max_not_below_min(cls, v, info):
        min_price = info.data.get("min_price")
        if min_price is not None and v < min_price:
            raise ValueError("maxPrice must be greater than or equal to minPrice")
        return v


class Listing(CamelModel):
    id: str
    title: str
    price: int = 0
    year: int = 0
    mileage: int = 0
    location: str = UNKNOWN_LOCATION
    image: str = ""
    url: str = ""


class ScoredListing(Listing):
    score: int = Field(0, ge=0, le=100)
    price_delta: int = 0


def _error_field(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ())]
    return ".".join(loc) or "body"


def validate_filters(payload: Any) -> SearchFilters:
    """Validate an arbitrary structure into `SearchFilters`.

    Raises `InvalidFilters` naming the first offending field.
    """
    if isinstance(payload, SearchFilters):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidFilters("body", "expected an object")
    try:
        return SearchFilters.model_validate(dict(payload))
    except ValidationError as e:
        errors = e.errors(include_url=False)
        first = errors[0]
        raise InvalidFilters(_error_field(first), first["msg"], errors) from e
