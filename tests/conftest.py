# tests/conftest.py
import json
import pytest

from carwatch.config import DefaultFilters
from carwatch.schemas import SearchFilters

PEUGEOT = {
    "brand": "Peugeot",
    "model": "208",
    "minPrice": 5000,
    "maxPrice": 15000,
    "minYear": 2015,
    "maxMileage": 150000,
    "region": "21",
    "city": "Lyon",
    "radiusKm": 50,
}


def make_card(title="Peugeot 208 Allure", price="12 500 €", features=("2018", "85 000 km", "Essence"),
              location="Lyon 69003", href="/ad/voitures/1", img="https://img.leboncoin.fr/1.jpg"):
    parts = ['<div data-qa-id="aditem_container">']
    if href is not None:
        parts.append(f'<a href="{href}">voir</a>')
    if title is not None:
        parts.append(f'<h2 data-qa-id="aditem_title">{title}</h2>')
    if price is not None:
        parts.append(f'<span data-qa-id="aditem_price">{price}</span>')
    if features is not None:
        items = "".join(f"<li>{f}</li>" for f in features)
        parts.append(f'<div data-qa-id="aditem_features" data-test-id="ad-params"><ul>{items}</ul></div>')
    if location is not None:
        parts.append(f'<span data-qa-id="aditem_location">{location}</span>')
    if img is not None:
        parts.append(f'<picture><img src="{img}"></picture>')
    parts.append("</div>")
    return "".join(parts)


def make_page(*cards):
    return "<html><body><main>" + "".join(cards) + "</main></body></html>"


@pytest.fixture
def filters_payload():
    return dict(PEUGEOT)


@pytest.fixture
def filters():
    return SearchFilters.model_validate(PEUGEOT)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(PEUGEOT), encoding="utf-8")
    return path


@pytest.fixture
def defaults(config_path):
    return DefaultFilters(str(config_path))


@pytest.fixture
def card():
    return make_card


@pytest.fixture
def page():
    return make_page
