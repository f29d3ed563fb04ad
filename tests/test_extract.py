# tests/test_extract.py
from bs4 import BeautifulSoup

from carwatch.extract import CARD_SELECTOR, extract_card, keep_listing, parse_listings


def _node(html):
    return BeautifulSoup(html, "html.parser").select_one(CARD_SELECTOR)


def test_extracts_full_card(card):
    listing = extract_card(_node(card()))
    assert listing.title == "Peugeot 208 Allure"
    assert listing.price == 12500
    assert listing.year == 2018
    assert listing.mileage == 85000
    assert listing.location == "Lyon 69003"
    assert listing.image == "https://img.leboncoin.fr/1.jpg"
    assert listing.url == "https://www.leboncoin.fr/ad/voitures/1"
    assert listing.id == listing.url


def test_empty_card_uses_fallbacks():
    listing = extract_card(_node('<div data-qa-id="aditem_container"></div>'))
    assert listing.title == "Annonce"
    assert listing.price == 0
    assert listing.year == 0
    assert listing.mileage == 0
    assert listing.location == "Inconnue"
    assert listing.image == ""
    assert listing.url == ""
    assert listing.id == "Annonce-0"


def test_synthetic_id_without_url(card):
    listing = extract_card(_node(card(href=None, title="Clio IV", price="7 900 €")))
    assert listing.url == ""
    assert listing.id == "Clio IV-7900"


def test_anchor_card_uses_own_href():
    html = '<a data-qa-id="aditem_container" href="https://www.leboncoin.fr/ad/voitures/99"><span data-qa-id="aditem_price">9 000 €</span></a>'
    listing = extract_card(_node(html))
    assert listing.url == "https://www.leboncoin.fr/ad/voitures/99"
    assert listing.price == 9000


def test_unparseable_price_is_zero(card):
    assert extract_card(_node(card(price="Prix sur demande"))).price == 0


def test_non_breaking_spaces_in_price(card):
    assert extract_card(_node(card(price="14\u00a0990\u00a0€"))).price == 14990


def test_year_needs_exactly_four_digits(card):
    listing = extract_card(_node(card(features=("12/2019", "20199", "2017", "2016"))))
    assert listing.year == 2017


def test_mileage_matches_km_case_insensitively(card):
    listing = extract_card(_node(card(features=("Diesel", "120 500 KM"))))
    assert listing.mileage == 120500
    assert listing.year == 0


def test_relative_image_is_made_absolute(card):
    listing = extract_card(_node(card(img="/static/car.jpg")))
    assert listing.image == "https://www.leboncoin.fr/static/car.jpg"


def test_keep_listing_rules(card):
    listing = extract_card(_node(card()))
    assert keep_listing(listing, 2015)
    assert keep_listing(listing, 2018)
    assert not keep_listing(listing, 2019)
    assert not keep_listing(listing.model_copy(update={"price": 0}), 2000)


def test_parse_listings_drops_free_and_old_cards(card, page):
    html = page(
        card(href="/ad/1"),
        card(href="/ad/2", price="0 €"),
        card(href="/ad/3", features=("2010", "90 000 km")),
        card(href="/ad/4", price=None),
        card(href="/ad/5", features=("Essence",)),
    )
    kept = parse_listings(html, min_year=2015)
    assert [item.url for item in kept] == ["https://www.leboncoin.fr/ad/1"]


def test_unknown_year_is_kept_when_min_year_is_zero(card, page):
    kept = parse_listings(page(card(features=("Essence",))), min_year=0)
    assert len(kept) == 1
    assert kept[0].year == 0


def test_page_without_cards(page):
    assert parse_listings(page(), min_year=2015) == []
    assert parse_listings("", min_year=2015) == []
