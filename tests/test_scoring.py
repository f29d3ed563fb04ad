# tests/test_scoring.py
import pytest

from carwatch.schemas import Listing
from carwatch.scoring import (
    apply_scoring, average_price, mileage_score, price_score, score_listing, year_score,
)


def _listing(id, price, year=0, mileage=0):
    return Listing(id=id, title=id, price=price, year=year, mileage=mileage)


def test_average_price():
    batch = [_listing("a", 10000), _listing("b", 15000), _listing("c", 20000)]
    assert average_price(batch) == 15000


def test_average_rounds_half_up():
    assert average_price([_listing("a", 1), _listing("b", 4)]) == 3


def test_empty_batch():
    assert average_price([]) == 0
    assert apply_scoring([]) == []


def test_price_score_against_average():
    assert price_score(10000, 15000) == pytest.approx(83.33, abs=0.01)
    assert price_score(20000, 15000) == pytest.approx(16.67, abs=0.01)
    assert price_score(15000, 15000) == 50
    assert price_score(0, 15000) == 100
    assert price_score(60000, 15000) == 0


def test_price_score_without_average_is_neutral():
    assert price_score(12000, 0) == 50


def test_mileage_score():
    assert mileage_score(0) == 50
    assert mileage_score(-10) == 50
    assert mileage_score(150000) == 50
    assert mileage_score(30000) == pytest.approx(90)
    assert mileage_score(300000) == 0
    assert mileage_score(450000) == 0


def test_year_score():
    assert year_score(0) == 50
    assert year_score(1995) == 0
    assert year_score(2010) == 50
    assert year_score(2025) == 100
    assert year_score(1980) == 0
    assert year_score(2031) == 100


def test_score_listing_weights():
    # 0.5 * 83.33 + 0.25 * 90 + 0.25 * 80 = 84.17
    listing = _listing("a", 10000, year=2019, mileage=30000)
    assert score_listing(listing, 15000) == 84


def test_batch_is_scored_and_sorted():
    batch = [_listing("mid", 15000), _listing("dear", 20000), _listing("cheap", 10000)]
    scored = apply_scoring(batch)
    assert [item.id for item in scored] == ["cheap", "mid", "dear"]
    assert [item.score for item in scored] == [67, 50, 33]
    assert [item.price_delta for item in scored] == [-5000, 0, 5000]


def test_scores_stay_in_range():
    batch = [_listing("a", 1), _listing("b", 1000000, year=1950, mileage=900000), _listing("c", 500, year=2030)]
    for item in apply_scoring(batch):
        assert 0 <= item.score <= 100


def test_zero_average_gives_zero_delta():
    scored = apply_scoring([_listing("a", 0), _listing("b", 0)])
    assert all(item.price_delta == 0 for item in scored)
    assert all(item.score == 50 for item in scored)


def test_ties_break_on_price_then_id():
    batch = [
        _listing("b", 10000, year=2015),
        _listing("a", 10000, year=2015),
        _listing("z", 9000, year=2012, mileage=1),
    ]
    scored = apply_scoring(batch)
    tied = [item for item in scored if item.id in ("a", "b")]
    assert [item.id for item in tied] == ["a", "b"]
    assert apply_scoring(list(reversed(batch))) == scored
