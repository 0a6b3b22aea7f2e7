"""Tests for grocery price lookup.

Covers:
- Ranking by price per base unit (pure)
- Name patterns with en/lv synonyms
- Latest-snapshot queries over scraped data
- /api/prices endpoints
"""

from datetime import date

import pytest

from recipehub.scraper.prices import ProductInput, scrape_store_prices, update_store_prices
from recipehub.services.prices import (
    ProductOffer,
    build_affiliate_url,
    build_name_patterns,
    cheapest_offer,
    compare_product_options,
    find_cheapest_product,
    price_offers,
)


# --- Pure ranking ---

def test_bigger_package_wins_when_cheaper_per_gram():
    """1000 g for 200 (0.2/g) beats 500 g for 150 (0.3/g)."""
    offers = [
        ProductOffer("Rimi", "Flour 500g", 150, 500, "g"),
        ProductOffer("Maxima", "Flour 1kg", 200, 1000, "g"),
    ]
    best = cheapest_offer(offers, "g")
    assert best is not None
    assert best.offer.product_name == "Flour 1kg"
    assert best.unit_price_cents == pytest.approx(0.2)
    assert best.package_base_unit == "g"
    assert best.package_base_size == 1000


def test_sizes_in_kg_are_normalized():
    offers = [
        ProductOffer("Rimi", "Sugar 1kg", 90, 1, "kg"),
        ProductOffer("Lidl", "Sugar 500g", 50, 500, "g"),
    ]
    ranked = price_offers(offers, "g")
    assert [p.offer.product_name for p in ranked] == ["Sugar 1kg", "Sugar 500g"]
    assert ranked[0].package_base_size == 1000


def test_incompatible_and_unusable_offers_are_skipped():
    offers = [
        ProductOffer("Rimi", "Milk 1L", 99, 1, "l"),
        ProductOffer("Rimi", "Milk broken", 10, 0, "g"),
        ProductOffer("Rimi", "Milk unknown", 10, None, "g"),
    ]
    assert price_offers(offers, "g") == []
    assert cheapest_offer(offers, "g") is None
    assert cheapest_offer(offers, "ml").offer.product_name == "Milk 1L"


def test_unknown_target_unit_finds_nothing():
    offers = [ProductOffer("Rimi", "Flour 1kg", 200, 1000, "g")]
    assert price_offers(offers, "cup") == []


def test_ties_keep_input_order():
    offers = [
        ProductOffer("A", "Salt 1kg", 50, 1000, "g"),
        ProductOffer("B", "Salt 500g", 25, 500, "g"),
    ]
    assert cheapest_offer(offers, "g").offer.store_name == "A"


def test_name_patterns_include_synonyms_and_diacritic_free_forms():
    patterns = build_name_patterns("Sāls")
    assert "%sāls%" in patterns
    assert "%sals%" in patterns
    assert "%salt%" in patterns
    assert len(patterns) == len(set(patterns))

    assert "%ola%" in build_name_patterns("Eggs")
    assert build_name_patterns("   ") == []


def test_affiliate_url_quotes_query():
    assert build_affiliate_url("https://shop.example/search?q={query}", "black pepper") == (
        "https://shop.example/search?q=black%20pepper"
    )
    assert build_affiliate_url(None, "salt") is None


# --- Database lookups ---

def test_latest_snapshot_wins(db_session):
    update_store_prices(
        db_session, "Rimi", [ProductInput("Flour 1kg", "g", 1000, "g", 100)],
        collected_at=date(2024, 1, 1),
    )
    update_store_prices(
        db_session, "Rimi", [ProductInput("Flour 1kg", "g", 1000, "g", 300)],
        collected_at=date(2024, 1, 8),
    )
    best = find_cheapest_product(db_session, "flour", "g")
    assert best.offer.price_cents == 300


def test_compare_orders_stores_by_unit_price(db_session):
    scrape_store_prices(db_session)
    options = compare_product_options(db_session, "potatoes", "g")
    assert [o.offer.store_name for o in options] == ["Lidl", "Maxima", "Barbora", "Rimi"]


def test_find_cheapest_matches_synonyms(db_session):
    scrape_store_prices(db_session)
    best = find_cheapest_product(db_session, "olas", "pcs")
    assert best.offer.store_name == "Lidl"
    assert best.offer.product_name == "Eggs 10pcs"


# --- Endpoints ---

def test_cheapest_endpoint(client, db_session):
    scrape_store_prices(db_session)
    response = client.get("/api/prices/cheapest", params={"name": "eggs", "unit": "pcs"})
    assert response.status_code == 200
    data = response.json()
    assert data["store_name"] == "Lidl"
    assert data["price_cents"] == 219
    assert data["unit_price_cents"] == pytest.approx(21.9)
    assert data["package_base_unit"] == "pcs"


def test_cheapest_endpoint_requires_name(client):
    response = client.get("/api/prices/cheapest", params={"name": "  "})
    assert response.status_code == 400


def test_cheapest_endpoint_not_found_for_incompatible_unit(client, db_session):
    scrape_store_prices(db_session)
    response = client.get("/api/prices/cheapest", params={"name": "eggs", "unit": "ml"})
    assert response.status_code == 404


def test_compare_endpoint(client, db_session):
    scrape_store_prices(db_session)
    response = client.get("/api/prices/compare", params={"name": "salt"})
    assert response.status_code == 200
    data = response.json()
    assert data["unit"] == "g"
    prices = [o["unit_price_cents"] for o in data["options"]]
    assert prices == sorted(prices)
    assert data["options"][0]["store_name"] == "Lidl"
