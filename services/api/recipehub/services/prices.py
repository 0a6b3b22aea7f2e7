"""
Grocery price lookup.

Finds products matching an ingredient name (substring match, with en/lv
synonyms and diacritic-free variants), normalizes package sizes to a base
unit and ranks them by price per base unit.
"""

import logging
import unicodedata
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence
from urllib.parse import quote

from sqlalchemy import select, func, and_, or_
from sqlalchemy.orm import Session

from ..models import Product, ProductPrice, Store
from .grocery import GroceryLine
from .units import base_unit, size_in_base, to_base

logger = logging.getLogger("recipehub.prices")


# Names scraped from Latvian stores rarely contain the English word.
SYNONYM_GROUPS: list[list[str]] = [
    ["egg", "eggs", "ola", "olas", "olu", "olam"],
    ["potato", "potatoes", "kartupel", "kartupeli", "kartupelis", "kartupelu"],
    ["sugar", "cukurs"],
    ["salt", "sals", "sāls"],
    ["oil", "olive oil", "ella", "eļļa"],
    ["milk", "piens"],
    ["flour", "milti"],
    ["rice", "risi", "rīsi"],
    ["chicken", "vista"],
    ["pork", "cuka", "cūka"],
    ["butter", "sviests"],
    ["cheese", "siers", "siera"],
    ["tomato", "tomats", "tomāts"],
    ["bread", "maize"],
]


@dataclass(frozen=True)
class ProductOffer:
    store_name: str
    product_name: str
    price_cents: int
    size_value: Optional[float]
    size_unit: str
    affiliate_url_template: Optional[str] = None


@dataclass(frozen=True)
class PricedOffer:
    offer: ProductOffer
    unit_price_cents: float  # cents per base unit
    package_base_unit: str
    package_base_size: float

    def to_dict(self, query: Optional[str] = None) -> dict:
        return {
            "store_name": self.offer.store_name,
            "product_name": self.offer.product_name,
            "price_cents": self.offer.price_cents,
            "unit_price_cents": round(self.unit_price_cents, 4),
            "package_base_unit": self.package_base_unit,
            "package_base_size": self.package_base_size,
            "affiliate_url": build_affiliate_url(self.offer.affiliate_url_template, query)
            if query else None,
        }


def strip_diacritics(s: str) -> str:
    return "".join(
        c for c in unicodedata.normalize("NFD", s) if unicodedata.category(c) != "Mn"
    )


def build_name_patterns(raw_name: str) -> list[str]:
    """ILIKE patterns for an ingredient name, e.g. "Eggs" -> %eggs%, %ola%, ..."""
    name = (raw_name or "").strip().lower()
    if not name:
        return []
    clean = strip_diacritics(name)

    patterns: list[str] = []

    def push(term: str):
        p = f"%{term}%"
        if term and p not in patterns:
            patterns.append(p)

    push(name)
    push(clean)

    for group in SYNONYM_GROUPS:
        group_clean = [strip_diacritics(w) for w in group]
        if any(w in name for w in group) or any(w in clean for w in group_clean):
            for w in group:
                push(w)
                push(strip_diacritics(w))

    return patterns


def build_affiliate_url(template: Optional[str], query: str) -> Optional[str]:
    if not template:
        return None
    return template.replace("{query}", quote(query, safe=""))


def price_offers(offers: Iterable[ProductOffer], unit: str) -> list[PricedOffer]:
    """
    Price every offer compatible with `unit`, cheapest per base unit first.

    Incompatible units (g vs ml vs pcs) and unusable sizes are skipped.
    The sort is stable, so equal prices keep input order.
    """
    target = base_unit(unit)
    if target is None:
        return []

    priced: list[PricedOffer] = []
    for offer in offers:
        size = size_in_base(offer.size_value, offer.size_unit, target)
        if size is None:
            continue
        priced.append(
            PricedOffer(
                offer=offer,
                unit_price_cents=offer.price_cents / size,
                package_base_unit=target,
                package_base_size=size,
            )
        )
    priced.sort(key=lambda p: p.unit_price_cents)
    return priced


def cheapest_offer(offers: Iterable[ProductOffer], unit: str) -> Optional[PricedOffer]:
    """Offer with the lowest price per base unit, or None if nothing is comparable."""
    priced = price_offers(offers, unit)
    return priced[0] if priced else None


def query_latest_offers(db: Session, patterns: Sequence[str]) -> list[ProductOffer]:
    """Latest price snapshot of every product whose name matches any pattern."""
    if not patterns:
        return []

    latest = (
        select(
            ProductPrice.product_id,
            func.max(ProductPrice.collected_at).label("collected_at"),
        )
        .group_by(ProductPrice.product_id)
        .subquery()
    )
    stmt = (
        select(
            Store.name,
            Store.affiliate_url_template,
            Product.name,
            Product.size_value,
            Product.size_unit,
            ProductPrice.price_cents,
        )
        .select_from(Product)
        .join(Store, Store.id == Product.store_id)
        .join(latest, latest.c.product_id == Product.id)
        .join(
            ProductPrice,
            and_(
                ProductPrice.product_id == latest.c.product_id,
                ProductPrice.collected_at == latest.c.collected_at,
            ),
        )
        .where(or_(*[Product.name.ilike(p) for p in patterns]))
        .order_by(Store.name, Product.name)
    )

    return [
        ProductOffer(
            store_name=store_name,
            product_name=product_name,
            price_cents=int(price_cents),
            size_value=size_value,
            size_unit=size_unit,
            affiliate_url_template=template,
        )
        for store_name, template, product_name, size_value, size_unit, price_cents in db.execute(stmt)
    ]


def find_cheapest_product(db: Session, ingredient_name: str, unit: str) -> Optional[PricedOffer]:
    patterns = build_name_patterns(ingredient_name)
    if not patterns:
        return None
    return cheapest_offer(query_latest_offers(db, patterns), unit)


def compare_product_options(db: Session, ingredient_name: str, unit: str) -> list[PricedOffer]:
    patterns = build_name_patterns(ingredient_name)
    return price_offers(query_latest_offers(db, patterns), unit)


def price_grocery_items(db: Session, items: Sequence[GroceryLine]) -> dict:
    """Attach the cheapest offer and an estimated cost to each grocery line."""
    lines = []
    total = 0

    for item in items:
        value, base = to_base(item.total_quantity, item.unit)
        cheapest = find_cheapest_product(db, item.name, base)
        line = {
            "name": item.name,
            "total_quantity": item.total_quantity,
            "unit": item.unit,
            "store_name": None,
            "product_name": None,
            "unit_price_cents": None,
            "estimated_cost_cents": None,
            "affiliate_url": None,
        }
        if cheapest is None:
            logger.info(f"No price match for '{item.name}' ({base})")
            lines.append(line)
            continue

        estimated = int(Decimal(cheapest.unit_price_cents * value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        total += estimated
        line.update(
            store_name=cheapest.offer.store_name,
            product_name=cheapest.offer.product_name,
            unit_price_cents=round(cheapest.unit_price_cents, 4),
            estimated_cost_cents=estimated,
            affiliate_url=build_affiliate_url(cheapest.offer.affiliate_url_template, item.name),
        )
        lines.append(line)

    return {"lines": lines, "total_cents": total}
