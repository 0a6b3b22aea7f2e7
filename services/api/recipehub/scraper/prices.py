"""Grocery price ingestion.

Each store's dataset is written in one transaction: upsert the store, upsert
every product by (store, name), then upsert today's price by (product, day).
Re-running on the same day overwrites that day's price instead of adding rows.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from ..db import dialect_insert, transaction
from ..models import Product, ProductPrice, Store

logger = logging.getLogger("recipehub.scraper.prices")


@dataclass(frozen=True)
class ProductInput:
    name: str
    unit: str
    size_value: float
    size_unit: str
    price_cents: int


def upsert_store(db: Session, name: str) -> int:
    stmt = dialect_insert(db, Store).values(name=name)
    stmt = stmt.on_conflict_do_update(
        index_elements=["name"], set_={"name": stmt.excluded.name}
    ).returning(Store.id)
    return db.execute(stmt).scalar_one()


def upsert_product(db: Session, store_id: int, p: ProductInput) -> str:
    stmt = dialect_insert(db, Product).values(
        store_id=store_id,
        name=p.name,
        unit=p.unit,
        size_value=p.size_value,
        size_unit=p.size_unit,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["store_id", "name"],
        set_={
            "unit": stmt.excluded.unit,
            "size_value": stmt.excluded.size_value,
            "size_unit": stmt.excluded.size_unit,
        },
    ).returning(Product.id)
    return db.execute(stmt).scalar_one()


def upsert_price(db: Session, product_id: str, price_cents: int, collected_at: date) -> None:
    stmt = dialect_insert(db, ProductPrice).values(
        product_id=product_id, price_cents=price_cents, collected_at=collected_at
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["product_id", "collected_at"],
        set_={"price_cents": stmt.excluded.price_cents},
    )
    db.execute(stmt)


def update_store_prices(
    db: Session,
    store_name: str,
    products: Sequence[ProductInput],
    collected_at: Optional[date] = None,
) -> int:
    """Write one store's price list. Returns the number of products written."""
    day = collected_at or datetime.now(timezone.utc).date()
    with transaction(db):
        store_id = upsert_store(db, store_name)
        for p in products:
            product_id = upsert_product(db, store_id, p)
            upsert_price(db, product_id, p.price_cents, day)
    logger.info(f"Updated {len(products)} prices for {store_name} ({day})")
    return len(products)


# Built-in datasets, one per store. Sizes are in the product's own unit.

RIMI_PRODUCTS = [
    ProductInput("Potatoes 1kg", "g", 1000, "g", 129),
    ProductInput("Eggs 10pcs", "pcs", 10, "pcs", 249),
    ProductInput("Pickles 720ml jar", "ml", 720, "ml", 299),
    ProductInput("Mayonnaise 400g", "g", 400, "g", 189),
    ProductInput("Salt 1kg", "g", 1000, "g", 59),
    ProductInput("Black Pepper 50g", "g", 50, "g", 149),
]

MAXIMA_PRODUCTS = [
    ProductInput("Potatoes 2kg", "g", 2000, "g", 199),
    ProductInput("Eggs 10pcs", "pcs", 10, "pcs", 239),
    ProductInput("Pickles 680ml jar", "ml", 680, "ml", 279),
    ProductInput("Mayonnaise 250g", "g", 250, "g", 129),
    ProductInput("Salt 1kg", "g", 1000, "g", 55),
    ProductInput("Black Pepper 40g", "g", 40, "g", 129),
]

BARBORA_PRODUCTS = [
    ProductInput("Potatoes 1.5kg", "g", 1500, "g", 169),
    ProductInput("Eggs 12pcs", "pcs", 12, "pcs", 289),
    ProductInput("Pickles 720ml jar", "ml", 720, "ml", 289),
    ProductInput("Mayonnaise 500g", "g", 500, "g", 219),
    ProductInput("Salt 500g", "g", 500, "g", 39),
    ProductInput("Black Pepper 50g", "g", 50, "g", 139),
]

LIDL_PRODUCTS = [
    ProductInput("Potatoes 2kg", "g", 2000, "g", 179),
    ProductInput("Eggs 10pcs", "pcs", 10, "pcs", 219),
    ProductInput("Sunflower Oil 1L", "ml", 1000, "ml", 299),
    ProductInput("Sugar 1kg", "g", 1000, "g", 89),
    ProductInput("Salt 1kg", "g", 1000, "g", 49),
]

STORE_DATASETS: dict[str, list[ProductInput]] = {
    "Rimi": RIMI_PRODUCTS,
    "Maxima": MAXIMA_PRODUCTS,
    "Barbora": BARBORA_PRODUCTS,
    "Lidl": LIDL_PRODUCTS,
}


def scrape_store_prices(db: Session, stores: Optional[Sequence[str]] = None) -> dict[str, int]:
    """Run the built-in dataset for each requested store (all when None).

    Unknown store names raise KeyError before anything is written.
    """
    names = list(stores) if stores else list(STORE_DATASETS)
    for name in names:
        if name not in STORE_DATASETS:
            raise KeyError(f"No price dataset for store '{name}'")
    return {name: update_store_prices(db, name, STORE_DATASETS[name]) for name in names}
