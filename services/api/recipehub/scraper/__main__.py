"""Run every ingestion job once.

Usage:
    python -m recipehub.scraper
"""

import logging
import sys

from ..db import SessionLocal, init_engine
from ..settings import settings
from .prices import scrape_store_prices
from .recipes import seed_sample_recipes

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("recipehub.scraper")


def main() -> int:
    init_engine()
    db = SessionLocal()()
    try:
        counts = scrape_store_prices(db, settings.scraper_stores)
        seeded = seed_sample_recipes(db)
    finally:
        db.close()

    logger.info(
        f"Ingestion finished: {sum(counts.values())} prices across {len(counts)} stores, "
        f"{seeded} new recipes"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
