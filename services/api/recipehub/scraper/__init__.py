from .prices import ProductInput, STORE_DATASETS, scrape_store_prices, update_store_prices
from .recipes import SAMPLE_RECIPES, seed_sample_recipes

__all__ = ["ProductInput", "STORE_DATASETS", "scrape_store_prices", "update_store_prices", "SAMPLE_RECIPES", "seed_sample_recipes"]
