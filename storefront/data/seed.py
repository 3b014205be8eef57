# storefront/data/seed.py
import random
from decimal import Decimal, ROUND_DOWN
from typing import List

from storefront.domain.schemas import Category, Item
from storefront.utils.settings import CATALOG_SEED

DEFAULT_CATEGORY_COUNT = 10
DEFAULT_ITEMS_PER_CATEGORY = 10


def _price(rng: random.Random) -> str:
    # [10, 100) - obcinamy zamiast zaokraglac, zeby nigdy nie wyszlo 100.00
    raw = Decimal(str(rng.random() * 90 + 10))
    return str(raw.quantize(Decimal("0.01"), rounding=ROUND_DOWN))


def default_catalog(seed: int | None = None) -> List[Category]:
    """Deterministic demo catalog: 10 categories x 10 items."""
    rng = random.Random(CATALOG_SEED if seed is None else seed)
    categories = []

    for i in range(1, DEFAULT_CATEGORY_COUNT + 1):
        items = [
            Item(
                id=j,
                name=f"Item {i}.{j}",
                price=_price(rng),
                image=f"https://via.placeholder.com/300x180.png?text=Item+{i}.{j}",
                description=f"This is the description for item {i}.{j}.",
            )
            for j in range(1, DEFAULT_ITEMS_PER_CATEGORY + 1)
        ]
        categories.append(Category(id=i, name=f"Category {i}", items=items))

    return categories
