# storefront/services/catalog_service.py
import asyncio
from typing import List, Tuple

import requests

from storefront.data.seed import default_catalog
from storefront.data.store import StoreAdapter
from storefront.domain.errors import CategoryNotFound, MissingFields, PersistenceError, ValidationError
from storefront.domain.money import format_money, parse_money
from storefront.domain.schemas import Category, Item
from storefront.repos.catalog_repo import CatalogRepo
from storefront.services.image_client import ImageUploadClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def find_item(categories: List[Category], category_id: int, item_id: int) -> Item | None:
    """Resolve a (category, item) pair; None if either is gone."""
    category = next((c for c in categories if c.id == category_id), None)
    if category is None:
        return None
    return category.find_item(item_id)


def _next_id(records) -> int:
    return max((r.id for r in records), default=0) + 1


class CatalogService:
    """
    Kategorie i produkty. Kazda mutacja dziala na calym katalogu w pamieci
    i zapisuje cala strukture. Kolejnosc = kolejnosc dodania.
    """

    def __init__(self, store: StoreAdapter, image_uploader: ImageUploadClient | None = None):
        self.repo = CatalogRepo(store)
        self.image_uploader = image_uploader

    async def load_for_update(self) -> List[Category]:
        """
        Catalog to modify and save back. Seeds only when the record is absent;
        an unreadable store raises PersistenceError instead.
        """
        categories = await self.repo.load()

        if categories is None:
            categories = default_catalog()
            await self.repo.save(categories)
            logger.info(f"Seeded default catalog with {len(categories)} categories")

        return categories

    #query
    async def load_categories(self) -> List[Category]:
        try:
            return await self.load_for_update()
        except PersistenceError as e:
            # nic nie zapisujemy - prawdziwy katalog moze nadal lezec w storage
            logger.error(f"{e} - serving default catalog without persisting it")
            return default_catalog()

    async def get_category(self, category_id: int) -> Category:
        categories = await self.load_categories()
        category = next((c for c in categories if c.id == category_id), None)
        if category is None:
            raise CategoryNotFound(f"Category {category_id} not found")
        return category

    async def search(self, query: str) -> List[Category]:
        """Categories with only the items whose name contains the query."""
        categories = await self.load_categories()
        needle = (query or "").strip().lower()
        if not needle:
            return categories

        results = []
        for category in categories:
            matches = [i for i in category.items if needle in i.name.lower()]
            if matches:
                results.append(category.model_copy(update={"items": matches}))
        return results

    #commands - kategorie
    async def add_category(self, name: str, image: str | None = None) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name required")

        categories = await self.load_for_update()
        new_id = _next_id(categories)
        category = Category(
            id=new_id,
            name=name,
            items=[],
            image=await self._store_image(image, f"category-{new_id}.jpg") if image else None,
        )
        categories.append(category)
        await self.repo.save(categories)

        logger.info(f"Added category {category.id} '{name}'")
        return category

    async def rename_category(self, category_id: int, name: str) -> Category | None:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name required")

        categories = await self.load_for_update()
        category = next((c for c in categories if c.id == category_id), None)
        if category is None:
            logger.info(f"Rename skipped, category {category_id} does not exist")
            return None

        category.name = name
        await self.repo.save(categories)
        return category

    async def delete_category(self, category_id: int) -> bool:
        categories = await self.load_for_update()
        remaining = [c for c in categories if c.id != category_id]
        if len(remaining) == len(categories):
            return False

        await self.repo.save(remaining)
        logger.info(f"Deleted category {category_id}")
        return True

    #commands - produkty
    async def add_item(
        self,
        category_id: int,
        name: str,
        price,
        description: str,
        image: str | None,
    ) -> Item:
        name, price, description, image = self._validate_item(name, price, description, image)

        categories = await self.load_for_update()
        category = next((c for c in categories if c.id == category_id), None)
        if category is None:
            raise CategoryNotFound(f"Category {category_id} not found")

        new_id = _next_id(category.items)
        item = Item(
            id=new_id,
            name=name,
            price=price,
            description=description,
            image=await self._store_image(image, f"item-{category_id}-{new_id}.jpg"),
        )
        category.items.append(item)
        await self.repo.save(categories)

        logger.info(f"Added item {category_id}.{item.id} '{name}' at {price}")
        return item

    async def edit_item(
        self,
        category_id: int,
        item_id: int,
        name: str,
        price,
        description: str,
        image: str | None,
    ) -> Item | None:
        name, price, description, image = self._validate_item(name, price, description, image)

        categories = await self.load_for_update()
        item = find_item(categories, category_id, item_id)
        if item is None:
            logger.info(f"Edit skipped, item {category_id}.{item_id} does not exist")
            return None

        item.name = name
        item.price = price
        item.description = description
        item.image = await self._store_image(image, f"item-{category_id}-{item_id}.jpg")
        await self.repo.save(categories)

        logger.info(f"Updated item {category_id}.{item_id}")
        return item

    async def delete_item(self, category_id: int, item_id: int) -> bool:
        categories = await self.load_for_update()
        category = next((c for c in categories if c.id == category_id), None)
        if category is None or category.find_item(item_id) is None:
            return False

        category.items = [i for i in category.items if i.id != item_id]
        await self.repo.save(categories)

        logger.info(f"Deleted item {category_id}.{item_id}")
        return True

    #helpers
    @staticmethod
    def _validate_item(name, price, description, image) -> Tuple[str, str, str, str]:
        name = (name or "").strip()
        description = (description or "").strip()
        image = (image or "").strip()
        price_raw = "" if price is None else str(price).strip()

        missing = [
            field
            for field, value in (("name", name), ("price", price_raw), ("description", description))
            if not value
        ]
        if missing:
            raise MissingFields(missing)
        if not image:
            raise ValidationError("Please provide an image via upload or URL")

        try:
            amount = parse_money(price_raw)
        except ValueError as e:
            raise ValidationError(str(e))

        return name, format_money(amount), description, image

    async def _store_image(self, image: str, filename: str) -> str:
        if self.image_uploader is None or not image.startswith("data:"):
            return image

        try:
            return await asyncio.to_thread(self.image_uploader.upload, image, filename)
        except (requests.RequestException, KeyError, ValueError) as e:
            # fail soft - zostaje data URI
            logger.warning(f"Image upload failed for {filename}, keeping data URI: {e}")
            return image
