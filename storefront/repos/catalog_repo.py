# storefront/repos/catalog_repo.py
from typing import List

from storefront.data.store import CATEGORIES, StoreAdapter, resolve
from storefront.domain.schemas import Category


class CatalogRepo:
    def __init__(self, store: StoreAdapter):
        self.store = store

    async def load(self) -> List[Category] | None:
        """
        None when the record was never written (catalog not seeded yet).
        Raises PersistenceError when storage cannot be read, so a failed
        read is never mistaken for a missing catalog.
        """
        raw = await resolve(self.store.fetch(CATEGORIES))
        if raw is None:
            return None
        return [Category.model_validate(c) for c in raw]

    async def save(self, categories: List[Category]) -> None:
        await resolve(self.store.write(CATEGORIES, [c.to_json() for c in categories]))
