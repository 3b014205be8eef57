# storefront/repos/cart_repo.py
from typing import List

from storefront.data.store import CART, StoreAdapter, resolve
from storefront.domain.schemas import CartLine


class CartRepo:
    def __init__(self, store: StoreAdapter):
        self.store = store

    async def get_lines(self) -> List[CartLine]:
        raw = await resolve(self.store.read(CART))
        return [CartLine.model_validate(line) for line in raw or []]

    async def save_lines(self, lines: List[CartLine]) -> None:
        await resolve(self.store.write(CART, [line.to_json() for line in lines]))

    async def clear(self) -> None:
        await resolve(self.store.write(CART, []))
