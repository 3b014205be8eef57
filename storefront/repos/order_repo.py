# storefront/repos/order_repo.py
from typing import List

from storefront.data.store import ORDERS, StoreAdapter, resolve
from storefront.domain.schemas import Order


class OrderRepo:
    """Global order ledger (all orders of all users)."""

    def __init__(self, store: StoreAdapter):
        self.store = store

    @staticmethod
    def dump(orders: List[Order]) -> list:
        return [o.to_json() for o in orders]

    async def list_orders(self) -> List[Order]:
        raw = await resolve(self.store.read(ORDERS))
        return [Order.model_validate(o) for o in raw or []]

    async def fetch_orders(self) -> List[Order]:
        # scisly odczyt dla read-modify-write, blad storage leci dalej
        raw = await resolve(self.store.fetch(ORDERS))
        return [Order.model_validate(o) for o in raw or []]

    async def save_orders(self, orders: List[Order]) -> None:
        await resolve(self.store.write(ORDERS, self.dump(orders)))
