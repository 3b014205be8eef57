# storefront/repos/banner_repo.py
from typing import List

from storefront.data.store import BANNERS, StoreAdapter, resolve


class BannerRepo:
    def __init__(self, store: StoreAdapter):
        self.store = store

    async def get_banners(self) -> List[str]:
        raw = await resolve(self.store.read(BANNERS))
        return [str(src) for src in raw or []]

    async def save_banners(self, banners: List[str]) -> None:
        await resolve(self.store.write(BANNERS, list(banners)))
