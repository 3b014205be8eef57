# storefront/services/banner_service.py
from typing import List

from storefront.data.store import StoreAdapter
from storefront.domain.errors import BannerLimitReached
from storefront.repos.banner_repo import BannerRepo
from storefront.utils.settings import MAX_BANNERS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class BannerService:
    """Ordered home page banner images (URLs or data URIs), at most MAX_BANNERS."""

    def __init__(self, store: StoreAdapter, limit: int = MAX_BANNERS):
        self.repo = BannerRepo(store)
        self.limit = limit

    async def list_banners(self) -> List[str]:
        return await self.repo.get_banners()

    async def add_banners(self, images: List[str]) -> List[str]:
        banners = await self.repo.get_banners()
        if len(banners) >= self.limit:
            raise BannerLimitReached(
                f"Maximum of {self.limit} banner images reached. Please delete some before adding more."
            )

        new_images = [src.strip() for src in images if src and src.strip()]
        free = self.limit - len(banners)
        if len(new_images) > free:
            logger.info(f"Only {free} of {len(new_images)} banner images fit, rest ignored")

        banners.extend(new_images[:free])
        await self.repo.save_banners(banners)
        return banners

    async def delete_banner(self, index: int) -> List[str]:
        banners = await self.repo.get_banners()
        if not 0 <= index < len(banners):
            return banners

        banners.pop(index)
        await self.repo.save_banners(banners)
        return banners

    async def move_banner(self, index: int, direction: str) -> List[str]:
        """Swap with the previous ("up") or next ("down") banner."""
        banners = await self.repo.get_banners()
        target = index - 1 if direction == "up" else index + 1
        if direction not in ("up", "down") or not 0 <= index < len(banners) or not 0 <= target < len(banners):
            return banners

        banners[index], banners[target] = banners[target], banners[index]
        await self.repo.save_banners(banners)
        return banners
