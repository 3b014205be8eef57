# tests/test_banners.py
import pytest

from storefront.domain.errors import BannerLimitReached
from storefront.services.banner_service import BannerService


@pytest.mark.anyio
async def test_add_ignores_blank_images(banners):
    result = await banners.add_banners(["a.png", " ", "", "b.png"])
    assert result == ["a.png", "b.png"]


@pytest.mark.anyio
async def test_limit(store):
    svc = BannerService(store, limit=3)

    assert await svc.add_banners(["1", "2", "3", "4"]) == ["1", "2", "3"]
    with pytest.raises(BannerLimitReached):
        await svc.add_banners(["5"])


@pytest.mark.anyio
async def test_delete_and_move(banners):
    await banners.add_banners(["a", "b", "c"])

    assert await banners.move_banner(2, "up") == ["a", "c", "b"]
    assert await banners.move_banner(0, "down") == ["c", "a", "b"]
    # poza zakresem - bez zmian
    assert await banners.move_banner(0, "up") == ["c", "a", "b"]
    assert await banners.move_banner(2, "down") == ["c", "a", "b"]

    assert await banners.delete_banner(1) == ["c", "b"]
    assert await banners.delete_banner(7) == ["c", "b"]
    assert await banners.list_banners() == ["c", "b"]
