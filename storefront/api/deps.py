# storefront/api/deps.py
from functools import lru_cache

from fastapi import Depends, HTTPException

from storefront.data.store import StoreAdapter, build_store
from storefront.domain.errors import NotAuthenticated
from storefront.domain.schemas import User
from storefront.services.admin_service import AdminService
from storefront.services.banner_service import BannerService
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.image_client import ImageUploadClient
from storefront.services.lock_service import LockService, build_lock_service
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService
from storefront.utils.settings import STORE_BACKEND


@lru_cache
def get_store() -> StoreAdapter:
    return build_store()


@lru_cache
def get_lock_service() -> LockService | None:
    return build_lock_service()


@lru_cache
def get_image_uploader() -> ImageUploadClient | None:
    # upload-image zyje obok zdalnego API danych
    if STORE_BACKEND == "remote":
        return ImageUploadClient()
    return None


def get_catalog_service(
    store: StoreAdapter = Depends(get_store),
    uploader: ImageUploadClient | None = Depends(get_image_uploader),
) -> CatalogService:
    return CatalogService(store, image_uploader=uploader)


def get_cart_service(store: StoreAdapter = Depends(get_store)) -> CartService:
    return CartService(store)


def get_order_service(
    store: StoreAdapter = Depends(get_store),
    lock_service: LockService | None = Depends(get_lock_service),
) -> OrderService:
    return OrderService(store, lock_service=lock_service)


def get_user_service(store: StoreAdapter = Depends(get_store)) -> UserService:
    return UserService(store)


def get_admin_service(store: StoreAdapter = Depends(get_store)) -> AdminService:
    return AdminService(store)


def get_banner_service(store: StoreAdapter = Depends(get_store)) -> BannerService:
    return BannerService(store)


async def require_admin(admin: AdminService = Depends(get_admin_service)) -> None:
    try:
        await admin.require_admin()
    except NotAuthenticated as e:
        raise HTTPException(status_code=401, detail=str(e))


async def require_user(users: UserService = Depends(get_user_service)) -> User:
    user = await users.current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Please log in")
    return user
