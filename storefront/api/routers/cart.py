# storefront/api/routers/cart.py
from typing import Literal

from fastapi import APIRouter, Depends

from storefront.api.deps import get_cart_service, get_catalog_service
from storefront.domain.schemas import CartItemIn, CartSummary
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/cart", tags=["cart"])

_DELTAS = {"increase": 1, "decrease": -1}


async def _summary(cart: CartService, catalog: CatalogService) -> CartSummary:
    return await cart.summarize(await catalog.load_categories())


@router.get("/", response_model=CartSummary)
async def get_cart(
    cart: CartService = Depends(get_cart_service),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await _summary(cart, catalog)


@router.post("/items", response_model=CartSummary)
async def add_item(
    payload: CartItemIn,
    cart: CartService = Depends(get_cart_service),
    catalog: CatalogService = Depends(get_catalog_service),
):
    await cart.add_to_cart(payload.category_id, payload.item_id, payload.quantity)
    return await _summary(cart, catalog)


@router.post("/items/{category_id}/{item_id}/{action}", response_model=CartSummary)
async def adjust_item(
    category_id: int,
    item_id: int,
    action: Literal["increase", "decrease"],
    cart: CartService = Depends(get_cart_service),
    catalog: CatalogService = Depends(get_catalog_service),
):
    await cart.adjust_quantity(category_id, item_id, _DELTAS[action])
    return await _summary(cart, catalog)


@router.delete("/items/{category_id}/{item_id}", response_model=CartSummary)
async def remove_item(
    category_id: int,
    item_id: int,
    cart: CartService = Depends(get_cart_service),
    catalog: CatalogService = Depends(get_catalog_service),
):
    await cart.remove_line(category_id, item_id)
    return await _summary(cart, catalog)


@router.delete("/", response_model=CartSummary)
async def clear_cart(
    cart: CartService = Depends(get_cart_service),
    catalog: CatalogService = Depends(get_catalog_service),
):
    await cart.clear()
    return await _summary(cart, catalog)
