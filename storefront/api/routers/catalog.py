# storefront/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from storefront.api.deps import get_catalog_service, require_admin
from storefront.domain.errors import PersistenceError
from storefront.domain.schemas import Category, CategoryIn, CategoryRename, Item, ItemIn
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/categories", tags=["catalog"])


@router.get("/", response_model=List[Category], response_model_exclude_none=True)
async def list_categories(svc: CatalogService = Depends(get_catalog_service)):
    return await svc.load_categories()


@router.get("/search", response_model=List[Category], response_model_exclude_none=True)
async def search(
    q: str = Query("", description="Case-insensitive match on item names"),
    svc: CatalogService = Depends(get_catalog_service),
):
    return await svc.search(q)


@router.get("/{category_id}", response_model=Category, response_model_exclude_none=True)
async def get_category(category_id: int, svc: CatalogService = Depends(get_catalog_service)):
    try:
        return await svc.get_category(category_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


# =====================================================
# ADMIN
# =====================================================

@router.post(
    "/",
    response_model=Category,
    response_model_exclude_none=True,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def add_category(payload: CategoryIn, svc: CatalogService = Depends(get_catalog_service)):
    try:
        return await svc.add_category(payload.name, payload.image)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch(
    "/{category_id}",
    response_model=Category,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
async def rename_category(
    category_id: int,
    payload: CategoryRename,
    svc: CatalogService = Depends(get_catalog_service),
):
    try:
        category = await svc.rename_category(category_id, payload.name)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.delete("/{category_id}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_category(category_id: int, svc: CatalogService = Depends(get_catalog_service)):
    try:
        deleted = await svc.delete_category(category_id)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Category not found")
    return Response(status_code=204)


@router.post(
    "/{category_id}/items",
    response_model=Item,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def add_item(
    category_id: int,
    payload: ItemIn,
    svc: CatalogService = Depends(get_catalog_service),
):
    try:
        return await svc.add_item(
            category_id,
            name=payload.name,
            price=payload.price,
            description=payload.description,
            image=payload.image,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put(
    "/{category_id}/items/{item_id}",
    response_model=Item,
    dependencies=[Depends(require_admin)],
)
async def edit_item(
    category_id: int,
    item_id: int,
    payload: ItemIn,
    svc: CatalogService = Depends(get_catalog_service),
):
    try:
        item = await svc.edit_item(
            category_id,
            item_id,
            name=payload.name,
            price=payload.price,
            description=payload.description,
            image=payload.image,
        )
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.delete(
    "/{category_id}/items/{item_id}",
    status_code=204,
    dependencies=[Depends(require_admin)],
)
async def delete_item(
    category_id: int,
    item_id: int,
    svc: CatalogService = Depends(get_catalog_service),
):
    try:
        deleted = await svc.delete_item(category_id, item_id)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Item not found")
    return Response(status_code=204)
