# storefront/api/routers/banners.py
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_banner_service, require_admin
from storefront.domain.schemas import BannersIn
from storefront.services.banner_service import BannerService

router = APIRouter(tags=["banners"])


@router.get("/banners", response_model=List[str])
async def list_banners(svc: BannerService = Depends(get_banner_service)):
    return await svc.list_banners()


@router.post("/admin/banners", response_model=List[str], dependencies=[Depends(require_admin)])
async def add_banners(payload: BannersIn, svc: BannerService = Depends(get_banner_service)):
    try:
        return await svc.add_banners(payload.images)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/admin/banners/{index}", response_model=List[str], dependencies=[Depends(require_admin)])
async def delete_banner(index: int, svc: BannerService = Depends(get_banner_service)):
    return await svc.delete_banner(index)


@router.post(
    "/admin/banners/{index}/move/{direction}",
    response_model=List[str],
    dependencies=[Depends(require_admin)],
)
async def move_banner(
    index: int,
    direction: Literal["up", "down"],
    svc: BannerService = Depends(get_banner_service),
):
    return await svc.move_banner(index, direction)
