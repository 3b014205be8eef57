# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from storefront.api.deps import get_order_service, require_admin
from storefront.domain.errors import ConcurrentUpdate, NotAuthenticated, PersistenceError
from storefront.domain.schemas import Order, ReconcileOut, StatusIn
from storefront.services.export_service import orders_to_csv
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/checkout", response_model=Order, status_code=201, response_model_exclude_none=True)
async def checkout(svc: OrderService = Depends(get_order_service)):
    """
    Sklada zamowienie z koszyka zalogowanego uzytkownika.
    401 -> klient ma przejsc do logowania, 204 -> pusty koszyk.
    503 -> storage nieczytelny, nic nie zostalo zapisane.
    """
    try:
        order = await svc.checkout()
    except NotAuthenticated as e:
        raise HTTPException(status_code=401, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrentUpdate as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if order is None:
        return Response(status_code=204)
    return order


# =====================================================
# ADMIN
# =====================================================

@router.get(
    "/",
    response_model=List[Order],
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
async def list_orders(
    status: str | None = Query(None),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return await svc.list_orders(status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/export.csv", dependencies=[Depends(require_admin)])
async def export_orders(svc: OrderService = Depends(get_order_service)):
    body = orders_to_csv(await svc.list_orders())
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="orders.csv"'},
    )


@router.patch(
    "/{order_id}/status",
    response_model=Order,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
)
async def set_status(
    order_id: int,
    payload: StatusIn,
    svc: OrderService = Depends(get_order_service),
):
    try:
        order = await svc.set_status(order_id, payload.status)
    except ConcurrentUpdate as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.post("/reconcile", response_model=ReconcileOut, dependencies=[Depends(require_admin)])
async def reconcile(svc: OrderService = Depends(get_order_service)):
    try:
        return ReconcileOut(fixed=await svc.reconcile_statuses())
    except ConcurrentUpdate as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
