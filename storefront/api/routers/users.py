# storefront/api/routers/users.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_admin_service, get_order_service, get_user_service, require_user
from storefront.domain.errors import AccountBlocked
from storefront.domain.schemas import LoginIn, Order, RegisterIn, SessionOut, User, UserOut
from storefront.services.admin_service import AdminService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=UserOut, status_code=201)
async def register(payload: RegisterIn, svc: UserService = Depends(get_user_service)):
    try:
        return await svc.register(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/login", response_model=SessionOut)
async def login(
    payload: LoginIn,
    svc: UserService = Depends(get_user_service),
    admin: AdminService = Depends(get_admin_service),
):
    try:
        username = await svc.login(payload.username, payload.password)
    except AccountBlocked as e:
        raise HTTPException(status_code=403, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return SessionOut(logged_in_user=username, admin_logged_in=await admin.is_logged_in())


@router.post("/logout", response_model=SessionOut)
async def logout(
    svc: UserService = Depends(get_user_service),
    admin: AdminService = Depends(get_admin_service),
):
    await svc.logout()
    return SessionOut(logged_in_user=None, admin_logged_in=await admin.is_logged_in())


@router.get("/session", response_model=SessionOut)
async def session(
    svc: UserService = Depends(get_user_service),
    admin: AdminService = Depends(get_admin_service),
):
    return SessionOut(
        logged_in_user=await svc.current_username(),
        admin_logged_in=await admin.is_logged_in(),
    )


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(require_user)):
    return user


@router.get("/me/history", response_model=List[Order], response_model_exclude_none=True)
async def my_history(
    user: User = Depends(require_user),
    orders: OrderService = Depends(get_order_service),
):
    return await orders.history(user.username)
