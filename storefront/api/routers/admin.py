# storefront/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.api.deps import get_admin_service, get_user_service, require_admin
from storefront.domain.schemas import LoginIn, PasswordChangeIn, RegisterIn, SessionOut, UserOut
from storefront.services.admin_service import AdminService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=SessionOut)
async def admin_login(
    payload: LoginIn,
    admin: AdminService = Depends(get_admin_service),
    users: UserService = Depends(get_user_service),
):
    try:
        await admin.login(payload.username, payload.password)
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return SessionOut(logged_in_user=await users.current_username(), admin_logged_in=True)


@router.post("/logout", response_model=SessionOut)
async def admin_logout(
    admin: AdminService = Depends(get_admin_service),
    users: UserService = Depends(get_user_service),
):
    await admin.logout()
    return SessionOut(logged_in_user=await users.current_username(), admin_logged_in=False)


@router.post("/password", status_code=204, dependencies=[Depends(require_admin)])
async def change_password(payload: PasswordChangeIn, admin: AdminService = Depends(get_admin_service)):
    try:
        await admin.change_password(payload.old_password, payload.new_password)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(status_code=204)


# =====================================================
# UZYTKOWNICY
# =====================================================

@router.get("/users", response_model=List[UserOut], dependencies=[Depends(require_admin)])
async def list_users(svc: UserService = Depends(get_user_service)):
    return await svc.list_users()


@router.post("/users", response_model=UserOut, status_code=201, dependencies=[Depends(require_admin)])
async def create_user(payload: RegisterIn, svc: UserService = Depends(get_user_service)):
    try:
        return await svc.create_user(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/users/{username}/block", response_model=UserOut, dependencies=[Depends(require_admin)])
async def block_user(username: str, svc: UserService = Depends(get_user_service)):
    user = await svc.block_user(username)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/users/{username}/unblock", response_model=UserOut, dependencies=[Depends(require_admin)])
async def unblock_user(username: str, svc: UserService = Depends(get_user_service)):
    user = await svc.unblock_user(username)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/users/{username}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_user(username: str, svc: UserService = Depends(get_user_service)):
    if not await svc.delete_user(username):
        raise HTTPException(status_code=404, detail="User not found")
    return Response(status_code=204)
