from structlog import get_logger
from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse

from keydash.core import KeydashContext, authenticate_admin, authenticate_reseller, register_reseller
from keydash.datatypes import AdminInDB, LoginRequest, ResellerRegistration
from keydash.exceptions import UnauthorizedException
from ..dependencies import keydash_context, current_user, login_session

logger = get_logger(__name__)


router = APIRouter()


@router.post("/admin/login")
def admin_login(request: Request, login: LoginRequest, g: KeydashContext = Depends(keydash_context)):
    admin = authenticate_admin(g, login.username, login.password)
    login_session(request, admin)
    logger.info("admin logged in", admin_id=admin.id)
    return {"status": "success", "user": {"id": admin.id, "username": admin.username}}


@router.post("/reseller/login")
def reseller_login(request: Request, login: LoginRequest, g: KeydashContext = Depends(keydash_context)):
    reseller = authenticate_reseller(g, login.username, login.password)
    login_session(request, reseller)
    logger.info("reseller logged in", reseller_id=reseller.id)
    return {
        "status": "success",
        "user": {"id": reseller.id, "username": reseller.username, "credits": reseller.credits},
    }


@router.post("/reseller/register", status_code=201)
def reseller_register(registration: ResellerRegistration, g: KeydashContext = Depends(keydash_context)):
    register_reseller(g, registration)
    return {"status": "success", "message": "Reseller account created successfully"}


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"status": "success", "message": "Logged out successfully"}


@router.get("/me")
def me(request: Request, g: KeydashContext = Depends(keydash_context)):
    if "user_id" not in request.session:
        raise UnauthorizedException()
    user = current_user(request, g)
    if user is None:
        request.session.clear()
        return JSONResponse(content={"status": "error", "message": "User not found"}, status_code=404)
    if isinstance(user, AdminInDB):
        return {"status": "success", "user": {"id": user.id, "username": user.username, "isAdmin": True}}
    return {
        "status": "success",
        "user": {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "credits": user.credits,
            "keysGenerated": user.keys_generated,
            "isAdmin": False,
        },
    }
