from typing import Optional, Union, cast
from structlog import get_logger
from fastapi import Request, Depends
from keydash.core.context import KeydashContext
from keydash.core.admins import get_admin
from keydash.datatypes import AdminInDB, ResellerInDB
from keydash.exceptions import UnauthorizedException, ForbiddenException

logger = get_logger(__name__)


def keydash_context(request: Request) -> KeydashContext:
    return cast(KeydashContext, request.app.state.keydash)


def current_user(
    request: Request, g: KeydashContext = Depends(keydash_context)
) -> Optional[Union[AdminInDB, ResellerInDB]]:
    user_id = request.session.get("user_id")
    if user_id is None:
        return None
    if request.session.get("is_admin"):
        return get_admin(g, user_id)
    return g.backend.resellers.get(user_id)


def require_user(user=Depends(current_user)) -> Union[AdminInDB, ResellerInDB]:
    if user is None:
        raise UnauthorizedException()
    return user


def require_admin(user=Depends(require_user)) -> AdminInDB:
    if not isinstance(user, AdminInDB):
        raise ForbiddenException()
    return user


def require_reseller(user=Depends(require_user)) -> ResellerInDB:
    if not isinstance(user, ResellerInDB):
        raise ForbiddenException()
    return user


def login_session(request: Request, user: Union[AdminInDB, ResellerInDB]):
    request.session.clear()
    request.session["user_id"] = user.id
    request.session["username"] = user.username
    request.session["is_admin"] = isinstance(user, AdminInDB)
