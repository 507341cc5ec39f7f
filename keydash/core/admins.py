from typing import Optional
from structlog import get_logger

from keydash.datatypes import AdminCreate, AdminInDB
from keydash.exceptions import InvalidCredentialsException, ValidationException

from .context import KeydashContext
from .passwords import hash_password, verify_password

logger = get_logger(__name__)


def create_admin(g: KeydashContext, username: str, password: str) -> AdminInDB:
    if g.backend.admins.get_by_username(username):
        raise ValidationException("Username already taken")
    admin = g.backend.admins.create(
        AdminCreate(username=username, password=hash_password(password, g.settings.password_iterations))
    )
    logger.info("admin created", admin_id=admin.id, username=username)
    return admin


def authenticate_admin(g: KeydashContext, username: str, password: str) -> AdminInDB:
    admin = g.backend.admins.get_by_username(username)
    if admin is None or not verify_password(password, admin.password):
        logger.info("admin login failed", username=username)
        raise InvalidCredentialsException()
    return admin


def get_admin(g: KeydashContext, admin_id: int) -> Optional[AdminInDB]:
    return g.backend.admins.get(admin_id)


def ensure_default_admin(g: KeydashContext) -> Optional[AdminInDB]:
    default_admin = g.settings.default_admin
    if not default_admin.password:
        return None
    existing = g.backend.admins.get_by_username(default_admin.username)
    if existing:
        return existing
    return create_admin(g, default_admin.username, default_admin.password)
