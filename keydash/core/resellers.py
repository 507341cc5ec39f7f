from typing import List
from structlog import get_logger

from keydash.datatypes import ResellerCreate, ResellerInDB, ResellerRegistration
from keydash.exceptions import (
    InvalidCredentialsException,
    InvalidTokenException,
    NotFoundException,
    ValidationException,
)

from .context import KeydashContext
from .passwords import hash_password, verify_password
from .referral_tokens import redeem_referral_token, mark_referral_token_used
from .api_usage import clear_api_usage

logger = get_logger(__name__)


def register_reseller(g: KeydashContext, registration: ResellerRegistration) -> ResellerInDB:
    """Create a reseller account from a single-use referral token.

    The token is looked up first, the account is created, and only then is
    the token consumed. When another registration consumed the same token in
    the meantime, the account created here is removed again so that every
    used token maps to exactly one reseller. The repository enforces username
    and email uniqueness on create, so losing a concurrent registration for
    the same name leaves the token unused.
    """
    referral_token = redeem_referral_token(g, registration.referral_token)

    if g.backend.resellers.get_by_username(registration.username):
        raise ValidationException("Username already taken")
    if g.backend.resellers.get_by_email(registration.email):
        raise ValidationException("Email already used")

    reseller = g.backend.resellers.create(
        ResellerCreate(
            username=registration.username,
            email=registration.email,
            password=hash_password(registration.password, g.settings.password_iterations),
        )
    )

    if not mark_referral_token_used(g, referral_token.id):
        g.backend.resellers.delete(reseller.id)
        logger.warning("referral token consumed concurrently", reseller_id=reseller.id)
        raise InvalidTokenException()

    logger.info("reseller registered", reseller_id=reseller.id, username=reseller.username)
    return reseller


def authenticate_reseller(g: KeydashContext, username: str, password: str) -> ResellerInDB:
    reseller = g.backend.resellers.get_by_username(username)
    if reseller is None or not verify_password(password, reseller.password):
        logger.info("reseller login failed", username=username)
        raise InvalidCredentialsException()
    return reseller


def list_resellers(g: KeydashContext) -> List[ResellerInDB]:
    return list(g.backend.resellers.all())


def get_reseller(g: KeydashContext, reseller_id: int) -> ResellerInDB:
    reseller = g.backend.resellers.get(reseller_id)
    if reseller is None:
        raise NotFoundException("Reseller not found")
    return reseller


def delete_reseller(g: KeydashContext, reseller_id: int) -> int:
    get_reseller(g, reseller_id)
    deleted = g.backend.delete_reseller(reseller_id)
    clear_api_usage(g, reseller_id)
    logger.info("reseller deleted", reseller_id=reseller_id)
    return deleted
