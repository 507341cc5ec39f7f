import secrets
from typing import List
from structlog import get_logger

from keydash.datatypes import ReferralTokenCreate, ReferralTokenInDB
from keydash.exceptions import InvalidTokenException

from .context import KeydashContext

logger = get_logger(__name__)


def generate_token_value() -> str:
    return secrets.token_hex(16)


def issue_referral_tokens(g: KeydashContext, count: int = 1) -> List[ReferralTokenInDB]:
    tokens = [g.backend.referral_tokens.create(ReferralTokenCreate(token=generate_token_value())) for _ in range(count)]
    logger.info("referral tokens issued", count=len(tokens))
    return tokens


def list_referral_tokens(g: KeydashContext) -> List[ReferralTokenInDB]:
    return list(g.backend.referral_tokens.all())


def redeem_referral_token(g: KeydashContext, token: str) -> ReferralTokenInDB:
    referral_token = g.backend.referral_tokens.get_unused_by_token(token)
    if referral_token is None:
        raise InvalidTokenException()
    return referral_token


def mark_referral_token_used(g: KeydashContext, token_id: int) -> bool:
    return g.backend.referral_tokens.mark_used(token_id)
