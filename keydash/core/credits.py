from structlog import get_logger

from keydash.datatypes import ResellerInDB
from keydash.exceptions import NotFoundException, ValidationException

from .context import KeydashContext

logger = get_logger(__name__)


def add_credits(g: KeydashContext, reseller_id: int, amount: int) -> ResellerInDB:
    if amount <= 0:
        raise ValidationException("Amount must be a positive integer")
    if g.backend.resellers.get(reseller_id) is None:
        raise NotFoundException("Reseller not found")
    reseller = g.backend.resellers.add_credits(reseller_id, amount)
    logger.info("credits added", reseller_id=reseller_id, amount=amount, credits=reseller.credits)
    return reseller


def debit_credits(g: KeydashContext, reseller_id: int, amount: int = 1) -> ResellerInDB:
    if amount <= 0:
        raise ValidationException("Amount must be a positive integer")
    return g.backend.resellers.debit_credits(reseller_id, amount)
