import datetime as dt
import secrets
from typing import List, Optional
from structlog import get_logger

from keydash.datatypes import KeyCreate, KeyInDB, KeyStatus, GenerateKeyRequest, utcnow
from keydash.exceptions import DuplicateKeyException, NotFoundException, NotOwnerException

from .context import KeydashContext

logger = get_logger(__name__)

KEY_GROUPS = 4
KEY_GROUP_BYTES = 4


def generate_key_value() -> str:
    return "-".join(secrets.token_hex(KEY_GROUP_BYTES).upper() for _ in range(KEY_GROUPS))


def is_expired(key: KeyInDB, now: Optional[dt.datetime] = None) -> bool:
    now = now or utcnow()
    return now > key.expiry_date


def derive_key_status(key: KeyInDB, now: Optional[dt.datetime] = None) -> KeyStatus:
    if is_expired(key, now):
        return KeyStatus.expired
    if key.devices_used >= key.device_limit:
        return KeyStatus.full
    return KeyStatus.active


def materialize_key(key: KeyInDB, now: Optional[dt.datetime] = None) -> KeyInDB:
    """Return the key with its status recomputed from expiry and device usage."""
    status = derive_key_status(key, now)
    if status == key.status:
        return key
    return key.model_copy(update={"status": status})


def persist_expired_status(g: KeydashContext, key: KeyInDB) -> KeyInDB:
    materialized = materialize_key(key)
    if materialized.status == KeyStatus.expired and key.status != KeyStatus.expired:
        logger.info("key expired", key_id=key.id)
        return g.backend.keys.set_status(key.id, KeyStatus.expired)
    return materialized


def create_key(g: KeydashContext, reseller_id: int, request: GenerateKeyRequest) -> KeyInDB:
    cost = g.settings.keys.credit_cost

    if request.custom_key:
        if g.backend.keys.get_by_value(request.custom_key):
            raise DuplicateKeyException()
        key = g.backend.issue_key(_key_create(reseller_id, request, request.custom_key), cost)
    else:
        key = _issue_generated_key(g, reseller_id, request, cost)

    logger.info("key issued", key_id=key.id, reseller_id=reseller_id, game=key.game, custom=bool(request.custom_key))
    return key


def _issue_generated_key(g: KeydashContext, reseller_id: int, request: GenerateKeyRequest, cost: int) -> KeyInDB:
    attempts = g.settings.keys.generation_attempts
    for attempt in range(1, attempts + 1):
        try:
            return g.backend.issue_key(_key_create(reseller_id, request, generate_key_value()), cost)
        except DuplicateKeyException:
            logger.warning("generated key collided", reseller_id=reseller_id, attempt=attempt)
    raise DuplicateKeyException("Could not generate a unique key")


def _key_create(reseller_id: int, request: GenerateKeyRequest, key_value: str) -> KeyCreate:
    return KeyCreate(
        key=key_value,
        game=request.game,
        device_limit=request.device_limit,
        expiry_date=request.expiry_date,
        reseller_id=reseller_id,
    )


def get_key_by_value(g: KeydashContext, key_value: str) -> Optional[KeyInDB]:
    return g.backend.keys.get_by_value(key_value)


def list_keys_for_reseller(g: KeydashContext, reseller_id: int) -> List[KeyInDB]:
    return [persist_expired_status(g, key) for key in g.backend.keys.get_for_reseller(reseller_id)]


def list_all_keys(g: KeydashContext) -> List[KeyInDB]:
    return [persist_expired_status(g, key) for key in g.backend.keys.all()]


def delete_key(g: KeydashContext, key_id: int, requester_id: int) -> int:
    key = g.backend.keys.get(key_id)
    if key is None:
        raise NotFoundException("Key not found")
    if key.reseller_id != requester_id:
        raise NotOwnerException()
    deleted = g.backend.delete_key(key_id)
    logger.info("key deleted", key_id=key_id, reseller_id=requester_id)
    return deleted
