from structlog import get_logger

from keydash.datatypes import KeyStatus, KeyStatusReport, VerificationResult, utcnow
from keydash.exceptions import InvalidKeyException, KeyExpiredException, DeviceLimitReachedException

from .context import KeydashContext
from .keys import get_key_by_value, is_expired, materialize_key
from .api_usage import track_api_usage

logger = get_logger(__name__)


def verify_key(g: KeydashContext, key_value: str, hwid: str) -> VerificationResult:
    key = get_key_by_value(g, key_value)
    if key is None:
        raise InvalidKeyException()

    track_api_usage(g, key.reseller_id, key.key)

    now = utcnow()
    if is_expired(key, now):
        if key.status != KeyStatus.expired:
            g.backend.keys.set_status(key.id, KeyStatus.expired)
        raise KeyExpiredException()

    try:
        binding = g.backend.bind_device(key.id, hwid)
    except DeviceLimitReachedException:
        logger.info("device limit reached", key_id=key.id, device_limit=key.device_limit)
        raise

    if binding.created:
        logger.info("device bound", key_id=key.id, device_id=binding.device.id, devices_used=binding.key.devices_used)

    return VerificationResult(
        game=binding.key.game,
        device_limit=binding.key.device_limit,
        devices_used=binding.key.devices_used,
        expiry_date=binding.key.expiry_date,
    )


def check_key_status(g: KeydashContext, key_value: str) -> KeyStatusReport:
    key = get_key_by_value(g, key_value)
    if key is None:
        return KeyStatusReport(is_valid=False, message="Invalid key")

    track_api_usage(g, key.reseller_id, key.key)

    key = materialize_key(key)
    return KeyStatusReport(
        is_valid=key.status != KeyStatus.expired and key.devices_used < key.device_limit,
        game=key.game,
        device_limit=key.device_limit,
        devices_used=key.devices_used,
        expiry_date=key.expiry_date,
        status=key.status,
    )
