import datetime as dt
from typing import Optional

from keydash.datatypes import ApiUsageStats, utcnow

from .context import KeydashContext


def _prefix(reseller_id: int) -> str:
    return f"api_usage:{reseller_id}"


def track_api_usage(g: KeydashContext, reseller_id: int, key_value: str, now: Optional[dt.datetime] = None):
    now = now or utcnow()
    prefix = _prefix(reseller_id)
    g.kvstore.incr_value(f"{prefix}:total")
    g.kvstore.set_value(f"{prefix}:last", now.isoformat())
    g.kvstore.incr_hash_value(f"{prefix}:by_date", now.strftime("%Y-%m-%d"))
    g.kvstore.incr_hash_value(f"{prefix}:by_key", key_value)


def get_api_usage_stats(g: KeydashContext, reseller_id: int) -> ApiUsageStats:
    prefix = _prefix(reseller_id)
    last_request = g.kvstore.get_value(f"{prefix}:last")
    return ApiUsageStats(
        total_requests=int(g.kvstore.get_value(f"{prefix}:total") or 0),
        last_request=dt.datetime.fromisoformat(str(last_request)) if last_request else None,
        usage_by_date=g.kvstore.get_hash(f"{prefix}:by_date"),
        usage_by_key=g.kvstore.get_hash(f"{prefix}:by_key"),
    )


def clear_api_usage(g: KeydashContext, reseller_id: int):
    g.kvstore.delete_values(f"{_prefix(reseller_id)}:*")
