from keydash.datatypes import AdminStats, ResellerStats

from .context import KeydashContext
from .keys import is_expired


def get_admin_stats(g: KeydashContext) -> AdminStats:
    resellers = list(g.backend.resellers.all())
    return AdminStats(
        total_resellers=len(resellers),
        total_keys=sum(r.keys_generated for r in resellers),
        total_credits=sum(r.credits for r in resellers),
    )


def get_reseller_stats(g: KeydashContext, reseller_id: int) -> ResellerStats:
    keys = g.backend.keys.get_for_reseller(reseller_id)
    expired_keys = len([k for k in keys if is_expired(k)])
    return ResellerStats(
        total_keys=len(keys),
        active_keys=len(keys) - expired_keys,
        expired_keys=expired_keys,
    )
