from .context import KeydashContext, init_context_from_settings
from .passwords import hash_password, verify_password
from .admins import create_admin, authenticate_admin, get_admin, ensure_default_admin
from .resellers import (
    register_reseller,
    authenticate_reseller,
    list_resellers,
    get_reseller,
    delete_reseller,
)
from .referral_tokens import (
    issue_referral_tokens,
    list_referral_tokens,
    redeem_referral_token,
    mark_referral_token_used,
)
from .credits import add_credits, debit_credits
from .keys import (
    generate_key_value,
    derive_key_status,
    materialize_key,
    create_key,
    get_key_by_value,
    list_keys_for_reseller,
    list_all_keys,
    delete_key,
)
from .verification import verify_key, check_key_status
from .api_usage import track_api_usage, get_api_usage_stats
from .stats import get_admin_stats, get_reseller_stats
