from .common import CoreModel, utcnow, as_naive_utc
from .admins import AdminCreate, AdminUpdate, AdminInDB, AdminPublic
from .resellers import (
    ResellerCreate,
    ResellerUpdate,
    ResellerInDB,
    ResellerPublic,
    ResellerRegistration,
    LoginRequest,
    AddCreditsRequest,
)
from .referral_tokens import ReferralTokenCreate, ReferralTokenUpdate, ReferralTokenInDB, GenerateTokensRequest
from .keys import KeyStatus, KeyCreate, KeyUpdate, KeyInDB, KeyPublic, GenerateKeyRequest
from .devices import DeviceCreate, DeviceInDB, DeviceBinding
from .verification import VerifyRequest, VerificationResult, KeyStatusReport
from .stats import AdminStats, ResellerStats, ApiUsageStats
