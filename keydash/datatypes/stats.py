import datetime as dt
from typing import Dict, Optional
from .common import CoreModel


class AdminStats(CoreModel):
    total_resellers: int
    total_keys: int
    total_credits: int


class ResellerStats(CoreModel):
    total_keys: int
    active_keys: int
    expired_keys: int


class ApiUsageStats(CoreModel):
    total_requests: int = 0
    last_request: Optional[dt.datetime] = None
    usage_by_date: Dict[str, int] = {}
    usage_by_key: Dict[str, int] = {}
