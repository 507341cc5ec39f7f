import datetime as dt
from typing import Optional
from pydantic import Field
from .common import CoreModel
from .keys import KeyStatus


class VerifyRequest(CoreModel):
    key: str = Field(..., min_length=1)
    hwid: str = Field(..., min_length=1, max_length=256)


class VerificationResult(CoreModel):
    game: str
    device_limit: int
    devices_used: int
    expiry_date: dt.datetime


class KeyStatusReport(CoreModel):
    is_valid: bool
    message: Optional[str] = None
    game: Optional[str] = None
    device_limit: Optional[int] = None
    devices_used: Optional[int] = None
    expiry_date: Optional[dt.datetime] = None
    status: Optional[KeyStatus] = None
