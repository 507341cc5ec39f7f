import datetime as dt
from enum import Enum
from typing import Optional
from pydantic import Field, field_validator
from .common import CoreModel, IDModelMixin, DateTimeModelMixin, as_naive_utc


class KeyStatus(str, Enum):
    active = "active"
    full = "full"
    expired = "expired"


class KeyBase(CoreModel):
    key: str = Field(..., max_length=128)
    game: str = Field(..., max_length=128)
    device_limit: int = Field(..., gt=0)
    expiry_date: dt.datetime


class KeyCreate(KeyBase):
    reseller_id: int


class KeyUpdate(CoreModel):
    devices_used: Optional[int] = None
    status: Optional[KeyStatus] = None


class KeyInDB(IDModelMixin, DateTimeModelMixin, KeyCreate):
    devices_used: int = 0
    status: KeyStatus = KeyStatus.active


class KeyPublic(IDModelMixin, KeyBase):
    devices_used: int
    status: KeyStatus

    @classmethod
    def from_in_db(cls, key: KeyInDB) -> "KeyPublic":
        return cls(**key.model_dump(exclude={"reseller_id", "created_at"}))


class GenerateKeyRequest(CoreModel):
    game: str = Field(..., min_length=1, max_length=128)
    device_limit: int = Field(..., gt=0)
    expiry_date: dt.datetime
    custom_key: Optional[str] = Field(None, max_length=128)

    @field_validator("game")
    @classmethod
    def game_validation(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("Game is required")
        return v

    @field_validator("expiry_date")
    @classmethod
    def expiry_date_to_utc(cls, v: dt.datetime):
        return as_naive_utc(v)

    @field_validator("custom_key")
    @classmethod
    def blank_custom_key_means_generated(cls, v: Optional[str]):
        if v is not None:
            v = v.strip()
        return v or None
