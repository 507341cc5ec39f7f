from typing import Optional
from pydantic import EmailStr, Field
from .common import CoreModel, IDModelMixin, DateTimeModelMixin


class ResellerBase(CoreModel):
    username: str = Field(..., max_length=128)
    email: str = Field(..., max_length=256)


class ResellerCreate(ResellerBase):
    password: str


class ResellerUpdate(CoreModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    credits: Optional[int] = Field(None, ge=0)
    keys_generated: Optional[int] = Field(None, ge=0)


class ResellerInDB(IDModelMixin, DateTimeModelMixin, ResellerBase):
    password: str
    credits: int = 0
    keys_generated: int = 0


class ResellerPublic(IDModelMixin, DateTimeModelMixin, ResellerBase):
    credits: int
    keys_generated: int

    @classmethod
    def from_in_db(cls, reseller: ResellerInDB) -> "ResellerPublic":
        return cls(**reseller.model_dump(exclude={"password"}))


class ResellerRegistration(CoreModel):
    username: str = Field(..., min_length=3, max_length=128)
    email: EmailStr
    password: str = Field(..., min_length=6)
    referral_token: str = Field(..., min_length=1)


class LoginRequest(CoreModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AddCreditsRequest(CoreModel):
    reseller_id: int
    amount: int = Field(..., gt=0)
