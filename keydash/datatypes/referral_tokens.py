from pydantic import Field
from .common import CoreModel, IDModelMixin, DateTimeModelMixin


class ReferralTokenBase(CoreModel):
    token: str


class ReferralTokenCreate(ReferralTokenBase):
    pass


class ReferralTokenUpdate(CoreModel):
    used: bool


class ReferralTokenInDB(IDModelMixin, DateTimeModelMixin, ReferralTokenBase):
    used: bool = False


class GenerateTokensRequest(CoreModel):
    count: int = Field(1, ge=1, le=1000)
