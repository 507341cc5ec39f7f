from pydantic import Field
from .common import CoreModel, IDModelMixin


class AdminBase(CoreModel):
    username: str = Field(..., min_length=1, max_length=128)


class AdminCreate(AdminBase):
    password: str


class AdminUpdate(CoreModel):
    password: str


class AdminInDB(IDModelMixin, AdminBase):
    password: str


class AdminPublic(IDModelMixin, AdminBase):
    pass
