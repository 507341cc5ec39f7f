import datetime as dt
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> dt.datetime:
    return dt.datetime.utcnow()


def as_naive_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is not None:
        return value.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return value


class CoreModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IDModelMixin(CoreModel):
    id: int


class DateTimeModelMixin(CoreModel):
    created_at: dt.datetime = Field(default_factory=utcnow)
