# pylint: disable=unsubscriptable-object
from abc import ABC, abstractmethod
from typing import Optional, TypeVar, Generic, Iterable
from pydantic import BaseModel

IdType = TypeVar("IdType")
CreateType = TypeVar("CreateType", bound=BaseModel)
UpdateType = TypeVar("UpdateType", bound=BaseModel)
InDBType = TypeVar("InDBType", bound=BaseModel)


class BaseRepository(ABC, Generic[IdType, CreateType, UpdateType, InDBType]):
    @abstractmethod
    def get(self, id_: IdType) -> Optional[InDBType]:
        pass

    @abstractmethod
    def get_or_error(self, id_: IdType) -> InDBType:
        pass

    @abstractmethod
    def create(self, obj: CreateType) -> InDBType:
        pass

    @abstractmethod
    def update(self, id_: IdType, obj: UpdateType) -> InDBType:
        pass

    @abstractmethod
    def delete(self, id_: IdType) -> int:
        pass

    @abstractmethod
    def all(self) -> Iterable[InDBType]:
        pass
