from typing import Iterable, Optional, Callable, List

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql import and_
from structlog import get_logger

from keydash.exceptions import NotFoundException, InsufficientCreditsException, ValidationException
from keydash.datatypes import (
    AdminCreate,
    AdminUpdate,
    AdminInDB,
    ResellerCreate,
    ResellerUpdate,
    ResellerInDB,
    ReferralTokenCreate,
    ReferralTokenUpdate,
    ReferralTokenInDB,
    KeyCreate,
    KeyUpdate,
    KeyInDB,
    DeviceCreate,
    DeviceInDB,
)
from keydash.backends.base import (
    BaseRepository,
    IdType,
    CreateType,
    UpdateType,
    InDBType,
    AdminRepository,
    ResellerRepository,
    ReferralTokenRepository,
    KeyRepository,
    DeviceRepository,
)

fetchone_ = lambda result: result.fetchone()
fetchall_ = lambda result: result.fetchall()
inserted_primary_key_ = lambda result: result.inserted_primary_key[0]
rowcount_ = lambda result: result.rowcount

logger = get_logger(__name__)


class SQLRepository(BaseRepository[IdType, CreateType, UpdateType, InDBType]):  # pylint: disable=unsubscriptable-object
    def __init__(self, table: sa.Table, engine: sa.engine.Engine, in_db_cls: Callable[..., InDBType]):
        self.table = table
        self.engine = engine
        self.in_db_cls = in_db_cls

    def identity(self, id_: IdType):
        return self.table.c.id == id_

    def get(self, id_: IdType) -> Optional[InDBType]:
        query = self.table.select().where(self.identity(id_)).limit(1)
        row = self._execute_query(query, callback_fn=fetchone_)
        return self.to_obj(row) if row else None

    def get_or_error(self, id_: IdType) -> InDBType:
        obj = self.get(id_)
        if obj is None:
            raise NotFoundException(f"{self.in_db_cls.__name__} not found")
        return obj

    def create(self, obj: CreateType) -> InDBType:
        query = self.table.insert().values(**obj.model_dump())
        id_ = self._execute_query(query, callback_fn=inserted_primary_key_)
        return self.get_or_error(id_)

    def update(self, id_: IdType, obj: UpdateType) -> InDBType:
        update_dict = obj.model_dump(exclude_unset=True)
        if update_dict:
            query = self.table.update().where(self.identity(id_)).values(**update_dict)
            self._execute_query(query)
        return self.get_or_error(id_)

    def delete(self, id_: IdType) -> int:
        query = self.table.delete().where(self.identity(id_))
        return self._execute_query(query, callback_fn=rowcount_)

    def all(self) -> Iterable[InDBType]:
        query = self.table.select().order_by(self.table.c.id)
        rows = self._execute_query(query, callback_fn=fetchall_)
        return [self.to_obj(row) for row in rows]

    def to_obj(self, row) -> InDBType:
        return self.in_db_cls(**row._mapping)

    def _select_one(self, query) -> Optional[InDBType]:
        row = self._execute_query(query.limit(1), callback_fn=fetchone_)
        return self.to_obj(row) if row else None

    def _select_many(self, query) -> List[InDBType]:
        rows = self._execute_query(query, callback_fn=fetchall_)
        return [self.to_obj(row) for row in rows]

    def _execute_query(self, query, callback_fn=lambda result: result):
        with self.engine.begin() as connection:
            result = connection.execute(query)
            return callback_fn(result)


class SQLAdminRepository(AdminRepository, SQLRepository[int, AdminCreate, AdminUpdate, AdminInDB]):
    def get_by_username(self, username: str) -> Optional[AdminInDB]:
        return self._select_one(self.table.select().where(self.table.c.username == username))


class SQLResellerRepository(ResellerRepository, SQLRepository[int, ResellerCreate, ResellerUpdate, ResellerInDB]):
    def create(self, obj: ResellerCreate) -> ResellerInDB:
        try:
            return super().create(obj)
        except IntegrityError as e:
            logger.info("reseller insert rejected", username=obj.username, error=str(e.orig))
            if self.get_by_username(obj.username):
                raise ValidationException("Username already taken") from e
            raise ValidationException("Email already used") from e

    def get_by_username(self, username: str) -> Optional[ResellerInDB]:
        return self._select_one(self.table.select().where(self.table.c.username == username))

    def get_by_email(self, email: str) -> Optional[ResellerInDB]:
        return self._select_one(self.table.select().where(sa.func.lower(self.table.c.email) == email.lower()))

    def add_credits(self, reseller_id: int, amount: int) -> ResellerInDB:
        query = (
            self.table.update()
            .where(self.identity(reseller_id))
            .values(credits=self.table.c.credits + amount)
        )
        if self._execute_query(query, callback_fn=rowcount_) == 0:
            raise NotFoundException("Reseller not found")
        return self.get_or_error(reseller_id)

    def debit_credits(self, reseller_id: int, amount: int) -> ResellerInDB:
        query = (
            self.table.update()
            .where(and_(self.identity(reseller_id), self.table.c.credits >= amount))
            .values(credits=self.table.c.credits - amount)
        )
        if self._execute_query(query, callback_fn=rowcount_) == 0:
            if self.get(reseller_id) is None:
                raise NotFoundException("Reseller not found")
            raise InsufficientCreditsException()
        return self.get_or_error(reseller_id)


class SQLReferralTokenRepository(
    ReferralTokenRepository, SQLRepository[int, ReferralTokenCreate, ReferralTokenUpdate, ReferralTokenInDB]
):
    def get_unused_by_token(self, token: str) -> Optional[ReferralTokenInDB]:
        query = self.table.select().where(and_(self.table.c.token == token, self.table.c.used.is_(False)))
        return self._select_one(query)

    def mark_used(self, token_id: int) -> bool:
        query = (
            self.table.update()
            .where(and_(self.identity(token_id), self.table.c.used.is_(False)))
            .values(used=True)
        )
        return self._execute_query(query, callback_fn=rowcount_) == 1


class SQLKeyRepository(KeyRepository, SQLRepository[int, KeyCreate, KeyUpdate, KeyInDB]):
    def get_by_value(self, key: str) -> Optional[KeyInDB]:
        return self._select_one(self.table.select().where(self.table.c.key == key))

    def get_for_reseller(self, reseller_id: int) -> List[KeyInDB]:
        query = self.table.select().where(self.table.c.reseller_id == reseller_id).order_by(self.table.c.id)
        return self._select_many(query)


class SQLDeviceRepository(DeviceRepository, SQLRepository[int, DeviceCreate, DeviceCreate, DeviceInDB]):
    def get_by_hwid(self, key_id: int, hwid: str) -> Optional[DeviceInDB]:
        query = self.table.select().where(and_(self.table.c.key_id == key_id, self.table.c.hwid == hwid))
        return self._select_one(query)

    def get_for_key(self, key_id: int) -> List[DeviceInDB]:
        query = self.table.select().where(self.table.c.key_id == key_id).order_by(self.table.c.id)
        return self._select_many(query)
