import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import and_, select
from structlog import get_logger

from keydash.settings import KeydashSettings
from keydash.exceptions import (
    SettingsException,
    NotFoundException,
    DuplicateKeyException,
    InsufficientCreditsException,
    DeviceLimitReachedException,
)
from keydash.datatypes import (
    AdminInDB,
    ResellerInDB,
    ReferralTokenInDB,
    KeyCreate,
    KeyInDB,
    KeyStatus,
    DeviceInDB,
    DeviceBinding,
)

from ..base import (
    KeydashBackend,
    AdminRepository,
    ResellerRepository,
    ReferralTokenRepository,
    KeyRepository,
    DeviceRepository,
)
from .tables import (
    metadata,
    admins_table,
    resellers_table,
    referral_tokens_table,
    keys_table,
    devices_table,
)
from .repositories import (
    SQLAdminRepository,
    SQLResellerRepository,
    SQLReferralTokenRepository,
    SQLKeyRepository,
    SQLDeviceRepository,
)

logger = get_logger(__name__)


def create_engine(database_url: str) -> sa.engine.Engine:
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        return sa.create_engine(database_url, **kwargs)
    return sa.create_engine(database_url, pool_pre_ping=True)


class SQLKeydashBackend(KeydashBackend):
    """Backend on top of SQLAlchemy Core.

    Multi-step writes run in a single transaction and rely on conditional
    UPDATEs plus unique constraints instead of application locks.
    """

    def __init__(self, settings: KeydashSettings):
        super().__init__(settings)
        if not settings.connections.database_url:
            raise SettingsException("connections.database_url is required for the sql backend")
        self._engine = create_engine(settings.connections.database_url)
        self._metadata = metadata
        self.initialize()

        self._admins = SQLAdminRepository(table=admins_table, engine=self._engine, in_db_cls=AdminInDB)
        self._resellers = SQLResellerRepository(table=resellers_table, engine=self._engine, in_db_cls=ResellerInDB)
        self._referral_tokens = SQLReferralTokenRepository(
            table=referral_tokens_table, engine=self._engine, in_db_cls=ReferralTokenInDB
        )
        self._keys = SQLKeyRepository(table=keys_table, engine=self._engine, in_db_cls=KeyInDB)
        self._devices = SQLDeviceRepository(table=devices_table, engine=self._engine, in_db_cls=DeviceInDB)

    @property
    def admins(self) -> AdminRepository:
        return self._admins

    @property
    def resellers(self) -> ResellerRepository:
        return self._resellers

    @property
    def referral_tokens(self) -> ReferralTokenRepository:
        return self._referral_tokens

    @property
    def keys(self) -> KeyRepository:
        return self._keys

    @property
    def devices(self) -> DeviceRepository:
        return self._devices

    def initialize(self):
        self._metadata.create_all(self._engine)

    def issue_key(self, key: KeyCreate, cost: int) -> KeyInDB:
        debit = (
            resellers_table.update()
            .where(and_(resellers_table.c.id == key.reseller_id, resellers_table.c.credits >= cost))
            .values(
                credits=resellers_table.c.credits - cost,
                keys_generated=resellers_table.c.keys_generated + 1,
            )
        )
        try:
            with self._engine.begin() as connection:
                if connection.execute(debit).rowcount == 0:
                    exists = connection.execute(
                        select(resellers_table.c.id).where(resellers_table.c.id == key.reseller_id)
                    ).first()
                    if exists is None:
                        raise NotFoundException("Reseller not found")
                    raise InsufficientCreditsException()
                result = connection.execute(keys_table.insert().values(**key.model_dump()))
                key_id = result.inserted_primary_key[0]
        except IntegrityError as e:
            logger.info("key insert rejected", reseller_id=key.reseller_id, error=str(e.orig))
            raise DuplicateKeyException() from e
        return self._keys.get_or_error(key_id)

    def bind_device(self, key_id: int, hwid: str) -> DeviceBinding:
        existing = self._devices.get_by_hwid(key_id, hwid)
        if existing:
            return DeviceBinding(device=existing, key=self._keys.get_or_error(key_id), created=False)

        increment = (
            keys_table.update()
            .where(and_(keys_table.c.id == key_id, keys_table.c.devices_used < keys_table.c.device_limit))
            .values(devices_used=keys_table.c.devices_used + 1)
        )
        mark_full = (
            keys_table.update()
            .where(and_(keys_table.c.id == key_id, keys_table.c.devices_used >= keys_table.c.device_limit))
            .values(status=KeyStatus.full)
        )
        try:
            with self._engine.begin() as connection:
                if connection.execute(increment).rowcount == 0:
                    exists = connection.execute(select(keys_table.c.id).where(keys_table.c.id == key_id)).first()
                    if exists is None:
                        raise NotFoundException("Key not found")
                    raise DeviceLimitReachedException()
                connection.execute(mark_full)
                result = connection.execute(devices_table.insert().values(key_id=key_id, hwid=hwid))
                device_id = result.inserted_primary_key[0]
        except IntegrityError:
            # the same hwid was bound concurrently; the transaction above is rolled back
            existing = self._devices.get_by_hwid(key_id, hwid)
            if existing is None:
                raise
            return DeviceBinding(device=existing, key=self._keys.get_or_error(key_id), created=False)

        return DeviceBinding(
            device=self._devices.get_or_error(device_id), key=self._keys.get_or_error(key_id), created=True
        )

    def delete_key(self, key_id: int) -> int:
        with self._engine.begin() as connection:
            connection.execute(devices_table.delete().where(devices_table.c.key_id == key_id))
            return connection.execute(keys_table.delete().where(keys_table.c.id == key_id)).rowcount

    def delete_reseller(self, reseller_id: int) -> int:
        key_ids = select(keys_table.c.id).where(keys_table.c.reseller_id == reseller_id)
        with self._engine.begin() as connection:
            connection.execute(devices_table.delete().where(devices_table.c.key_id.in_(key_ids)))
            deleted_keys = connection.execute(keys_table.delete().where(keys_table.c.reseller_id == reseller_id))
            deleted = connection.execute(resellers_table.delete().where(resellers_table.c.id == reseller_id))
            logger.debug("sql reseller cascade", reseller_id=reseller_id, deleted_keys=deleted_keys.rowcount)
            return deleted.rowcount
