from threading import Lock, RLock
from typing import Optional, Callable, Dict, List, Iterable

from structlog import get_logger

from keydash.settings import KeydashSettings
from keydash.exceptions import (
    NotFoundException,
    ValidationException,
    DuplicateKeyException,
    InsufficientCreditsException,
    DeviceLimitReachedException,
)
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
    KeyStatus,
    DeviceCreate,
    DeviceInDB,
    DeviceBinding,
)

from .base import (
    BaseRepository,
    IdType,
    CreateType,
    UpdateType,
    InDBType,
    KeydashBackend,
    AdminRepository,
    ResellerRepository,
    ReferralTokenRepository,
    KeyRepository,
    DeviceRepository,
)

logger = get_logger(__name__)


class InMemRepository(
    BaseRepository[IdType, CreateType, UpdateType, InDBType]
):  # pylint: disable=unsubscriptable-object
    def __init__(self, in_db_cls: Callable[..., InDBType], write_lock: Optional[RLock] = None):
        self._state: dict = {}
        self._counter = 1
        self._in_db_cls = in_db_cls
        self._write_lock = write_lock or RLock()

    def get(self, id_: IdType) -> Optional[InDBType]:
        return self._state.get(id_)

    def get_or_error(self, id_: IdType) -> InDBType:
        obj = self._state.get(id_)
        if obj is None:
            raise NotFoundException(f"{self._in_db_cls.__name__} not found")
        return obj

    def create(self, obj: CreateType) -> InDBType:
        values = obj.model_dump()
        with self._write_lock:
            id_ = self._new_id()
            values["id"] = id_
            self._state[id_] = self._in_db_cls(**values)
            return self._state[id_]

    def update(self, id_: IdType, obj: UpdateType) -> InDBType:
        update_dict = obj.model_dump(exclude_unset=True)
        with self._write_lock:
            original_obj = self.get_or_error(id_)
            updated_obj = original_obj.model_copy(update=update_dict)
            self._state[id_] = updated_obj
            return self._state[id_]

    def delete(self, id_: IdType) -> int:
        with self._write_lock:
            try:
                del self._state[id_]
                return 1
            except KeyError:
                return 0

    def all(self) -> Iterable[InDBType]:
        return self._values()

    def _values(self) -> List[InDBType]:
        with self._write_lock:
            return list(self._state.values())

    def _new_id(self):
        ret = self._counter
        self._counter += 1
        return ret


class InMemAdminRepository(AdminRepository, InMemRepository[int, AdminCreate, AdminUpdate, AdminInDB]):
    def get_by_username(self, username: str) -> Optional[AdminInDB]:
        return next((admin for admin in self._values() if admin.username == username), None)


class InMemResellerRepository(
    ResellerRepository, InMemRepository[int, ResellerCreate, ResellerUpdate, ResellerInDB]
):
    def create(self, obj: ResellerCreate) -> ResellerInDB:
        with self._write_lock:
            if self.get_by_username(obj.username):
                raise ValidationException("Username already taken")
            if self.get_by_email(obj.email):
                raise ValidationException("Email already used")
            return super().create(obj)

    def get_by_username(self, username: str) -> Optional[ResellerInDB]:
        return next((r for r in self._values() if r.username == username), None)

    def get_by_email(self, email: str) -> Optional[ResellerInDB]:
        email = email.lower()
        return next((r for r in self._values() if r.email.lower() == email), None)

    def add_credits(self, reseller_id: int, amount: int) -> ResellerInDB:
        with self._write_lock:
            reseller = self._get_reseller(reseller_id)
            return self.update(reseller_id, ResellerUpdate(credits=reseller.credits + amount))

    def debit_credits(self, reseller_id: int, amount: int) -> ResellerInDB:
        with self._write_lock:
            reseller = self._get_reseller(reseller_id)
            if reseller.credits < amount:
                raise InsufficientCreditsException()
            return self.update(reseller_id, ResellerUpdate(credits=reseller.credits - amount))

    def _get_reseller(self, reseller_id: int) -> ResellerInDB:
        reseller = self.get(reseller_id)
        if reseller is None:
            raise NotFoundException("Reseller not found")
        return reseller


class InMemReferralTokenRepository(
    ReferralTokenRepository,
    InMemRepository[int, ReferralTokenCreate, ReferralTokenUpdate, ReferralTokenInDB],
):
    def get_unused_by_token(self, token: str) -> Optional[ReferralTokenInDB]:
        return next((t for t in self._values() if t.token == token and not t.used), None)

    def mark_used(self, token_id: int) -> bool:
        with self._write_lock:
            token = self.get(token_id)
            if token is None or token.used:
                return False
            self.update(token_id, ReferralTokenUpdate(used=True))
            return True


class InMemKeyRepository(KeyRepository, InMemRepository[int, KeyCreate, KeyUpdate, KeyInDB]):
    def __init__(self, in_db_cls: Callable[..., KeyInDB], write_lock: Optional[RLock] = None):
        super().__init__(in_db_cls, write_lock)
        self._key_locks: Dict[int, Lock] = {}
        self._key_locks_lock = Lock()

    def lock_for(self, key_id: int) -> Lock:
        with self._key_locks_lock:
            return self._key_locks.setdefault(key_id, Lock())

    def forget_lock(self, key_id: int):
        with self._key_locks_lock:
            self._key_locks.pop(key_id, None)

    def get_by_value(self, key: str) -> Optional[KeyInDB]:
        return next((k for k in self._values() if k.key == key), None)

    def get_for_reseller(self, reseller_id: int) -> List[KeyInDB]:
        return [k for k in self._values() if k.reseller_id == reseller_id]


class InMemDeviceRepository(DeviceRepository, InMemRepository[int, DeviceCreate, DeviceCreate, DeviceInDB]):
    def get_by_hwid(self, key_id: int, hwid: str) -> Optional[DeviceInDB]:
        return next((d for d in self._values() if d.key_id == key_id and d.hwid == hwid), None)

    def get_for_key(self, key_id: int) -> List[DeviceInDB]:
        return [d for d in self._values() if d.key_id == key_id]


class InMemKeydashBackend(KeydashBackend):
    """Process-local backend. Every write goes through one re-entrant lock;
    device binding additionally holds the lock of the key being bound.

    Lock order is always key lock -> write lock.
    """

    def __init__(self, settings: KeydashSettings):
        super().__init__(settings)
        self._write_lock = RLock()
        self._admins = InMemAdminRepository(in_db_cls=AdminInDB, write_lock=self._write_lock)
        self._resellers = InMemResellerRepository(in_db_cls=ResellerInDB, write_lock=self._write_lock)
        self._referral_tokens = InMemReferralTokenRepository(
            in_db_cls=ReferralTokenInDB, write_lock=self._write_lock
        )
        self._keys = InMemKeyRepository(in_db_cls=KeyInDB, write_lock=self._write_lock)
        self._devices = InMemDeviceRepository(in_db_cls=DeviceInDB, write_lock=self._write_lock)

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
        pass

    def issue_key(self, key: KeyCreate, cost: int) -> KeyInDB:
        with self._write_lock:
            reseller = self._resellers.get(key.reseller_id)
            if reseller is None:
                raise NotFoundException("Reseller not found")
            if self._keys.get_by_value(key.key):
                raise DuplicateKeyException()
            if reseller.credits < cost:
                raise InsufficientCreditsException()
            key_in_db = self._keys.create(key)
            self._resellers.update(
                reseller.id,
                ResellerUpdate(credits=reseller.credits - cost, keys_generated=reseller.keys_generated + 1),
            )
            return key_in_db

    def bind_device(self, key_id: int, hwid: str) -> DeviceBinding:
        with self._keys.lock_for(key_id):
            key = self._keys.get(key_id)
            if key is None:
                raise NotFoundException("Key not found")
            existing = self._devices.get_by_hwid(key_id, hwid)
            if existing:
                return DeviceBinding(device=existing, key=key, created=False)

            if key.devices_used >= key.device_limit:
                raise DeviceLimitReachedException()

            device = self._devices.create(DeviceCreate(key_id=key_id, hwid=hwid))
            key_update = KeyUpdate(devices_used=key.devices_used + 1)
            if key_update.devices_used >= key.device_limit:
                key_update.status = KeyStatus.full
            key = self._keys.update(key_id, key_update)
            return DeviceBinding(device=device, key=key, created=True)

    def delete_key(self, key_id: int) -> int:
        with self._keys.lock_for(key_id):
            for device in self._devices.get_for_key(key_id):
                self._devices.delete(device.id)
            deleted = self._keys.delete(key_id)
        self._keys.forget_lock(key_id)
        return deleted

    def delete_reseller(self, reseller_id: int) -> int:
        # deleting the reseller first stops issue_key from adding keys during the cascade
        with self._write_lock:
            key_ids = [key.id for key in self._keys.get_for_reseller(reseller_id)]
            deleted = self._resellers.delete(reseller_id)
        for key_id in key_ids:
            self.delete_key(key_id)
        logger.debug("in-memory reseller cascade", reseller_id=reseller_id, deleted_keys=len(key_ids))
        return deleted
