from abc import ABC, abstractmethod

from keydash.settings import KeydashSettings
from keydash.datatypes import KeyCreate, KeyInDB, DeviceBinding

from .repositories import (
    AdminRepository,
    ResellerRepository,
    ReferralTokenRepository,
    KeyRepository,
    DeviceRepository,
)


class KeydashBackend(ABC):
    def __init__(self, settings: KeydashSettings):
        self.settings = settings

    @property
    @abstractmethod
    def admins(self) -> AdminRepository:
        pass

    @property
    @abstractmethod
    def resellers(self) -> ResellerRepository:
        pass

    @property
    @abstractmethod
    def referral_tokens(self) -> ReferralTokenRepository:
        pass

    @property
    @abstractmethod
    def keys(self) -> KeyRepository:
        pass

    @property
    @abstractmethod
    def devices(self) -> DeviceRepository:
        pass

    @abstractmethod
    def initialize(self):
        pass

    @abstractmethod
    def issue_key(self, key: KeyCreate, cost: int) -> KeyInDB:
        """Insert the key, debit `cost` credits and bump `keys_generated` as one unit.

        Raises DuplicateKeyException, InsufficientCreditsException or
        NotFoundException; nothing is persisted in those cases.
        """

    @abstractmethod
    def bind_device(self, key_id: int, hwid: str) -> DeviceBinding:
        """Bind `hwid` to the key, atomically per key.

        Re-binding a known hwid returns the existing device without consuming
        capacity. Raises DeviceLimitReachedException when the key is full.
        """

    @abstractmethod
    def delete_key(self, key_id: int) -> int:
        pass

    @abstractmethod
    def delete_reseller(self, reseller_id: int) -> int:
        pass
