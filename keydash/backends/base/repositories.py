from abc import abstractmethod
from typing import Optional, List

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
)

from .repositories_base import BaseRepository


class AdminRepository(BaseRepository[int, AdminCreate, AdminUpdate, AdminInDB]):
    @abstractmethod
    def get_by_username(self, username: str) -> Optional[AdminInDB]:
        pass


class ResellerRepository(BaseRepository[int, ResellerCreate, ResellerUpdate, ResellerInDB]):
    @abstractmethod
    def get_by_username(self, username: str) -> Optional[ResellerInDB]:
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[ResellerInDB]:
        pass

    @abstractmethod
    def add_credits(self, reseller_id: int, amount: int) -> ResellerInDB:
        pass

    @abstractmethod
    def debit_credits(self, reseller_id: int, amount: int) -> ResellerInDB:
        """Decrease the balance by `amount`, never below zero.

        Raises InsufficientCreditsException when the balance is too low and
        NotFoundException when the reseller does not exist.
        """


class ReferralTokenRepository(
    BaseRepository[int, ReferralTokenCreate, ReferralTokenUpdate, ReferralTokenInDB]
):
    @abstractmethod
    def get_unused_by_token(self, token: str) -> Optional[ReferralTokenInDB]:
        pass

    @abstractmethod
    def mark_used(self, token_id: int) -> bool:
        """Flip `used` from False to True. Returns False if it was already used or missing."""


class KeyRepository(BaseRepository[int, KeyCreate, KeyUpdate, KeyInDB]):
    @abstractmethod
    def get_by_value(self, key: str) -> Optional[KeyInDB]:
        pass

    @abstractmethod
    def get_for_reseller(self, reseller_id: int) -> List[KeyInDB]:
        pass

    def set_status(self, key_id: int, status: KeyStatus) -> KeyInDB:
        return self.update(key_id, KeyUpdate(status=status))


class DeviceRepository(BaseRepository[int, DeviceCreate, DeviceCreate, DeviceInDB]):
    @abstractmethod
    def get_by_hwid(self, key_id: int, hwid: str) -> Optional[DeviceInDB]:
        pass

    @abstractmethod
    def get_for_key(self, key_id: int) -> List[DeviceInDB]:
        pass
