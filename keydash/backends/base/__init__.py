from .repositories_base import BaseRepository, IdType, CreateType, UpdateType, InDBType
from .repositories import (
    AdminRepository,
    ResellerRepository,
    ReferralTokenRepository,
    KeyRepository,
    DeviceRepository,
)
from .backend import KeydashBackend
