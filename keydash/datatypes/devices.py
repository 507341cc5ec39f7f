from .common import CoreModel, IDModelMixin, DateTimeModelMixin
from .keys import KeyInDB


class DeviceCreate(CoreModel):
    key_id: int
    hwid: str


class DeviceInDB(IDModelMixin, DateTimeModelMixin, DeviceCreate):
    pass


class DeviceBinding(CoreModel):
    """Result of binding a hardware id to a key.

    `key` is the post-bind state and `created` tells whether a new device
    slot was consumed by this call.
    """

    device: DeviceInDB
    key: KeyInDB
    created: bool
