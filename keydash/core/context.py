from keydash.settings import KeydashSettings
from keydash.backends import KeydashBackend, init_backend
from keydash.kvstore import KeyValueStore, init_key_value_store


class KeydashContext:
    def __init__(
        self,
        settings: KeydashSettings,
        backend: KeydashBackend,
        kvstore: KeyValueStore,
    ):
        self._settings = settings
        self._backend = backend
        self._kvstore = kvstore

    @property
    def settings(self) -> KeydashSettings:
        return self._settings

    @property
    def backend(self) -> KeydashBackend:
        return self._backend

    @property
    def kvstore(self) -> KeyValueStore:
        return self._kvstore


def init_context_from_settings(settings: KeydashSettings) -> KeydashContext:
    backend: KeydashBackend = init_backend(settings)
    kvstore = init_key_value_store(settings)
    return KeydashContext(
        settings=settings,
        backend=backend,
        kvstore=kvstore,
    )
