import datetime as dt
import pytest
from keydash.settings import KeydashSettings
from keydash.backends import InMemKeydashBackend
from keydash.kvstore import InMemKeyValueStore
from keydash.core import KeydashContext, add_credits, hash_password
from keydash.datatypes import ResellerCreate, GenerateKeyRequest


@pytest.fixture
def minimal_settings():
    return KeydashSettings(secret="test" * 8, password_iterations=1000)


@pytest.fixture
def inmem_backend(minimal_settings):
    return InMemKeydashBackend(minimal_settings)


@pytest.fixture
def dummy_kvstore(minimal_settings):
    return InMemKeyValueStore(minimal_settings)


@pytest.fixture
def keydash(minimal_settings, inmem_backend, dummy_kvstore):
    return KeydashContext(settings=minimal_settings, backend=inmem_backend, kvstore=dummy_kvstore)


@pytest.fixture
def make_reseller(keydash):
    def _make_reseller(username="seller", credits=0, password="password"):
        reseller = keydash.backend.resellers.create(
            ResellerCreate(
                username=username,
                email=f"{username}@example.com",
                password=hash_password(password, keydash.settings.password_iterations),
            )
        )
        if credits:
            reseller = add_credits(keydash, reseller.id, credits)
        return reseller

    return _make_reseller


@pytest.fixture
def key_request():
    def _key_request(device_limit=1, days=30, custom_key=None, game="Space Game"):
        return GenerateKeyRequest(
            game=game,
            device_limit=device_limit,
            expiry_date=dt.datetime.utcnow() + dt.timedelta(days=days),
            custom_key=custom_key,
        )

    return _key_request
