import datetime as dt
import re
import pytest
from keydash.core import (
    create_key,
    delete_key,
    derive_key_status,
    generate_key_value,
    list_keys_for_reseller,
    materialize_key,
)
from keydash.core import keys as keys_module
from keydash.datatypes import KeyStatus, GenerateKeyRequest
from keydash.exceptions import (
    DuplicateKeyException,
    InsufficientCreditsException,
    NotFoundException,
    NotOwnerException,
)


def test_generate_key_value_format():
    key = generate_key_value()
    assert re.fullmatch(r"[0-9A-F]{8}-[0-9A-F]{8}-[0-9A-F]{8}-[0-9A-F]{8}", key)
    assert generate_key_value() != key


def test_create_key_spends_one_credit(keydash, make_reseller, key_request):
    reseller = make_reseller(credits=2)
    key = create_key(keydash, reseller.id, key_request(device_limit=3))

    assert key.reseller_id == reseller.id
    assert key.devices_used == 0
    assert key.device_limit == 3
    assert key.status == KeyStatus.active
    reseller = keydash.backend.resellers.get(reseller.id)
    assert reseller.credits == 1
    assert reseller.keys_generated == 1


def test_create_key_without_credits_has_no_side_effects(keydash, make_reseller, key_request):
    reseller = make_reseller(credits=0)
    with pytest.raises(InsufficientCreditsException):
        create_key(keydash, reseller.id, key_request())

    reseller = keydash.backend.resellers.get(reseller.id)
    assert reseller.credits == 0
    assert reseller.keys_generated == 0
    assert keydash.backend.keys.get_for_reseller(reseller.id) == []


def test_custom_key_must_be_globally_unique(keydash, make_reseller, key_request):
    first = make_reseller(username="first", credits=1)
    second = make_reseller(username="second", credits=1)
    create_key(keydash, first.id, key_request(custom_key="MY-CUSTOM-KEY"))

    with pytest.raises(DuplicateKeyException) as excinfo:
        create_key(keydash, second.id, key_request(custom_key="MY-CUSTOM-KEY"))
    assert excinfo.value.message == "Custom key already exists"
    assert keydash.backend.resellers.get(second.id).credits == 1


def test_blank_custom_key_is_generated(keydash, make_reseller, key_request):
    reseller = make_reseller(credits=1)
    key = create_key(keydash, reseller.id, key_request(custom_key="   "))
    assert re.fullmatch(r"[0-9A-F]{8}(-[0-9A-F]{8}){3}", key.key)


def test_generated_key_collision_is_retried(keydash, make_reseller, key_request, monkeypatch):
    reseller = make_reseller(credits=2)
    create_key(keydash, reseller.id, key_request(custom_key="AAAAAAAA-AAAAAAAA-AAAAAAAA-AAAAAAAA"))

    values = iter(["AAAAAAAA-AAAAAAAA-AAAAAAAA-AAAAAAAA", "BBBBBBBB-BBBBBBBB-BBBBBBBB-BBBBBBBB"])
    monkeypatch.setattr(keys_module, "generate_key_value", lambda: next(values))

    key = create_key(keydash, reseller.id, key_request())
    assert key.key == "BBBBBBBB-BBBBBBBB-BBBBBBBB-BBBBBBBB"
    assert keydash.backend.resellers.get(reseller.id).credits == 0


def test_generate_key_request_validation():
    with pytest.raises(ValueError):
        GenerateKeyRequest(game="  ", device_limit=1, expiry_date=dt.datetime(2099, 1, 1))
    with pytest.raises(ValueError):
        GenerateKeyRequest(game="Game", device_limit=0, expiry_date=dt.datetime(2099, 1, 1))

    request = GenerateKeyRequest.model_validate(
        {"game": " Game ", "deviceLimit": "2", "expiryDate": "2099-01-01T02:00:00+02:00"}
    )
    assert request.game == "Game"
    assert request.device_limit == 2
    assert request.expiry_date == dt.datetime(2099, 1, 1, 0, 0)


def test_derive_key_status_precedence(keydash, make_reseller, key_request):
    reseller = make_reseller(credits=1)
    key = create_key(keydash, reseller.id, key_request(device_limit=1))
    now = dt.datetime.utcnow()

    assert derive_key_status(key, now) == KeyStatus.active
    full = key.model_copy(update={"devices_used": 1})
    assert derive_key_status(full, now) == KeyStatus.full
    assert derive_key_status(full, key.expiry_date + dt.timedelta(seconds=1)) == KeyStatus.expired
    assert materialize_key(full, now).status == KeyStatus.full
    assert materialize_key(key, now) is key


def test_list_keys_persists_expired_status(keydash, make_reseller, key_request):
    reseller = make_reseller(credits=2)
    expired = create_key(keydash, reseller.id, key_request(days=-1))
    active = create_key(keydash, reseller.id, key_request(days=10))
    assert keydash.backend.keys.get(expired.id).status == KeyStatus.active

    keys = {k.id: k for k in list_keys_for_reseller(keydash, reseller.id)}
    assert keys[expired.id].status == KeyStatus.expired
    assert keys[active.id].status == KeyStatus.active
    assert keydash.backend.keys.get(expired.id).status == KeyStatus.expired


def test_delete_key_requires_ownership(keydash, make_reseller, key_request):
    owner = make_reseller(username="owner", credits=1)
    other = make_reseller(username="other")
    key = create_key(keydash, owner.id, key_request())

    with pytest.raises(NotOwnerException):
        delete_key(keydash, key.id, other.id)
    with pytest.raises(NotFoundException):
        delete_key(keydash, key.id + 100, owner.id)

    assert delete_key(keydash, key.id, owner.id) == 1
    assert keydash.backend.keys.get(key.id) is None
    assert keydash.backend.resellers.get(owner.id).keys_generated == 1
