import pytest
from keydash.core import add_credits, debit_credits
from keydash.exceptions import InsufficientCreditsException, NotFoundException, ValidationException


def test_add_credits(keydash, make_reseller):
    reseller = make_reseller(credits=2)
    assert add_credits(keydash, reseller.id, 5).credits == 7


def test_add_credits_unknown_reseller(keydash):
    with pytest.raises(NotFoundException) as excinfo:
        add_credits(keydash, 42, 5)
    assert excinfo.value.message == "Reseller not found"


@pytest.mark.parametrize("amount", [0, -3])
def test_add_credits_requires_positive_amount(keydash, make_reseller, amount):
    reseller = make_reseller(credits=2)
    with pytest.raises(ValidationException):
        add_credits(keydash, reseller.id, amount)
    assert keydash.backend.resellers.get(reseller.id).credits == 2


def test_debit_credits(keydash, make_reseller):
    reseller = make_reseller(credits=1)
    assert debit_credits(keydash, reseller.id).credits == 0
    with pytest.raises(InsufficientCreditsException) as excinfo:
        debit_credits(keydash, reseller.id)
    assert excinfo.value.message == "Insufficient credits"
    assert keydash.backend.resellers.get(reseller.id).credits == 0
