import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from ledger.errors import InvalidAmountError
from ledger.resource import (
    BIG_INTEGER,
    INTEGER,
    BigIntegerResource,
    IntegerResource,
    Resource,
)
from ledger.resource_types import ResourceType


def _record(resource):
    events = []
    resource.updated.connect(lambda old, new, initiator: events.append((old, new, initiator)))
    return events


def test_default_amount_is_zero():
    resource = IntegerResource(ResourceType.GOLD)
    assert resource.get_amount() == 0
    assert resource.type is ResourceType.GOLD
    assert resource.kind is INTEGER


def test_starting_amount_is_kept():
    resource = BigIntegerResource(ResourceType.STARS, 10**30)
    assert resource.get_amount() == 10**30
    assert resource.kind is BIG_INTEGER


def test_negative_starting_amount_rejected():
    with pytest.raises(InvalidAmountError):
        IntegerResource(ResourceType.GOLD, -1)


def test_type_is_read_only():
    resource = IntegerResource(ResourceType.GOLD)
    with pytest.raises(AttributeError):
        resource.type = ResourceType.GEMS


def test_add_increases_amount_and_notifies():
    resource = IntegerResource(ResourceType.GOLD, 5)
    events = _record(resource)
    resource.add(7)
    assert resource.get_amount() == 12
    assert events == [(5, 12, None)]


def test_spend_decreases_amount():
    resource = IntegerResource(ResourceType.GOLD, 100)
    events = _record(resource)
    resource.spend(30)
    assert resource.get_amount() == 70
    assert events == [(100, 70, None)]


def test_spend_more_than_available_floors_at_zero():
    resource = IntegerResource(ResourceType.GOLD, 70)
    events = _record(resource)
    resource.spend(1000)
    assert resource.get_amount() == 0
    assert events == [(70, 0, None)]


def test_spend_notifies_even_without_change():
    resource = IntegerResource(ResourceType.GOLD)
    events = _record(resource)
    resource.spend(0)
    resource.spend(5)
    assert resource.get_amount() == 0
    assert events == [(0, 0, None), (0, 0, None)]


@pytest.mark.parametrize("operation", ["add", "spend"])
def test_negative_amount_rejected_without_change(operation):
    resource = IntegerResource(ResourceType.GOLD, 10)
    events = _record(resource)
    with pytest.raises(InvalidAmountError, match="must not be negative"):
        getattr(resource, operation)(-1)
    assert resource.get_amount() == 10
    assert events == []


@pytest.mark.parametrize("amount", [1.5, "3", True, None])
def test_non_integer_amount_rejected(amount):
    resource = BigIntegerResource(ResourceType.STARS, 10)
    with pytest.raises(InvalidAmountError):
        resource.add(amount)
    assert resource.get_amount() == 10


def test_invalid_amount_error_is_value_error():
    resource = IntegerResource(ResourceType.GOLD)
    with pytest.raises(ValueError):
        resource.spend(-3)


def test_integer_overflow_raises_before_mutation():
    resource = IntegerResource(ResourceType.GOLD, 2**31 - 10)
    events = _record(resource)
    with pytest.raises(OverflowError):
        resource.add(11)
    assert resource.get_amount() == 2**31 - 10
    assert events == []
    resource.add(9)
    assert resource.get_amount() == 2**31 - 1


def test_big_integer_has_no_upper_bound():
    resource = BigIntegerResource(ResourceType.STARS, 2**31 - 1)
    resource.add(2**64)
    assert resource.get_amount() == 2**31 - 1 + 2**64


def test_has_amount_is_greater_or_equal():
    resource = IntegerResource(ResourceType.GOLD, 42)
    assert resource.has_amount(42) is True
    assert resource.has_amount(43) is False
    assert resource.has_amount(0) is True
    assert resource.has_amount(-5) is True


def test_initiator_passed_through_unchanged():
    sender = object()
    resource = IntegerResource(ResourceType.GEMS)
    events = _record(resource)
    resource.add(3, sender)
    resource.spend(1, initiator=sender)
    assert events[0][2] is sender
    assert events[1][2] is sender


def test_amount_never_negative_over_sequence():
    resource = IntegerResource(ResourceType.ENERGY, 3)
    for operation, amount in [
        ("spend", 2),
        ("spend", 2),
        ("add", 1),
        ("spend", 10),
        ("add", 4),
        ("spend", 4),
    ]:
        getattr(resource, operation)(amount)
        assert resource.get_amount() >= 0
    assert resource.get_amount() == 0


def test_generic_resource_accepts_explicit_kind():
    resource = Resource(ResourceType.GOLD, 1, kind=INTEGER)
    assert resource.kind is INTEGER
    with pytest.raises(OverflowError):
        resource.add(2**31)


def test_integer_spend_beyond_range_floors_at_zero():
    resource = IntegerResource(ResourceType.GOLD, 5)
    events = _record(resource)
    resource.spend(2**31)
    assert resource.get_amount() == 0
    assert events == [(5, 0, None)]


def test_integer_starting_amount_beyond_range_rejected():
    with pytest.raises(OverflowError):
        IntegerResource(ResourceType.GOLD, 2**31)


def test_plain_resource_is_big_integer():
    resource = Resource(ResourceType.GOLD, 50)
    assert resource.kind is BIG_INTEGER
