import math

import pytest

from app.core.exceptions import InvalidInputError
from app.services.validation import validate_id, validate_item_payload, validate_store_payload
from conftest import item_payload, store_payload


def test_complete_store_payload_is_valid():
    validate_store_payload(store_payload())


@pytest.mark.parametrize("field", ["name", "location", "image"])
def test_store_payload_with_empty_field_is_rejected(field):
    with pytest.raises(InvalidInputError) as excinfo:
        validate_store_payload(store_payload(**{field: ""}))
    assert field in excinfo.value.message


def test_whitespace_only_store_field_is_accepted():
    validate_store_payload(store_payload(name="   "))


def test_complete_item_payload_is_valid():
    validate_item_payload(item_payload())


@pytest.mark.parametrize("price", [0, -1, -0.01, math.nan, math.inf])
def test_item_payload_with_non_positive_price_is_rejected(price):
    with pytest.raises(InvalidInputError) as excinfo:
        validate_item_payload(item_payload(price=price))
    assert "price" in excinfo.value.message


def test_item_payload_reports_every_problem():
    with pytest.raises(InvalidInputError) as excinfo:
        validate_item_payload(item_payload(size="", glass_type="", price=0))
    message = excinfo.value.message
    assert "size" in message
    assert "glassType" in message
    assert "price" in message


def test_empty_identifier_is_rejected():
    with pytest.raises(InvalidInputError):
        validate_id("")
    validate_id("abc")
    validate_id(" ")
