"""Unit tests for sale request validation."""

from decimal import Decimal

import pytest

from app.core import exceptions
from app.modules.sales.validators import parse_number, validate_sale_request
from app.shared.database.models import PaymentMethod


def _payload(**overrides):
    payload = {
        "userId": "U1",
        "paymentMethod": "cash",
        "items": [{"productId": "P1", "quantity": 2}],
    }
    payload.update(overrides)
    return payload


def test_valid_payload_is_sanitized():
    request = validate_sale_request(
        _payload(
            items=[{"productId": " P1 ", "quantity": "1.5", "price": 5}],
            discount="1.25",
            receiptNumber="  R-1  ",
        )
    )

    assert request.user_id == "U1"
    assert request.payment_method is PaymentMethod.CASH
    assert request.items[0].product_id == "P1"
    assert request.items[0].quantity == Decimal("1.50")
    assert request.items[0].price_override == Decimal("5")
    assert request.discount == Decimal("1.25")
    assert request.receipt_number == "R-1"


def test_defaults_discount_and_receipt_number():
    request = validate_sale_request(_payload(receiptNumber="   "))

    assert request.discount == Decimal("0")
    assert request.receipt_number is None
    assert request.items[0].price_override is None


@pytest.mark.parametrize("method", ["CASH", "Cash", "mobile_money", "Bank_Transfer"])
def test_payment_method_is_case_insensitive(method):
    request = validate_sale_request(_payload(paymentMethod=method))
    assert request.payment_method.value == method.upper()


@pytest.mark.parametrize("user_id", [None, "", "   "])
def test_missing_user_id(user_id):
    payload = _payload(userId=user_id)
    with pytest.raises(exceptions.MissingFieldError, match="userId is required"):
        validate_sale_request(payload)


@pytest.mark.parametrize("method", [None, "", "cheque", 3])
def test_invalid_payment_method(method):
    with pytest.raises(exceptions.InvalidEnumError):
        validate_sale_request(_payload(paymentMethod=method))


@pytest.mark.parametrize("items", [None, [], {}, "P1"])
def test_empty_items(items):
    with pytest.raises(exceptions.EmptyItemsError):
        validate_sale_request(_payload(items=items))


def test_checks_run_in_order():
    """A payload wrong everywhere reports the attendant first."""

    with pytest.raises(exceptions.MissingFieldError):
        validate_sale_request({"paymentMethod": "nope", "items": []})

    with pytest.raises(exceptions.InvalidEnumError):
        validate_sale_request({"userId": "U1", "paymentMethod": "nope", "items": []})


def test_item_errors_are_one_indexed():
    items = [
        {"productId": "P1", "quantity": 1},
        {"quantity": 1},
    ]
    with pytest.raises(exceptions.MissingFieldError, match="Item 2 is missing productId"):
        validate_sale_request(_payload(items=items))


def test_non_object_item():
    with pytest.raises(exceptions.InvalidItemError, match="position 1"):
        validate_sale_request(_payload(items=["P1"]))


@pytest.mark.parametrize("quantity", [0, -1, "abc", None, True, float("nan"), float("inf"), "0.001"])
def test_invalid_quantity(quantity):
    with pytest.raises(exceptions.InvalidQuantityError, match="Item 1"):
        validate_sale_request(_payload(items=[{"productId": "P1", "quantity": quantity}]))


@pytest.mark.parametrize("price", [-0.01, "free", float("inf"), False])
def test_invalid_price_override(price):
    with pytest.raises(exceptions.InvalidPriceError, match="Item 1 price"):
        validate_sale_request(_payload(items=[{"productId": "P1", "quantity": 1, "price": price}]))


def test_zero_price_override_passes_validation():
    request = validate_sale_request(_payload(items=[{"productId": "P1", "quantity": 1, "price": 0}]))
    assert request.items[0].price_override == Decimal("0")


@pytest.mark.parametrize("discount", [-1, "lots", float("nan")])
def test_invalid_discount(discount):
    with pytest.raises(exceptions.InvalidDiscountError):
        validate_sale_request(_payload(discount=discount))


def test_validation_errors_map_to_bad_request():
    with pytest.raises(exceptions.ValidationError) as excinfo:
        validate_sale_request(_payload(items=[]))

    assert excinfo.value.status_code == 400
    assert excinfo.value.to_dict() == {
        "error": "At least one sale item is required.",
        "code": "EMPTY_ITEMS",
    }


def test_parse_number():
    assert parse_number(0.1) == Decimal("0.1")
    assert parse_number("  2.50 ") == Decimal("2.50")
    assert parse_number(True) is None
    assert parse_number("") is None
    assert parse_number({"value": 1}) is None


@pytest.mark.parametrize("overrides, error, message", [
    (
        {"items": [{"productId": "P1", "quantity": "1e30"}]},
        exceptions.InvalidQuantityError,
        "Item 1 quantity is too large.",
    ),
    (
        {"items": [{"productId": "P1", "quantity": 1, "price": "1e27"}]},
        exceptions.InvalidPriceError,
        "Item 1 price is too large.",
    ),
    ({"discount": "1e27"}, exceptions.InvalidDiscountError, "discount is too large."),
    ({"discount": 100000000}, exceptions.InvalidDiscountError, "discount is too large."),
])
def test_amounts_beyond_storage_range(overrides, error, message):
    with pytest.raises(error) as excinfo:
        validate_sale_request(_payload(**overrides))

    assert excinfo.value.message == message


def test_largest_storable_amounts_pass():
    request = validate_sale_request(_payload(
        items=[{"productId": "P1", "quantity": "99999999.99", "price": "99999999.99"}],
        discount="99999999.99",
    ))

    assert request.items[0].quantity == Decimal("99999999.99")
    assert request.discount == Decimal("99999999.99")
