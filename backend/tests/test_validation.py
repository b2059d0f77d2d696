import pytest

from bazar.services.exceptions import ValidationError
from bazar.services.validation import (
    MAX_DB_INT,
    parse_id,
    parse_paging,
    to_number,
    validate_product,
    validate_sale,
    validate_status,
)


def test_valid_product_has_no_errors():
    assert validate_product("Mesa", "0") == []
    assert validate_product("  Mesa ", 199.9, "madeira") == []


def test_product_errors_accumulate():
    errors = validate_product(" a ", -5, 42)
    assert len(errors) == 3


@pytest.mark.parametrize("price", [None, "", "  ", "12,5", "nan", "inf", True, [1]])
def test_product_rejects_bad_price(price):
    assert len(validate_product("Mesa", price)) == 1


def test_to_number():
    assert to_number(" 3.5 ") == 3.5
    assert to_number(7) == 7.0
    assert to_number(False) is None
    assert to_number("1e400") is None


def test_sale_checks_in_field_order():
    with pytest.raises(ValidationError) as exc:
        validate_sale(None, None, None)
    assert exc.value.message.startswith("productId")
    assert exc.value.errors is None
    validate_sale(3, 2, 0)


def test_status_filter():
    assert validate_status(None) is None
    assert validate_status("") is None
    assert validate_status("inactive") == "inactive"
    with pytest.raises(ValidationError):
        validate_status("ACTIVE")


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (None, None, (1, 10, 0)),
        ("2", "10", (2, 10, 10)),
        (0, 51, (1, 50, 0)),
        (3, -1, (3, 1, 2)),
        ("abc", "1.5", (1, 10, 0)),
    ],
)
def test_parse_paging(page, limit, expected):
    assert parse_paging(page, limit) == expected


def test_oversized_integers_are_rejected():
    assert validate_product("Mesa", 10 ** 400) == ["price must be a number"]
    with pytest.raises(ValidationError) as exc:
        validate_sale(2 ** 63, 1, 1)
    assert exc.value.message.startswith("productId")
    with pytest.raises(ValidationError) as exc:
        validate_sale(1, 2 ** 70, 1)
    assert exc.value.message.startswith("quantity")
    with pytest.raises(ValidationError) as exc:
        validate_sale(1, 1, 10 ** 400)
    assert exc.value.message.startswith("total")
    validate_sale(MAX_DB_INT, MAX_DB_INT, 0)


@pytest.mark.parametrize(
    "raw, expected",
    [("7", 7), (" 12 ", 12), ("0", None), ("-4", None), ("abc", None), ("1.0", None),
     ("9" * 30, None), (str(MAX_DB_INT), MAX_DB_INT), (5, 5)],
)
def test_parse_id(raw, expected):
    assert parse_id(raw) == expected


def test_parse_paging_keeps_offset_storable():
    page, limit, offset = parse_paging("9" * 30, 50)
    assert limit == 50
    assert offset <= MAX_DB_INT
