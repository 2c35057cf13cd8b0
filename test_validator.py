import pytest

from receipt import Item, Receipt
from validator import RULES, FieldError, ReceiptValidationError, check_receipt, validate_receipt


def make_receipt(**overrides):
    fields = {
        "retailer": "Walgreens",
        "purchase_date": "2022-01-02",
        "purchase_time": "08:13",
        "items": [Item("Pepsi - 12-oz", "1.25"), Item("Dasani", "1.40")],
        "total": "2.65",
    }
    fields.update(overrides)
    return Receipt(**fields)


def codes(errors):
    return [error.code for error in errors]


def test_valid_receipt_has_empty_report():
    assert check_receipt(make_receipt()) == []
    validate_receipt(make_receipt())


def test_header_checks_all_run():
    receipt = make_receipt(retailer="Shop*Name", purchase_date="2022-13-01", purchase_time="25:00")
    assert check_receipt(receipt) == [
        FieldError("retailer", "retailerformat"),
        FieldError("purchaseDate", "purchasedateformat"),
        FieldError("purchaseTime", "purchasetimeformat"),
    ]


def test_header_errors_accumulate_with_total_mismatch():
    receipt = make_receipt(retailer="Store#1", total="9.00")
    assert codes(check_receipt(receipt)) == ["retailerformat", "totalmatchsumprice"]


def test_total_format_halts_before_numeric_and_sum_checks():
    receipt = make_receipt(total="10.005", items=[])
    assert check_receipt(receipt) == [FieldError("total", "totalformat")]


def test_total_format_rejects_trailing_newline_and_unicode_digits():
    for total in ["2.65\n", "٢.65", " 2.65", "2,65"]:
        assert codes(check_receipt(make_receipt(total=total))) == ["totalformat"]


def test_total_number_rejects_overflowing_amount():
    receipt = make_receipt(total="9" * 400 + ".00")
    assert check_receipt(receipt) == [FieldError("total", "totalnumber")]


def test_empty_items():
    receipt = make_receipt(items=[], purchase_time="1:00")
    assert codes(check_receipt(receipt)) == ["purchasetimeformat", "emptyitems"]


def test_first_bad_item_halts_item_checks():
    items = [
        Item("Pepsi - 12-oz", "1.25"),
        Item("Dasani!", "1.40"),
        Item("Gatorade", "bad"),
    ]
    receipt = make_receipt(items=items, total="99.00")
    assert check_receipt(receipt) == [FieldError("items[1].shortDescription", "itemdescformat")]


def test_item_price_format_checked_before_description():
    receipt = make_receipt(items=[Item("Dasani!", "1.4")], total="1.40")
    assert check_receipt(receipt) == [FieldError("items[0].price", "itempriceformat")]


def test_item_price_number():
    receipt = make_receipt(items=[Item("Dasani", "9" * 400 + ".00")], total="1.40")
    assert check_receipt(receipt) == [FieldError("items[0].price", "itempricenumber")]


def test_total_within_tolerance_of_item_sum():
    items = [Item("Gatorade", "2.25")] * 4
    assert check_receipt(make_receipt(items=items, total="9.00")) == []
    assert check_receipt(make_receipt(items=items, total="9.10")) == [FieldError("total", "totalmatchsumprice")]


def test_description_allows_underscore_hyphen_and_spaces():
    receipt = make_receipt(items=[Item("  Klarbrunn_12-PK 12 FL OZ  ", "2.65")])
    assert check_receipt(receipt) == []


def test_retailer_ampersand_allowed_but_not_in_description():
    assert check_receipt(make_receipt(retailer="M&M Corner Market")) == []
    receipt = make_receipt(items=[Item("M&M", "2.65")])
    assert codes(check_receipt(receipt)) == ["itemdescformat"]


def test_date_and_time_layout():
    for date in ["2022-1-02", "22-01-02", "2022/01/02", "2022-02-29"]:
        assert codes(check_receipt(make_receipt(purchase_date=date))) == ["purchasedateformat"]
    for time in ["8:13", "08:3", "08-13", "08:60", "08:13:00"]:
        assert codes(check_receipt(make_receipt(purchase_time=time))) == ["purchasetimeformat"]
    assert check_receipt(make_receipt(purchase_date="2024-02-29", purchase_time="23:59")) == []


def test_validate_receipt_raises_with_report():
    with pytest.raises(ReceiptValidationError) as excinfo:
        validate_receipt(make_receipt(items=[]))
    assert excinfo.value.errors == [FieldError("items", "emptyitems")]
    assert "items:emptyitems" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)


def test_total_matches_item_sum_despite_float_drift():
    items = [Item("Dasani", "0.10"), Item("Pepsi", "0.20")]
    assert check_receipt(make_receipt(items=items, total="0.30")) == []


def test_total_one_cent_off_item_sum_is_rejected():
    items = [Item("Dasani", "0.40"), Item("Pepsi", "0.60")]
    assert check_receipt(make_receipt(items=items, total="1.01")) == [FieldError("total", "totalmatchsumprice")]


def test_year_zero_and_unpadded_hour_are_rejected():
    assert codes(check_receipt(make_receipt(purchase_date="0000-01-01"))) == ["purchasedateformat"]
    assert codes(check_receipt(make_receipt(purchase_time="9:05"))) == ["purchasetimeformat"]


def test_passing_checks_return_none():
    receipt = make_receipt()
    parsed = {}
    for rule in RULES:
        assert rule.check(receipt, parsed) is None
    assert parsed == {"total": 2.65, "price_sum": pytest.approx(2.65)}
