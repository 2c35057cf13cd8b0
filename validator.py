"""
Content validation for receipts that already passed the structural check in
``receipt.py``.

The checks run as an ordered list of rules. Each rule inspects the receipt,
records at most one ``FieldError`` and, when it is a halting rule that
failed, ends the pass. Retailer, date and time checks never halt, so a
report can carry all three; the total and item checks cut the pass short
because every later check depends on the values they parse.
"""
import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional

from receipt import Receipt

RECEIPT_DATE_FORMAT = '%Y-%m-%d'
RECEIPT_TIME_FORMAT = '%H:%M'
TOTAL_MATCH_TOLERANCE = 0.01

RETAILER_RE = re.compile(r"[\w\s\-&]+", re.ASCII)
AMOUNT_RE = re.compile(r"\d+\.\d{2}", re.ASCII)
SHORT_DESCRIPTION_RE = re.compile(r"[\w\s\-]+", re.ASCII)
DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
TIME_RE = re.compile(r"\d{2}:\d{2}", re.ASCII)


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str

    def __str__(self):
        return f"{self.field}:{self.code}"


class ReceiptValidationError(ValueError):
    """ Raised with the full validation report when a receipt is rejected """

    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        super().__init__("invalid receipt (" + ", ".join(str(e) for e in errors) + ")")


class Rule(NamedTuple):
    check: Callable[[Receipt, dict], Optional[FieldError]]
    halts: bool


def _parse_finite(amount: str) -> Optional[float]:
    try:
        value = float(amount)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _matches_datetime(value: str, pattern, fmt: str) -> bool:
    """ strptime alone accepts unpadded fields, so the layout is checked first """
    if not pattern.fullmatch(value):
        return False
    try:
        datetime.strptime(value, fmt)
    except ValueError:
        return False
    return True


def check_retailer(receipt: Receipt, parsed: dict) -> Optional[FieldError]:
    if not RETAILER_RE.fullmatch(receipt.retailer):
        return FieldError("retailer", "retailerformat")
    return None


def check_purchase_date(receipt: Receipt, parsed: dict) -> Optional[FieldError]:
    if not _matches_datetime(receipt.purchase_date, DATE_RE, RECEIPT_DATE_FORMAT):
        return FieldError("purchaseDate", "purchasedateformat")
    return None


def check_purchase_time(receipt: Receipt, parsed: dict) -> Optional[FieldError]:
    if not _matches_datetime(receipt.purchase_time, TIME_RE, RECEIPT_TIME_FORMAT):
        return FieldError("purchaseTime", "purchasetimeformat")
    return None


def check_total_format(receipt: Receipt, parsed: dict) -> Optional[FieldError]:
    if not AMOUNT_RE.fullmatch(receipt.total):
        return FieldError("total", "totalformat")
    return None


def check_total_number(receipt: Receipt, parsed: dict) -> Optional[FieldError]:
    total = _parse_finite(receipt.total)
    if total is None:
        return FieldError("total", "totalnumber")
    parsed["total"] = total
    return None


def check_items_present(receipt: Receipt, parsed: dict) -> Optional[FieldError]:
    if len(receipt.items) < 1:
        return FieldError("items", "emptyitems")
    return None


def check_items(receipt: Receipt, parsed: dict) -> Optional[FieldError]:
    """ Checks items in order and stops at the first bad one """
    price_sum = 0.0
    for index, item in enumerate(receipt.items):
        if not AMOUNT_RE.fullmatch(item.price):
            return FieldError(f"items[{index}].price", "itempriceformat")
        if not SHORT_DESCRIPTION_RE.fullmatch(item.short_description):
            return FieldError(f"items[{index}].shortDescription", "itemdescformat")
        price = _parse_finite(item.price)
        if price is None:
            return FieldError(f"items[{index}].price", "itempricenumber")
        price_sum += price
    parsed["price_sum"] = price_sum
    return None


def check_total_matches_items(receipt: Receipt, parsed: dict) -> Optional[FieldError]:
    if abs(parsed["price_sum"] - parsed["total"]) >= TOTAL_MATCH_TOLERANCE:
        return FieldError("total", "totalmatchsumprice")
    return None


RULES = [
    Rule(check_retailer, halts=False),
    Rule(check_purchase_date, halts=False),
    Rule(check_purchase_time, halts=False),
    Rule(check_total_format, halts=True),
    Rule(check_total_number, halts=True),
    Rule(check_items_present, halts=True),
    Rule(check_items, halts=True),
    Rule(check_total_matches_items, halts=False),
]


def check_receipt(receipt: Receipt) -> List[FieldError]:
    """ Runs every rule in order and returns the validation report (empty when valid) """
    errors = []
    parsed = {}
    for rule in RULES:
        error = rule.check(receipt, parsed)
        if error is None:
            continue
        errors.append(error)
        if rule.halts:
            break
    return errors


def validate_receipt(receipt: Receipt):
    """ Raises ReceiptValidationError carrying the report if the receipt is invalid """
    errors = check_receipt(receipt)
    if errors:
        raise ReceiptValidationError(errors)
