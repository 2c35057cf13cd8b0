from dataclasses import dataclass
from typing import List

required_receipt_attributes = ["retailer", "purchaseDate", "purchaseTime", "items", "total"]
required_item_attributes = ["shortDescription", "price"]


class MalformedReceiptError(ValueError):
    """ Raised when a payload is not shaped like a receipt at all """


@dataclass(frozen=True)
class Item:
    short_description: str
    price: str


@dataclass(frozen=True)
class Receipt:
    retailer: str
    purchase_date: str
    purchase_time: str
    items: List[Item]
    total: str

    @classmethod
    def from_json(cls, payload) -> "Receipt":
        """ Builds a receipt from decoded JSON, checking required attributes and their types """
        validate_receipt_json_structure(payload)
        return cls(
            retailer=payload["retailer"],
            purchase_date=payload["purchaseDate"],
            purchase_time=payload["purchaseTime"],
            items=[Item(item["shortDescription"], item["price"]) for item in payload["items"]],
            total=payload["total"],
        )


def _is_filled_string(value) -> bool:
    return isinstance(value, str) and value != ""


def validate_receipt_json_structure(receipt):
    """ Validates structure of the json input """
    if not isinstance(receipt, dict):
        raise MalformedReceiptError("receipt is not a json object")
    for attribute in required_receipt_attributes:
        if attribute not in receipt:
            raise MalformedReceiptError(f"missing {attribute} in receipt")
        if attribute != "items" and not _is_filled_string(receipt[attribute]):
            raise MalformedReceiptError(f"invalid {attribute} format")

    # an empty list is left for the validator to report
    if not isinstance(receipt["items"], list):
        raise MalformedReceiptError("invalid receipt items list format")
    for index, item in enumerate(receipt["items"]):
        if not isinstance(item, dict):
            raise MalformedReceiptError(f"invalid receipt item format (items[{index}])")
        for attribute in required_item_attributes:
            if not _is_filled_string(item.get(attribute)):
                raise MalformedReceiptError(f"invalid {attribute} format (items[{index}])")
