import math
import re
from typing import List

from receipt import Item, Receipt

POINTS_RETAILER_NAME_ALPHANUM_CHARACTER = 1
POINTS_TOTAL_HAS_NO_CENTS = 50
POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS = 25
POINTS_ITEMS_COUNT = 5
POINTS_ITEM_DESCRIPTION = 0.2
POINTS_ODD_PURCHASE_DAY = 6
POINTS_VALID_PURCHASE_HOUR = 10
REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR = 3
NO_CENTS = "00"
QUARTER_CENTS = {"00", "25", "50", "75"}
ODD_DIGITS = {"1", "3", "5", "7", "9"}
# compared as strings, both ends exclusive
REWARD_TIME_START = "14:00"
REWARD_TIME_END = "16:00"

ALPHANUM_RE = re.compile(r"[A-Za-z0-9]")


def score_retailer(retailer_name: str) -> int:
    """ One point for every ASCII letter or digit in the retailer name """
    return len(ALPHANUM_RE.findall(retailer_name)) * POINTS_RETAILER_NAME_ALPHANUM_CHARACTER


def score_total(total: str) -> int:
    """ Round dollar and quarter bonuses, read off the last two characters """
    cents = total[-2:]
    points = 0
    if cents == NO_CENTS:
        points += POINTS_TOTAL_HAS_NO_CENTS
    if cents in QUARTER_CENTS:
        points += POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS
    return points


def score_item_count(items: List[Item]) -> int:
    return (len(items) // 2) * POINTS_ITEMS_COUNT


def score_item_descriptions(items: List[Item]) -> int:
    points = 0
    for item in items:
        if len(item.short_description.strip()) % REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR == 0:
            points += math.ceil(float(item.price) * POINTS_ITEM_DESCRIPTION)
    return points


def score_purchase_date(date: str) -> int:
    """ Looks at the last character of the date string, not the parsed day """
    if date[-1:] in ODD_DIGITS:
        return POINTS_ODD_PURCHASE_DAY
    return 0


def score_purchase_time(time: str) -> int:
    if REWARD_TIME_START < time < REWARD_TIME_END:
        return POINTS_VALID_PURCHASE_HOUR
    return 0


def calculate_points(receipt: Receipt) -> int:
    """ Calculates points earned from each component of a validated receipt """
    points = 0
    points += score_retailer(receipt.retailer)
    points += score_total(receipt.total)
    points += score_item_count(receipt.items)
    points += score_item_descriptions(receipt.items)
    points += score_purchase_date(receipt.purchase_date)
    points += score_purchase_time(receipt.purchase_time)
    return points
