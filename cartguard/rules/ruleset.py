# cartguard/rules/ruleset.py
from __future__ import annotations
import random
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable

from ..schemas import CustomLineItem, LineItem
from ..utils.logging import logger

# same signature as random.randint (inclusive bounds)
RandInt = Callable[[int, int], int]

# -----------------------------
# Tunables
# -----------------------------
MAX_DISCOUNT_PERCENT = 10
PERMYRIAD_PER_PERCENT = 100
MIN_AVAILABLE_QUANTITY = 1
MAX_AVAILABLE_QUANTITY = 10
HIGH_STOCK_RATIO = 0.2


class AvailabilityFlag(str, Enum):
    LOW_ON_STOCK = "low-on-stock"
    HIGH_ON_STOCK = "high-on-stock"
    LAST_ITEMS_ON_STOCK = "last-items-on-stock"
    MORE_THAN_STOCK = "more-than-stock"
    OUT_OF_STOCK = "out-of-stock"


# -----------------------------
# Recency
# -----------------------------
def parse_timestamp(raw: Any) -> datetime | None:
    """ISO-8601 string (or datetime) -> aware datetime. Naive values are read as UTC."""
    if isinstance(raw, datetime):
        ts = raw
    elif isinstance(raw, str) and raw.strip():
        s = raw.strip()
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts

def is_recently_added(item: LineItem | CustomLineItem, now: datetime, window: timedelta) -> bool:
    """
    True iff `now - item.added_at <= window`.
    Fails closed: a missing or unparsable addedAt is never recent.
    """
    if not item.added_at:
        logger.warning("Line item %s has no addedAt timestamp", item.id)
        return False
    added = parse_timestamp(item.added_at)
    if added is None:
        logger.error("Unparsable addedAt for line item %s: %r", item.id, item.added_at)
        return False
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    age = now - added
    recent = age <= window
    logger.debug("Line item %s added %.3fs ago, recent=%s", item.id, age.total_seconds(), recent)
    return recent


# -----------------------------
# Eligibility
# -----------------------------
def is_eligible(item: LineItem) -> bool:
    if not item.id:
        logger.error("Line item missing required id field")
        return False
    if not item.product_id:
        logger.error("Line item %s missing required productId field", item.id)
        return False
    if item.variant is None or item.variant.id is None:
        logger.error("Line item %s missing required variant.id field", item.id)
        return False
    if item.price is None or item.price.value is None or not item.price.value.currency_code:
        logger.error("Line item %s missing required price.value.currencyCode field", item.id)
        return False
    return True

def is_custom_eligible(item: CustomLineItem) -> bool:
    if not item.id or not item.slug:
        logger.error("Custom line item %s missing required id/slug field", item.id)
        return False
    if item.money is None or not item.money.currency_code:
        logger.error("Custom line item %s missing required money.currencyCode field", item.id)
        return False
    return True


# -----------------------------
# Random draws
# -----------------------------
def random_discount_permyriad(randint: RandInt = random.randint) -> int:
    """0..10 percent in whole-percent steps, as permyriad (1000 = 10%). 0 means no discount."""
    return randint(0, MAX_DISCOUNT_PERCENT) * PERMYRIAD_PER_PERCENT

def random_available_quantity(randint: RandInt = random.randint) -> int:
    return randint(MIN_AVAILABLE_QUANTITY, MAX_AVAILABLE_QUANTITY)


# -----------------------------
# Availability
# -----------------------------
def classify_availability(current_qty: int, available_qty: int) -> AvailabilityFlag:
    if available_qty == 0:
        return AvailabilityFlag.OUT_OF_STOCK
    if current_qty > available_qty:
        return AvailabilityFlag.MORE_THAN_STOCK
    if current_qty == available_qty:
        return AvailabilityFlag.LAST_ITEMS_ON_STOCK
    if current_qty / available_qty <= HIGH_STOCK_RATIO:
        return AvailabilityFlag.HIGH_ON_STOCK
    return AvailabilityFlag.LOW_ON_STOCK
