# cartguard/services/cart.py
from __future__ import annotations
import random
from datetime import datetime, timedelta
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..config import Settings, settings
from ..errors import BadRequest
from ..rules.ruleset import (
    RandInt,
    classify_availability,
    is_custom_eligible,
    is_eligible,
    is_recently_added,
    random_available_quantity,
    random_discount_permyriad,
)
from ..schemas import (
    CustomLineItem,
    DirectDiscount,
    DiscountTarget,
    DiscountValue,
    LineItem,
    SetDirectDiscounts,
    SetLineItemCustomType,
    StockFields,
    TypeKey,
    UpdateAction,
)
from ..utils.logging import logger


_LINE_ITEM = TypeAdapter(LineItem)
_CUSTOM_LINE_ITEM = TypeAdapter(CustomLineItem)


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'

def _discount(permyriad: int, target_type: str, predicate: str) -> DirectDiscount:
    return DirectDiscount(
        value=DiscountValue(permyriad=permyriad),
        target=DiscountTarget(type=target_type, predicate=predicate),
    )

# -----------------------------
# Parsing
# -----------------------------
def parse_items(raw: Any, adapter: TypeAdapter, kind: str) -> list:
    """Validates entries one by one; a malformed entry is logged and dropped, never fatal."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.error("Expected a list of %ss, got %s", kind, type(raw).__name__)
        return []
    items = []
    for index, entry in enumerate(raw):
        try:
            items.append(adapter.validate_python(entry))
        except ValidationError as e:
            logger.error("Dropping malformed %s at index %s: %s", kind, index, e.errors()[0]["msg"])
    return items

# -----------------------------
# Discounts
# -----------------------------
def line_item_discounts(items: List[LineItem], randint: RandInt = random.randint) -> List[DirectDiscount]:
    discounts: List[DirectDiscount] = []
    for li in items:
        sku = li.variant.sku if li.variant else None
        if not sku:
            # without a sku the discount could not be targeted at this item alone
            logger.warning("Line item %s has no variant sku, skipping discount", li.id)
            continue
        permyriad = random_discount_permyriad(randint)
        if permyriad > 0:
            logger.info("Applying %s%% discount to line item %s (product %s)",
                        permyriad / 100, li.id, li.product_id)
            discounts.append(_discount(permyriad, "lineItems", f"sku = {_quote(sku)}"))
        else:
            logger.info("No discount (0%%) for line item %s (product %s)", li.id, li.product_id)
    return discounts

def custom_line_item_discounts(items: List[CustomLineItem], randint: RandInt = random.randint) -> List[DirectDiscount]:
    discounts: List[DirectDiscount] = []
    for cli in items:
        permyriad = random_discount_permyriad(randint)
        if permyriad > 0:
            logger.info("Applying %s%% discount to custom line item %s", permyriad / 100, cli.id)
            discounts.append(_discount(permyriad, "customLineItems", f"slug = {_quote(cli.slug)}"))
        else:
            logger.info("No discount (0%%) for custom line item %s", cli.id)
    return discounts

# -----------------------------
# Stock annotations
# -----------------------------
def prior_available_quantity(item: LineItem, type_key: str) -> Optional[int]:
    """availableQuantity from an annotation a previous call attached, if any."""
    custom = item.custom
    if custom is None or custom.type_key != type_key:
        return None
    value = custom.fields.get("availableQuantity")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value

def stock_actions(items: List[LineItem], randint: RandInt = random.randint,
                  type_key: str = settings.STOCK_TYPE_KEY) -> List[SetLineItemCustomType]:
    actions: List[SetLineItemCustomType] = []
    for li in items:
        available = prior_available_quantity(li, type_key)
        if available is not None:
            logger.info("Using existing available quantity %s for line item %s", available, li.id)
        else:
            available = random_available_quantity(randint)
            logger.info("Generated available quantity %s for line item %s", available, li.id)

        quantity = li.quantity or 0
        flag = classify_availability(quantity, available)
        logger.info("Line item %s: quantity=%s, available=%s, flag=%s", li.id, quantity, available, flag.value)

        actions.append(SetLineItemCustomType(
            line_item_id=li.id,
            type=TypeKey(key=type_key),
            fields=StockFields(availability_flag=flag.value, available_quantity=available),
        ))
    logger.info("Created %s stock update actions", len(actions))
    return actions

# -----------------------------
# Main entry
# -----------------------------
def decide_cart(
    obj: dict | None,
    now: datetime,
    randint: RandInt = random.randint,
    config: Settings = settings,
) -> List[UpdateAction]:
    """
    Returns the update actions for a cart Create/Update:
      - at most one setDirectDiscounts covering new line items and new custom line items
      - one setLineItemCustomType per eligible line item, in input order
    Raises BadRequest when there is no usable cart snapshot.
    """
    if not isinstance(obj, dict):
        raise BadRequest("Invalid cart data in resource object")

    logger.info("Processing cart %s, version %s", obj.get("id"), obj.get("version"))
    line_items = parse_items(obj.get("lineItems"), _LINE_ITEM, "line item")
    custom_line_items = parse_items(obj.get("customLineItems"), _CUSTOM_LINE_ITEM, "custom line item")
    window = timedelta(seconds=config.RECENT_WINDOW_SECONDS)

    eligible = [li for li in line_items if is_eligible(li)]
    if len(eligible) != len(line_items):
        logger.warning("%s invalid line items filtered out", len(line_items) - len(eligible))
    new_items = [li for li in eligible if is_recently_added(li, now, window)]

    custom_eligible = [cli for cli in custom_line_items if is_custom_eligible(cli)]
    new_custom = [cli for cli in custom_eligible if is_recently_added(cli, now, window)]

    logger.info("Found %s new line items and %s new custom line items", len(new_items), len(new_custom))

    actions: List[UpdateAction] = []
    discounts = line_item_discounts(new_items, randint) + custom_line_item_discounts(new_custom, randint)
    if discounts:
        actions.append(SetDirectDiscounts(discounts=discounts))
        logger.info("Created setDirectDiscounts action with %s discounts", len(discounts))
    else:
        logger.info("No discounts to apply")

    actions.extend(stock_actions(eligible, randint, config.STOCK_TYPE_KEY))
    return actions
