# cartguard/services/scoring.py
from __future__ import annotations
from typing import Any, Dict, Tuple

from ..config import Settings, settings
from ..schemas import Order
from ..utils.logging import logger
from .verdict import Accepted, Rejected, Verdict

FRAUD_REJECTION_MESSAGE = "Fraud scoring failed: Order exceeds risk threshold"

# -----------------------------
# Signals
# -----------------------------
def order_signals(order: Order, reference_currency: str) -> Tuple[int, int, str]:
    """
    Returns (total_count, pre_tax_total, currency)
    - pre_tax_total is in minor units: taxed net total, else gross total, else 0
    """
    total_count = sum((li.quantity or 0) for li in order.line_items)

    net = order.taxed_price.total_net if order.taxed_price else None
    pre_tax_total = (net.cent_amount if net else None) \
        or (order.total_price.cent_amount if order.total_price else None) \
        or 0

    currency = (order.total_price.currency_code if order.total_price else None) or reference_currency
    return total_count, pre_tax_total, currency

def is_high_risk(total_count: int, pre_tax_total: int, currency: str, config: Settings = settings) -> bool:
    # all three must hold; partial matches pass
    return (
        total_count > config.FRAUD_MAX_ITEM_COUNT
        and pre_tax_total > config.FRAUD_MAX_PRE_TAX_CENT_AMOUNT
        and currency == config.FRAUD_REFERENCE_CURRENCY
    )

# -----------------------------
# Main entry
# -----------------------------
def score_order(obj: Dict[str, Any] | None, config: Settings = settings) -> Verdict:
    """
    Fraud check for order Create. Never emits update actions and never raises:
    a snapshot that cannot be scored is rejected with its failure message.
    """
    if obj is None:
        return Rejected(400, "Invalid order data in resource object")
    try:
        order = Order.model_validate(obj)
        total_count, pre_tax_total, currency = order_signals(order, config.FRAUD_REFERENCE_CURRENCY)
    except Exception as e:
        logger.exception("Order could not be scored")
        return Rejected(400, f"Internal server error on order scoring: {e}")

    logger.info("Order %s: items=%s, pre_tax_total=%s, currency=%s",
                order.id, total_count, pre_tax_total, currency)

    if is_high_risk(total_count, pre_tax_total, currency, config):
        logger.warning("Order %s rejected by fraud scoring", order.id)
        return Rejected(400, FRAUD_REJECTION_MESSAGE)
    return Accepted([])
