# cartguard/services/dispatcher.py
from __future__ import annotations
import random
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import Settings, settings
from ..errors import BadRequest, BusinessRuleRejection, ExtensionError, InternalFault, UnrecognizedAction
from ..rules.ruleset import RandInt
from ..schemas import Resource, UpdateAction
from ..utils.logging import logger
from .cart import decide_cart
from .scoring import score_order
from .verdict import Accepted, Rejected, Verdict


class ResourceType(str, Enum):
    CART = "cart"
    ORDER = "order"
    PAYMENT = "payment"
    CUSTOMER = "customer"
    QUOTE_REQUEST = "quote-request"
    STAGED_QUOTE = "staged-quote"
    QUOTE = "quote"
    BUSINESS_UNIT = "business-unit"
    SHOPPING_LIST = "shopping-list"


class ExtensionAction(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"


Handler = Callable[[Optional[Dict[str, Any]], datetime, RandInt, Settings], Verdict]

def _decide_cart(obj, now, randint, config) -> Verdict:
    return Accepted(decide_cart(obj, now, randint, config))

def _score_order(obj, now, randint, config) -> Verdict:
    return score_order(obj, config)

def _accept(obj, now, randint, config) -> Verdict:
    return Accepted([])

# every action of every implemented resource type has an entry
HANDLERS: Dict[Tuple[ResourceType, ExtensionAction], Handler] = {
    (ResourceType.CART, ExtensionAction.CREATE): _decide_cart,
    (ResourceType.CART, ExtensionAction.UPDATE): _decide_cart,
    (ResourceType.ORDER, ExtensionAction.CREATE): _score_order,
    (ResourceType.ORDER, ExtensionAction.UPDATE): _accept,
}
IMPLEMENTED = {rtype for rtype, _ in HANDLERS}


def dispatch(
    action: str | None,
    resource: Resource | None,
    now: datetime,
    randint: RandInt = random.randint,
    config: Settings = settings,
) -> List[UpdateAction]:
    """
    Routes one extension call to its decision engine and returns the update actions.
    Every failure leaves as an ExtensionError subclass, ready for the error envelope.
    """
    if not action or resource is None:
        logger.error("Bad request - missing body parameters")
        raise BadRequest("Bad request - Missing body parameters.")

    logger.info("Received extension request - action: %s, resource type: %s", action, resource.type_id)

    try:
        rtype = ResourceType(resource.type_id)
    except ValueError:
        logger.warning("Unrecognized resource type: %s", resource.type_id)
        return []
    if rtype not in IMPLEMENTED:
        logger.info("Resource type %s not implemented, accepting without actions", rtype.value)
        return []

    try:
        act = ExtensionAction(action)
    except ValueError:
        raise UnrecognizedAction(
            "Internal Server Error - Action not recognized. Allowed values are 'Create' or 'Update'."
        ) from None

    try:
        verdict = HANDLERS[(rtype, act)](resource.obj, now, randint, config)
    except ExtensionError:
        raise
    except Exception as e:
        logger.exception("Unexpected error in %s handler", rtype.value)
        raise InternalFault(f"Internal server error: {e}") from e

    if isinstance(verdict, Rejected):
        raise BusinessRuleRejection(verdict.message, status_code=verdict.status_code)

    logger.info("%s %s processed with %s update actions", rtype.value, act.value, len(verdict.actions))
    return verdict.actions
