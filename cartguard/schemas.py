# cartguard/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Literal, Optional, Union


class PlatformModel(BaseModel):
    """camelCase on the wire, snake_case in Python; unknown platform fields are kept."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# ----------------------------
# Inbound snapshots
# ----------------------------
class Money(PlatformModel):
    currency_code: Optional[str] = None
    cent_amount: Optional[int] = None

class Price(PlatformModel):
    value: Optional[Money] = None

class Variant(PlatformModel):
    id: Optional[int] = None
    sku: Optional[str] = None

class TypeRef(PlatformModel):
    key: Optional[str] = None
    obj: Optional[Dict[str, Any]] = None  # present when the reference is expanded

class CustomFields(PlatformModel):
    type: Optional[TypeRef] = None
    fields: Dict[str, Any] = Field(default_factory=dict)

    @property
    def type_key(self) -> Optional[str]:
        if self.type is None:
            return None
        return self.type.key or (self.type.obj or {}).get("key")

class LineItem(PlatformModel):
    id: Optional[str] = None
    product_id: Optional[str] = None
    variant: Optional[Variant] = None
    price: Optional[Price] = None
    quantity: Optional[int] = None
    # kept raw: a malformed timestamp must not fail the whole snapshot
    added_at: Any = None
    custom: Optional[CustomFields] = None

class CustomLineItem(PlatformModel):
    id: Optional[str] = None
    slug: Optional[str] = None
    money: Optional[Money] = None
    quantity: Optional[int] = None
    added_at: Any = None

class TaxedPrice(PlatformModel):
    total_net: Optional[Money] = None
    total_gross: Optional[Money] = None

class Order(PlatformModel):
    id: Optional[str] = None
    line_items: List[LineItem] = Field(default_factory=list)
    taxed_price: Optional[TaxedPrice] = None
    total_price: Optional[Money] = None

class Resource(PlatformModel):
    type_id: Optional[str] = None
    obj: Optional[Dict[str, Any]] = None

class ExtensionInput(PlatformModel):
    action: Optional[str] = None
    resource: Optional[Resource] = None


# ----------------------------
# Update actions (outbound)
# ----------------------------
class DiscountValue(PlatformModel):
    type: Literal["relative"] = "relative"
    permyriad: int

class DiscountTarget(PlatformModel):
    type: Literal["lineItems", "customLineItems"] = "lineItems"
    predicate: str

class DirectDiscount(PlatformModel):
    value: DiscountValue
    target: Optional[DiscountTarget] = None

class SetDirectDiscounts(PlatformModel):
    action: Literal["setDirectDiscounts"] = "setDirectDiscounts"
    discounts: List[DirectDiscount]

class TypeKey(PlatformModel):
    key: str

class StockFields(PlatformModel):
    availability_flag: str
    available_quantity: int

class SetLineItemCustomType(PlatformModel):
    action: Literal["setLineItemCustomType"] = "setLineItemCustomType"
    line_item_id: str
    type: TypeKey
    fields: StockFields

UpdateAction = Union[SetDirectDiscounts, SetLineItemCustomType]


def dump_actions(actions: List[UpdateAction]) -> List[dict]:
    return [a.model_dump(by_alias=True, exclude_none=True) for a in actions]


# ----------------------------
# Response envelopes
# ----------------------------
class SuccessResponse(BaseModel):
    actions: List[Dict[str, Any]]

class ErrorItem(BaseModel):
    code: str
    message: str

class ErrorResponse(BaseModel):
    errors: List[ErrorItem]
