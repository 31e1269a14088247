"""Pydantic request/response schemas for the Inventory API.

These are external contracts (anti-corruption layer), separate from the
Protean aggregates. Money crosses the boundary as a decimal amount with two
places, rendered as a string so large amounts stay exact, and is held
internally as integer minor units.

Request models stay permissive about order lines: shape problems (missing
item id, non-positive quantity, duplicates) are reported by the domain
validator with the same error body as every other business error.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

from inventory.shared.money import from_minor_units

Money = Annotated[Decimal, PlainSerializer(str, return_type=str, when_used="json")]


# ---------------------------------------------------------------------------
# Item Schemas
# ---------------------------------------------------------------------------
class ItemRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    base_price: Decimal | None = None
    stock_quantity: int = 0
    has_variants: bool = False
    version: int | None = None


class VariantRequest(BaseModel):
    item_id: str
    sku: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    price: Decimal
    stock_quantity: int = 0
    version: int | None = None


class VariantResponse(BaseModel):
    id: str
    item_id: str
    sku: str
    name: str
    price: Money | None = None
    stock_quantity: int
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_variant(cls, variant):
        return cls(
            id=str(variant.id),
            item_id=str(variant.item_id),
            sku=variant.sku,
            name=variant.name,
            price=from_minor_units(variant.price),
            stock_quantity=variant.stock_quantity,
            version=variant.version,
            created_at=variant.created_at,
            updated_at=variant.updated_at,
        )


class ItemResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    base_price: Money | None = None
    stock_quantity: int
    has_variants: bool
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    variants: list[VariantResponse] = []

    @classmethod
    def from_item(cls, item, variants=()):
        return cls(
            id=str(item.id),
            name=item.name,
            description=item.description,
            base_price=from_minor_units(item.base_price),
            stock_quantity=item.stock_quantity,
            has_variants=bool(item.has_variants),
            version=item.version,
            created_at=item.created_at,
            updated_at=item.updated_at,
            variants=[VariantResponse.from_variant(variant) for variant in variants],
        )


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    item_id: str | None = None
    variant_id: str | None = None
    # Raw JSON value, so booleans and floats reach the line validator unchanged.
    quantity: Any = None


class CreateOrderRequest(BaseModel):
    lines: list[OrderLineRequest] = []


class OrderLineResponse(BaseModel):
    id: str
    item_id: str
    item_name: str | None = None
    variant_id: str | None = None
    variant_name: str | None = None
    quantity: int
    unit_price: Money
    line_total: Money


class OrderResponse(BaseModel):
    id: str
    order_number: str
    created_at: datetime
    total_amount: Money
    lines: list[OrderLineResponse]

    @classmethod
    def from_order(cls, order):
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            created_at=order.created_at,
            total_amount=from_minor_units(order.total_amount),
            lines=[
                OrderLineResponse(
                    id=str(line.id),
                    item_id=str(line.item_id),
                    item_name=line.item_name,
                    variant_id=str(line.variant_id) if line.variant_id else None,
                    variant_name=line.variant_name,
                    quantity=line.quantity,
                    unit_price=from_minor_units(line.unit_price),
                    line_total=from_minor_units(line.line_total),
                )
                for line in order.ordered_lines
            ],
        )
