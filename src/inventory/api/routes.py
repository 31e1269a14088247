"""FastAPI routes for the Inventory domain: items, variants and orders.

Write routes are plain functions and run in the FastAPI threadpool, since
they can wait on the catalog write lock or back off between order attempts.
"""

from fastapi import APIRouter, Response

from inventory.api.schemas import (
    CreateOrderRequest,
    ItemRequest,
    ItemResponse,
    OrderResponse,
    VariantRequest,
    VariantResponse,
)
from inventory.catalog.management import ItemService, VariantService
from inventory.catalog.store import CatalogStore
from inventory.errors import InvalidArgumentError
from inventory.order.placement import OrderService
from inventory.order.validation import RequestedLine
from inventory.shared.money import to_minor_units


def _minor(amount, field):
    try:
        return to_minor_units(amount)
    except ValueError as exc:
        raise InvalidArgumentError(str(exc), field=field) from None


def _item_response(item):
    return ItemResponse.from_item(item, CatalogStore().variants_of(item.id))


# ---------------------------------------------------------------------------
# Item Router
# ---------------------------------------------------------------------------
item_router = APIRouter(prefix="/api/items", tags=["items"])


@item_router.get("", response_model=list[ItemResponse])
async def list_items() -> list[ItemResponse]:
    return [_item_response(item) for item in ItemService().list_items()]


@item_router.get("/{item_id}", response_model=ItemResponse)
async def get_item(item_id: str) -> ItemResponse:
    return _item_response(ItemService().get_item(item_id))


@item_router.post("", status_code=201, response_model=ItemResponse)
def create_item(body: ItemRequest) -> ItemResponse:
    item = ItemService().create_item(
        name=body.name,
        description=body.description,
        base_price=_minor(body.base_price, "base_price"),
        stock_quantity=body.stock_quantity,
        has_variants=body.has_variants,
    )
    return _item_response(item)


@item_router.put("/{item_id}", response_model=ItemResponse)
def update_item(item_id: str, body: ItemRequest) -> ItemResponse:
    item = ItemService().update_item(
        item_id,
        name=body.name,
        description=body.description,
        base_price=_minor(body.base_price, "base_price"),
        stock_quantity=body.stock_quantity,
        has_variants=body.has_variants,
        version=body.version,
    )
    return _item_response(item)


@item_router.delete("/{item_id}", status_code=204)
def delete_item(item_id: str) -> Response:
    ItemService().delete_item(item_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Variant Router
# ---------------------------------------------------------------------------
variant_router = APIRouter(prefix="/api/variants", tags=["variants"])


@variant_router.get("", response_model=list[VariantResponse])
async def list_variants(item_id: str | None = None) -> list[VariantResponse]:
    return [VariantResponse.from_variant(variant) for variant in VariantService().list_variants(item_id)]


@variant_router.get("/{variant_id}", response_model=VariantResponse)
async def get_variant(variant_id: str) -> VariantResponse:
    return VariantResponse.from_variant(VariantService().get_variant(variant_id))


@variant_router.post("", status_code=201, response_model=VariantResponse)
def create_variant(body: VariantRequest) -> VariantResponse:
    variant = VariantService().create_variant(
        item_id=body.item_id,
        sku=body.sku,
        name=body.name,
        price=_minor(body.price, "price"),
        stock_quantity=body.stock_quantity,
    )
    return VariantResponse.from_variant(variant)


@variant_router.put("/{variant_id}", response_model=VariantResponse)
def update_variant(variant_id: str, body: VariantRequest) -> VariantResponse:
    variant = VariantService().update_variant(
        variant_id,
        sku=body.sku,
        name=body.name,
        price=_minor(body.price, "price"),
        stock_quantity=body.stock_quantity,
        item_id=body.item_id,
        version=body.version,
    )
    return VariantResponse.from_variant(variant)


@variant_router.delete("/{variant_id}", status_code=204)
def delete_variant(variant_id: str) -> Response:
    VariantService().delete_variant(variant_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderResponse])
async def list_orders() -> list[OrderResponse]:
    return [OrderResponse.from_order(order) for order in OrderService().list_orders()]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(OrderService().get_order(order_id))


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(body: CreateOrderRequest) -> OrderResponse:
    lines = [
        RequestedLine(item_id=line.item_id, quantity=line.quantity, variant_id=line.variant_id) for line in body.lines
    ]
    order = OrderService().create_order(lines)
    return OrderResponse.from_order(order)
