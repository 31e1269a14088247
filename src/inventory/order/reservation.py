"""Stock reservation: turning requested lines into a committed Order.

Order creation runs in two phases over one ``OrderUnitOfWork``:

Resolution (read-only)
    Every requested line is resolved, in request order, against the current
    catalog: the target (item or variant) is fetched, its ownership and
    price are checked, available stock is compared with the requested
    quantity, and the line is priced. The first failing line aborts the
    whole order; nothing has been staged at that point.

Commit
    Each target is re-fetched, its stock is deducted and the write is staged
    with the version just read. The priced Order is staged alongside, and
    the unit of work commits everything at once or not at all. A stale
    version surfaces as ``ConcurrentModificationError``; the engine does not
    retry. Callers that want retries go through ``place_order``.
"""

from dataclasses import dataclass, field

import structlog

from inventory.catalog.store import StockTarget, VersionConflict
from inventory.errors import (
    CatalogStateError,
    ConcurrentModificationError,
    InsufficientStockError,
    InvalidArgumentError,
    StoreUnavailableError,
)
from inventory.order.numbering import OrderNumberGenerator
from inventory.order.order import Order
from inventory.order.validation import RequestedLine, validate_requested_lines
from inventory.unit_of_work import OrderNumberConflict

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PendingDeduction:
    target: StockTarget
    target_id: str
    quantity: int


@dataclass(frozen=True)
class ResolvedLine:
    item_id: str
    item_name: str
    variant_id: str | None
    variant_name: str | None
    quantity: int
    unit_price: int
    line_total: int

    def as_order_line(self):
        return {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "variant_id": self.variant_id,
            "variant_name": self.variant_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "line_total": self.line_total,
        }


@dataclass
class ReservationPlan:
    lines: list = field(default_factory=list)
    deductions: list = field(default_factory=list)
    total_amount: int = 0

    def add(self, line, deduction):
        self.lines.append(line)
        self.deductions.append(deduction)
        self.total_amount += line.line_total


def _normalize(lines):
    return [line if isinstance(line, RequestedLine) else RequestedLine.from_dict(line) for line in lines or []]


class StockReservationEngine:
    def __init__(self, catalog, orders, numbers=None):
        self.catalog = catalog
        self.orders = orders
        self.numbers = numbers or OrderNumberGenerator()

    def create_order(self, lines):
        """Validate, resolve and commit an order for ``lines``.

        ``lines`` holds ``RequestedLine`` values or dicts with ``item_id``,
        ``quantity`` and an optional ``variant_id``. Returns the committed
        Order; raises a typed inventory error otherwise.
        """
        requested = _normalize(lines)
        logger.info("Creating order", line_count=len(requested))
        validate_requested_lines(requested)

        with self.catalog.begin(self.orders) as uow:
            plan = self.resolve(uow, requested)
            return self.commit(uow, plan)

    # -------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------
    def resolve(self, uow, lines):
        plan = ReservationPlan()
        for line in lines:
            resolved, deduction = self._resolve_line(uow, line)
            plan.add(resolved, deduction)
        return plan

    def _resolve_line(self, uow, line):
        item = uow.get_item(line.item_id)

        if line.variant_id is not None:
            variant = uow.get_variant(line.variant_id)
            if not variant.belongs_to(item.id):
                logger.warning("Variant does not belong to item", variant_id=str(variant.id), item_id=str(item.id))
                raise InvalidArgumentError(f"Variant does not belong to item with id: {item.id}", field="variant_id")

            if variant.price is None or variant.price < 0:
                raise CatalogStateError(f"Invalid price for variant: {variant.id}")

            available = variant.stock_quantity
            unit_price = variant.price
            label = f"{item.name} (Variant: {variant.name})"
            deduction = PendingDeduction(StockTarget.VARIANT, str(variant.id), line.quantity)
            variant_id, variant_name = str(variant.id), variant.name
        else:
            if item.has_variants:
                logger.warning("Variant required but not given", item_id=str(item.id))
                raise InvalidArgumentError("Item has variants. Please specify a variant ID.", field="variant_id")

            if item.base_price is None:
                raise CatalogStateError("Item does not have a base price")
            if item.base_price < 0:
                raise CatalogStateError(f"Invalid base price for item: {item.id}")

            available = item.stock_quantity
            unit_price = item.base_price
            label = item.name
            deduction = PendingDeduction(StockTarget.ITEM, str(item.id), line.quantity)
            variant_id, variant_name = None, None

        if line.quantity is None or line.quantity <= 0:
            raise InvalidArgumentError(f"Quantity must be positive for {label}", field="quantity")

        if available < line.quantity:
            logger.warning("Insufficient stock", target=label, available=available, requested=line.quantity)
            raise InsufficientStockError.for_line(label, available, line.quantity)

        resolved = ResolvedLine(
            item_id=str(item.id),
            item_name=item.name,
            variant_id=variant_id,
            variant_name=variant_name,
            quantity=line.quantity,
            unit_price=unit_price,
            line_total=unit_price * line.quantity,
        )
        return resolved, deduction

    # -------------------------------------------------------------------
    # Commit
    # -------------------------------------------------------------------
    def commit(self, uow, plan):
        for deduction in plan.deductions:
            self._stage_deduction(uow, deduction)

        order = Order.place(self.numbers(), [line.as_order_line() for line in plan.lines])
        uow.add_order(order)

        outcome = uow.commit()
        if isinstance(outcome, OrderNumberConflict):
            order.renumber(self.numbers())
            outcome = uow.commit()
            if isinstance(outcome, OrderNumberConflict):
                logger.error("Order number collided twice", order_number=outcome.order_number)
                raise StoreUnavailableError("Could not allocate a unique order number. Please try again.")

        if isinstance(outcome, VersionConflict):
            raise ConcurrentModificationError()

        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order.order_number,
            total=order.total_amount,
            lines=len(plan.lines),
        )
        return order

    def _stage_deduction(self, uow, deduction):
        record = uow.get(deduction.target, deduction.target_id)
        expected_version = record.version
        record.deduct_stock(deduction.quantity)

        outcome = uow.save(deduction.target, record, expected_version)
        if isinstance(outcome, VersionConflict):
            raise ConcurrentModificationError()
        logger.debug(
            "Stock deduction staged",
            target=deduction.target.value,
            target_id=deduction.target_id,
            new_quantity=record.stock_quantity,
        )
