"""Order aggregate with its OrderLine entities.

An Order is immutable once placed: unit prices and the item/variant names are
snapshotted from the catalog at order time and never re-derived. Lines keep
the position they had in the request so they are displayed in that order.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from inventory.domain import inventory


@inventory.entity(part_of="Order")
class OrderLine:
    item_id = Identifier(required=True)
    item_name = String(max_length=255)
    variant_id = Identifier()
    variant_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Integer(required=True, min_value=0)
    line_total = Integer(required=True, min_value=0)
    position = Integer(default=0)

    @invariant.post
    def line_total_must_be_unit_price_times_quantity(self):
        if self.unit_price is None or self.quantity is None or self.line_total is None:
            return
        if self.line_total != self.unit_price * self.quantity:
            raise ValidationError(
                {"line_total": [f"Line total {self.line_total} does not equal {self.unit_price} x {self.quantity}"]}
            )


@inventory.aggregate
class Order:
    order_number = String(required=True, max_length=100)
    created_at = DateTime(required=True)
    total_amount = Integer(required=True, min_value=0)
    lines = HasMany(OrderLine)

    @classmethod
    def place(cls, order_number, lines_data):
        """Build a new order from already priced line data.

        Args:
            order_number: The generated, unique order number.
            lines_data: Dicts with item_id, item_name, variant_id, variant_name,
                        quantity, unit_price and line_total, in request order.
        """
        total_amount = sum(data["line_total"] for data in lines_data)

        order = cls(
            order_number=order_number,
            created_at=datetime.now(UTC),
            total_amount=total_amount,
        )
        for position, data in enumerate(lines_data):
            order.add_lines(OrderLine(position=position, **data))
        return order

    def renumber(self, order_number):
        self.order_number = order_number

    @property
    def ordered_lines(self):
        return sorted(self.lines or [], key=lambda line: line.position or 0)
