"""ItemVariant aggregate: a sellable variation (size, colour...) of an Item.

Variants are stored and versioned independently of their owning Item so that
an order for one variant never contends with writes to its siblings. The
owning ``item_id`` is fixed at creation.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String

from inventory.domain import inventory
from inventory.errors import InsufficientStockError, InvalidArgumentError


@inventory.aggregate
class ItemVariant:
    item_id = Identifier(required=True)
    sku = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    price = Integer(min_value=0)
    stock_quantity = Integer(default=0, min_value=0)
    version = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, item_id, sku, name, price, stock_quantity=0):
        now = datetime.now(UTC)
        return cls(
            item_id=item_id,
            sku=sku,
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            version=0,
            created_at=now,
            updated_at=now,
        )

    def update_details(self, sku, name, price, stock_quantity, item_id=None):
        if item_id is not None and str(item_id) != str(self.item_id):
            raise InvalidArgumentError("A variant cannot be moved to another item", field="item_id")

        self.sku = sku
        self.name = name
        self.price = price
        self.stock_quantity = stock_quantity
        self.updated_at = datetime.now(UTC)

    def deduct_stock(self, quantity):
        new_stock = self.stock_quantity - quantity
        if new_stock < 0:
            raise InsufficientStockError(
                f"Stock update would result in negative quantity for variant: {self.name}",
                target=self.name,
                available=self.stock_quantity,
                requested=quantity,
            )
        self.stock_quantity = new_stock
        self.updated_at = datetime.now(UTC)

    def belongs_to(self, item_id):
        return str(self.item_id) == str(item_id)
