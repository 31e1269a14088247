"""Item aggregate: a catalog entry sold directly or only through its variants.

Money fields hold integer minor units (see ``inventory.shared.money``).

The ``version`` counter backs optimistic concurrency: every successful
version-checked write through ``CatalogStore`` increments it by one, and a
write carrying a stale expected version is rejected.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Integer, String

from inventory.domain import inventory
from inventory.errors import InsufficientStockError


@inventory.aggregate
class Item:
    name = String(required=True, max_length=255)
    description = String(max_length=1000)
    base_price = Integer(min_value=0)
    stock_quantity = Integer(default=0, min_value=0)
    has_variants = Boolean(default=False)
    version = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, name, description=None, base_price=None, stock_quantity=0, has_variants=False):
        now = datetime.now(UTC)
        return cls(
            name=name,
            description=description,
            base_price=base_price,
            stock_quantity=stock_quantity,
            has_variants=bool(has_variants),
            version=0,
            created_at=now,
            updated_at=now,
        )

    def update_details(self, name, description, base_price, stock_quantity, has_variants):
        """Replace all editable attributes, mirroring a full PUT of the item."""
        self.name = name
        self.description = description
        self.base_price = base_price
        self.stock_quantity = stock_quantity
        self.has_variants = bool(has_variants)
        self.updated_at = datetime.now(UTC)

    def mark_has_variants(self):
        self.has_variants = True
        self.updated_at = datetime.now(UTC)

    def deduct_stock(self, quantity):
        """Remove ``quantity`` units from the directly sold stock."""
        new_stock = self.stock_quantity - quantity
        if new_stock < 0:
            raise InsufficientStockError(
                f"Stock update would result in negative quantity for item: {self.name}",
                target=self.name,
                available=self.stock_quantity,
                requested=quantity,
            )
        self.stock_quantity = new_stock
        self.updated_at = datetime.now(UTC)
