"""Unit of work for order creation.

An ``OrderUnitOfWork`` is opened by ``CatalogStore.begin()`` and threaded
through the resolution and commit phases of a single order. Reads go to the
store (or to the record already staged for the same target). Stock writes and
the new order are only staged; nothing reaches storage until ``commit()``.

``commit()`` re-verifies every staged expected version and the uniqueness of
every staged order number under the catalog write lock, and only then writes
all records inside one Protean ``UnitOfWork``. A failed verification is
returned as a typed conflict and leaves the staged state untouched, so the
caller may adjust it (a new order number) and commit again, or discard.
"""

from dataclasses import dataclass

import structlog
from protean.core.unit_of_work import UnitOfWork

from inventory.catalog.store import StockTarget

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderNumberConflict:
    order_number: str


class OrderUnitOfWork:
    def __init__(self, catalog, orders):
        self._catalog = catalog
        self._orders = orders
        self._staged = {}
        self._new_orders = []
        self.committed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None or not self.committed:
            self.discard()
        return False

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get(self, target, target_id):
        staged = self._staged.get((target, str(target_id)))
        if staged is not None:
            return staged[0]
        return self._catalog.get(target, target_id)

    def get_item(self, item_id):
        return self.get(StockTarget.ITEM, item_id)

    def get_variant(self, variant_id):
        return self.get(StockTarget.VARIANT, variant_id)

    # -------------------------------------------------------------------
    # Staged writes
    # -------------------------------------------------------------------
    def save(self, target, record, expected_version):
        """Stage a version-checked write; returns the record or a VersionConflict."""
        conflict = self._catalog.check_version(target, record.id, expected_version)
        if conflict is not None:
            return conflict

        self._staged[(target, str(record.id))] = (record, expected_version)
        return record

    def save_item(self, item, expected_version):
        return self.save(StockTarget.ITEM, item, expected_version)

    def save_variant(self, variant, expected_version):
        return self.save(StockTarget.VARIANT, variant, expected_version)

    def add_order(self, order):
        self._new_orders.append(order)

    @property
    def pending_writes(self):
        return len(self._staged) + len(self._new_orders)

    # -------------------------------------------------------------------
    # Boundary
    # -------------------------------------------------------------------
    def commit(self):
        """Write everything staged, or return the conflict that prevented it."""
        with self._catalog.write_lock():
            for (target, target_id), (_, expected_version) in self._staged.items():
                conflict = self._catalog.check_version(target, target_id, expected_version)
                if conflict is not None:
                    logger.warning(
                        "Stale stock version at commit",
                        target=target.value,
                        target_id=target_id,
                        expected_version=expected_version,
                        actual_version=conflict.actual_version,
                    )
                    return conflict

            for order in self._new_orders:
                if self._orders.order_number_exists(order.order_number):
                    logger.warning("Order number already taken", order_number=order.order_number)
                    return OrderNumberConflict(order.order_number)

            with UnitOfWork():
                for (target, _), (record, expected_version) in self._staged.items():
                    record.version = expected_version + 1
                    self._catalog.repository_for(target).add(record)
                for order in self._new_orders:
                    self._orders.save_order(order)

        self._staged.clear()
        self._new_orders.clear()
        self.committed = True
        return None

    def discard(self):
        if self._staged or self._new_orders:
            logger.debug("Discarding staged writes", pending_writes=self.pending_writes)
        self._staged.clear()
        self._new_orders.clear()
