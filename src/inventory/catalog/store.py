"""Catalog Store: versioned persistence for Items and ItemVariants.

Every conditional write takes an explicit ``expected_version`` and returns a
``VersionConflict`` instead of writing when the stored version has moved on.
The compare-and-write step runs under a process-wide write lock, bounded by a
timeout; readers never take the lock.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

import structlog
from protean.core.unit_of_work import UnitOfWork
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from inventory.catalog.item import Item
from inventory.catalog.variant import ItemVariant
from inventory.config import settings
from inventory.errors import ResourceInUseError, ResourceNotFoundError, StoreUnavailableError

logger = structlog.get_logger(__name__)


class StockTarget(Enum):
    ITEM = "item"
    VARIANT = "variant"


@dataclass(frozen=True)
class VersionConflict:
    """A version-checked write lost against a concurrent writer.

    ``actual_version`` is None when the record no longer exists.
    """

    target: StockTarget
    target_id: str
    expected_version: int
    actual_version: int | None


_AGGREGATES = {
    StockTarget.ITEM: Item,
    StockTarget.VARIANT: ItemVariant,
}

_NOT_FOUND_MESSAGES = {
    StockTarget.ITEM: "Item not found with id: {}",
    StockTarget.VARIANT: "Item variant not found with id: {}",
}


def _by_creation(records):
    return sorted(records, key=lambda record: record.created_at.timestamp() if record.created_at else 0.0)


class CatalogStore:
    _write_lock = threading.Lock()

    def __init__(self, lock_timeout=None):
        self._lock_timeout = settings.store_lock_timeout if lock_timeout is None else lock_timeout

    @contextmanager
    def write_lock(self):
        if not self._write_lock.acquire(timeout=self._lock_timeout):
            logger.error("Timed out waiting for catalog write lock", timeout=self._lock_timeout)
            raise StoreUnavailableError("Catalog storage is busy. Please try again later.")
        try:
            yield
        finally:
            self._write_lock.release()

    def repository_for(self, target):
        return current_domain.repository_for(_AGGREGATES[target])

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get(self, target, target_id):
        try:
            return self.repository_for(target).get(target_id)
        except ObjectNotFoundError:
            raise ResourceNotFoundError(_NOT_FOUND_MESSAGES[target].format(target_id)) from None

    def get_item(self, item_id):
        return self.get(StockTarget.ITEM, item_id)

    def get_variant(self, variant_id):
        return self.get(StockTarget.VARIANT, variant_id)

    def item_exists(self, item_id):
        try:
            self.get_item(item_id)
        except ResourceNotFoundError:
            return False
        return True

    def variant_exists(self, variant_id):
        try:
            self.get_variant(variant_id)
        except ResourceNotFoundError:
            return False
        return True

    def list_items(self):
        return _by_creation(self.repository_for(StockTarget.ITEM)._dao.query.all().items)

    def list_variants(self):
        return _by_creation(self.repository_for(StockTarget.VARIANT)._dao.query.all().items)

    def variants_of(self, item_id):
        repo = self.repository_for(StockTarget.VARIANT)
        return _by_creation(repo._dao.query.filter(item_id=str(item_id)).all().items)

    def find_item_by_name(self, name):
        items = self.repository_for(StockTarget.ITEM)._dao.query.filter(name=name).all().items
        return items[0] if items else None

    def find_variant_by_sku(self, sku):
        variants = self.repository_for(StockTarget.VARIANT)._dao.query.filter(sku=sku).all().items
        return variants[0] if variants else None

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def check_version(self, target, target_id, expected_version):
        """Return a VersionConflict if the stored version differs from ``expected_version``."""
        try:
            current = self.get(target, target_id)
        except ResourceNotFoundError:
            return VersionConflict(target, str(target_id), expected_version, None)

        if current.version != expected_version:
            return VersionConflict(target, str(target_id), expected_version, current.version)
        return None

    def add_item(self, item):
        with self.write_lock():
            self.repository_for(StockTarget.ITEM).add(item)
        return item

    def add_variant(self, variant):
        with self.write_lock():
            self.repository_for(StockTarget.VARIANT).add(variant)
        return variant

    def save_item(self, item, expected_version):
        return self._save(StockTarget.ITEM, item, expected_version)

    def save_variant(self, variant, expected_version):
        return self._save(StockTarget.VARIANT, variant, expected_version)

    def _save(self, target, record, expected_version):
        with self.write_lock():
            conflict = self.check_version(target, record.id, expected_version)
            if conflict is not None:
                logger.warning(
                    "Version conflict on catalog write",
                    target=target.value,
                    target_id=conflict.target_id,
                    expected_version=expected_version,
                    actual_version=conflict.actual_version,
                )
                return conflict

            record.version = expected_version + 1
            self.repository_for(target).add(record)
        return record

    def delete_item(self, item_id, orders=None):
        """Delete an item together with its variants.

        With an order store, the item is kept and ``ResourceInUseError`` raised
        when an order line references it. The check shares the write lock with
        order commits.
        """
        with self.write_lock():
            item = self.get_item(item_id)
            if orders is not None and orders.references_item(item_id):
                raise ResourceInUseError(f"Item is referenced by existing orders: {item_id}")
            variants = self.variants_of(item_id)
            with UnitOfWork():
                variant_repo = self.repository_for(StockTarget.VARIANT)
                for variant in variants:
                    variant_repo._dao.delete(variant)
                self.repository_for(StockTarget.ITEM)._dao.delete(item)
        return len(variants)

    def delete_variant(self, variant_id, orders=None):
        with self.write_lock():
            variant = self.get_variant(variant_id)
            if orders is not None and orders.references_variant(variant_id):
                raise ResourceInUseError(f"Variant is referenced by existing orders: {variant_id}")
            self.repository_for(StockTarget.VARIANT)._dao.delete(variant)

    def begin(self, orders):
        """Open a unit of work that stages stock writes and new orders until commit."""
        from inventory.unit_of_work import OrderUnitOfWork

        return OrderUnitOfWork(self, orders)
