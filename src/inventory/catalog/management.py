"""Create, update and delete Items and ItemVariants.

Plain application services over ``CatalogStore``. Updates are optimistic:
the caller may pass the version it last read, otherwise the version read at
the start of the update is used, and a lost race surfaces as
``ConcurrentModificationError``. Entities referenced by orders cannot be
deleted.
"""

import structlog

from inventory.catalog.item import Item
from inventory.catalog.store import CatalogStore, VersionConflict
from inventory.catalog.variant import ItemVariant
from inventory.errors import (
    ConcurrentModificationError,
    DuplicateResourceError,
    InvalidArgumentError,
)
from inventory.order.store import OrderStore

logger = structlog.get_logger(__name__)


def _check_non_negative(stock_quantity, price, price_label):
    if stock_quantity is not None and stock_quantity < 0:
        raise InvalidArgumentError("Stock quantity cannot be negative", field="stock_quantity")
    if price is not None and price < 0:
        raise InvalidArgumentError(f"{price_label} cannot be negative", field="price")


def _raise_if_conflict(outcome, label):
    if isinstance(outcome, VersionConflict):
        raise ConcurrentModificationError(f"{label} was modified concurrently. Please reload and try again.")
    return outcome


class ItemService:
    def __init__(self, catalog=None, orders=None):
        self.catalog = catalog or CatalogStore()
        self.orders = orders or OrderStore()

    def list_items(self):
        return self.catalog.list_items()

    def get_item(self, item_id):
        return self.catalog.get_item(item_id)

    def create_item(self, name, description=None, base_price=None, stock_quantity=0, has_variants=False):
        logger.info("Creating item", name=name)
        _check_non_negative(stock_quantity, base_price, "Base price")
        if self.catalog.find_item_by_name(name) is not None:
            raise DuplicateResourceError(f"Item already exists with name: {name}", field="name")

        item = Item.create(
            name=name,
            description=description,
            base_price=base_price,
            stock_quantity=stock_quantity,
            has_variants=has_variants,
        )
        self.catalog.add_item(item)
        logger.info("Item created", item_id=str(item.id), name=item.name)
        return item

    def update_item(
        self, item_id, name, description=None, base_price=None, stock_quantity=0, has_variants=False, version=None
    ):
        logger.info("Updating item", item_id=str(item_id))
        item = self.catalog.get_item(item_id)
        _check_non_negative(stock_quantity, base_price, "Base price")

        namesake = self.catalog.find_item_by_name(name)
        if namesake is not None and str(namesake.id) != str(item.id):
            raise DuplicateResourceError(f"Item already exists with name: {name}", field="name")

        expected_version = item.version if version is None else version
        item.update_details(name, description, base_price, stock_quantity, has_variants)
        _raise_if_conflict(self.catalog.save_item(item, expected_version), f"Item {item_id}")

        logger.info("Item updated", item_id=str(item.id), version=item.version)
        return item

    def delete_item(self, item_id):
        """Delete an item and its variants, unless an order references it."""
        removed_variants = self.catalog.delete_item(item_id, self.orders)
        logger.info("Item deleted", item_id=str(item_id), removed_variants=removed_variants)


class VariantService:
    def __init__(self, catalog=None, orders=None):
        self.catalog = catalog or CatalogStore()
        self.orders = orders or OrderStore()

    def list_variants(self, item_id=None):
        if item_id is not None:
            return self.catalog.variants_of(item_id)
        return self.catalog.list_variants()

    def get_variant(self, variant_id):
        return self.catalog.get_variant(variant_id)

    def create_variant(self, item_id, sku, name, price, stock_quantity=0):
        """Create a variant and flag its item as sold only through variants."""
        logger.info("Creating variant", item_id=str(item_id), sku=sku)
        item = self.catalog.get_item(item_id)
        _check_non_negative(stock_quantity, price, "Price")
        if self.catalog.find_variant_by_sku(sku) is not None:
            raise DuplicateResourceError(f"Variant already exists with SKU: {sku}", field="sku")

        variant = ItemVariant.create(
            item_id=str(item.id),
            sku=sku,
            name=name,
            price=price,
            stock_quantity=stock_quantity,
        )

        if not item.has_variants:
            expected_version = item.version
            item.mark_has_variants()
            _raise_if_conflict(self.catalog.save_item(item, expected_version), f"Item {item.id}")

        self.catalog.add_variant(variant)
        logger.info("Variant created", variant_id=str(variant.id), sku=variant.sku)
        return variant

    def update_variant(self, variant_id, sku, name, price, stock_quantity=0, item_id=None, version=None):
        logger.info("Updating variant", variant_id=str(variant_id))
        variant = self.catalog.get_variant(variant_id)
        _check_non_negative(stock_quantity, price, "Price")

        namesake = self.catalog.find_variant_by_sku(sku)
        if namesake is not None and str(namesake.id) != str(variant.id):
            raise DuplicateResourceError(f"Variant already exists with SKU: {sku}", field="sku")

        expected_version = variant.version if version is None else version
        variant.update_details(sku, name, price, stock_quantity, item_id=item_id)
        _raise_if_conflict(self.catalog.save_variant(variant, expected_version), f"Variant {variant_id}")

        logger.info("Variant updated", variant_id=str(variant.id), version=variant.version)
        return variant

    def delete_variant(self, variant_id):
        self.catalog.delete_variant(variant_id, self.orders)
        logger.info("Variant deleted", variant_id=str(variant_id))
