"""Shared BDD fixtures and step definitions for the Inventory domain."""

import pytest
from inventory.catalog.item import Item
from inventory.catalog.store import CatalogStore
from inventory.catalog.variant import ItemVariant
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured order errors."""
    return {"exc": None}


@pytest.fixture()
def placed():
    """Container for the order placed in a When step."""
    return {"order": None}


@pytest.fixture()
def catalog_records():
    """Catalog records created in Given steps, keyed by name."""
    return {"items": {}, "variants": {}}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an item "{name}" priced {price:d} with {stock:d} in stock'))
def item_in_stock(name, price, stock, catalog_records):
    item = CatalogStore().add_item(Item.create(name=name, base_price=price, stock_quantity=stock))
    catalog_records["items"][name] = item


@given(parsers.cfparse('an item "{name}" sold through variants'))
def item_with_variants(name, catalog_records):
    item = CatalogStore().add_item(Item.create(name=name, base_price=100000, stock_quantity=10, has_variants=True))
    catalog_records["items"][name] = item


@given(parsers.cfparse('a variant "{variant_name}" of "{item_name}" priced {price:d} with {stock:d} in stock'))
def variant_in_stock(variant_name, item_name, price, stock, catalog_records):
    item = catalog_records["items"][item_name]
    variant = CatalogStore().add_variant(
        ItemVariant.create(
            item_id=item.id,
            sku=variant_name.upper().replace(" ", ""),
            name=variant_name,
            price=price,
            stock_quantity=stock,
        )
    )
    catalog_records["variants"][variant_name] = variant


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order total is {total:d}"))
def order_total(total, placed, error):
    assert error["exc"] is None
    assert placed["order"].total_amount == total


@then(parsers.cfparse('the order is rejected with "{kind}"'))
def order_rejected(kind, placed, error):
    assert placed["order"] is None
    assert error["exc"] is not None
    assert error["exc"].kind == kind


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def item_stock(name, stock, catalog_records):
    item = catalog_records["items"][name]
    assert CatalogStore().get_item(item.id).stock_quantity == stock


@then(parsers.cfparse('variant "{name}" has {stock:d} in stock'))
def variant_stock(name, stock, catalog_records):
    variant = catalog_records["variants"][name]
    assert CatalogStore().get_variant(variant.id).stock_quantity == stock
