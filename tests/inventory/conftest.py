import os

import pytest


@pytest.fixture(scope="session")
def _inventory_domain(request):
    """Initialize the inventory domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from inventory.domain import inventory

    inventory.init()
    return inventory


@pytest.fixture(scope="session", autouse=True)
def setup_db(_inventory_domain):
    from inventory.utils.db import drop_db, setup_db

    setup_db(_inventory_domain)

    yield

    drop_db(_inventory_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_inventory_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _inventory_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    ctx.pop()


@pytest.fixture()
def catalog():
    from inventory.catalog.store import CatalogStore

    return CatalogStore()


@pytest.fixture()
def orders():
    from inventory.order.store import OrderStore

    return OrderStore()


@pytest.fixture()
def engine(catalog, orders):
    from inventory.order.reservation import StockReservationEngine

    return StockReservationEngine(catalog, orders)


@pytest.fixture()
def coffee(catalog):
    """Coffee Beans: sold directly, 20 in stock at 150000."""
    from inventory.catalog.item import Item

    return catalog.add_item(
        Item.create(name="Coffee Beans", description="250g medium roast", base_price=150000, stock_quantity=20)
    )


@pytest.fixture()
def tshirt(catalog):
    """T-Shirt: sold only through variants."""
    from inventory.catalog.item import Item

    return catalog.add_item(Item.create(name="T-Shirt", base_price=100000, stock_quantity=10, has_variants=True))


@pytest.fixture()
def black_m(catalog, tshirt):
    """Black - M variant of the T-Shirt: 5 in stock at 110000."""
    from inventory.catalog.variant import ItemVariant

    return catalog.add_variant(
        ItemVariant.create(item_id=tshirt.id, sku="TSHIRT-BLACK-M", name="Black - M", price=110000, stock_quantity=5)
    )
