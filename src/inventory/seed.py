"""Sample catalog data: a T-Shirt sold in four variants, coffee beans and a laptop.

Seeding is idempotent. Items that already exist (by name) and variants that
already exist (by SKU) are left untouched.
"""

import structlog

from inventory.catalog.management import ItemService, VariantService
from inventory.shared.money import to_minor_units

logger = structlog.get_logger(__name__)

SAMPLE_ITEMS = [
    {
        "name": "T-Shirt",
        "description": "Basic cotton t-shirt",
        "base_price": "100000",
        "stock_quantity": 10,
        "has_variants": True,
        "variants": [
            {"sku": "TSHIRT-BLACK-M", "name": "Black - M", "price": "110000", "stock_quantity": 5},
            {"sku": "TSHIRT-BLACK-L", "name": "Black - L", "price": "110000", "stock_quantity": 3},
            {"sku": "TSHIRT-WHITE-M", "name": "White - M", "price": "105000", "stock_quantity": 2},
            {"sku": "TSHIRT-WHITE-L", "name": "White - L", "price": "105000", "stock_quantity": 4},
        ],
    },
    {
        "name": "Coffee Beans",
        "description": "250g medium roast coffee beans",
        "base_price": "150000",
        "stock_quantity": 20,
        "has_variants": False,
        "variants": [],
    },
    {
        "name": "Laptop",
        "description": "15-inch laptop computer",
        "base_price": "12000000",
        "stock_quantity": 5,
        "has_variants": False,
        "variants": [],
    },
]


def seed_catalog(items=None, variants=None):
    """Create the sample items and variants; returns the number of records created."""
    items = items or ItemService()
    variants = variants or VariantService(items.catalog, items.orders)
    created = 0

    for data in SAMPLE_ITEMS:
        item = items.catalog.find_item_by_name(data["name"])
        if item is None:
            item = items.create_item(
                name=data["name"],
                description=data["description"],
                base_price=to_minor_units(data["base_price"]),
                stock_quantity=data["stock_quantity"],
                has_variants=data["has_variants"],
            )
            created += 1

        for variant_data in data["variants"]:
            if items.catalog.find_variant_by_sku(variant_data["sku"]) is not None:
                continue
            variants.create_variant(
                item_id=item.id,
                sku=variant_data["sku"],
                name=variant_data["name"],
                price=to_minor_units(variant_data["price"]),
                stock_quantity=variant_data["stock_quantity"],
            )
            created += 1

    logger.info("Catalog seeded", created=created)
    return created
