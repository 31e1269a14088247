"""Inventory bounded context: Catalog, Stock Reservation and Orders.

Handles the item/variant catalog (aggregates with version counters),
order creation with all-or-nothing stock reservation under optimistic
concurrency, and the order history.
"""

from protean.domain import Domain

inventory = Domain(name="inventory")
