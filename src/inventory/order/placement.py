"""Order placement: the caller-side boundary around the reservation engine.

The engine never retries. ``place_order`` re-drives the whole
``create_order`` call when it loses an optimistic race, up to a bounded
number of attempts with exponential backoff. Every other error propagates
on the first attempt.
"""

import time

import structlog

from inventory.catalog.store import CatalogStore
from inventory.config import settings
from inventory.errors import ConcurrentModificationError
from inventory.order.reservation import StockReservationEngine
from inventory.order.store import OrderStore

logger = structlog.get_logger(__name__)


def place_order(engine, lines, attempts=None, backoff=None, sleep=time.sleep):
    attempts = settings.order_retry_attempts if attempts is None else attempts
    backoff = settings.order_retry_backoff if backoff is None else backoff
    attempts = max(attempts, 1)

    for attempt in range(1, attempts + 1):
        try:
            return engine.create_order(lines)
        except ConcurrentModificationError:
            if attempt == attempts:
                logger.warning("Giving up on order after concurrent modifications", attempts=attempts)
                raise
            delay = backoff * (2 ** (attempt - 1))
            logger.info("Retrying order after concurrent modification", attempt=attempt, delay=delay)
            sleep(delay)


class OrderService:
    """Application service for orders, used by the HTTP layer."""

    def __init__(self, catalog=None, orders=None, engine=None):
        self.catalog = catalog or CatalogStore()
        self.orders = orders or OrderStore()
        self.engine = engine or StockReservationEngine(self.catalog, self.orders)

    def create_order(self, lines):
        return place_order(self.engine, lines)

    def get_order(self, order_id):
        return self.orders.get_order(order_id)

    def list_orders(self):
        return self.orders.list_orders()
