"""Persistence and lookups for Order aggregates."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from inventory.errors import ResourceNotFoundError
from inventory.order.order import Order, OrderLine


class OrderStore:
    def save_order(self, order):
        current_domain.repository_for(Order).add(order)
        return order

    def get_order(self, order_id):
        try:
            return current_domain.repository_for(Order).get(order_id)
        except ObjectNotFoundError:
            raise ResourceNotFoundError(f"Order not found with id: {order_id}") from None

    def list_orders(self):
        orders = current_domain.repository_for(Order)._dao.query.all().items
        return sorted(orders, key=lambda order: order.created_at.timestamp() if order.created_at else 0.0)

    def order_number_exists(self, order_number):
        repo = current_domain.repository_for(Order)
        return bool(repo._dao.query.filter(order_number=order_number).all().items)

    def references_item(self, item_id):
        repo = current_domain.repository_for(OrderLine)
        return bool(repo._dao.query.filter(item_id=str(item_id)).all().items)

    def references_variant(self, variant_id):
        repo = current_domain.repository_for(OrderLine)
        return bool(repo._dao.query.filter(variant_id=str(variant_id)).all().items)
