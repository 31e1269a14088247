"""Order number generation: ``ORD-`` followed by 12 random uppercase hex digits."""

from uuid import uuid4

from inventory.config import settings


def _uuid_hex():
    return uuid4().hex


class OrderNumberGenerator:
    def __init__(self, prefix=None, length=12, token_source=_uuid_hex):
        self.prefix = settings.order_number_prefix if prefix is None else prefix
        self.length = length
        self._token_source = token_source

    def __call__(self):
        token = self._token_source()[: self.length].upper()
        return f"{self.prefix}-{token}"
