"""Runtime settings for the inventory domain, read from the environment."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    order_retry_attempts: int = 3
    order_retry_backoff: float = 0.05
    store_lock_timeout: float = 5.0
    order_number_prefix: str = "ORD"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            order_retry_attempts=int(os.getenv("INVENTORY_ORDER_RETRY_ATTEMPTS", "3")),
            order_retry_backoff=float(os.getenv("INVENTORY_ORDER_RETRY_BACKOFF", "0.05")),
            store_lock_timeout=float(os.getenv("INVENTORY_STORE_LOCK_TIMEOUT", "5.0")),
            order_number_prefix=os.getenv("INVENTORY_ORDER_NUMBER_PREFIX", "ORD"),
        )


settings = Settings.from_env()
