"""Error taxonomy of the inventory domain.

Each error derives from the Protean exception that carries the same meaning,
so Protean-aware callers keep working, and exposes a human-readable
``message`` that the API layer renders as is.

    ResourceNotFoundError        referenced item/variant/order is absent
    InvalidArgumentError         malformed or inconsistent request
    InsufficientStockError       requested quantity exceeds available stock
    CatalogStateError            catalog data itself is inconsistent
    ConcurrentModificationError  an optimistic version check lost a race
    DuplicateResourceError       unique name/SKU already taken
    ResourceInUseError           entity is still referenced by orders
    StoreUnavailableError        storage timed out or is transiently unusable
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class ResourceNotFoundError(ObjectNotFoundError):
    kind = "NotFound"

    def __init__(self, message, field="_entity"):
        self.message = message
        super().__init__({field: [message]})


class InvalidArgumentError(ValidationError):
    kind = "InvalidArgument"

    def __init__(self, message, field="lines"):
        self.message = message
        super().__init__({field: [message]})


class InsufficientStockError(ValidationError):
    """Raised with the target label and the available/requested counts."""

    kind = "InsufficientStock"

    def __init__(self, message, target=None, available=None, requested=None):
        self.message = message
        self.target = target
        self.available = available
        self.requested = requested
        super().__init__({"quantity": [message]})

    @classmethod
    def for_line(cls, target, available, requested):
        return cls(
            f"Not enough stock for {target}. Available: {available}, Requested: {requested}",
            target=target,
            available=available,
            requested=requested,
        )


class CatalogStateError(InvalidOperationError):
    kind = "InvalidState"

    def __init__(self, message):
        self.message = message
        super().__init__({"_entity": [message]})


class ConcurrentModificationError(InvalidOperationError):
    kind = "ConcurrentModification"

    def __init__(self, message="Order could not be processed due to concurrent modification. Please try again."):
        self.message = message
        super().__init__({"_entity": [message]})


class DuplicateResourceError(ValidationError):
    kind = "Duplicate"

    def __init__(self, message, field="_entity"):
        self.message = message
        super().__init__({field: [message]})


class ResourceInUseError(InvalidOperationError):
    kind = "ResourceInUse"

    def __init__(self, message):
        self.message = message
        super().__init__({"_entity": [message]})


class StoreUnavailableError(Exception):
    kind = "Unavailable"

    def __init__(self, message):
        self.message = message
        super().__init__(message)
