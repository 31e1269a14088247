"""Shape and duplicate checks on requested order lines.

These checks never touch storage. They run before the reservation engine
reads anything, so a malformed request fails without a single store access.
"""

from dataclasses import dataclass

from inventory.errors import InvalidArgumentError


@dataclass(frozen=True)
class RequestedLine:
    item_id: str
    quantity: int
    variant_id: str | None = None

    @property
    def key(self):
        return (str(self.item_id), None if self.variant_id is None else str(self.variant_id))

    @classmethod
    def from_dict(cls, data):
        return cls(
            item_id=data.get("item_id"),
            quantity=data.get("quantity"),
            variant_id=data.get("variant_id"),
        )


def _is_positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_requested_lines(lines):
    """Reject an empty list, missing item ids, non-positive quantities and duplicates.

    Lines are scanned once, left to right, and the first offending line is
    reported. A line without a variant never duplicates a line with one.
    """
    if not lines:
        raise InvalidArgumentError("Order must contain at least one line")

    seen = set()
    for index, line in enumerate(lines):
        if line.item_id is None or str(line.item_id).strip() == "":
            raise InvalidArgumentError(f"Order line {index + 1} is missing an item id")

        if not _is_positive_int(line.quantity):
            raise InvalidArgumentError(f"Quantity must be a positive integer for item {line.item_id}")

        if line.key in seen:
            suffix = f" variant {line.variant_id}" if line.variant_id is not None else ""
            raise InvalidArgumentError(f"Duplicate order line detected for item {line.item_id}{suffix}")
        seen.add(line.key)
