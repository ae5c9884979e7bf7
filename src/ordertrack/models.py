"""Data models for the order file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

logger = logging.getLogger("ordertrack.models")

DELIMITER = ","

# Historical capacity of the customer/product fields (50-byte buffers).
DEFAULT_MAX_TEXT_LENGTH = 49

# Mutation outcomes
UPDATED = "updated"
ADDED = "added"
DELETED = "deleted"
NOT_FOUND = "not-found"
OUT_OF_RANGE = "out-of-range"
DECLINED = "declined"
DUPLICATE = "duplicate"


def sanitize_text(value: str, max_length: int | None = None) -> str:
    """Make free text safe to store in a single delimited field.

    Delimiters and line breaks become spaces, surrounding whitespace is
    stripped, and the result is cut to ``max_length`` characters when a
    limit is given (``None`` or 0 means no limit).

    Raises:
        ValueError: if nothing is left after cleaning.
    """
    cleaned = value.replace(DELIMITER, " ").replace("\r", " ").replace("\n", " ").strip()
    if max_length and len(cleaned) > max_length:
        logger.debug("truncating %r to %d chars", cleaned, max_length)
        cleaned = cleaned[:max_length].rstrip()
    if not cleaned:
        msg = "text field cannot be empty"
        raise ValueError(msg)
    return cleaned


@dataclass(frozen=True)
class Order:
    """One record line of the order file."""

    order_id: int
    customer_name: str
    product_name: str
    quantity: int
    price: float
    order_date: str

    def display(self) -> str:
        """Human-readable one-liner: ``id, customer, product, qty, price, date``."""
        return (
            f"{self.order_id}, {self.customer_name}, {self.product_name}, "
            f"{self.quantity}, {self.price:.2f}, {self.order_date}"
        )


@dataclass
class OrderEdits:
    """Partial edit set for an update. ``None`` means keep the current value."""

    customer_name: str | None = None
    product_name: str | None = None
    quantity: int | None = None
    price: float | None = None
    order_date: str | None = None

    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (self.customer_name, self.product_name, self.quantity, self.price, self.order_date)
        )


@dataclass
class UpdateResult:
    """Outcome of ``update_by_id``."""

    status: str                                     # updated | not-found
    order: Order | None = None                      # record as written
    rejected: tuple[str, ...] = field(default=())   # fields whose edit was dropped

    @property
    def ok(self) -> bool:
        return self.status == UPDATED


def with_edits(order: Order, **changes: object) -> Order:
    """Return a copy of ``order`` with the given fields replaced."""
    return replace(order, **changes)  # type: ignore[arg-type]
