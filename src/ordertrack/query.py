"""Read-only scans over an OrderStore. Linear, no index."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ordertrack.models import Order
    from ordertrack.store import OrderStore


def find_by_id(store: OrderStore, order_id: int) -> Order | None:
    """First record with ``order_id`` in file order, or None."""
    for order in store.iter_orders():
        if order.order_id == order_id:
            return order
    return None


def find_all_by_id(store: OrderStore, order_id: int) -> list[Order]:
    """Every record with ``order_id``; position in the list + 1 is its delete ordinal."""
    return [order for order in store.iter_orders() if order.order_id == order_id]


def find_by_product_substring(store: OrderStore, needle: str) -> list[Order]:
    """Records whose product name contains ``needle``, ignoring case."""
    needle_lc = needle.lower()
    return [order for order in store.iter_orders() if needle_lc in order.product_name.lower()]


def list_orders(store: OrderStore) -> list[Order]:
    return list(store.iter_orders())
