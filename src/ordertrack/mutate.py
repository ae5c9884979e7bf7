"""Add, update and delete on top of OrderStore.

Update and delete are scan-then-rewrite: the file is scanned first to find
the target, and only then rewritten through OrderStore.atomic_rewrite with a
transform that passes every other line through unchanged.

Duplicate ids are allowed in the file. Update touches the first match only;
delete picks one match by its 1-based ordinal among the matches.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ordertrack.codec import encode_line
from ordertrack.models import (
    ADDED,
    DECLINED,
    DELETED,
    DUPLICATE,
    NOT_FOUND,
    OUT_OF_RANGE,
    UPDATED,
    UpdateResult,
    sanitize_text,
    with_edits,
)
from ordertrack.query import find_all_by_id, find_by_id

if TYPE_CHECKING:
    from ordertrack.dates import DateValidator
    from ordertrack.models import Order, OrderEdits
    from ordertrack.store import OrderStore

logger = logging.getLogger("ordertrack.mutate")


def add_order(store: OrderStore, order: Order) -> str:
    """Append ``order`` unless its id is already taken. Returns added | duplicate."""
    if store.exists(order.order_id):
        return DUPLICATE
    store.append(order)
    return ADDED


def apply_edits(
    order: Order,
    edits: OrderEdits,
    validator: DateValidator,
    max_text_length: int | None = None,
) -> tuple[Order, tuple[str, ...]]:
    """Apply each present edit that passes validation.

    Returns the edited order and the names of the fields whose edit was
    rejected (those keep their current value).
    """
    changes: dict[str, object] = {}
    rejected: list[str] = []

    for name in ("customer_name", "product_name"):
        value = getattr(edits, name)
        if value is None:
            continue
        try:
            changes[name] = sanitize_text(value, max_text_length)
        except ValueError:
            rejected.append(name)

    if edits.quantity is not None:
        if edits.quantity >= 0:
            changes["quantity"] = edits.quantity
        else:
            rejected.append("quantity")

    if edits.price is not None:
        if edits.price >= 0:
            changes["price"] = float(edits.price)
        else:
            rejected.append("price")

    if edits.order_date is not None:
        if validator.is_valid(edits.order_date):
            changes["order_date"] = edits.order_date.strip()
        else:
            rejected.append("order_date")

    if rejected:
        logger.debug("order %d: rejected edits for %s", order.order_id, ", ".join(rejected))
    return with_edits(order, **changes), tuple(rejected)


def update_by_id(
    store: OrderStore,
    order_id: int,
    edits: OrderEdits,
    validator: DateValidator,
    max_text_length: int | None = None,
) -> UpdateResult:
    """Rewrite the first record with ``order_id`` with ``edits`` applied."""
    current = find_by_id(store, order_id)
    if current is None:
        return UpdateResult(NOT_FOUND)

    updated, rejected = apply_edits(current, edits, validator, max_text_length)
    new_line = encode_line(updated)
    done = False

    def transform(raw: str, order: Order | None) -> str | None:
        nonlocal done
        if not done and order is not None and order.order_id == order_id:
            done = True
            return new_line
        return raw

    store.atomic_rewrite(transform)
    logger.info("updated order %d in %s", order_id, store.path)
    return UpdateResult(UPDATED, order=updated, rejected=rejected)


def delete_selected(store: OrderStore, order_id: int, ordinal: int, *, confirmed: bool) -> str:
    """Remove the ``ordinal``-th (1-based) record with ``order_id``.

    Returns deleted | not-found | out-of-range | declined. Only ``deleted``
    touches the file.
    """
    match_count = len(find_all_by_id(store, order_id))
    if match_count == 0:
        return NOT_FOUND
    if not 1 <= ordinal <= match_count:
        return OUT_OF_RANGE
    if not confirmed:
        return DECLINED

    seen = 0

    def transform(raw: str, order: Order | None) -> str | None:
        nonlocal seen
        if order is not None and order.order_id == order_id:
            seen += 1
            if seen == ordinal:
                return None
        return raw

    store.atomic_rewrite(transform)
    logger.info("deleted order %d (match %d of %d) from %s", order_id, ordinal, match_count, store.path)
    return DELETED
