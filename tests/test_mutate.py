from __future__ import annotations

from pathlib import Path

import pytest

from ordertrack.codec import HEADER_LINE
from ordertrack.dates import YMD, DateValidator
from ordertrack.models import (
    ADDED,
    DECLINED,
    DELETED,
    DUPLICATE,
    NOT_FOUND,
    OUT_OF_RANGE,
    UPDATED,
    Order,
    OrderEdits,
)
from ordertrack.mutate import add_order, apply_edits, delete_selected, update_by_id
from ordertrack.store import OrderStore

VALIDATOR = DateValidator()

DUPLICATES = (
    HEADER_LINE
    + "500,First,A,1,1.00,01-01-2024\n"
    + "500,Second,B,2,2.00,02-01-2024\n"
    + "501,Other,C,3,3.00,03-01-2024\n"
)


@pytest.fixture
def dup_store(orders_path: Path) -> OrderStore:
    orders_path.write_text(DUPLICATES)
    return OrderStore(orders_path)


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


def test_add_order_rejects_taken_id(sample_store: OrderStore) -> None:
    before = sample_store.path.read_bytes()
    assert add_order(sample_store, Order(100, "X", "Y", 1, 1.0, "01-01-2024")) == DUPLICATE
    assert sample_store.path.read_bytes() == before

    assert add_order(sample_store, Order(101, "X", "Y", 1, 1.0, "01-01-2024")) == ADDED
    assert sample_store.exists(101)


# ---------------------------------------------------------------------------
# apply_edits
# ---------------------------------------------------------------------------

BASE = Order(1, "Ann", "Widget", 5, 2.5, "01-01-2024")


def test_apply_edits_keeps_absent_fields() -> None:
    edited, rejected = apply_edits(BASE, OrderEdits(product_name="Gizmo"), VALIDATOR)
    assert edited == Order(1, "Ann", "Gizmo", 5, 2.5, "01-01-2024")
    assert rejected == ()


def test_apply_edits_rejects_invalid_fields_individually() -> None:
    edits = OrderEdits(
        customer_name="  ",
        product_name="Gizmo",
        quantity=-1,
        price=-0.01,
        order_date="31-02-2024",
    )
    edited, rejected = apply_edits(BASE, edits, VALIDATOR)
    assert edited == Order(1, "Ann", "Gizmo", 5, 2.5, "01-01-2024")
    assert rejected == ("customer_name", "quantity", "price", "order_date")


def test_apply_edits_accepts_zero_and_sanitizes_text() -> None:
    edits = OrderEdits(customer_name="Smith, Jane", quantity=0, price=0.0, order_date="29-02-2024")
    edited, rejected = apply_edits(BASE, edits, VALIDATOR, max_text_length=8)
    assert edited == Order(1, "Smith  J", "Widget", 0, 0.0, "29-02-2024")
    assert rejected == ()


def test_apply_edits_uses_configured_date_format() -> None:
    edited, rejected = apply_edits(BASE, OrderEdits(order_date="2024-08-15"), DateValidator(YMD, 1900, 3000))
    assert edited.order_date == "2024-08-15"
    assert rejected == ()


# ---------------------------------------------------------------------------
# update_by_id
# ---------------------------------------------------------------------------


def test_update_rewrites_only_the_target_line(sample_store: OrderStore) -> None:
    before = sample_store.path.read_text().splitlines(keepends=True)
    result = update_by_id(sample_store, 200, OrderEdits(quantity=9, price=4.25), VALIDATOR)

    assert result.ok
    assert result.status == UPDATED
    assert result.order == Order(200, "Bob Ray", "Gadget", 9, 4.25, "15-08-2024")
    after = sample_store.path.read_text().splitlines(keepends=True)
    assert len(after) == len(before)
    assert after[2] == "200,Bob Ray,Gadget,9,4.25,15-08-2024\n"
    assert after[:2] == before[:2]
    assert after[3:] == before[3:]


def test_update_reports_rejected_fields_but_succeeds(sample_store: OrderStore) -> None:
    result = update_by_id(sample_store, 100, OrderEdits(quantity=-3, order_date="bad"), VALIDATOR)
    assert result.status == UPDATED
    assert result.rejected == ("quantity", "order_date")
    assert result.order == Order(100, "Ann Lee", "Widget X", 5, 12.34, "01-01-2024")


def test_update_touches_first_duplicate_only(dup_store: OrderStore) -> None:
    update_by_id(dup_store, 500, OrderEdits(customer_name="Changed"), VALIDATOR)
    assert dup_store.path.read_text() == (
        HEADER_LINE
        + "500,Changed,A,1,1.00,01-01-2024\n"
        + "500,Second,B,2,2.00,02-01-2024\n"
        + "501,Other,C,3,3.00,03-01-2024\n"
    )


def test_update_missing_id_leaves_file_untouched(sample_store: OrderStore) -> None:
    before = sample_store.path.read_bytes()
    result = update_by_id(sample_store, 999, OrderEdits(quantity=1), VALIDATOR)
    assert result.status == NOT_FOUND
    assert result.order is None
    assert not result.ok
    assert sample_store.path.read_bytes() == before


def test_update_preserves_opaque_lines(orders_path: Path) -> None:
    orders_path.write_text(HEADER_LINE + "junk line\n1,a,b,1,1.00,01-01-2024\n# note\n")
    store = OrderStore(orders_path)
    update_by_id(store, 1, OrderEdits(product_name="z"), VALIDATOR)
    assert orders_path.read_text() == HEADER_LINE + "junk line\n1,a,z,1,1.00,01-01-2024\n# note\n"


def test_update_keeps_commas_in_the_date_field(orders_path: Path) -> None:
    orders_path.write_text(HEADER_LINE + "1,a,b,2,3.00,01-01-2024, late\n")
    store = OrderStore(orders_path)

    result = update_by_id(store, 1, OrderEdits(quantity=9), VALIDATOR)

    assert result.status == UPDATED
    assert result.rejected == ()
    assert result.order == Order(1, "a", "b", 9, 3.0, "01-01-2024, late")
    assert orders_path.read_bytes() == (HEADER_LINE + "1,a,b,9,3.00,01-01-2024, late\n").encode()


def test_update_canonicalizes_only_the_target_line(orders_path: Path) -> None:
    original = (
        HEADER_LINE.replace("\n", "\r\n")
        + " 1 , Ann Lee ,  Widget , 1 , 1.5 , 01-01-2024 \r\n"
        + " 2 , Bob , Gadget , 2 , 2.00 , 02-01-2024\r\n"
    )
    orders_path.write_bytes(original.encode())
    store = OrderStore(orders_path)

    result = update_by_id(store, 1, OrderEdits(quantity=9), VALIDATOR)

    assert result.status == UPDATED
    assert orders_path.read_bytes() == (
        HEADER_LINE.replace("\n", "\r\n")
        + "1,Ann Lee,Widget,9,1.50,01-01-2024\n"
        + " 2 , Bob , Gadget , 2 , 2.00 , 02-01-2024\r\n"
    ).encode()


# ---------------------------------------------------------------------------
# delete_selected
# ---------------------------------------------------------------------------


def test_delete_first_of_duplicates(dup_store: OrderStore) -> None:
    assert delete_selected(dup_store, 500, 1, confirmed=True) == DELETED
    assert dup_store.path.read_text() == (
        HEADER_LINE
        + "500,Second,B,2,2.00,02-01-2024\n"
        + "501,Other,C,3,3.00,03-01-2024\n"
    )


def test_delete_second_of_duplicates(dup_store: OrderStore) -> None:
    assert delete_selected(dup_store, 500, 2, confirmed=True) == DELETED
    assert dup_store.path.read_text() == (
        HEADER_LINE
        + "500,First,A,1,1.00,01-01-2024\n"
        + "501,Other,C,3,3.00,03-01-2024\n"
    )


def test_delete_middle_record_keeps_order(sample_store: OrderStore) -> None:
    before = sample_store.path.read_text().splitlines(keepends=True)
    assert delete_selected(sample_store, 200, 1, confirmed=True) == DELETED
    after = sample_store.path.read_text().splitlines(keepends=True)
    assert after == before[:2] + before[3:]


@pytest.mark.parametrize(
    ("order_id", "ordinal", "confirmed", "expected"),
    [
        (999, 1, True, NOT_FOUND),
        (500, 0, True, OUT_OF_RANGE),
        (500, 3, True, OUT_OF_RANGE),
        (501, 2, True, OUT_OF_RANGE),
        (500, 1, False, DECLINED),
    ],
)
def test_delete_without_effect(
    dup_store: OrderStore, order_id: int, ordinal: int, confirmed: bool, expected: str
) -> None:
    before = dup_store.path.read_bytes()
    assert delete_selected(dup_store, order_id, ordinal, confirmed=confirmed) == expected
    assert dup_store.path.read_bytes() == before


def test_delete_on_missing_file_is_not_found(orders_path: Path) -> None:
    assert delete_selected(OrderStore(orders_path), 1, 1, confirmed=True) == NOT_FOUND
    assert not orders_path.exists()
