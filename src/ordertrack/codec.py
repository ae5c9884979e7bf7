"""Line codec for the order file.

Record line layout (six comma-separated fields):

    order_id,customer_name,product_name,quantity,price,order_date
    42,John Doe,Widget X,5,12.34,01-01-2024

Whitespace around the delimiters is tolerated on read. The date field runs to
the end of the line. Lines that do not have this shape decode to ``None`` and
are carried through rewrites untouched (header, blank or corrupt lines).
"""

from __future__ import annotations

import re

from ordertrack.models import DELIMITER, Order

HEADER_LINE = "orderid,customername,productname,quantity,price,orderdate\n"

_INT = r"[+-]?\d+"
_TEXT = r"[^,\s][^,]*?"
_LINE_RE = re.compile(
    rf"\s*({_INT})\s*,\s*({_TEXT})\s*,\s*({_TEXT})\s*,\s*({_INT})\s*,\s*([^,\s]+)\s*,\s*(\S.*?)\s*"
)


def is_header_shaped(line: str) -> bool:
    """True if the first non-blank character of ``line`` is not a digit.

    Only applied to the first line of a file. A corrupt data line that starts
    with a non-digit is indistinguishable from a header here.
    """
    stripped = line.lstrip(" \t")
    return not (stripped and stripped[0].isdigit())


def encode_line(order: Order) -> str:
    """Render ``order`` as one newline-terminated line.

    Raises:
        ValueError: if a text field contains a line break, or the name fields
            contain the delimiter. The date is last and may hold delimiters.
    """
    for name in ("customer_name", "product_name", "order_date"):
        value = getattr(order, name)
        if "\n" in value or "\r" in value or (name != "order_date" and DELIMITER in value):
            msg = f"{name} must be sanitized before storage: {value!r}"
            raise ValueError(msg)
    return (
        f"{order.order_id}{DELIMITER}{order.customer_name}{DELIMITER}{order.product_name}"
        f"{DELIMITER}{order.quantity}{DELIMITER}{order.price:.2f}{DELIMITER}{order.order_date}\n"
    )


def decode_line(line: str) -> Order | None:
    """Parse one line into an Order, or return None if it is not a record."""
    m = _LINE_RE.fullmatch(line.rstrip("\r\n"))
    if m is None:
        return None
    order_id, customer, product, qty, price, date = m.groups()
    try:
        price_value = float(price)
    except ValueError:
        return None
    return Order(
        order_id=int(order_id),
        customer_name=customer,
        product_name=product,
        quantity=int(qty),
        price=price_value,
        order_date=date,
    )
