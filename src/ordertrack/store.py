"""Flat-file order store.

OrderStore is the only component that touches the data file:
    store = OrderStore("orders.csv")
    store.append(Order(42, "John Doe", "Widget X", 5, 12.34, "01-01-2024"))
    for line in store.read_all():
        ...

File layout:
    orderid,customername,productname,quantity,price,orderdate   # optional header (line 1)
    42,John Doe,Widget X,5,12.34,01-01-2024                      # record
    ???                                                          # opaque line, kept as-is

Header detection looks at the first line only: if its first non-blank
character is not a digit it is the header and is never decoded.

Writes:
    append()          single line at end of file
    atomic_rewrite()  stream every line through a transform into a temp file in
                      the same directory, then os.replace() it over the original.
                      On any failure the temp file is removed and the original
                      is left byte-for-byte unchanged.

Single process, single session: no locking.
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ordertrack.codec import HEADER_LINE, decode_line, encode_line, is_header_shaped

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from ordertrack.models import Order

logger = logging.getLogger("ordertrack.store")


@dataclass(frozen=True)
class StoredLine:
    """One physical line of the data file."""

    raw: str                  # exactly as read, line ending included
    order: Order | None       # None for header and opaque lines
    header: bool = False


class OrderStore:
    """Order records in a delimited text file."""

    def __init__(self, path: Path | str, *, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"OrderStore({str(self.path)!r})"

    def ensure_initialized(self) -> None:
        """Create the file with just the header if it is missing or empty."""
        if self.path.exists() and self.path.stat().st_size > 0:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding=self.encoding, newline="") as f:
            f.write(HEADER_LINE)
        logger.debug("initialized %s", self.path)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def iter_lines(self) -> Iterator[StoredLine]:
        """Stream the file once, classifying each line. Missing file yields nothing."""
        try:
            f = self.path.open(encoding=self.encoding, newline="")
        except FileNotFoundError:
            return
        with f:
            yield from _classify(f)

    def read_all(self) -> list[StoredLine]:
        return list(self.iter_lines())

    def iter_orders(self) -> Iterator[Order]:
        """Decoded records in file order (header and opaque lines skipped)."""
        for line in self.iter_lines():
            if line.order is not None:
                yield line.order

    def exists(self, order_id: int) -> bool:
        return any(order.order_id == order_id for order in self.iter_orders())

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def append(self, order: Order) -> None:
        """Write ``order`` as the last line of the file."""
        line = encode_line(order)
        self.ensure_initialized()
        with self.path.open("a+b") as f:
            f.seek(0, os.SEEK_END)
            if f.tell() > 0:
                f.seek(-1, os.SEEK_END)
                if f.read(1) != b"\n":
                    # last line was left unterminated; don't glue onto it
                    line = "\n" + line
            f.write(line.encode(self.encoding))
        logger.debug("appended order %d to %s", order.order_id, self.path)

    def atomic_rewrite(self, transform: Callable[[str, Order | None], str | None]) -> int:
        """Rewrite the whole file through ``transform``. Returns lines written.

        Raises whatever the filesystem (or the transform) raises; in that case
        the original file is untouched and no temp file is left behind.
        """
        mode = stat.S_IMODE(self.path.stat().st_mode)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        written = 0
        try:
            with (
                os.fdopen(fd, "w", encoding=self.encoding, newline="") as out,
                self.path.open(encoding=self.encoding, newline="") as src,
            ):
                for line in _classify(src):
                    new = transform(line.raw, line.order)
                    if new is None:
                        continue
                    out.write(new)
                    written += 1
                out.flush()
                os.fsync(out.fileno())
            os.chmod(tmp_path, mode)
            tmp_path.replace(self.path)
        except BaseException:
            logger.exception("rewrite of %s failed; original left untouched", self.path)
            with contextlib.suppress(OSError):
                tmp_path.unlink()
            raise
        logger.debug("rewrote %s (%d lines)", self.path, written)
        return written


def _classify(lines: Iterable[str]) -> Iterator[StoredLine]:
    for lineno, raw in enumerate(lines):
        if lineno == 0 and is_header_shaped(raw):
            yield StoredLine(raw, None, header=True)
        else:
            yield StoredLine(raw, decode_line(raw))
