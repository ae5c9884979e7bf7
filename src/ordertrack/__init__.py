"""Order tracking on a flat comma-delimited text file.

Layout:
    orders.toml      # optional config: data file path, date format/years, text length
    orders.csv       # header line + one order per line, in append order

orders.csv line types:
    orderid,customername,productname,quantity,price,orderdate   # header (line 1, optional)
    42,John Doe,Widget X,5,12.34,01-01-2024                      # record
    anything else                                                # opaque, preserved on rewrite

Update and delete rewrite the whole file into a temp file in the same
directory and rename it over the original, so a failure mid-way never
leaves a half-written file.
"""

from ordertrack.config import OrderTrackConfig, init_config, load_config
from ordertrack.dates import DateValidator
from ordertrack.models import Order, OrderEdits, UpdateResult
from ordertrack.store import OrderStore, StoredLine

__all__ = [
    "DateValidator",
    "Order",
    "OrderEdits",
    "OrderStore",
    "OrderTrackConfig",
    "StoredLine",
    "UpdateResult",
    "init_config",
    "load_config",
]
