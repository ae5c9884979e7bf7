"""ordertrack CLI — order records in a flat comma-delimited file.

Commands:
    ordertrack init                     create orders.toml + the data file
    ordertrack add ID CUST PROD Q P D   append an order (id must be unused)
    ordertrack show ID                  first order with that id
    ordertrack search NEEDLE            product name substring, any case
    ordertrack list                     every order in file order
    ordertrack update ID [--field ...]  edit the first order with that id
    ordertrack delete ID [--index N]    remove one order among same-id matches
    ordertrack menu                     interactive menu
"""

from __future__ import annotations

import contextlib
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING

import click

from ordertrack import prompts
from ordertrack.config import OrderTrackConfig, init_config, load_config
from ordertrack.dates import DMY, YMD
from ordertrack.models import (
    DECLINED,
    DELETED,
    DUPLICATE,
    NOT_FOUND,
    OUT_OF_RANGE,
    Order,
    OrderEdits,
    sanitize_text,
)
from ordertrack.mutate import add_order, delete_selected, update_by_id
from ordertrack.query import find_all_by_id, find_by_id, find_by_product_substring, list_orders
from ordertrack.store import OrderStore

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("ordertrack.cli")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg(ctx: click.Context) -> OrderTrackConfig:
    try:
        return load_config(ctx.obj["root"], data_file=ctx.obj["file"])
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc


def _open_store(ctx: click.Context) -> tuple[OrderTrackConfig, OrderStore]:
    cfg = _load_cfg(ctx)
    return cfg, OrderStore(cfg.data_file)


@contextlib.contextmanager
def _store_errors() -> Iterator[None]:
    """Turn filesystem and encoding failures into a clean CLI error."""
    try:
        yield
    except (OSError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_rejected(rejected: tuple[str, ...]) -> None:
    for name in rejected:
        click.echo(f"Invalid {name.replace('_', ' ')}. Keeping old value.", err=True)


def _echo_matches(order_id: int, matches: list[Order]) -> None:
    click.echo(f"Found {len(matches)} record(s) with OrderID {order_id}:")
    for i, order in enumerate(matches, start=1):
        click.echo(f"  [{i}] {order.display()}")


def _check_price(value: float) -> float:
    if not math.isfinite(value):
        raise click.BadParameter("price must be a finite number", param_hint="PRICE")
    return value


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="ordertrack")
@click.option("--file", "data_file", default=None, help="Data file (overrides orders.toml / ORDERTRACK_FILE)")
@click.option("--root", default=None, help="Project root (default: search upward from cwd)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging to stderr")
@click.pass_context
def cli(ctx: click.Context, data_file: str | None, root: str | None, verbose: bool) -> None:
    """ordertrack — order records in a delimited text file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    ctx.ensure_object(dict)
    ctx.obj["file"] = data_file
    ctx.obj["root"] = root


# ---------------------------------------------------------------------------
# ordertrack init
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--date-format", type=click.Choice([DMY, YMD]), default=DMY, show_default=True
)
@click.pass_context
def init(ctx: click.Context, date_format: str) -> None:
    """Create orders.toml and the data file (with header) in the project root."""
    root_path = Path(ctx.obj["root"] or ".").resolve()
    try:
        config_path = init_config(root_path, date_format=date_format)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("orders.toml already exists — skipping config")

    ctx.obj["root"] = str(root_path)
    cfg, store = _open_store(ctx)
    with _store_errors():
        store.ensure_initialized()
    click.echo(f"Data file : {cfg.data_file}")
    click.echo(f"Dates     : {cfg.date_validator().hint}")


# ---------------------------------------------------------------------------
# ordertrack add
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("order_id", type=int)
@click.argument("customer")
@click.argument("product")
@click.argument("quantity", type=click.IntRange(min=0))
@click.argument("price", type=click.FloatRange(min=0.0))
@click.argument("order_date")
@click.pass_context
def add(
    ctx: click.Context,
    order_id: int,
    customer: str,
    product: str,
    quantity: int,
    price: float,
    order_date: str,
) -> None:
    """Append an order. The id must not be in use."""
    cfg, store = _open_store(ctx)
    validator = cfg.date_validator()
    if not validator.is_valid(order_date):
        raise click.BadParameter(f"{order_date!r} is not a valid date ({validator.hint})", param_hint="ORDER_DATE")
    try:
        customer = sanitize_text(customer, cfg.max_text_length)
        product = sanitize_text(product, cfg.max_text_length)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    order = Order(order_id, customer, product, quantity, _check_price(price), order_date.strip())
    with _store_errors():
        outcome = add_order(store, order)
    if outcome == DUPLICATE:
        raise click.ClickException(f"Order ID {order_id} already exists.")
    click.echo(f"Added: {order.display()}")


# ---------------------------------------------------------------------------
# ordertrack show / search / list
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("order_id", type=int)
@click.pass_context
def show(ctx: click.Context, order_id: int) -> None:
    """Show the first order with ORDER_ID."""
    _, store = _open_store(ctx)
    with _store_errors():
        order = find_by_id(store, order_id)
    if order is None:
        raise click.ClickException(f"OrderID {order_id} not found.")
    click.echo(f"Found: {order.display()}")


@cli.command()
@click.argument("needle")
@click.pass_context
def search(ctx: click.Context, needle: str) -> None:
    """Find orders whose product name contains NEEDLE (case-insensitive)."""
    _, store = _open_store(ctx)
    with _store_errors():
        matches = find_by_product_substring(store, needle)
    if not matches:
        click.echo(f'No orders found for product containing "{needle}".')
        return
    click.echo(f'Matches for "{needle}":')
    for order in matches:
        click.echo(order.display())


@cli.command("list")
@click.pass_context
def list_cmd(ctx: click.Context) -> None:
    """List every order in file order."""
    _, store = _open_store(ctx)
    with _store_errors():
        orders = list_orders(store)
    if not orders:
        click.echo("No orders.")
        return
    for order in orders:
        click.echo(order.display())


# ---------------------------------------------------------------------------
# ordertrack update / delete
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("order_id", type=int)
@click.option("--customer", default=None, help="New customer name")
@click.option("--product", default=None, help="New product name")
@click.option("--quantity", type=int, default=None, help="New quantity (>= 0)")
@click.option("--price", type=float, default=None, help="New price (>= 0)")
@click.option("--date", "order_date", default=None, help="New order date")
@click.pass_context
def update(
    ctx: click.Context,
    order_id: int,
    customer: str | None,
    product: str | None,
    quantity: int | None,
    price: float | None,
    order_date: str | None,
) -> None:
    """Edit the first order with ORDER_ID. Invalid edits are skipped."""
    edits = OrderEdits(customer, product, quantity, price, order_date)
    if edits.is_empty():
        raise click.UsageError("Nothing to update: give at least one of --customer/--product/--quantity/--price/--date")
    if price is not None and not math.isfinite(price):
        raise click.BadParameter("price must be a finite number", param_hint="--price")

    cfg, store = _open_store(ctx)
    with _store_errors():
        result = update_by_id(store, order_id, edits, cfg.date_validator(), cfg.max_text_length)
    if result.status == NOT_FOUND or result.order is None:
        raise click.ClickException(f"OrderID {order_id} not found. No changes made.")
    _echo_rejected(result.rejected)
    click.echo(f"Order {order_id} updated successfully.")
    click.echo(f"Now: {result.order.display()}")


@cli.command()
@click.argument("order_id", type=int)
@click.option("--index", "ordinal", type=int, default=None, help="Which match to delete (1-based)")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx: click.Context, order_id: int, ordinal: int | None, yes: bool) -> None:
    """Delete one order with ORDER_ID, choosing among duplicates."""
    _, store = _open_store(ctx)
    with _store_errors():
        matches = find_all_by_id(store, order_id)
    if not matches:
        raise click.ClickException(f"OrderID {order_id} not found. Nothing to delete.")

    _echo_matches(order_id, matches)
    if ordinal is None:
        ordinal = 1
        if len(matches) > 1:
            ordinal = click.prompt(
                f"Choose which one to delete [1..{len(matches)}]",
                type=click.IntRange(1, len(matches)),
            )
    elif not 1 <= ordinal <= len(matches):
        raise click.BadParameter(f"choose a number between 1 and {len(matches)}", param_hint="--index")
    confirmed = yes or click.confirm("Confirm delete?", default=False)

    with _store_errors():
        outcome = delete_selected(store, order_id, ordinal, confirmed=confirmed)
    if outcome == OUT_OF_RANGE:
        raise click.ClickException(f"Choose a number between 1 and {len(matches)}.")
    if outcome == DECLINED:
        click.echo("Canceled. No changes made.")
        return
    if outcome == NOT_FOUND:
        raise click.ClickException(f"OrderID {order_id} not found. Nothing to delete.")
    click.echo(f"Deleted record [{ordinal}] for OrderID {order_id} successfully.")


# ---------------------------------------------------------------------------
# ordertrack menu
# ---------------------------------------------------------------------------


def _menu_add(cfg: OrderTrackConfig, store: OrderStore) -> None:
    store.ensure_initialized()
    while True:
        order_id = prompts.read_int("Enter Order ID")
        if not store.exists(order_id):
            break
        click.echo(f"Order ID {order_id} already exists. Try another.")

    validator = cfg.date_validator()
    order = Order(
        order_id=order_id,
        customer_name=prompts.read_text("Customer name", cfg.max_text_length),
        product_name=prompts.read_text("Product name", cfg.max_text_length),
        quantity=prompts.read_int("Quantity (>=0)", minimum=0),
        price=prompts.read_float("Price (>=0)", minimum=0.0),
        order_date=prompts.read_date(f"Order date ({validator.fmt})", validator),
    )
    store.append(order)
    click.echo(f"Added: {order.display()}")


def _menu_search_id(store: OrderStore) -> None:
    order_id = prompts.read_int("Enter Order ID to search")
    order = find_by_id(store, order_id)
    if order is None:
        click.echo(f"OrderID {order_id} not found.")
    else:
        click.echo(f"Found: {order.display()}")


def _menu_search_product(cfg: OrderTrackConfig, store: OrderStore) -> None:
    needle = prompts.read_text("Enter product name (substring, case-insensitive)", cfg.max_text_length)
    matches = find_by_product_substring(store, needle)
    if not matches:
        click.echo(f'No orders found for product containing "{needle}".')
        return
    click.echo(f'Matches for "{needle}":')
    for order in matches:
        click.echo(order.display())


def _menu_search(cfg: OrderTrackConfig, store: OrderStore) -> None:
    while True:
        click.echo("\n-- Search Menu --")
        click.echo("[1] By Order ID")
        click.echo("[2] By Product Name")
        click.echo("[3] Back")
        choice = prompts.read_choice("Choose", 1, 3)
        if choice == 1:
            _menu_search_id(store)
        elif choice == 2:
            _menu_search_product(cfg, store)
        else:
            return


def _menu_update(cfg: OrderTrackConfig, store: OrderStore) -> None:
    order_id = prompts.read_int("Enter Order ID to update")
    current = find_by_id(store, order_id)
    if current is None:
        click.echo(f"OrderID {order_id} not found. No changes made.")
        return
    click.echo(f"Current: {current.display()}")

    validator = cfg.date_validator()
    edits = OrderEdits(
        customer_name=prompts.read_optional_text("New customer name (leave blank to keep)"),
        product_name=prompts.read_optional_text("New product name (leave blank to keep)"),
        quantity=prompts.read_optional_int("New quantity (leave blank to keep)"),
        price=prompts.read_optional_float("New price (leave blank to keep)"),
        order_date=prompts.read_optional_date(
            f"New order date {validator.fmt} (leave blank to keep)", validator
        ),
    )
    result = update_by_id(store, order_id, edits, validator, cfg.max_text_length)
    if result.status == NOT_FOUND:
        click.echo(f"OrderID {order_id} not found. No changes made.")
        return
    _echo_rejected(result.rejected)
    click.echo(f"Order {order_id} updated successfully.")


def _menu_delete(store: OrderStore) -> None:
    order_id = prompts.read_int("Enter Order ID to delete")
    matches = find_all_by_id(store, order_id)
    if not matches:
        click.echo(f"OrderID {order_id} not found. Nothing to delete.")
        return

    _echo_matches(order_id, matches)
    ordinal = 1
    if len(matches) > 1:
        ordinal = prompts.read_choice(f"Choose which one to delete [1..{len(matches)}]", 1, len(matches))
    confirmed = prompts.read_confirm("Confirm delete? (Y/N)")

    outcome = delete_selected(store, order_id, ordinal, confirmed=confirmed)
    if outcome == DELETED:
        click.echo(f"Deleted record [{ordinal}] for OrderID {order_id} successfully.")
    elif outcome == DECLINED:
        click.echo("Canceled. No changes made.")
    else:
        click.echo(f"Nothing deleted ({outcome}).")


@cli.command()
@click.pass_context
def menu(ctx: click.Context) -> None:
    """Interactive add/search/update/delete menu."""
    cfg, store = _open_store(ctx)
    with _store_errors():
        store.ensure_initialized()

    actions = {
        1: lambda: _menu_add(cfg, store),
        2: lambda: _menu_search(cfg, store),
        3: lambda: _menu_update(cfg, store),
        4: lambda: _menu_delete(store),
    }
    try:
        while True:
            click.echo("\n==== Orders ====")
            click.echo("[1] Add order")
            click.echo("[2] Search")
            click.echo("[3] Update by ID")
            click.echo("[4] Delete by ID")
            click.echo("[5] Exit")
            choice = prompts.read_choice("Choose", 1, 5)
            if choice == 5:
                break
            try:
                actions[choice]()
            except (OSError, ValueError) as exc:
                logger.debug("menu action %d failed", choice, exc_info=True)
                click.echo(f"Error: {exc}", err=True)
    except click.Abort:
        click.echo()
    click.echo("End of program")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
