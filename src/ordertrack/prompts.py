"""Line-oriented prompts with validation loops for the interactive menu.

Required readers loop until they get a valid value. Optional readers return
None for a blank answer ("keep") and also for an invalid one, after telling
the user the old value is kept. EOF on input raises click.Abort.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ordertrack.models import sanitize_text

if TYPE_CHECKING:
    from ordertrack.dates import DateValidator


def read_line(prompt: str) -> str:
    return str(click.prompt(prompt, default="", show_default=False)).strip()


def parse_int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def parse_float(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    # inf/nan would round-trip badly through "%.2f"
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value


def read_int(prompt: str, minimum: int | None = None) -> int:
    while True:
        value = parse_int(read_line(prompt))
        if value is not None and (minimum is None or value >= minimum):
            return value
        if minimum is None:
            click.echo("Invalid input. Please enter an integer.")
        else:
            click.echo(f"Invalid input. Please enter an integer >= {minimum}.")


def read_float(prompt: str, minimum: float | None = None) -> float:
    while True:
        value = parse_float(read_line(prompt))
        if value is not None and (minimum is None or value >= minimum):
            return value
        if minimum is None:
            click.echo("Invalid input. Please enter a number.")
        else:
            click.echo(f"Invalid input. Please enter a number >= {minimum:.2f}.")


def read_text(prompt: str, max_length: int | None = None) -> str:
    while True:
        try:
            return sanitize_text(read_line(prompt), max_length)
        except ValueError:
            click.echo("Input cannot be empty.")


def read_date(prompt: str, validator: DateValidator) -> str:
    while True:
        value = read_line(prompt)
        if validator.is_valid(value):
            return value
        click.echo(f"Invalid date. Use {validator.hint} and a real calendar date.")


def read_optional_int(prompt: str) -> int | None:
    text = read_line(prompt)
    if not text:
        return None
    value = parse_int(text)
    if value is None:
        click.echo("Not a valid integer. Keeping old value.")
    return value


def read_optional_float(prompt: str) -> float | None:
    text = read_line(prompt)
    if not text:
        return None
    value = parse_float(text)
    if value is None:
        click.echo("Not a valid number. Keeping old value.")
    return value


def read_optional_text(prompt: str) -> str | None:
    """Raw text or None; sanitizing happens when the edit is applied."""
    return read_line(prompt) or None


def read_optional_date(prompt: str, validator: DateValidator) -> str | None:
    text = read_line(prompt)
    if not text:
        return None
    if not validator.is_valid(text):
        click.echo("Invalid date. Keeping old value.")
        return None
    return text


def read_confirm(prompt: str) -> bool:
    return read_line(prompt)[:1] in ("Y", "y")


def read_choice(prompt: str, low: int, high: int) -> int:
    while True:
        value = parse_int(read_line(prompt))
        if value is not None and low <= value <= high:
            return value
        click.echo(f"Please enter a number between {low} and {high}.")
