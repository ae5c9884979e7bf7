"""OrderTrackConfig: project-local config for the order file.

Default layout (relative to the directory holding orders.toml):

    orders.toml           # config (optional; defaults apply without it)
    orders.csv            # data file

orders.toml example:

    [store]
    path = "orders.csv"

    [dates]
    format = "DD-MM-YYYY"   # or "YYYY-MM-DD"
    min_year = 1999
    max_year = 2025

    [text]
    max_length = 49         # customer/product names are cut to this; 0 = no limit

ORDERTRACK_FILE in the environment overrides [store].path.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ordertrack.dates import DEFAULT_MAX_YEAR, DEFAULT_MIN_YEAR, DMY, DateValidator
from ordertrack.models import DEFAULT_MAX_TEXT_LENGTH

_CONFIG_FILENAME = "orders.toml"
_DEFAULT_DATA_FILE = "orders.csv"
_ENV_DATA_FILE = "ORDERTRACK_FILE"


@dataclass
class DatesConfig:
    format: str = DMY
    min_year: int = DEFAULT_MIN_YEAR
    max_year: int = DEFAULT_MAX_YEAR


@dataclass
class TextConfig:
    max_length: int = DEFAULT_MAX_TEXT_LENGTH   # 0 disables truncation


@dataclass
class OrderTrackConfig:
    """Resolved configuration for one order file."""

    root: Path                      # directory that contains orders.toml
    data_file: Path = field(default_factory=Path)
    dates: DatesConfig = field(default_factory=DatesConfig)
    text: TextConfig = field(default_factory=TextConfig)

    @property
    def config_path(self) -> Path:
        return self.root / _CONFIG_FILENAME

    @property
    def max_text_length(self) -> int | None:
        return self.text.max_length or None

    def date_validator(self) -> DateValidator:
        return DateValidator(self.dates.format, self.dates.min_year, self.dates.max_year)


def load_config(root: Path | str | None = None, data_file: Path | str | None = None) -> OrderTrackConfig:
    """Load orders.toml from root (or search upward from cwd if root is None).

    ``data_file`` (e.g. from --file) wins over the environment and the toml.
    """
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    store_section = raw.get("store", {})
    dates_section = raw.get("dates", {})
    text_section = raw.get("text", {})

    path_value = data_file or os.environ.get(_ENV_DATA_FILE) or store_section.get("path", _DEFAULT_DATA_FILE)
    resolved = Path(path_value).expanduser()
    if not resolved.is_absolute():
        # --file is relative to cwd; toml/env paths are relative to the project root
        resolved = (Path.cwd() if data_file else root_path) / resolved

    max_length = int(text_section.get("max_length", DEFAULT_MAX_TEXT_LENGTH))
    if max_length < 0:
        msg = f"[text] max_length must be >= 0, got {max_length}"
        raise ValueError(msg)

    cfg = OrderTrackConfig(
        root=root_path,
        data_file=resolved,
        dates=DatesConfig(
            format=str(dates_section.get("format", DMY)),
            min_year=int(dates_section.get("min_year", DEFAULT_MIN_YEAR)),
            max_year=int(dates_section.get("max_year", DEFAULT_MAX_YEAR)),
        ),
        text=TextConfig(max_length=max_length),
    )
    cfg.date_validator()  # fail early on a bad format / year range
    return cfg


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for orders.toml."""
    start = start.resolve()
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path, *, date_format: str = DMY) -> Path:
    """Write a default orders.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"orders.toml already exists at {config_path}"
        raise FileExistsError(msg)

    DateValidator(date_format)  # reject unknown formats before writing anything
    content = f"""\
[store]
path = "{_DEFAULT_DATA_FILE}"
# ORDERTRACK_FILE in the environment overrides this

[dates]
format = "{date_format}"   # "DD-MM-YYYY" or "YYYY-MM-DD"
min_year = {DEFAULT_MIN_YEAR}
max_year = {DEFAULT_MAX_YEAR}

[text]
max_length = {DEFAULT_MAX_TEXT_LENGTH}   # longer customer/product names are cut; 0 = no limit
"""
    root.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content)
    return config_path
