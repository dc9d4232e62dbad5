"""
Configuration Loader (``retail_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen
``retail_config.schema`` dataclasses.  Callers use
``retail_config.get_active_config()``; this module is its tooling.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` with the offending key; there are no
  silent defaults for required fields (``store.name``, ``database.url``).
* Money values are read as ``Decimal`` from their string form, never
  through float.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from retail_config.schema import (
    CustomersConfig,
    DatabaseConfig,
    InventoryConfig,
    LoyaltyConfig,
    StoreConfig,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def _int(data: dict[str, Any], key: str, default: int, minimum: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"'{key}' must be >= {minimum}, got {value}")
    return value


def parse_decimal(value: Any, key: str) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"'{key}' is not a number: {value!r}") from None


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    url = data.get("url")
    if not url or not isinstance(url, str):
        raise ValueError("'database.url' is required")
    return DatabaseConfig(
        url=url,
        echo=bool(data.get("echo", False)),
        pool_size=_int(data, "pool_size", 10, 1),
        max_overflow=_int(data, "max_overflow", 20, 0),
        pool_timeout=_int(data, "pool_timeout", 30, 1),
        pool_recycle=_int(data, "pool_recycle", 3600, -1),
        pool_pre_ping=bool(data.get("pool_pre_ping", True)),
    )


def parse_loyalty(data: dict[str, Any]) -> LoyaltyConfig:
    block = parse_decimal(data.get("block_amount", "1000"), "loyalty.block_amount")
    if block <= 0:
        raise ValueError(f"'loyalty.block_amount' must be positive, got {block}")
    return LoyaltyConfig(
        block_amount=block,
        points_per_block=_int(data, "points_per_block", 10, 0),
    )


def parse_config(data: dict[str, Any]) -> StoreConfig:
    """Parse a StoreConfig from the top-level YAML mapping."""
    store = _section(data, "store")
    name = store.get("name")
    if not name:
        raise ValueError("'store.name' is required")

    inventory = _section(data, "inventory")
    customers = _section(data, "customers")
    return StoreConfig(
        name=str(name),
        database=parse_database(_section(data, "database")),
        loyalty=parse_loyalty(_section(data, "loyalty")),
        inventory=InventoryConfig(
            default_low_stock_threshold=_int(
                inventory, "default_low_stock_threshold", 5, 0
            ),
        ),
        customers=CustomersConfig(
            inactive_after_days=_int(customers, "inactive_after_days", 60, 1),
        ),
    )
