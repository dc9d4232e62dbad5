"""
retail_config -- single public entrypoint for store configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``StoreConfig``.

Architecture position:
    Configuration -- YAML-driven settings.  This package sits above
    ``retail_kernel``.  The kernel MUST NEVER import from
    ``retail_config``; ``retail_config.bridges`` translates the config
    into kernel inputs.

Resolution order:
    1. The ``path`` argument, if given.
    2. The ``RETAIL_CONFIG_PATH`` environment variable.
    3. ``retail_config/sets/default.yaml``.
    ``DATABASE_URL``, when set, overrides ``database.url``.

Failure modes:
    - ``FileNotFoundError`` -- the selected file does not exist.
    - ``ValueError`` -- a required key is missing or a value is invalid.

Audit relevance:
    Every successful call emits a ``RETAIL_CONFIG_TRACE`` log entry with
    the source path and the effective business rules (password redacted).
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path

from retail_config.loader import load_yaml_file, parse_config
from retail_config.schema import (
    CustomersConfig,
    DatabaseConfig,
    InventoryConfig,
    LoyaltyConfig,
    StoreConfig,
)

_logger = logging.getLogger("retail_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "RETAIL_CONFIG_PATH"
DATABASE_URL_ENV = "DATABASE_URL"


def get_active_config(path: Path | str | None = None) -> StoreConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: Explicit YAML file.  Overrides ``RETAIL_CONFIG_PATH``.

    Returns:
        StoreConfig, with ``DATABASE_URL`` applied when set.
    """
    source = Path(path or os.environ.get(CONFIG_PATH_ENV) or _DEFAULT_CONFIG_PATH)
    config = parse_config(load_yaml_file(source))

    override = os.environ.get(DATABASE_URL_ENV)
    if override:
        config = replace(config, database=replace(config.database, url=override))

    _logger.info(
        "RETAIL_CONFIG_TRACE",
        extra={
            "trace_type": "RETAIL_CONFIG_TRACE",
            "config_source": str(source),
            "store_name": config.name,
            "database_url": config.database.redacted_url(),
            "database_url_overridden": bool(override),
            "loyalty_block_amount": str(config.loyalty.block_amount),
            "loyalty_points_per_block": config.loyalty.points_per_block,
        },
    )
    return config


__all__ = [
    "CustomersConfig",
    "DatabaseConfig",
    "InventoryConfig",
    "LoyaltyConfig",
    "StoreConfig",
    "get_active_config",
]
