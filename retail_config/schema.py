"""
StoreConfig schema.

Typed, frozen view of a store configuration set.  YAML files are parsed
into these types by the loader; bridges turn them into kernel inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection and pool settings passed to ``init_engine_from_url``."""

    url: str
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 3600
    pool_pre_ping: bool = True

    def redacted_url(self) -> str:
        """URL with the password masked, for logs."""
        scheme, sep, rest = self.url.partition("://")
        if not sep or "@" not in rest:
            return self.url
        creds, at, host = rest.rpartition("@")
        user = creds.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"


# ---------------------------------------------------------------------------
# Business rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoyaltyConfig:
    """Points earned per full block of net sale value."""

    block_amount: Decimal = Decimal("1000")
    points_per_block: int = 10


@dataclass(frozen=True)
class InventoryConfig:
    default_low_stock_threshold: int = 5


@dataclass(frozen=True)
class CustomersConfig:
    inactive_after_days: int = 60


@dataclass(frozen=True)
class StoreConfig:
    """The complete store configuration returned by ``get_active_config``."""

    name: str
    database: DatabaseConfig
    loyalty: LoyaltyConfig = field(default_factory=LoyaltyConfig)
    inventory: InventoryConfig = field(default_factory=InventoryConfig)
    customers: CustomersConfig = field(default_factory=CustomersConfig)
