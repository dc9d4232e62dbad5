"""
Config -> Kernel Bridges.

Functions that convert a StoreConfig into kernel inputs.  They live in
retail_config because the kernel must never import retail_config.

Usage:
    from retail_config import get_active_config
    from retail_config.bridges import init_engine, loyalty_policy, low_stock_threshold

    config = get_active_config()
    init_engine(config)
    service = StatusTransitionService(session, loyalty_policy(config))
    catalog = CatalogService(
        session, default_low_stock_threshold=low_stock_threshold(config)
    )
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from retail_config.schema import StoreConfig
from retail_kernel.db.engine import init_engine_from_url
from retail_kernel.domain.transitions import LoyaltyPolicy


def loyalty_policy(config: StoreConfig) -> LoyaltyPolicy:
    return LoyaltyPolicy(
        block_amount=config.loyalty.block_amount,
        points_per_block=config.loyalty.points_per_block,
    )


def init_engine(config: StoreConfig) -> Engine:
    """Initialize the kernel's global engine from the database section."""
    db = config.database
    return init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_pre_ping=db.pool_pre_ping,
        pool_timeout=db.pool_timeout,
        pool_recycle=db.pool_recycle,
    )


def low_stock_threshold(config: StoreConfig) -> int:
    """Default threshold for ``CatalogService(default_low_stock_threshold=...)``."""
    return config.inventory.default_low_stock_threshold


def inactive_after_days(config: StoreConfig) -> int:
    """Window for ``CustomerSelector(inactive_after_days=...)``."""
    return config.customers.inactive_after_days
