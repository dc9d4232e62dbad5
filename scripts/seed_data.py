#!/usr/bin/env python3
"""
Seed the database with a small catalog, customers and orders.

Drops all tables, recreates them, then creates products, a bundle, two
customers, a few orders walked through their lifecycle, and two expenses.
Finishes with a low-stock and inactive-customer summary.

The database comes from retail_config (set DATABASE_URL to override).

Usage:
    python3 scripts/seed_data.py
    DATABASE_URL=sqlite:///seed.db python3 scripts/seed_data.py
"""

import logging
import sys
from datetime import UTC, date, datetime
from decimal import Decimal
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def main() -> int:
    from sqlalchemy.exc import SQLAlchemyError

    from retail_config import get_active_config
    from retail_config.bridges import (
        inactive_after_days,
        init_engine,
        loyalty_policy,
        low_stock_threshold,
    )
    from retail_kernel.db.engine import create_tables, drop_tables, session_scope
    from retail_kernel.domain.clock import DeterministicClock
    from retail_kernel.domain.order_types import OrderStatus
    from retail_kernel.domain.requests import BundleLine, OrderRequest, ProductLine
    from retail_kernel.logging_config import configure_logging
    from retail_kernel.selectors.catalog_selector import CatalogSelector
    from retail_kernel.selectors.customer_selector import CustomerSelector
    from retail_kernel.services.catalog_service import CatalogService
    from retail_kernel.services.customer_service import CustomerService
    from retail_kernel.services.expense_service import ExpenseService
    from retail_kernel.services.order_service import OrderService
    from retail_kernel.services.status_service import StatusTransitionService

    configure_logging(level=logging.WARNING)
    config = get_active_config()

    # -----------------------------------------------------------------
    # 1. Connect + reset
    # -----------------------------------------------------------------
    print()
    print(f"  [1/4] Connecting to {config.database.redacted_url()}...")
    try:
        init_engine(config)
        drop_tables()
        create_tables()
    except SQLAlchemyError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    clock = DeterministicClock(datetime(2025, 6, 15, 12, 0, 0, tzinfo=UTC))

    # -----------------------------------------------------------------
    # 2. Catalog + customers
    # -----------------------------------------------------------------
    print("  [2/4] Creating catalog and customers...")
    with session_scope() as session:
        catalog = CatalogService(
            session, clock, default_low_stock_threshold=low_stock_threshold(config)
        )
        soap = catalog.create_product("Olive Soap", "300", "600", 40)
        cream = catalog.create_product("Hand Cream", "1200", "2500", 15)
        oil = catalog.create_product("Argan Oil", "2000", "4500", 4)
        gift = catalog.create_bundle(
            "Gift Box", "5000", [(soap.id, 2), (cream.id, 1)]
        )

        customers = CustomerService(session, clock)
        amina = customers.create_customer(
            "0550000001", "Amina", instagram="@amina.shop"
        )
        customers.create_customer("0550000002", "Karim")

    # -----------------------------------------------------------------
    # 3. Orders through their lifecycle
    # -----------------------------------------------------------------
    print("  [3/4] Creating orders...")
    with session_scope() as session:
        orders = OrderService(session, clock)
        transitions = StatusTransitionService(session, loyalty_policy(config), clock)

        first = orders.create_order(
            OrderRequest(
                lines=(ProductLine(soap.id, 3), BundleLine(gift.id, 2)),
                delivery_cost=Decimal("400"),
                customer_id=amina.id,
                order_source="instagram",
            )
        )
        transitions.change_status(first.id, OrderStatus.SHIPPED)
        clock.advance(3600)
        transitions.change_status(first.id, OrderStatus.COMPLETED)

        second = orders.create_order(
            OrderRequest(
                lines=(ProductLine(oil.id, 1), ProductLine(soap.id, 1, is_free=True)),
                discount=Decimal("10"),
                discount_type="PERCENTAGE",
                delivery_cost=Decimal("300"),
                delivery_paid_by="SHOP",
                customer_name="Walk-in",
            )
        )
        transitions.change_status(second.id, OrderStatus.CANCELLED)

        expenses = ExpenseService(session, clock)
        expenses.record_expense("ADS", "3000", date(2025, 6, 1), "June campaign")
        expenses.record_expense("PACKAGING", "800", date(2025, 6, 10))

    # -----------------------------------------------------------------
    # 4. Summary
    # -----------------------------------------------------------------
    print("  [4/4] Summary")
    with session_scope() as session:
        amina_now = CustomerSelector(session).get_customer(amina.id)
        print(f"        {amina_now.name}: {amina_now.points} points")
        for product in CatalogSelector(session).list_low_stock():
            print(f"        low stock: {product.name} ({product.stock} left)")
        inactive = CustomerSelector(
            session, inactive_after_days=inactive_after_days(config)
        ).list_inactive(clock.now())
        print(f"        inactive customers: {len(inactive)}")

    print()
    print("  Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
