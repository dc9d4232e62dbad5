"""
CatalogService -- write side of the product and bundle catalog.

Responsibility:
    Create and edit products, restock or correct on-hand stock, and
    maintain bundles.  Price edits only affect future orders because order
    lines keep their own snapshot.

Invariants enforced:
    - Stock writes go through a row lock, like order creation.
    - Stock is never set below zero; restock quantities are positive.
    - A bundle has at least one component, every component references an
      existing product, and component quantities are positive.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from retail_kernel.db.types import to_money
from retail_kernel.domain.clock import Clock
from retail_kernel.exceptions import (
    BundleNotFoundError,
    InvalidRequestError,
    ProductNotFoundError,
)
from retail_kernel.logging_config import get_logger
from retail_kernel.models.bundle import Bundle, BundleComponent
from retail_kernel.models.product import DEFAULT_LOW_STOCK_THRESHOLD, Product
from retail_kernel.selectors.catalog_selector import (
    BundleInfo,
    ProductInfo,
    bundle_to_info,
    product_to_info,
)
from retail_kernel.services.base import BaseService

logger = get_logger("services.catalog")

_ZERO = Decimal("0")

_EDITABLE_PRODUCT_FIELDS = frozenset({
    "name",
    "cost_price",
    "selling_price",
    "old_price",
    "supplier",
    "barcode",
    "expiry_date",
    "low_stock_threshold",
})
_MONEY_FIELDS = frozenset({"cost_price", "selling_price", "old_price"})


def _price(value: Any, what: str) -> Decimal:
    try:
        amount = to_money(value)
    except ValueError as exc:
        raise InvalidRequestError(f"{what}: {exc}") from None
    if amount < _ZERO:
        raise InvalidRequestError(f"{what} must not be negative, got {amount}")
    return amount


def _count(value: Any, what: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidRequestError(f"{what} must be an integer >= {minimum}, got {value!r}")
    return value


def _name(value: Any, what: str = "name") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(f"{what} is required")
    return value.strip()


class CatalogService(BaseService[Product]):
    """
    Service for product and bundle maintenance.

    ``default_low_stock_threshold`` applies to products created without an
    explicit threshold (``retail_config.bridges.low_stock_threshold``).
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        default_low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ):
        super().__init__(session, clock)
        self.default_low_stock_threshold = _count(
            default_low_stock_threshold, "default_low_stock_threshold", 0
        )

    # -- products ----------------------------------------------------------

    def create_product(
        self,
        name: str,
        cost_price: Decimal | int | str,
        selling_price: Decimal | int | str,
        stock: int = 0,
        *,
        old_price: Decimal | int | str | None = None,
        supplier: str | None = None,
        barcode: str | None = None,
        expiry_date: date | None = None,
        low_stock_threshold: int | None = None,
    ) -> ProductInfo:
        if low_stock_threshold is None:
            low_stock_threshold = self.default_low_stock_threshold
        product = Product(
            name=_name(name),
            cost_price=_price(cost_price, "cost_price"),
            selling_price=_price(selling_price, "selling_price"),
            old_price=_price(old_price, "old_price") if old_price is not None else None,
            stock=_count(stock, "stock", 0),
            supplier=supplier,
            barcode=barcode,
            expiry_date=expiry_date,
            low_stock_threshold=_count(low_stock_threshold, "low_stock_threshold", 0),
            created_at=self.clock.now(),
        )
        self.session.add(product)
        self.session.flush()

        logger.info(
            "product_created",
            extra={"product_id": str(product.id), "stock": product.stock},
        )
        return product_to_info(product)

    def update_product(self, product_id: UUID, **changes: Any) -> ProductInfo:
        """
        Edit product attributes.  Stock is not editable here; use
        ``restock`` or ``set_stock``.
        """
        unknown = set(changes) - _EDITABLE_PRODUCT_FIELDS
        if unknown:
            raise InvalidRequestError(
                f"cannot update product fields: {', '.join(sorted(unknown))}"
            )

        product = self.session.get(Product, product_id)
        if product is None:
            raise ProductNotFoundError(str(product_id))

        for field_name, value in changes.items():
            if field_name in _MONEY_FIELDS and value is not None:
                value = _price(value, field_name)
            elif field_name == "name":
                value = _name(value)
            elif field_name == "low_stock_threshold":
                value = _count(value, field_name, 0)
            setattr(product, field_name, value)
        self.session.flush()

        logger.info(
            "product_updated",
            extra={"product_id": str(product.id), "fields": sorted(changes)},
        )
        return product_to_info(product)

    def delete_product(self, product_id: UUID) -> None:
        """
        Delete a product.  Past order lines keep their snapshot with the
        product reference cleared.

        Raises:
            InvalidRequestError: If a bundle still contains the product.
        """
        product = self.lock_row(Product, product_id)
        if product is None:
            raise ProductNotFoundError(str(product_id))
        in_bundle = self.session.execute(
            select(BundleComponent.id)
            .where(BundleComponent.product_id == product_id)
            .limit(1)
        ).scalar_one_or_none()
        if in_bundle is not None:
            raise InvalidRequestError(
                f"product {product.name} is a component of a bundle"
            )
        self.session.delete(product)
        self.session.flush()
        logger.info("product_deleted", extra={"product_id": str(product_id)})

    def restock(self, product_id: UUID, quantity: int) -> ProductInfo:
        """Add ``quantity`` (> 0) units to on-hand stock."""
        _count(quantity, "quantity", 1)
        product = self.lock_row(Product, product_id)
        if product is None:
            raise ProductNotFoundError(str(product_id))
        product.stock += quantity
        self.session.flush()

        logger.info(
            "product_restocked",
            extra={
                "product_id": str(product.id),
                "quantity": quantity,
                "stock": product.stock,
            },
        )
        return product_to_info(product)

    def set_stock(self, product_id: UUID, stock: int) -> ProductInfo:
        """Overwrite on-hand stock after a physical count."""
        _count(stock, "stock", 0)
        product = self.lock_row(Product, product_id)
        if product is None:
            raise ProductNotFoundError(str(product_id))
        previous = product.stock
        product.stock = stock
        self.session.flush()

        logger.info(
            "product_stock_set",
            extra={
                "product_id": str(product.id),
                "previous_stock": previous,
                "stock": stock,
            },
        )
        return product_to_info(product)

    # -- bundles -----------------------------------------------------------

    def create_bundle(
        self,
        name: str,
        selling_price: Decimal | int | str,
        components: Iterable[tuple[UUID, int]],
    ) -> BundleInfo:
        """
        Create a bundle from (product_id, quantity) pairs.

        Raises:
            InvalidRequestError: No components or a non-positive quantity.
            ProductNotFoundError: A component product doesn't exist.
        """
        pairs = [(pid, _count(qty, "component quantity", 1)) for pid, qty in components]
        if not pairs:
            raise InvalidRequestError("a bundle needs at least one component")

        bundle = Bundle(
            name=_name(name),
            selling_price=_price(selling_price, "selling_price"),
            created_at=self.clock.now(),
        )
        for position, (product_id, quantity) in enumerate(pairs):
            product = self.session.get(Product, product_id)
            if product is None:
                raise ProductNotFoundError(str(product_id))
            bundle.components.append(
                BundleComponent(product=product, quantity=quantity, position=position)
            )
        self.session.add(bundle)
        self.session.flush()

        logger.info(
            "bundle_created",
            extra={"bundle_id": str(bundle.id), "components": len(pairs)},
        )
        return bundle_to_info(bundle)

    def delete_bundle(self, bundle_id: UUID) -> None:
        """Delete a bundle.  Past orders keep their line snapshots."""
        bundle = self.session.get(Bundle, bundle_id)
        if bundle is None:
            raise BundleNotFoundError(str(bundle_id))
        self.session.delete(bundle)
        self.session.flush()
        logger.info("bundle_deleted", extra={"bundle_id": str(bundle_id)})
