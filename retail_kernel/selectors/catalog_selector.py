"""
Catalog query selector.

Read-only access to products and bundles, including the low-stock
report.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from retail_kernel.exceptions import BundleNotFoundError, ProductNotFoundError
from retail_kernel.models.bundle import Bundle
from retail_kernel.models.product import Product
from retail_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class ProductInfo:
    """Data transfer object for a catalog product."""

    id: UUID
    name: str
    cost_price: Decimal
    selling_price: Decimal
    old_price: Decimal | None
    stock: int
    supplier: str | None
    barcode: str | None
    expiry_date: date | None
    low_stock_threshold: int

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    @property
    def unit_margin(self) -> Decimal:
        return self.selling_price - self.cost_price


@dataclass(frozen=True)
class BundleComponentInfo:
    product_id: UUID
    product_name: str
    quantity: int


@dataclass(frozen=True)
class BundleInfo:
    """Data transfer object for a bundle and its component quantities."""

    id: UUID
    name: str
    selling_price: Decimal
    unit_cost: Decimal
    components: tuple[BundleComponentInfo, ...]


def product_to_info(product: Product) -> ProductInfo:
    return ProductInfo(
        id=product.id,
        name=product.name,
        cost_price=product.cost_price,
        selling_price=product.selling_price,
        old_price=product.old_price,
        stock=product.stock,
        supplier=product.supplier,
        barcode=product.barcode,
        expiry_date=product.expiry_date,
        low_stock_threshold=product.low_stock_threshold,
    )


def bundle_to_info(bundle: Bundle) -> BundleInfo:
    return BundleInfo(
        id=bundle.id,
        name=bundle.name,
        selling_price=bundle.selling_price,
        unit_cost=bundle.unit_cost,
        components=tuple(
            BundleComponentInfo(
                product_id=c.product_id,
                product_name=c.product.name,
                quantity=c.quantity,
            )
            for c in bundle.components
        ),
    )


class CatalogSelector(BaseSelector[Product]):
    """Selector for product and bundle queries."""

    def get_product(self, product_id: UUID) -> ProductInfo:
        product = self.session.get(Product, product_id)
        if product is None:
            raise ProductNotFoundError(str(product_id))
        return product_to_info(product)

    def list_products(self) -> list[ProductInfo]:
        rows = self.session.execute(
            select(Product).order_by(Product.name, Product.id)
        ).scalars().all()
        return [product_to_info(p) for p in rows]

    def list_low_stock(self) -> list[ProductInfo]:
        """Products at or below their own low-stock threshold, emptiest first."""
        rows = self.session.execute(
            select(Product)
            .where(Product.stock <= Product.low_stock_threshold)
            .order_by(Product.stock, Product.name)
        ).scalars().all()
        return [product_to_info(p) for p in rows]

    def get_bundle(self, bundle_id: UUID) -> BundleInfo:
        bundle = self.session.get(Bundle, bundle_id)
        if bundle is None:
            raise BundleNotFoundError(str(bundle_id))
        return bundle_to_info(bundle)

    def list_bundles(self) -> list[BundleInfo]:
        rows = self.session.execute(
            select(Bundle).order_by(Bundle.name, Bundle.id)
        ).scalars().all()
        return [bundle_to_info(b) for b in rows]
