"""Read-only query selectors.  Selectors return frozen DTOs, never ORM rows."""

from retail_kernel.selectors.base import BaseSelector
from retail_kernel.selectors.catalog_selector import (
    BundleComponentInfo,
    BundleInfo,
    CatalogSelector,
    ProductInfo,
)
from retail_kernel.selectors.customer_selector import (
    CustomerInfo,
    CustomerSelector,
    InactiveCustomerInfo,
)
from retail_kernel.selectors.expense_selector import ExpenseInfo, ExpenseSelector
from retail_kernel.selectors.order_selector import (
    OrderInfo,
    OrderLineComponentInfo,
    OrderLineInfo,
    OrderSelector,
)

__all__ = [
    "BaseSelector",
    "BundleComponentInfo",
    "BundleInfo",
    "CatalogSelector",
    "CustomerInfo",
    "CustomerSelector",
    "ExpenseInfo",
    "ExpenseSelector",
    "InactiveCustomerInfo",
    "OrderInfo",
    "OrderLineComponentInfo",
    "OrderLineInfo",
    "OrderSelector",
    "ProductInfo",
]
