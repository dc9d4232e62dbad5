"""Domain models for the retail kernel."""

from retail_kernel.models.bundle import Bundle, BundleComponent
from retail_kernel.models.customer import Customer
from retail_kernel.models.expense import Expense, ExpenseType
from retail_kernel.models.order import Order, OrderLine, OrderLineComponent
from retail_kernel.models.product import Product

__all__ = [
    "Bundle",
    "BundleComponent",
    "Customer",
    "Expense",
    "ExpenseType",
    "Order",
    "OrderLine",
    "OrderLineComponent",
    "Product",
]
