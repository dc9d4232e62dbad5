"""Kernel services: the write side.  Services flush; callers commit."""

from retail_kernel.services.base import BaseService
from retail_kernel.services.catalog_service import CatalogService
from retail_kernel.services.customer_service import CustomerService
from retail_kernel.services.expense_service import ExpenseService
from retail_kernel.services.order_service import OrderService
from retail_kernel.services.points_service import PointsService, TransferResult
from retail_kernel.services.status_service import StatusTransitionService

__all__ = [
    "BaseService",
    "CatalogService",
    "CustomerService",
    "ExpenseService",
    "OrderService",
    "PointsService",
    "StatusTransitionService",
    "TransferResult",
]
