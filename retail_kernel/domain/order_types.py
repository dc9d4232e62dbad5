"""
Order enumerations shared by the pure domain and the ORM models.

Kept here, with no ORM imports, so that the pricing and status policies
stay pure and the models can reuse the same types for their columns.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status.

    Any status may move to any other.  The effect of a move depends only
    on the stock category of the old and new status.
    """

    NEW = "NEW"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"

    @property
    def is_stock_in(self) -> bool:
        """CANCELLED and RETURNED hold no stock: the goods are back on the shelf."""
        return self in (OrderStatus.CANCELLED, OrderStatus.RETURNED)

    @property
    def is_stock_out(self) -> bool:
        return not self.is_stock_in


class DiscountType(str, Enum):
    """How the order-level discount figure is interpreted."""

    AMOUNT = "AMOUNT"
    PERCENTAGE = "PERCENTAGE"


class DeliveryPayer(str, Enum):
    """Who bears the delivery cost.  Only SHOP-paid delivery reduces profit."""

    CUSTOMER = "CUSTOMER"
    SHOP = "SHOP"
