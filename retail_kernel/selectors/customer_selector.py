"""
Customer query selector.

Lookup, free-text search and the inactive-customer report used for
re-engagement campaigns.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from retail_kernel.exceptions import CustomerNotFoundError
from retail_kernel.models.customer import Customer
from retail_kernel.models.order import Order
from retail_kernel.selectors.base import BaseSelector

DEFAULT_INACTIVE_DAYS = 60


@dataclass(frozen=True)
class CustomerInfo:
    """Data transfer object for a customer."""

    id: UUID
    name: str | None
    phone: str
    address: str | None
    instagram: str | None
    tags: str | None
    points: int
    created_at: datetime | None


@dataclass(frozen=True)
class InactiveCustomerInfo:
    customer: CustomerInfo
    last_order_at: datetime | None


def customer_to_info(customer: Customer) -> CustomerInfo:
    return CustomerInfo(
        id=customer.id,
        name=customer.name,
        phone=customer.phone,
        address=customer.address,
        instagram=customer.instagram,
        tags=customer.tags,
        points=customer.points,
        created_at=customer.created_at,
    )


class CustomerSelector(BaseSelector[Customer]):
    """
    Selector for customer queries.

    ``inactive_after_days`` is the window ``list_inactive`` uses when no
    explicit ``days`` is given (``retail_config.bridges.inactive_after_days``).
    """

    def __init__(
        self, session: Session, inactive_after_days: int = DEFAULT_INACTIVE_DAYS
    ):
        super().__init__(session)
        self.inactive_after_days = inactive_after_days

    def get_customer(self, customer_id: UUID) -> CustomerInfo:
        """
        Raises:
            CustomerNotFoundError: If the customer doesn't exist.
        """
        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))
        return customer_to_info(customer)

    def get_by_phone(self, phone: str) -> CustomerInfo | None:
        customer = self.session.execute(
            select(Customer).where(Customer.phone == phone.strip())
        ).scalar_one_or_none()
        return customer_to_info(customer) if customer is not None else None

    def list_customers(self) -> list[CustomerInfo]:
        rows = self.session.execute(
            select(Customer).order_by(Customer.created_at.desc(), Customer.id)
        ).scalars().all()
        return [customer_to_info(c) for c in rows]

    def search(self, text: str) -> list[CustomerInfo]:
        """Case-insensitive substring match on name, phone or instagram."""
        term = text.strip()
        if not term:
            return self.list_customers()
        stmt = (
            select(Customer)
            .where(
                or_(
                    Customer.name.icontains(term, autoescape=True),
                    Customer.phone.icontains(term, autoescape=True),
                    Customer.instagram.icontains(term, autoescape=True),
                )
            )
            .order_by(Customer.name, Customer.id)
        )
        return [customer_to_info(c) for c in self.session.execute(stmt).scalars()]

    def list_inactive(
        self, as_of: datetime, days: int | None = None
    ) -> list[InactiveCustomerInfo]:
        """
        Customers whose most recent order (or registration, if they never
        ordered) is older than ``days`` before ``as_of``.
        """
        if days is None:
            days = self.inactive_after_days
        cutoff = as_of - timedelta(days=days)
        last_order = (
            select(
                Order.customer_id.label("customer_id"),
                func.max(Order.created_at).label("last_order_at"),
            )
            .where(Order.customer_id.is_not(None))
            .group_by(Order.customer_id)
            .subquery()
        )
        stmt = (
            select(Customer, last_order.c.last_order_at)
            .outerjoin(last_order, last_order.c.customer_id == Customer.id)
            .where(
                func.coalesce(last_order.c.last_order_at, Customer.created_at)
                < cutoff
            )
            .order_by(Customer.name, Customer.id)
        )
        return [
            InactiveCustomerInfo(
                customer=customer_to_info(customer), last_order_at=last_at
            )
            for customer, last_at in self.session.execute(stmt).all()
        ]
