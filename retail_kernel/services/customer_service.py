"""
CustomerService -- write side of the customer directory.

Invariants enforced:
    - Phone numbers are unique (uq_customer_phone).  A duplicate raises
      DuplicatePhoneError; the insert runs in a savepoint so the caller's
      transaction stays usable.
    - Points are not editable here.  They change only through orders,
      status transitions and PointsService.transfer.
    - Deleting a customer keeps their orders, with the customer reference
      cleared and customer_name retained.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from retail_kernel.exceptions import (
    CustomerNotFoundError,
    DuplicatePhoneError,
    InvalidRequestError,
)
from retail_kernel.logging_config import get_logger
from retail_kernel.models.customer import Customer
from retail_kernel.selectors.customer_selector import CustomerInfo, customer_to_info
from retail_kernel.services.base import BaseService

logger = get_logger("services.customer")

_EDITABLE_CUSTOMER_FIELDS = frozenset({"name", "phone", "address", "instagram", "tags"})


def _phone(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError("phone is required")
    return value.strip()


class CustomerService(BaseService[Customer]):
    """Service for managing customers."""

    def create_customer(
        self,
        phone: str,
        name: str | None = None,
        *,
        address: str | None = None,
        instagram: str | None = None,
        tags: str | None = None,
    ) -> CustomerInfo:
        """
        Register a customer with a zero points balance.

        Raises:
            DuplicatePhoneError: If the phone number is already registered.
        """
        phone = _phone(phone)
        self._ensure_phone_free(phone)

        customer = Customer(
            name=name,
            phone=phone,
            address=address,
            instagram=instagram,
            tags=tags,
            points=0,
            created_at=self.clock.now(),
        )
        try:
            with self.session.begin_nested():
                self.session.add(customer)
                self.session.flush()
        except IntegrityError:
            # Concurrent registration of the same phone.
            raise DuplicatePhoneError(phone) from None

        logger.info("customer_created", extra={"customer_id": str(customer.id)})
        return customer_to_info(customer)

    def update_customer(self, customer_id: UUID, **changes: Any) -> CustomerInfo:
        unknown = set(changes) - _EDITABLE_CUSTOMER_FIELDS
        if unknown:
            raise InvalidRequestError(
                f"cannot update customer fields: {', '.join(sorted(unknown))}"
            )

        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))

        if "phone" in changes:
            changes["phone"] = _phone(changes["phone"])
            if changes["phone"] != customer.phone:
                self._ensure_phone_free(changes["phone"])

        for field_name, value in changes.items():
            setattr(customer, field_name, value)
        try:
            with self.session.begin_nested():
                self.session.flush()
        except IntegrityError:
            raise DuplicatePhoneError(changes["phone"]) from None

        logger.info(
            "customer_updated",
            extra={"customer_id": str(customer.id), "fields": sorted(changes)},
        )
        return customer_to_info(customer)

    def delete_customer(self, customer_id: UUID) -> None:
        customer = self.lock_row(Customer, customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))
        self.session.delete(customer)
        self.session.flush()
        logger.info("customer_deleted", extra={"customer_id": str(customer_id)})

    def _ensure_phone_free(self, phone: str) -> None:
        existing = self.session.execute(
            select(Customer.id).where(Customer.phone == phone)
        ).scalar_one_or_none()
        if existing is not None:
            raise DuplicatePhoneError(phone)
