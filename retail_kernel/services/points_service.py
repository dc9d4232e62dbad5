"""
PointsService -- move loyalty points between two customers.

Invariants enforced:
    - Conservation: the sender loses exactly what the recipient gains.
    - No balance goes negative.
    - Both customer rows are locked in ascending id order, so concurrent
      transfers in opposite directions cannot deadlock.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from retail_kernel.exceptions import (
    CustomerNotFoundError,
    InsufficientPointsError,
    InvalidRequestError,
)
from retail_kernel.logging_config import get_logger
from retail_kernel.models.customer import Customer
from retail_kernel.selectors.customer_selector import CustomerInfo, customer_to_info
from retail_kernel.services.base import BaseService

logger = get_logger("services.points")


@dataclass(frozen=True)
class TransferResult:
    sender: CustomerInfo
    recipient: CustomerInfo
    amount: int


def _customer_id(value: UUID | str | None, what: str) -> UUID:
    if value is None or value == "":
        raise InvalidRequestError(f"{what} is required")
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidRequestError(f"{what} is not a valid id: {value!r}") from None


class PointsService(BaseService[Customer]):
    """Service for loyalty point transfers."""

    def transfer(
        self,
        sender_id: UUID | str,
        recipient_id: UUID | str,
        amount: int,
    ) -> TransferResult:
        """
        Transfer ``amount`` points from sender to recipient atomically.

        Raises:
            InvalidRequestError: Missing ids, same customer, or amount < 1.
            CustomerNotFoundError: Sender or recipient does not exist.
            InsufficientPointsError: Sender balance is below ``amount``.
        """
        sender_key = _customer_id(sender_id, "sender_id")
        recipient_key = _customer_id(recipient_id, "recipient_id")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
            raise InvalidRequestError(
                f"transfer amount must be a positive integer, got {amount!r}"
            )
        if sender_key == recipient_key:
            raise InvalidRequestError("cannot transfer points to the same customer")

        customers = self.lock_rows(Customer, [sender_key, recipient_key])
        sender = customers.get(sender_key)
        if sender is None:
            raise CustomerNotFoundError(str(sender_key))
        if sender.points < amount:
            raise InsufficientPointsError(
                customer_id=str(sender.id),
                required=amount,
                available=sender.points,
            )
        recipient = customers.get(recipient_key)
        if recipient is None:
            raise CustomerNotFoundError(str(recipient_key))

        sender.points -= amount
        recipient.points += amount
        self.session.flush()

        logger.info(
            "points_transferred",
            extra={
                "sender_id": str(sender.id),
                "recipient_id": str(recipient.id),
                "amount": amount,
            },
        )
        return TransferResult(
            sender=customer_to_info(sender),
            recipient=customer_to_info(recipient),
            amount=amount,
        )
