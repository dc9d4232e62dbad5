"""Tests for PointsService.transfer."""

from uuid import uuid4

import pytest

from retail_kernel.exceptions import (
    CustomerNotFoundError,
    InsufficientPointsError,
    InvalidRequestError,
)


@pytest.fixture
def friend(customer_service):
    return customer_service.create_customer("0550000002", "Karim")


class TestTransfer:

    def test_transfer_moves_points(
        self, points_service, customer, friend, set_points, points_of
    ):
        set_points(customer.id, 200)

        result = points_service.transfer(customer.id, friend.id, 50)

        assert result.amount == 50
        assert result.sender.points == 150
        assert result.recipient.points == 50
        assert points_of(customer.id) == 150
        assert points_of(friend.id) == 50

    def test_whole_balance_can_be_sent(
        self, points_service, customer, friend, set_points, points_of
    ):
        set_points(customer.id, 30)
        points_service.transfer(str(customer.id), str(friend.id), 30)
        assert points_of(customer.id) == 0
        assert points_of(friend.id) == 30

    def test_insufficient_balance(
        self, points_service, customer, friend, set_points, points_of
    ):
        set_points(customer.id, 10)

        with pytest.raises(InsufficientPointsError) as exc_info:
            points_service.transfer(customer.id, friend.id, 11)

        assert exc_info.value.required == 11
        assert exc_info.value.available == 10
        assert points_of(customer.id) == 10
        assert points_of(friend.id) == 0

    def test_missing_sender(self, points_service, friend):
        with pytest.raises(CustomerNotFoundError):
            points_service.transfer(uuid4(), friend.id, 1)

    def test_missing_recipient(self, points_service, customer, set_points, points_of):
        set_points(customer.id, 10)
        with pytest.raises(CustomerNotFoundError):
            points_service.transfer(customer.id, uuid4(), 5)
        assert points_of(customer.id) == 10

    def test_same_customer(self, points_service, customer):
        with pytest.raises(InvalidRequestError):
            points_service.transfer(customer.id, customer.id, 1)

    @pytest.mark.parametrize("amount", [0, -5, 1.5, True])
    def test_bad_amount(self, points_service, customer, friend, amount):
        with pytest.raises(InvalidRequestError):
            points_service.transfer(customer.id, friend.id, amount)

    @pytest.mark.parametrize("missing", [None, ""])
    def test_missing_ids(self, points_service, customer, missing):
        with pytest.raises(InvalidRequestError):
            points_service.transfer(missing, customer.id, 1)
        with pytest.raises(InvalidRequestError):
            points_service.transfer(customer.id, missing, 1)

    def test_transfer_logged(
        self, points_service, customer, friend, set_points, captured_logs
    ):
        set_points(customer.id, 5)
        points_service.transfer(customer.id, friend.id, 5)

        record = next(r for r in captured_logs() if r["message"] == "points_transferred")
        assert record["amount"] == 5
        assert record["sender_id"] == str(customer.id)
