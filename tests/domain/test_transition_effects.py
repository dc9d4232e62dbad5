"""
Tests for status transition effects (retail_kernel/domain/transitions.py).

The round-trip law is checked exhaustively over every status pair and,
with hypothesis, over arbitrary walks through the status graph.
"""

from decimal import Decimal
from itertools import product
from uuid import uuid4

import pytest
from hypothesis import given
from hypothesis import strategies as st

from retail_kernel.domain.order_types import OrderStatus
from retail_kernel.domain.transitions import (
    LoyaltyPolicy,
    SnapshotComponent,
    SnapshotLine,
    plan_transition,
    stock_footprint,
)

SOAP = uuid4()
CREAM = uuid4()
FOOTPRINT = {SOAP: 3, CREAM: 1}
ALL_STATUSES = list(OrderStatus)


def _plan(old, new, **kwargs):
    kwargs.setdefault("has_customer", True)
    return plan_transition(old, new, FOOTPRINT, **kwargs)


def _add(total, deltas):
    for pid, d in deltas.items():
        total[pid] = total.get(pid, 0) + d


class TestStatusCategories:

    @pytest.mark.parametrize("status", [OrderStatus.CANCELLED, OrderStatus.RETURNED])
    def test_stock_in(self, status):
        assert status.is_stock_in
        assert not status.is_stock_out

    @pytest.mark.parametrize(
        "status", [OrderStatus.NEW, OrderStatus.SHIPPED, OrderStatus.COMPLETED]
    )
    def test_stock_out(self, status):
        assert status.is_stock_out
        assert not status.is_stock_in


class TestStockFootprint:

    def test_product_and_bundle_lines(self):
        lines = [
            SnapshotLine(quantity=3, product_id=SOAP),
            SnapshotLine(
                quantity=2,
                components=(
                    SnapshotComponent(product_id=SOAP, quantity=2),
                    SnapshotComponent(product_id=CREAM, quantity=1),
                ),
            ),
        ]
        assert stock_footprint(lines) == {SOAP: 7, CREAM: 2}

    def test_deleted_references_contribute_nothing(self):
        lines = [
            SnapshotLine(quantity=3, product_id=None),
            SnapshotLine(
                quantity=1,
                components=(SnapshotComponent(product_id=None, quantity=4),),
            ),
        ]
        assert stock_footprint(lines) == {}


class TestStockEffects:

    def test_cancel_returns_stock(self):
        effect = _plan(OrderStatus.NEW, OrderStatus.CANCELLED)
        assert dict(effect.stock_deltas) == {SOAP: 3, CREAM: 1}

    def test_reopen_takes_stock_again(self):
        effect = _plan(OrderStatus.RETURNED, OrderStatus.SHIPPED)
        assert dict(effect.stock_deltas) == {SOAP: -3, CREAM: -1}

    @pytest.mark.parametrize(
        "old,new",
        [
            (OrderStatus.NEW, OrderStatus.SHIPPED),
            (OrderStatus.SHIPPED, OrderStatus.COMPLETED),
            (OrderStatus.CANCELLED, OrderStatus.RETURNED),
        ],
    )
    def test_same_category_has_no_stock_effect(self, old, new):
        assert not _plan(old, new).stock_deltas

    @pytest.mark.parametrize("status", ALL_STATUSES)
    def test_same_status_is_noop(self, status):
        effect = _plan(status, status, points_earned=120, redeemed_points=50)
        assert effect.is_noop
        assert not effect.stock_deltas
        assert effect.points_delta == 0


class TestLoyaltyEffects:

    def test_points_earned_example(self):
        """12500 sold with 500 discount earns 120 points."""
        assert LoyaltyPolicy().points_earned(Decimal("12500"), Decimal("500")) == 120

    def test_points_earned_rounds_down(self):
        assert LoyaltyPolicy().points_earned(Decimal("999.99"), Decimal("0")) == 0
        assert LoyaltyPolicy().points_earned(Decimal("1999"), Decimal("0")) == 10

    def test_custom_policy(self):
        policy = LoyaltyPolicy(block_amount=Decimal("500"), points_per_block=1)
        assert policy.points_earned(Decimal("1600"), Decimal("0")) == 3

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            LoyaltyPolicy(block_amount=Decimal("0"))

    def test_completion_credits_earned_points(self):
        effect = _plan(OrderStatus.NEW, OrderStatus.COMPLETED, points_earned=120)
        assert effect.earned_points_delta == 120
        assert effect.enters_completed

    def test_cancel_after_completion_debits_earned_and_refunds_redeemed(self):
        effect = _plan(
            OrderStatus.COMPLETED,
            OrderStatus.CANCELLED,
            points_earned=120,
            redeemed_points=50,
        )
        assert effect.earned_points_delta == -120
        assert effect.redeemed_points_delta == 50
        assert effect.points_delta == -70

    def test_reopen_rededucts_redeemed(self):
        effect = _plan(OrderStatus.CANCELLED, OrderStatus.NEW, redeemed_points=50)
        assert effect.redeemed_points_delta == -50
        assert effect.earned_points_delta == 0

    def test_no_customer_no_points(self):
        effect = _plan(
            OrderStatus.NEW,
            OrderStatus.COMPLETED,
            has_customer=False,
            points_earned=120,
        )
        assert effect.points_delta == 0
        assert dict(effect.stock_deltas) == {}


class TestRoundTripLaw:

    @pytest.mark.parametrize("a,b", list(product(ALL_STATUSES, ALL_STATUSES)))
    def test_there_and_back_is_zero(self, a, b):
        there = _plan(a, b, points_earned=120, redeemed_points=50)
        back = _plan(b, a, points_earned=120, redeemed_points=50)

        stock = {}
        _add(stock, there.stock_deltas)
        _add(stock, back.stock_deltas)
        assert all(v == 0 for v in stock.values())
        assert there.points_delta + back.points_delta == 0

    @given(walk=st.lists(st.sampled_from(ALL_STATUSES), min_size=1, max_size=12))
    def test_effects_telescope(self, walk):
        """Applying a walk step by step equals jumping from start to end."""
        path = [OrderStatus.NEW] + walk
        stock = {}
        points = 0
        for old, new in zip(path, path[1:]):
            effect = _plan(old, new, points_earned=120, redeemed_points=50)
            _add(stock, effect.stock_deltas)
            points += effect.points_delta

        direct = _plan(path[0], path[-1], points_earned=120, redeemed_points=50)
        expected = dict(direct.stock_deltas)
        assert {k: v for k, v in stock.items() if v} == expected
        assert points == direct.points_delta
