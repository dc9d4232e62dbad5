"""
Tests for order pricing (retail_kernel/domain/pricing.py).

Pure functions: no database.  Covers per-line resolution and stock
checks, bundle expansion, aggregated demand, free lines and the two
discount modes.
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from retail_kernel.domain.order_types import DeliveryPayer, DiscountType
from retail_kernel.domain.pricing import (
    BundleComponentSnapshot,
    BundleSnapshot,
    ProductSnapshot,
    compute_totals,
    discount_amount,
    price_order,
)
from retail_kernel.domain.requests import BundleLine, OrderRequest, ProductLine
from retail_kernel.exceptions import (
    BundleNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
)


def _product(name="Soap", cost="300", price="600", stock=10):
    return ProductSnapshot(
        id=uuid4(),
        name=name,
        cost_price=Decimal(cost),
        selling_price=Decimal(price),
        stock=stock,
    )


def _bundle(name, price, *components):
    return BundleSnapshot(
        id=uuid4(),
        name=name,
        selling_price=Decimal(price),
        components=tuple(
            BundleComponentSnapshot(product_id=p.id, quantity=q) for p, q in components
        ),
    )


def _by_id(*items):
    return {i.id: i for i in items}


class TestProductLines:

    def test_single_line_totals(self):
        soap = _product(stock=10)
        priced = price_order(
            OrderRequest(lines=(ProductLine(soap.id, 3),)), _by_id(soap), {}
        )

        assert priced.stock_requirements == {soap.id: 3}
        assert priced.totals.total_selling_price == Decimal("1800")
        assert priced.totals.product_cost == Decimal("900")
        assert priced.totals.total_profit == Decimal("900")
        line = priced.lines[0]
        assert line.name == "Soap"
        assert line.unit_cost == Decimal("300")
        assert line.unit_price == Decimal("600")
        assert line.product_id == soap.id
        assert line.bundle_id is None

    def test_quantity_equal_to_stock_is_allowed(self):
        soap = _product(stock=4)
        priced = price_order(
            OrderRequest(lines=(ProductLine(soap.id, 4),)), _by_id(soap), {}
        )
        assert priced.stock_requirements[soap.id] == 4

    def test_quantity_above_stock_fails(self):
        soap = _product(stock=2)
        with pytest.raises(InsufficientStockError) as exc_info:
            price_order(OrderRequest(lines=(ProductLine(soap.id, 3),)), _by_id(soap), {})

        assert exc_info.value.product_name == "Soap"
        assert exc_info.value.required == 3
        assert exc_info.value.available == 2
        assert exc_info.value.bundle_name is None

    def test_unknown_product_fails(self):
        missing = uuid4()
        with pytest.raises(ProductNotFoundError) as exc_info:
            price_order(OrderRequest(lines=(ProductLine(missing, 1),)), {}, {})
        assert exc_info.value.code == "PRODUCT_NOT_FOUND"

    def test_free_line_costs_but_earns_nothing(self):
        soap = _product()
        priced = price_order(
            OrderRequest(lines=(ProductLine(soap.id, 2, is_free=True),)),
            _by_id(soap),
            {},
        )

        assert priced.lines[0].is_free
        assert priced.lines[0].unit_price == Decimal("0")
        assert priced.totals.total_selling_price == Decimal("0")
        assert priced.totals.product_cost == Decimal("600")
        assert priced.totals.total_profit == Decimal("-600")
        assert priced.stock_requirements == {soap.id: 2}


class TestBundleLines:

    def test_bundle_expands_into_components(self):
        soap = _product("Soap", "300", "600", stock=10)
        cream = _product("Cream", "1200", "2500", stock=5)
        box = _bundle("Gift Box", "5000", (soap, 2), (cream, 1))

        priced = price_order(
            OrderRequest(lines=(BundleLine(box.id, 2),)),
            _by_id(soap, cream),
            _by_id(box),
        )

        line = priced.lines[0]
        assert line.name == "Gift Box"
        assert line.bundle_id == box.id
        assert line.product_id is None
        assert line.unit_cost == Decimal("1800")
        assert [(c.product_id, c.quantity) for c in line.components] == [
            (soap.id, 2),
            (cream.id, 1),
        ]
        assert priced.stock_requirements == {soap.id: 4, cream.id: 2}
        assert priced.totals.total_selling_price == Decimal("10000")
        assert priced.totals.product_cost == Decimal("3600")

    def test_component_shortfall_names_product_and_bundle(self):
        soap = _product("Soap", stock=3)
        box = _bundle("Gift Box", "5000", (soap, 2))

        with pytest.raises(InsufficientStockError) as exc_info:
            price_order(
                OrderRequest(lines=(BundleLine(box.id, 2),)),
                _by_id(soap),
                _by_id(box),
            )

        assert exc_info.value.product_name == "Soap"
        assert exc_info.value.bundle_name == "Gift Box"
        assert exc_info.value.required == 4
        assert exc_info.value.available == 3

    def test_unknown_bundle_fails(self):
        with pytest.raises(BundleNotFoundError):
            price_order(OrderRequest(lines=(BundleLine(uuid4(), 1),)), {}, {})


class TestAggregatedDemand:

    def test_shared_product_is_summed(self):
        soap = _product(stock=10)
        box = _bundle("Box", "1000", (soap, 2))

        priced = price_order(
            OrderRequest(lines=(ProductLine(soap.id, 3), BundleLine(box.id, 2))),
            _by_id(soap),
            _by_id(box),
        )

        assert priced.stock_requirements == {soap.id: 7}

    def test_lines_that_fit_alone_but_not_together_fail(self):
        soap = _product(stock=5)
        box = _bundle("Box", "1000", (soap, 2))

        with pytest.raises(InsufficientStockError) as exc_info:
            price_order(
                OrderRequest(lines=(ProductLine(soap.id, 3), BundleLine(box.id, 2))),
                _by_id(soap),
                _by_id(box),
            )

        assert exc_info.value.required == 7
        assert exc_info.value.available == 5

    def test_same_product_on_two_lines(self):
        soap = _product(stock=4)
        with pytest.raises(InsufficientStockError):
            price_order(
                OrderRequest(lines=(ProductLine(soap.id, 3), ProductLine(soap.id, 2))),
                _by_id(soap),
                {},
            )


class TestFinancials:

    def test_amount_discount(self):
        assert discount_amount(Decimal("20000"), Decimal("500"), DiscountType.AMOUNT) == Decimal("500")

    def test_percentage_discount(self):
        assert discount_amount(
            Decimal("20000"), Decimal("10"), DiscountType.PERCENTAGE
        ) == Decimal("2000")

    def test_profit_with_percentage_discount(self):
        totals = compute_totals(
            Decimal("20000"),
            Decimal("8000"),
            discount=Decimal("10"),
            discount_type=DiscountType.PERCENTAGE,
            packaging_cost=Decimal("200"),
        )
        assert totals.discount_amount == Decimal("2000")
        assert totals.total_cost == Decimal("8200")
        assert totals.total_profit == Decimal("9800")

    def test_customer_paid_delivery_is_not_a_cost(self):
        totals = compute_totals(
            Decimal("5000"),
            Decimal("2000"),
            delivery_cost=Decimal("400"),
            delivery_paid_by=DeliveryPayer.CUSTOMER,
        )
        assert totals.total_cost == Decimal("2000")
        assert totals.total_profit == Decimal("3000")

    def test_shop_paid_delivery_reduces_profit(self):
        totals = compute_totals(
            Decimal("5000"),
            Decimal("2000"),
            delivery_cost=Decimal("400"),
            delivery_paid_by=DeliveryPayer.SHOP,
        )
        assert totals.total_cost == Decimal("2400")
        assert totals.total_profit == Decimal("2600")


class TestPricingProperties:

    @given(
        quantities=st.lists(st.integers(min_value=1, max_value=20), min_size=1, max_size=6),
        free_flags=st.lists(st.booleans(), min_size=6, max_size=6),
    )
    @settings(max_examples=100)
    def test_profit_identity(self, quantities, free_flags):
        """profit == revenue - discount - deductible cost, for any mix of lines."""
        products = [_product(f"P{i}", "150", "400", stock=100) for i in range(len(quantities))]
        lines = tuple(
            ProductLine(p.id, q, is_free=free_flags[i])
            for i, (p, q) in enumerate(zip(products, quantities))
        )
        priced = price_order(
            OrderRequest(lines=lines, discount=Decimal("50"), packaging_cost=Decimal("30")),
            _by_id(*products),
            {},
        )
        t = priced.totals
        assert t.total_profit == t.total_selling_price - t.discount_amount - t.total_cost
        assert t.product_cost == sum(Decimal("150") * q for q in quantities)

    @given(
        stock=st.integers(min_value=0, max_value=50),
        quantity=st.integers(min_value=1, max_value=60),
    )
    def test_requirement_never_exceeds_stock(self, stock, quantity):
        soap = _product(stock=stock)
        request = OrderRequest(lines=(ProductLine(soap.id, quantity),))
        if quantity <= stock:
            assert price_order(request, _by_id(soap), {}).stock_requirements[soap.id] == quantity
        else:
            with pytest.raises(InsufficientStockError):
                price_order(request, _by_id(soap), {})
