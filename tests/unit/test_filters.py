"""
Unit Tests - Order Filter
"""
from datetime import datetime, timezone

from sales_reporting.reporting.filters import Scope, filter_orders, filter_products
from sales_reporting.reporting.periods import TimeRange
from tests.conftest import AGENT_A, AGENT_B

UTC = timezone.utc


class TestFilterOrders:
    """Tests for filter_orders"""

    def test_agent_scope_excludes_other_agents_and_cancelled(self, orders):
        result = filter_orders(orders, Scope.agent(AGENT_A))
        assert {o.order_id.int for o in result} == {1, 2, 3, 6}

    def test_platform_scope(self, orders):
        result = filter_orders(orders, Scope.platform())
        assert {o.order_id.int for o in result} == {1, 2, 3, 5, 6}

    def test_keep_cancelled_for_ledgers(self, orders):
        result = filter_orders(orders, Scope.agent(AGENT_A), exclude_cancelled=False)
        assert 4 in {o.order_id.int for o in result}

    def test_time_range_is_inclusive(self, orders):
        time_range = TimeRange(datetime(2025, 1, 14, 10, tzinfo=UTC), datetime(2025, 1, 15, 9, tzinfo=UTC))
        result = filter_orders(orders, Scope.platform(), time_range)
        assert [o.order_id.int for o in result] == [2, 3, 5]

    def test_category_keeps_orders_touching_the_category(self, orders, categories):
        result = filter_orders(orders, Scope.platform(), category_id=categories["home"].category_id)
        assert [o.order_id.int for o in result] == [3]

    def test_preserves_input_order(self, orders):
        result = filter_orders(list(reversed(orders)), Scope.platform())
        assert [o.order_id.int for o in result] == [6, 5, 3, 2, 1]

    def test_empty_input(self):
        assert filter_orders([], Scope.agent(AGENT_A)) == []


class TestFilterProducts:
    """Tests for filter_products"""

    def test_agent_products(self, products):
        result = filter_products(products.values(), Scope.agent(AGENT_B))
        assert [p.name for p in result] == ["USB Cable"]

    def test_category(self, products, categories):
        result = filter_products(products.values(), Scope.platform(), categories["electronics"].category_id)
        assert {p.name for p in result} == {"Smartphone", "USB Cable"}


def test_scope_flags():
    assert Scope.platform().is_platform
    assert not Scope.agent(AGENT_A).is_platform
    assert Scope.agent(AGENT_A).includes(AGENT_A)
    assert not Scope.agent(AGENT_A).includes(AGENT_B)
