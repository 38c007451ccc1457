"""
Unit Tests - Ranking Engine
"""
from decimal import Decimal

import pytest

from sales_reporting.reporting.filters import Scope, filter_orders
from sales_reporting.reporting.models import RankedEntity
from sales_reporting.reporting.ranking import (
    agent_rollup,
    by_quantity,
    by_revenue,
    product_rollup,
    top_n,
    with_shares,
)
from tests.conftest import AGENT_A, AGENT_B


def entity(entity_id: str, revenue: str = "0", quantity: int = 0) -> RankedEntity:
    return RankedEntity(entity_id=entity_id, name=entity_id, revenue=Decimal(revenue), quantity=quantity)


class TestTopN:
    """Tests for top_n"""

    @pytest.mark.parametrize("n", [0, 1, 3, 10])
    def test_bounded_and_non_increasing(self, n):
        candidates = [entity(str(i), revenue=str(i * 7 % 5)) for i in range(6)]
        result = top_n(candidates, by_revenue, n)

        assert len(result) <= max(n, 0)
        assert len(result) == min(n, len(candidates))
        assert all(a.revenue >= b.revenue for a, b in zip(result, result[1:]))

    def test_negative_n(self):
        assert top_n([entity("a", "1")], by_revenue, -1) == []

    def test_ties_break_on_ascending_id(self):
        candidates = [entity("c", "5"), entity("a", "5"), entity("b", "9"), entity("d", "5")]
        result = top_n(candidates, by_revenue, 3)
        assert [e.entity_id for e in result] == ["b", "a", "c"]

    def test_tie_break_is_input_order_independent(self):
        candidates = [entity("x", quantity=2), entity("y", quantity=2), entity("z", quantity=1)]
        forward = top_n(candidates, by_quantity, 2)
        backward = top_n(list(reversed(candidates)), by_quantity, 2)
        assert [e.entity_id for e in forward] == [e.entity_id for e in backward] == ["x", "y"]


class TestRollups:
    """Tests for product and agent rollups"""

    def test_product_rollup(self, orders, products):
        rollup = {e.name: e for e in product_rollup(filter_orders(orders, Scope.agent(AGENT_A)))}

        assert rollup["Mystery Novel"].quantity == 3
        assert rollup["Mystery Novel"].revenue == Decimal("250.00")
        assert rollup["Mystery Novel"].order_count == 2
        assert rollup["Smartphone"].quantity == 2
        assert rollup["Smartphone"].attributes["category_name"] == "Electronics"

    def test_product_rollup_skips_cancelled(self, orders):
        rollup = {e.name: e for e in product_rollup(orders)}
        assert rollup["Smartphone"].quantity == 2

    def test_agent_rollup(self, orders, agents):
        directory = {agent.agent_id: agent for agent in agents}
        rollup = {e.entity_id: e for e in agent_rollup(orders, directory)}

        assert rollup[str(AGENT_A)].revenue == Decimal("650.00")
        assert rollup[str(AGENT_A)].order_count == 4
        assert rollup[str(AGENT_A)].name == "Alice Nguyen"
        assert rollup[str(AGENT_B)].revenue == Decimal("400.00")

    def test_agent_rollup_uses_line_items(self, orders, shipped_order):
        rollup = {e.entity_id: e for e in agent_rollup(orders + [shipped_order])}

        assert shipped_order.grand_total == Decimal("150.00")
        assert rollup[str(AGENT_B)].revenue == Decimal("500.00")
        assert rollup[str(AGENT_B)].order_count == 2

    def test_agent_rollup_unknown_agent(self, orders):
        rollup = agent_rollup(orders)
        assert {e.name for e in rollup} == {"Unknown"}

    def test_empty(self):
        assert product_rollup([]) == []
        assert agent_rollup([]) == []


def test_with_shares():
    ranked = with_shares([entity("a", "600"), entity("b", "400")], Decimal("1000"))
    assert [e.share for e in ranked] == [Decimal("60.0"), Decimal("40.0")]
    assert with_shares([entity("a", "10")], Decimal("0"))[0].share == Decimal("0.0")
