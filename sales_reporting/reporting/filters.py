"""
Order Filter

Narrows an order collection to the orders in scope for a report.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import UUID

from .models import Order, Product
from .periods import TimeRange


@dataclass(frozen=True)
class Scope:
    """Single sales agent (agent view) or the whole platform (admin view)"""
    agent_id: Optional[UUID] = None

    @classmethod
    def agent(cls, agent_id: UUID) -> "Scope":
        return cls(agent_id=agent_id)

    @classmethod
    def platform(cls) -> "Scope":
        return cls()

    @property
    def is_platform(self) -> bool:
        return self.agent_id is None

    def includes(self, owner_id: Optional[UUID]) -> bool:
        return self.is_platform or owner_id == self.agent_id


def order_in_category(order: Order, category_id: UUID) -> bool:
    """True when at least one line item belongs to the category"""
    return any(
        item.product.category is not None and item.product.category.category_id == category_id
        for item in order.items
    )


def filter_orders(
    orders: Iterable[Order],
    scope: Scope,
    time_range: Optional[TimeRange] = None,
    category_id: Optional[UUID] = None,
    exclude_cancelled: bool = True,
) -> List[Order]:
    """
    Filter orders by scope, cancellation, date range and category.

    Args:
        orders: Full order collection
        scope: Agent or platform scope
        time_range: Optional closed range on the order date
        category_id: Optional category the order must touch
        exclude_cancelled: Drop cancelled orders (always true for revenue)

    Returns:
        Orders in scope, preserving input order
    """
    result = []
    for order in orders:
        if exclude_cancelled and order.is_cancelled:
            continue
        if not scope.includes(order.sale_agent_id):
            continue
        if time_range is not None and not time_range.contains(order.order_date):
            continue
        if category_id is not None and not order_in_category(order, category_id):
            continue
        result.append(order)
    return result


def filter_products(
    products: Iterable[Product],
    scope: Scope,
    category_id: Optional[UUID] = None,
) -> List[Product]:
    """Products owned within the scope, optionally restricted to a category"""
    return [
        product
        for product in products
        if scope.includes(product.sale_agent_id)
        and (
            category_id is None
            or (product.category is not None and product.category.category_id == category_id)
        )
    ]
