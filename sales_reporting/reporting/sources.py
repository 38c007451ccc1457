"""
Order Sources

The reporting engine reads its ledger through an ``OrderSource``. A source
returns fully loaded domain objects (order items with their products and
categories) so report assembly never touches storage.
"""

from typing import Iterable, List, Optional, Protocol
from uuid import UUID

from .models import Order, Product, SalesAgent


class OrderSource(Protocol):
    """Read-only access to orders, products and sales agents"""

    async def orders_for_agent(self, agent_id: UUID) -> List[Order]:
        ...

    async def all_orders(self) -> List[Order]:
        ...

    async def products(self, agent_id: Optional[UUID] = None) -> List[Product]:
        ...

    async def sales_agents(self) -> List[SalesAgent]:
        ...


class InMemoryOrderSource:
    """Order source over in-memory collections, used by tests and demos"""

    def __init__(
        self,
        orders: Iterable[Order] = (),
        products: Iterable[Product] = (),
        agents: Iterable[SalesAgent] = (),
    ):
        self._orders = list(orders)
        self._products = list(products)
        self._agents = list(agents)

    async def orders_for_agent(self, agent_id: UUID) -> List[Order]:
        return [order for order in self._orders if order.sale_agent_id == agent_id]

    async def all_orders(self) -> List[Order]:
        return list(self._orders)

    async def products(self, agent_id: Optional[UUID] = None) -> List[Product]:
        if agent_id is None:
            return list(self._products)
        return [product for product in self._products if product.sale_agent_id == agent_id]

    async def sales_agents(self) -> List[SalesAgent]:
        return list(self._agents)
