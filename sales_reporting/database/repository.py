"""
SQLAlchemy Order Source

Loads the order ledger into reporting domain objects. Orders are fetched
with their items, products, categories and customers eagerly so that the
assembler never triggers lazy loads.
"""

from typing import Dict, List, Optional
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sales_reporting.reporting.models import Category, Order, OrderItem, Product, SalesAgent

from .models import (
    CategoryRecord,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    UserRecord,
    UserRole,
)

logger = structlog.get_logger(__name__)


def to_category(record: Optional[CategoryRecord]) -> Optional[Category]:
    if record is None:
        return None
    return Category(category_id=record.category_id, name=record.name)


def to_product(record: ProductRecord) -> Product:
    return Product(
        product_id=record.product_id,
        name=record.name,
        category=to_category(record.category),
        quantity=record.quantity or 0,
        status=record.status,
        sale_agent_id=record.sale_agent_id,
        image_url=record.image_url,
    )


def customer_display_name(record: Optional[UserRecord]) -> Optional[str]:
    if record is None:
        return None
    name = f"{record.first_name or ''} {record.last_name or ''}".strip()
    return name or record.username


def to_order(record: OrderRecord, products: Dict[UUID, Product]) -> Order:
    items = []
    for item in record.items:
        product = products.get(item.product_id)
        if product is None:
            product = to_product(item.product)
            products[item.product_id] = product
        items.append(
            OrderItem(
                product=product,
                quantity=item.quantity,
                unit_sale_price=item.unit_sale_price,
                total_price=item.total_price,
            )
        )
    return Order(
        order_id=record.order_id,
        order_date=record.order_date,
        status=record.status,
        payment_status=record.payment_status,
        sale_agent_id=record.sale_agent_id,
        customer_id=record.customer_id,
        grand_total=record.grand_total,
        items=tuple(items),
        customer_name=customer_display_name(record.customer),
    )


def to_sales_agent(record: UserRecord) -> SalesAgent:
    return SalesAgent(
        agent_id=record.user_id,
        username=record.username,
        email=record.email or "",
        first_name=record.first_name or "",
        last_name=record.last_name or "",
        is_active=record.is_active,
    )


class SqlAlchemyOrderSource:
    """Order source backed by an async SQLAlchemy session"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _order_query(self):
        return select(OrderRecord).options(
            selectinload(OrderRecord.customer),
            selectinload(OrderRecord.items)
            .selectinload(OrderItemRecord.product)
            .selectinload(ProductRecord.category),
        )

    async def _orders(self, query) -> List[Order]:
        result = await self.session.execute(query)
        records = result.scalars().all()
        products: Dict[UUID, Product] = {}
        orders = [to_order(record, products) for record in records]
        logger.debug("Orders loaded", count=len(orders))
        return orders

    async def orders_for_agent(self, agent_id: UUID) -> List[Order]:
        return await self._orders(self._order_query().where(OrderRecord.sale_agent_id == agent_id))

    async def all_orders(self) -> List[Order]:
        return await self._orders(self._order_query())

    async def products(self, agent_id: Optional[UUID] = None) -> List[Product]:
        query = select(ProductRecord).options(selectinload(ProductRecord.category))
        if agent_id is not None:
            query = query.where(ProductRecord.sale_agent_id == agent_id)
        result = await self.session.execute(query)
        return [to_product(record) for record in result.scalars().all()]

    async def sales_agents(self) -> List[SalesAgent]:
        result = await self.session.execute(
            select(UserRecord).where(UserRecord.role == UserRole.SALES_AGENT)
        )
        return [to_sales_agent(record) for record in result.scalars().all()]
