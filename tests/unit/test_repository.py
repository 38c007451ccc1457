"""
Unit Tests - SQLAlchemy Order Source
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from sales_reporting.database.connection import check_database_health, close_database, init_database
from sales_reporting.database.models import (
    CategoryRecord,
    OrderItemRecord,
    OrderRecord,
    ProductRecord,
    UserRecord,
    UserRole,
)
from sales_reporting.database.repository import SqlAlchemyOrderSource
from sales_reporting.reporting import assembler
from sales_reporting.reporting.models import OrderStatus, PaymentStatus, ProductStatus
from sales_reporting.reporting.periods import Period
from tests.conftest import AGENT_A, AGENT_B, FEE_RATE, NOW

UTC = timezone.utc


@pytest.fixture
async def seeded_session(db_session):
    """Ledger with two agents, one customer and three orders"""
    customer = UserRecord(username="dana", email="dana@shop.test", first_name="Dana", last_name="Customer")
    db_session.add_all([
        UserRecord(user_id=AGENT_A, username="alice", email="alice@shop.test",
                   first_name="Alice", last_name="Nguyen", role=UserRole.SALES_AGENT),
        UserRecord(user_id=AGENT_B, username="bob", email="bob@shop.test", role=UserRole.SALES_AGENT),
        UserRecord(username="root", role=UserRole.ADMIN),
        customer,
    ])
    books = CategoryRecord(name="Books")
    novel = ProductRecord(name="Mystery Novel", category=books, sale_agent_id=AGENT_A, quantity=4)
    cable = ProductRecord(name="USB Cable", sale_agent_id=AGENT_B, quantity=30, status=ProductStatus.DISCONTINUED)
    db_session.add_all([books, novel, cable])
    await db_session.flush()

    db_session.add_all([
        OrderRecord(
            customer_id=customer.user_id,
            sale_agent_id=AGENT_A,
            order_date=datetime(2025, 1, 13, 10, tzinfo=UTC),
            status=OrderStatus.DELIVERED,
            payment_status=PaymentStatus.PAID,
            grand_total=Decimal("40.00"),
            items=[OrderItemRecord(product_id=novel.product_id, quantity=2,
                                   unit_sale_price=Decimal("20.00"), total_price=Decimal("40.00"))],
        ),
        OrderRecord(
            customer_id=customer.user_id,
            sale_agent_id=AGENT_A,
            order_date=datetime(2025, 1, 14, 10, tzinfo=UTC),
            status=OrderStatus.CANCELLED,
            payment_status=PaymentStatus.REFUNDED,
            grand_total=Decimal("20.00"),
            items=[OrderItemRecord(product_id=novel.product_id, quantity=1,
                                   unit_sale_price=Decimal("20.00"), total_price=Decimal("20.00"))],
        ),
        OrderRecord(
            sale_agent_id=AGENT_B,
            order_date=datetime(2025, 1, 15, 8, tzinfo=UTC),
            status=OrderStatus.CONFIRMED,
            payment_status=PaymentStatus.PENDING,
            grand_total=Decimal("15.50"),
            items=[OrderItemRecord(product_id=cable.product_id, quantity=1,
                                   unit_sale_price=Decimal("15.50"), total_price=Decimal("15.50"))],
        ),
    ])
    await db_session.commit()
    return db_session


class TestSqlAlchemyOrderSource:
    """Tests for mapping rows to the reporting model"""

    async def test_orders_for_agent(self, seeded_session):
        orders = await SqlAlchemyOrderSource(seeded_session).orders_for_agent(AGENT_A)

        assert len(orders) == 2
        delivered = next(o for o in orders if o.status == OrderStatus.DELIVERED)
        assert delivered.grand_total == Decimal("40.00")
        assert delivered.customer_name == "Dana Customer"
        assert delivered.order_date.tzinfo is not None
        assert delivered.items[0].product.category.name == "Books"

    async def test_all_orders(self, seeded_session):
        orders = await SqlAlchemyOrderSource(seeded_session).all_orders()
        assert len(orders) == 3
        assert {o.customer_name for o in orders if o.sale_agent_id == AGENT_B} == {None}

    async def test_products(self, seeded_session):
        source = SqlAlchemyOrderSource(seeded_session)

        assert len(await source.products()) == 2
        owned = await source.products(AGENT_B)
        assert [p.name for p in owned] == ["USB Cable"]
        assert owned[0].category is None
        assert owned[0].status == ProductStatus.DISCONTINUED

    async def test_sales_agents(self, seeded_session):
        agents = await SqlAlchemyOrderSource(seeded_session).sales_agents()
        assert {a.username for a in agents} == {"alice", "bob"}

    async def test_feeds_the_assembler(self, seeded_session):
        source = SqlAlchemyOrderSource(seeded_session)
        summary = assembler.admin_summary(
            await source.all_orders(),
            await source.products(),
            await source.sales_agents(),
            Period.WEEK,
            NOW,
            FEE_RATE,
        )

        assert summary.total_gmv == Decimal("55.50")
        assert summary.total_orders == 3
        assert summary.admin_commission == Decimal("5.55")
        assert [p.name for p in summary.low_stock_products] == ["Mystery Novel"]


class TestConnection:
    """Tests for engine lifecycle and health checks"""

    async def test_health_after_init(self):
        await init_database("sqlite+aiosqlite:///:memory:")
        try:
            health = await check_database_health()
        finally:
            await close_database()

        assert health["status"] == "healthy"
        assert "latency_ms" in health

    async def test_health_before_init(self):
        health = await check_database_health()
        assert health["status"] == "unhealthy"
