"""
Test Suite Configuration

Shared ledger used across the suite. ``NOW`` is Wednesday 2025-01-15 12:00
UTC, so the current ISO week starts on Monday 2025-01-13.

Agent A orders:
    1  Mon 13 10:00  Smartphone x1 @100                    100.00  paid
    2  Tue 14 10:00  Mystery Novel x2 @100                  200.00  paid
    3  Wed 15 09:00  Smartphone x1 @100 + Desk Lamp x2 @100 300.00  paid
    4  Wed 15 10:00  Smartphone x9 @111                    999.00  cancelled
    6  Fri 2024-12-20 Mystery Novel x1 @50                   50.00  pending
Agent B orders:
    5  Tue 14 15:00  USB Cable x4 @100                      400.00  pending

``shipped_order`` (order 7, agent B, Tue 14 16:00) is kept out of the ledger:
its USB Cable x1 @100 line is 100.00 but its grand total is 150.00.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator, Dict, List
from uuid import UUID

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sales_reporting.database.models import Base
from sales_reporting.reporting.models import (
    Category,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Product,
    ProductStatus,
    SalesAgent,
)
from sales_reporting.reporting.sources import InMemoryOrderSource

UTC = timezone.utc
NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
FEE_RATE = Decimal("0.10")

AGENT_A = UUID("00000000-0000-0000-0000-0000000000a1")
AGENT_B = UUID("00000000-0000-0000-0000-0000000000b2")
AGENT_IDLE = UUID("00000000-0000-0000-0000-0000000000c3")
ADMIN_ID = UUID("00000000-0000-0000-0000-0000000000ad")


def build_order(
    number: int,
    agent_id: UUID,
    when: datetime,
    lines,
    status: OrderStatus = OrderStatus.DELIVERED,
    payment_status: PaymentStatus = PaymentStatus.PAID,
    customer_name: str = "Dana Customer",
    shipping: str = "0",
) -> Order:
    """Build an order from (product, quantity, unit price) lines plus a shipping charge"""
    items = tuple(
        OrderItem(
            product=product,
            quantity=quantity,
            unit_sale_price=Decimal(price),
            total_price=Decimal(price) * quantity,
        )
        for product, quantity, price in lines
    )
    return Order(
        order_id=UUID(int=number),
        order_date=when,
        status=status,
        payment_status=payment_status,
        sale_agent_id=agent_id,
        customer_id=UUID(int=500 + number),
        grand_total=sum((item.total_price for item in items), Decimal(shipping)),
        items=items,
        customer_name=customer_name,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_order():
    return build_order


@pytest.fixture
def categories() -> Dict[str, Category]:
    """Create sample categories"""
    return {
        "electronics": Category(UUID(int=101), "Electronics"),
        "books": Category(UUID(int=102), "Books"),
        "home": Category(UUID(int=103), "Home"),
    }


@pytest.fixture
def products(categories) -> Dict[str, Product]:
    """Create sample products"""
    return {
        "phone": Product(UUID(int=201), "Smartphone", categories["electronics"], quantity=5, sale_agent_id=AGENT_A),
        "novel": Product(UUID(int=202), "Mystery Novel", categories["books"], quantity=50, sale_agent_id=AGENT_A),
        "lamp": Product(
            UUID(int=203), "Desk Lamp", categories["home"], quantity=0,
            status=ProductStatus.OUT_OF_STOCK, sale_agent_id=AGENT_A,
        ),
        "cable": Product(
            UUID(int=204), "USB Cable", categories["electronics"], quantity=8,
            status=ProductStatus.DISCONTINUED, sale_agent_id=AGENT_B,
        ),
    }


@pytest.fixture
def agents() -> List[SalesAgent]:
    """Create sample sales agents"""
    return [
        SalesAgent(AGENT_A, "alice", "alice@shop.test", "Alice", "Nguyen"),
        SalesAgent(AGENT_B, "bob", "bob@shop.test", "Bob", "Stone"),
        SalesAgent(AGENT_IDLE, "carol", "carol@shop.test", "Carol", "", is_active=False),
    ]


@pytest.fixture
def orders(products) -> List[Order]:
    """Create the sample ledger described in the module docstring"""
    phone, novel, lamp, cable = products["phone"], products["novel"], products["lamp"], products["cable"]
    return [
        build_order(1, AGENT_A, datetime(2025, 1, 13, 10, tzinfo=UTC), [(phone, 1, "100.00")]),
        build_order(2, AGENT_A, datetime(2025, 1, 14, 10, tzinfo=UTC), [(novel, 2, "100.00")]),
        build_order(
            3, AGENT_A, datetime(2025, 1, 15, 9, tzinfo=UTC),
            [(phone, 1, "100.00"), (lamp, 2, "100.00")],
        ),
        build_order(
            4, AGENT_A, datetime(2025, 1, 15, 10, tzinfo=UTC), [(phone, 9, "111.00")],
            status=OrderStatus.CANCELLED, payment_status=PaymentStatus.REFUNDED,
        ),
        build_order(
            5, AGENT_B, datetime(2025, 1, 14, 15, tzinfo=UTC), [(cable, 4, "100.00")],
            status=OrderStatus.SHIPPED, payment_status=PaymentStatus.PENDING,
        ),
        build_order(
            6, AGENT_A, datetime(2024, 12, 20, 8, tzinfo=UTC), [(novel, 1, "50.00")],
            payment_status=PaymentStatus.PENDING,
        ),
    ]


@pytest.fixture
def order_source(orders, products, agents) -> InMemoryOrderSource:
    return InMemoryOrderSource(orders, products.values(), agents)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """In-memory SQLite session with the ledger schema created"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def shipped_order(products) -> Order:
    """Agent B order whose grand total carries 50.00 shipping on top of its lines"""
    return build_order(
        7, AGENT_B, datetime(2025, 1, 14, 16, tzinfo=UTC), [(products["cable"], 1, "100.00")],
        shipping="50.00",
    )
