"""
Database Models - Order Ledger

Read-side mapping of the marketplace ledger consumed by the reporting engine:

- UserRecord: customers, sales agents and administrators
- CategoryRecord / ProductRecord: catalogue owned by sales agents
- OrderRecord / OrderItemRecord: orders with line items priced at sale time

Money is stored as NUMERIC(12, 2) and timestamps as timezone-aware UTC.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
import uuid

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from sales_reporting.reporting.models import OrderStatus, PaymentStatus, ProductStatus


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


class UserRole(str, Enum):
    """Account role"""
    CUSTOMER = "customer"
    SALES_AGENT = "sales_agent"
    ADMIN = "admin"


# =============================================================================
# ACCOUNTS
# =============================================================================

class UserRecord(Base):
    """Marketplace account"""
    __tablename__ = "users"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    role: Mapped[UserRole] = mapped_column(SQLEnum(UserRole), default=UserRole.CUSTOMER)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
    )


# =============================================================================
# CATALOGUE
# =============================================================================

class CategoryRecord(Base):
    """Product category"""
    __tablename__ = "categories"

    category_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    products: Mapped[List["ProductRecord"]] = relationship(back_populates="category")


class ProductRecord(Base):
    """Product listed by a sales agent"""
    __tablename__ = "products"

    product_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("categories.category_id"))
    sale_agent_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.user_id"))
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[ProductStatus] = mapped_column(SQLEnum(ProductStatus), default=ProductStatus.AVAILABLE)
    image_url: Mapped[Optional[str]] = mapped_column(String(500))

    category: Mapped[Optional[CategoryRecord]] = relationship(back_populates="products")

    __table_args__ = (
        Index("ix_products_sale_agent", "sale_agent_id"),
    )


# =============================================================================
# ORDERS
# =============================================================================

class OrderRecord(Base):
    """Order placed with one sales agent"""
    __tablename__ = "orders"

    order_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("users.user_id"))
    sale_agent_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.user_id"), nullable=False)
    order_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[OrderStatus] = mapped_column(SQLEnum(OrderStatus), default=OrderStatus.CREATED)
    payment_status: Mapped[PaymentStatus] = mapped_column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING)
    grand_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    customer: Mapped[Optional[UserRecord]] = relationship(foreign_keys=[customer_id])
    items: Mapped[List["OrderItemRecord"]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_orders_sale_agent_date", "sale_agent_id", "order_date"),
        Index("ix_orders_date", "order_date"),
    )


class OrderItemRecord(Base):
    """Order line priced at the time of sale"""
    __tablename__ = "order_items"

    order_item_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("orders.order_id"), nullable=False)
    product_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("products.product_id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_sale_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    order: Mapped[OrderRecord] = relationship(back_populates="items")
    product: Mapped[ProductRecord] = relationship()
