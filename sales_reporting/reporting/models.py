"""
Reporting Domain Model

Read-only views of the order ledger consumed by the reporting engine, plus the
request-scoped derived structures (buckets and ranked entities) it produces.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from uuid import UUID


# =============================================================================
# ENUMERATIONS
# =============================================================================

class OrderStatus(str, Enum):
    """Order lifecycle status"""
    CREATED = "created"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    PAID = "paid"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment status"""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class ProductStatus(str, Enum):
    """Product lifecycle status"""
    AVAILABLE = "available"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class StockStatus(str, Enum):
    """Derived stock label shown in product summaries"""
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    DISCONTINUED = "DISCONTINUED"


STOCK_STATUS_COLORS = {
    StockStatus.IN_STOCK: "#10b981",
    StockStatus.LOW_STOCK: "#f59e0b",
    StockStatus.OUT_OF_STOCK: "#ef4444",
    StockStatus.DISCONTINUED: "#6b7280",
}


def ensure_utc(value: datetime) -> datetime:
    """Normalize an instant to UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =============================================================================
# LEDGER ENTITIES
# =============================================================================

@dataclass(frozen=True)
class Category:
    """Product category (dimension only)"""
    category_id: UUID
    name: str


@dataclass(frozen=True)
class Product:
    """Catalogue product used as a grouping/ranking dimension"""
    product_id: UUID
    name: str
    category: Optional[Category] = None
    quantity: int = 0
    status: ProductStatus = ProductStatus.AVAILABLE
    sale_agent_id: Optional[UUID] = None
    image_url: Optional[str] = None

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None


@dataclass(frozen=True)
class OrderItem:
    """Order line; prices are as recorded at the time of sale"""
    product: Product
    quantity: int
    unit_sale_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class Order:
    """Order as read from the ledger"""
    order_id: UUID
    order_date: datetime
    status: OrderStatus
    payment_status: PaymentStatus
    sale_agent_id: UUID
    customer_id: Optional[UUID]
    grand_total: Decimal
    items: Tuple[OrderItem, ...] = ()
    customer_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "order_date", ensure_utc(self.order_date))
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED


@dataclass(frozen=True)
class SalesAgent:
    """Sales agent account, needed for admin-level rankings"""
    agent_id: UUID
    username: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True

    @property
    def full_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username

    @property
    def initials(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        if not parts:
            return self.username[:2].upper()
        return "".join(p[0] for p in parts).upper()


# =============================================================================
# DERIVED (REQUEST-SCOPED) STRUCTURES
# =============================================================================

@dataclass
class Bucket:
    """Half-open time interval [start, end) with accumulated metrics"""
    start: datetime
    end: datetime
    label: str
    revenue: Decimal = Decimal("0")
    order_count: int = 0
    commission: Optional[Decimal] = None

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass
class RankedEntity:
    """Entity with summed metrics and its share of a report total"""
    entity_id: str
    name: str
    revenue: Decimal = Decimal("0")
    quantity: int = 0
    order_count: int = 0
    share: Decimal = Decimal("0")
    attributes: Dict[str, Any] = field(default_factory=dict)
