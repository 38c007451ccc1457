"""
Report Response Models

Pydantic DTOs returned by the reporting service and the API. Monetary values
are Decimals rounded to cents and serialize to JSON numbers; timestamps
serialize as UTC ``YYYY-MM-DDTHH:MM:SSZ``.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Percent = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Rate = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Timestamp = Annotated[datetime, PlainSerializer(format_timestamp, return_type=str, when_used="json")]


# =============================================================================
# DASHBOARD SUMMARY
# =============================================================================

class LowStockProduct(BaseModel):
    """Product at or below the low-stock threshold"""
    id: UUID
    name: str
    category_name: Optional[str] = None
    quantity: int
    image_url: Optional[str] = None
    status: str


class TopSellingProduct(BaseModel):
    """Best-selling product by units sold"""
    id: UUID
    name: str
    category_name: Optional[str] = None
    sold_count: int
    revenue: Money
    image_url: Optional[str] = None


class RecentOrder(BaseModel):
    """Most recent orders"""
    id: UUID
    customer_name: str
    order_date: Timestamp
    total_amount: Money
    status: str


class TopSalesAgent(BaseModel):
    """Sales agent ranked by GMV"""
    id: UUID
    name: str
    email: str
    total_gmv: Money
    platform_commission: Money
    agent_earnings: Money
    product_count: int
    order_count: int


class AgentDashboardSummary(BaseModel):
    """Dashboard summary for one sales agent"""
    period: Optional[str] = None
    total_products: int = 0
    total_orders: int = 0
    total_revenue: Money = Decimal("0.00")
    today_orders: int = 0
    today_revenue: Money = Decimal("0.00")
    week_revenue: Money = Decimal("0.00")
    month_revenue: Money = Decimal("0.00")
    year_revenue: Money = Decimal("0.00")
    low_stock_products: List[LowStockProduct] = Field(default_factory=list)
    top_selling_products: List[TopSellingProduct] = Field(default_factory=list)
    recent_orders: List[RecentOrder] = Field(default_factory=list)


class AdminDashboardSummary(BaseModel):
    """Platform-wide dashboard summary"""
    period: Optional[str] = None
    active_sales_agents: int = 0
    total_products: int = 0
    total_gmv: Money = Decimal("0.00")
    admin_commission: Money = Decimal("0.00")
    platform_fee_rate: Rate
    total_orders: int = 0
    total_revenue: Money = Decimal("0.00")
    low_stock_products: List[LowStockProduct] = Field(default_factory=list)
    top_selling_products: List[TopSellingProduct] = Field(default_factory=list)
    top_sales_agents: List[TopSalesAgent] = Field(default_factory=list)
    recent_orders: List[RecentOrder] = Field(default_factory=list)


# =============================================================================
# CHARTS
# =============================================================================

class RevenueChart(BaseModel):
    """Revenue series for one agent"""
    period: str
    labels: List[str]
    data: List[Money]


class AdminRevenueChart(BaseModel):
    """Platform revenue and commission series"""
    period: str
    labels: List[str]
    revenue_data: List[Money]
    commission_data: List[Money]


# =============================================================================
# COMPOSITE REPORTS
# =============================================================================

class PeriodInfo(BaseModel):
    """Report date range"""
    from_date: Timestamp
    to_date: Timestamp


class RevenueTrendItem(BaseModel):
    """Revenue point; ``date`` is a yyyy-MM-dd day or a bucket label"""
    date: str
    revenue: Money
    order_count: int
    average_order_value: Money


class OrdersByCategoryItem(BaseModel):
    """Order statistics for one category"""
    category_id: Optional[UUID] = None
    category_name: str
    order_count: int
    revenue: Money
    percentage: Percent
    commission: Optional[Money] = None


class ProductRatingAnalysis(BaseModel):
    """
    Product rating distribution.

    Not implemented yet: there is no rating storage, so every count is zero
    and ``is_placeholder`` is always true.
    """
    excellent: int = 0
    very_good: int = 0
    good: int = 0
    fair: int = 0
    poor: int = 0
    total_ratings: int = 0
    average_rating: Rate = Decimal("0")
    is_placeholder: bool = True
    note: str = "Product ratings are not implemented yet"


class SalespersonContribution(BaseModel):
    """Sales agent contribution to the report total"""
    salesperson_id: UUID
    first_name: str
    last_name: str
    email: str
    avatar: str
    total_sales: int
    total_revenue: Money
    platform_commission: Money
    agent_earnings: Money
    percentage: Percent


class TopProduct(BaseModel):
    """Top product by revenue inside one scope"""
    product_id: UUID
    product_name: str
    category_name: Optional[str] = None
    units_sold: int
    revenue: Money
    average_rating: Rate = Decimal("0")
    percentage: Percent


class ProductSummaryItem(BaseModel):
    """Product performance row"""
    product_id: UUID
    product_name: str
    category_name: Optional[str] = None
    total_orders: int
    total_revenue: Money
    average_rating: Rate = Decimal("0")
    status: str
    status_color: str
    stock_level: int
    low_stock_threshold: int


class PagedProductSummary(BaseModel):
    """Page of product performance rows"""
    data: List[ProductSummaryItem] = Field(default_factory=list)
    page_number: int = 1
    page_size: int = 10
    total_count: int = 0
    total_pages: int = 0


class CompositeReport(BaseModel):
    """Multi-section report over an explicit date range"""
    period: PeriodInfo
    revenue_trend: List[RevenueTrendItem]
    orders_by_category: List[OrdersByCategoryItem]
    product_ratings: ProductRatingAnalysis
    salesperson_contributions: List[SalespersonContribution]
    top_products: List[TopProduct]
    product_summary: PagedProductSummary


class AgentPeriodReport(BaseModel):
    """Personal report of a sales agent for a period token"""
    period: str
    revenue_trend: List[RevenueTrendItem]
    orders_by_category: List[OrdersByCategoryItem]
    top_products: List[TopProduct]


# =============================================================================
# EARNINGS
# =============================================================================

class EarningsSummary(BaseModel):
    """Lifetime earnings of a sales agent"""
    total_earnings: Money = Decimal("0.00")
    total_platform_fees: Money = Decimal("0.00")
    net_earnings: Money = Decimal("0.00")
    pending_earnings: Money = Decimal("0.00")
    paid_earnings: Money = Decimal("0.00")
    total_orders: int = 0
    average_earnings_per_order: Money = Decimal("0.00")
    last_month_earnings: Money = Decimal("0.00")
    platform_fee_rate: Rate


class EarningHistoryItem(BaseModel):
    """One order in the earnings ledger"""
    order_id: UUID
    order_code: str
    customer_name: str
    order_date: Timestamp
    order_status: str
    payment_status: str
    order_amount: Money
    platform_fee: Money
    net_earnings: Money


class EarningsHistory(BaseModel):
    """Page of the earnings ledger"""
    items: List[EarningHistoryItem] = Field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 10
    total_pages: int = 0
