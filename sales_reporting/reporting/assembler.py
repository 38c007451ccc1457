"""
Report Assembler

Composes the filter, aggregator and ranking engine into the response shapes
served to sales agents and administrators:

- dashboard summaries (agent / admin)
- revenue charts (agent / admin, bucketed by period)
- composite reports over an explicit date range
- agent period reports
- earnings summary and earnings history

Every function here is synchronous and pure: it reads the already-fetched
order set and never mutates it.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar
from uuid import UUID

from .aggregation import (
    aggregate,
    aggregate_by_category,
    daily_trend,
    fill_buckets,
    round_money,
    safe_average,
    split_commission,
    validate_fee_rate,
)
from .exceptions import ReportValidationError
from .filters import Scope, filter_orders, filter_products
from .models import (
    STOCK_STATUS_COLORS,
    Order,
    OrderStatus,
    PaymentStatus,
    Product,
    ProductStatus,
    SalesAgent,
    StockStatus,
    ensure_utc,
)
from .periods import Period, TimeRange, add_months, generate_buckets, resolve_period, start_of_month
from .ranking import agent_rollup, by_quantity, by_revenue, product_rollup, top_n, with_shares
from .schemas import (
    AdminDashboardSummary,
    AdminRevenueChart,
    AgentDashboardSummary,
    AgentPeriodReport,
    CompositeReport,
    EarningHistoryItem,
    EarningsHistory,
    EarningsSummary,
    LowStockProduct,
    OrdersByCategoryItem,
    PagedProductSummary,
    PeriodInfo,
    ProductRatingAnalysis,
    ProductSummaryItem,
    RecentOrder,
    RevenueChart,
    RevenueTrendItem,
    SalespersonContribution,
    TopProduct,
    TopSalesAgent,
    TopSellingProduct,
)

T = TypeVar("T")


@dataclass(frozen=True)
class ReportLimits:
    """List sizes and thresholds applied by the assembler"""
    low_stock_threshold: int = 10
    list_size: int = 5
    top_agents: int = 10
    top_products: int = 10
    max_page_size: int = 100


DEFAULT_LIMITS = ReportLimits()


# =============================================================================
# SHARED SECTIONS
# =============================================================================

def stock_status(product: Product, threshold: int = DEFAULT_LIMITS.low_stock_threshold) -> StockStatus:
    """Derived stock label; a discontinued product is always DISCONTINUED"""
    if product.status == ProductStatus.DISCONTINUED:
        return StockStatus.DISCONTINUED
    if product.quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if product.quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def paginate(items: Sequence[T], page: int, page_size: int, max_page_size: int) -> Tuple[List[T], int]:
    """
    Slice one page out of ``items``.

    Returns:
        (page items, total pages)
    """
    if page < 1:
        raise ReportValidationError("Page number must be at least 1")
    if page_size < 1 or page_size > max_page_size:
        raise ReportValidationError(f"Page size must be between 1 and {max_page_size}")
    total_pages = math.ceil(len(items) / page_size)
    offset = (page - 1) * page_size
    return list(items[offset:offset + page_size]), total_pages


def low_stock_products(products: Iterable[Product], limits: ReportLimits) -> List[LowStockProduct]:
    """Products at or below the threshold, lowest stock first"""
    low = sorted(
        (p for p in products if p.quantity <= limits.low_stock_threshold),
        key=lambda p: (p.quantity, p.name, str(p.product_id)),
    )
    return [
        LowStockProduct(
            id=p.product_id,
            name=p.name,
            category_name=p.category_name,
            quantity=p.quantity,
            image_url=p.image_url,
            status=p.status.value,
        )
        for p in low[:limits.list_size]
    ]


def _catalogue(orders: Iterable[Order], products: Iterable[Product] = ()) -> Dict[str, Product]:
    catalogue = {str(item.product.product_id): item.product for order in orders for item in order.items}
    catalogue.update({str(p.product_id): p for p in products})
    return catalogue


def top_selling_products(
    orders: Sequence[Order],
    limit: int,
    products: Iterable[Product] = (),
) -> List[TopSellingProduct]:
    """Best sellers by units sold over the given (non-cancelled) orders"""
    catalogue = _catalogue(orders, products)
    ranked = top_n(product_rollup(orders), by_quantity, limit)
    return [
        TopSellingProduct(
            id=UUID(entity.entity_id),
            name=entity.name,
            category_name=entity.attributes.get("category_name"),
            sold_count=entity.quantity,
            revenue=entity.revenue,
            image_url=catalogue[entity.entity_id].image_url if entity.entity_id in catalogue else None,
        )
        for entity in ranked
    ]


def recent_orders(orders: Iterable[Order], limit: int) -> List[RecentOrder]:
    """Newest orders first, whatever their status"""
    newest = sorted(orders, key=lambda o: str(o.order_id))
    newest.sort(key=lambda o: o.order_date, reverse=True)
    return [
        RecentOrder(
            id=o.order_id,
            customer_name=o.customer_name or "Unknown",
            order_date=o.order_date,
            total_amount=round_money(o.grand_total),
            status=o.status.value,
        )
        for o in newest[:limit]
    ]


def top_products(orders: Sequence[Order], total: Decimal, limit: int) -> List[TopProduct]:
    """Top products by revenue with their share of ``total``"""
    ranked = with_shares(top_n(product_rollup(orders), by_revenue, limit), total)
    return [
        TopProduct(
            product_id=UUID(entity.entity_id),
            product_name=entity.name,
            category_name=entity.attributes.get("category_name"),
            units_sold=entity.quantity,
            revenue=entity.revenue,
            percentage=entity.share,
        )
        for entity in ranked
    ]


def category_items(orders: Sequence[Order], fee_rate: Optional[Decimal] = None) -> List[OrdersByCategoryItem]:
    return [
        OrdersByCategoryItem(
            category_id=row.category_id,
            category_name=row.category_name,
            order_count=row.order_count,
            revenue=row.revenue,
            percentage=row.percentage,
            commission=row.agent_earnings,
        )
        for row in aggregate_by_category(orders, fee_rate)
    ]


# =============================================================================
# DASHBOARD SUMMARIES
# =============================================================================

def agent_summary(
    agent_id: UUID,
    orders: Sequence[Order],
    products: Sequence[Product],
    period: Optional[Period],
    now: datetime,
    limits: ReportLimits = DEFAULT_LIMITS,
) -> AgentDashboardSummary:
    """
    Dashboard summary for one sales agent.

    Revenue covers the period (all time when ``period`` is None) and skips
    cancelled orders. The order count, top sellers and recent orders are
    always all-time, and the order count includes cancelled orders.
    """
    scope = Scope.agent(agent_id)
    scoped = filter_orders(orders, scope)
    period_metrics = aggregate(resolve_period(period, now), scoped)
    today = aggregate(resolve_period(Period.DAY, now), scoped)

    return AgentDashboardSummary(
        period=period.value if period else None,
        total_products=len(filter_products(products, scope)),
        total_orders=len(filter_orders(orders, scope, exclude_cancelled=False)),
        total_revenue=period_metrics.revenue,
        today_orders=today.order_count,
        today_revenue=today.revenue,
        week_revenue=aggregate(resolve_period(Period.WEEK, now), scoped).revenue,
        month_revenue=aggregate(resolve_period(Period.MONTH, now), scoped).revenue,
        year_revenue=aggregate(resolve_period(Period.YEAR, now), scoped).revenue,
        low_stock_products=low_stock_products(filter_products(products, scope), limits),
        top_selling_products=top_selling_products(scoped, limits.list_size, products),
        recent_orders=recent_orders(filter_orders(orders, scope, exclude_cancelled=False), limits.list_size),
    )


def admin_summary(
    orders: Sequence[Order],
    products: Sequence[Product],
    agents: Sequence[SalesAgent],
    period: Optional[Period],
    now: datetime,
    fee_rate: Decimal,
    limits: ReportLimits = DEFAULT_LIMITS,
) -> AdminDashboardSummary:
    """
    Platform-wide dashboard summary.

    GMV, commission and top agents cover the period; the order count is
    all-time and includes cancelled orders.
    """
    fee_rate = validate_fee_rate(fee_rate)
    scope = Scope.platform()
    scoped = filter_orders(orders, scope)
    period_orders = filter_orders(scoped, scope, resolve_period(period, now))
    metrics = aggregate(TimeRange(), period_orders)
    split = split_commission(metrics.revenue, fee_rate)

    directory = {agent.agent_id: agent for agent in agents}
    product_counts: Dict[str, int] = {}
    for product in products:
        if product.sale_agent_id is not None:
            key = str(product.sale_agent_id)
            product_counts[key] = product_counts.get(key, 0) + 1

    top_agents = []
    for entity in top_n(agent_rollup(period_orders, directory), by_revenue, limits.list_size):
        agent = entity.attributes.get("agent")
        agent_split = split_commission(entity.revenue, fee_rate)
        top_agents.append(
            TopSalesAgent(
                id=UUID(entity.entity_id),
                name=entity.name,
                email=agent.email if agent else "",
                total_gmv=entity.revenue,
                platform_commission=agent_split.platform_commission,
                agent_earnings=agent_split.agent_earnings,
                product_count=product_counts.get(entity.entity_id, 0),
                order_count=entity.order_count,
            )
        )

    return AdminDashboardSummary(
        period=period.value if period else None,
        active_sales_agents=sum(1 for agent in agents if agent.is_active),
        total_products=len(products),
        total_gmv=metrics.revenue,
        admin_commission=split.platform_commission,
        platform_fee_rate=fee_rate,
        total_orders=len(filter_orders(orders, scope, exclude_cancelled=False)),
        total_revenue=metrics.revenue,
        low_stock_products=low_stock_products(products, limits),
        top_selling_products=top_selling_products(scoped, limits.list_size, products),
        top_sales_agents=top_agents,
        recent_orders=recent_orders(orders, limits.list_size),
    )


# =============================================================================
# REVENUE CHARTS
# =============================================================================

def revenue_chart(orders: Sequence[Order], scope: Scope, period: Period, now: datetime) -> RevenueChart:
    """Revenue per bucket of the period grid"""
    buckets = fill_buckets(generate_buckets(period, now), filter_orders(orders, scope))
    return RevenueChart(
        period=period.value,
        labels=[b.label for b in buckets],
        data=[b.revenue for b in buckets],
    )


def admin_revenue_chart(
    orders: Sequence[Order],
    period: Period,
    now: datetime,
    fee_rate: Decimal,
) -> AdminRevenueChart:
    """Platform revenue and platform commission per bucket"""
    buckets = fill_buckets(
        generate_buckets(period, now),
        filter_orders(orders, Scope.platform()),
        fee_rate=validate_fee_rate(fee_rate),
    )
    return AdminRevenueChart(
        period=period.value,
        labels=[b.label for b in buckets],
        revenue_data=[b.revenue for b in buckets],
        commission_data=[b.commission for b in buckets],
    )


# =============================================================================
# COMPOSITE REPORT
# =============================================================================

def product_ratings_placeholder() -> ProductRatingAnalysis:
    """Rating distribution is not implemented: always zeros"""
    return ProductRatingAnalysis()


def product_summary(
    orders: Sequence[Order],
    products: Sequence[Product],
    page: int,
    page_size: int,
    limits: ReportLimits,
) -> PagedProductSummary:
    """Products in scope sorted by revenue over ``orders``, one page of them"""
    performance = {entity.entity_id: entity for entity in product_rollup(orders)}

    rows = []
    for product in products:
        entity = performance.get(str(product.product_id))
        status = stock_status(product, limits.low_stock_threshold)
        rows.append(
            ProductSummaryItem(
                product_id=product.product_id,
                product_name=product.name,
                category_name=product.category_name,
                total_orders=entity.order_count if entity else 0,
                total_revenue=entity.revenue if entity else round_money(0),
                status=status.value,
                status_color=STOCK_STATUS_COLORS[status],
                stock_level=product.quantity,
                low_stock_threshold=limits.low_stock_threshold,
            )
        )
    rows.sort(key=lambda row: (-row.total_revenue, row.product_name, str(row.product_id)))

    page_rows, total_pages = paginate(rows, page, page_size, limits.max_page_size)
    return PagedProductSummary(
        data=page_rows,
        page_number=page,
        page_size=page_size,
        total_count=len(rows),
        total_pages=total_pages,
    )


def salesperson_contributions(
    orders: Sequence[Order],
    agents: Sequence[SalesAgent],
    total: Decimal,
    fee_rate: Decimal,
    limit: int,
) -> List[SalespersonContribution]:
    """Top agents by revenue with their share of the report total"""
    directory = {agent.agent_id: agent for agent in agents}
    ranked = with_shares(top_n(agent_rollup(orders, directory), by_revenue, limit), total)

    contributions = []
    for entity in ranked:
        agent = entity.attributes.get("agent")
        split = split_commission(entity.revenue, fee_rate)
        contributions.append(
            SalespersonContribution(
                salesperson_id=UUID(entity.entity_id),
                first_name=agent.first_name if agent else "",
                last_name=agent.last_name if agent else "",
                email=agent.email if agent else "",
                avatar=agent.initials if agent else "?",
                total_sales=entity.order_count,
                total_revenue=entity.revenue,
                platform_commission=split.platform_commission,
                agent_earnings=split.agent_earnings,
                percentage=entity.share,
            )
        )
    return contributions


def composite_report(
    scope: Scope,
    orders: Sequence[Order],
    products: Sequence[Product],
    agents: Sequence[SalesAgent],
    start: datetime,
    end: datetime,
    fee_rate: Decimal,
    category_id: Optional[UUID] = None,
    page: int = 1,
    page_size: int = 10,
    limits: ReportLimits = DEFAULT_LIMITS,
) -> CompositeReport:
    """
    Five-section report over ``[start, end]``.

    Sections: daily revenue trend, orders by category, product ratings
    placeholder, top salesperson contributions (platform scope only) and a
    paginated product summary. ``top_products`` is added for both scopes.

    Raises:
        ReportValidationError: inverted range or invalid pagination
    """
    start, end = ensure_utc(start), ensure_utc(end)
    if start > end:
        raise ReportValidationError("Invalid date range. Start date must be before or equal to end date.")
    fee_rate = validate_fee_rate(fee_rate)

    time_range = TimeRange(start, end)
    scoped = filter_orders(orders, scope, time_range)

    categories = category_items(scoped, None if scope.is_platform else fee_rate)
    total = sum((row.revenue for row in categories), round_money(0))

    contributions = []
    if scope.is_platform:
        contributions = salesperson_contributions(scoped, agents, total, fee_rate, limits.top_agents)

    return CompositeReport(
        period=PeriodInfo(from_date=start, to_date=end),
        revenue_trend=[
            RevenueTrendItem(
                date=point.date,
                revenue=point.revenue,
                order_count=point.order_count,
                average_order_value=point.average_order_value,
            )
            for point in daily_trend(scoped, time_range)
        ],
        orders_by_category=categories,
        product_ratings=product_ratings_placeholder(),
        salesperson_contributions=contributions,
        top_products=top_products(scoped, total, limits.top_products),
        product_summary=product_summary(
            scoped,
            filter_products(products, scope, category_id),
            page,
            page_size,
            limits,
        ),
    )


# =============================================================================
# AGENT PERIOD REPORT
# =============================================================================

def agent_period_report(
    agent_id: UUID,
    orders: Sequence[Order],
    period: Period,
    now: datetime,
    fee_rate: Decimal,
    category_id: Optional[UUID] = None,
    limits: ReportLimits = DEFAULT_LIMITS,
) -> AgentPeriodReport:
    """
    Personal report of a sales agent on the period's bucket grid.

    The category filter keeps orders that contain at least one item of the
    category.
    """
    fee_rate = validate_fee_rate(fee_rate)
    scoped = filter_orders(orders, Scope.agent(agent_id), resolve_period(period, now), category_id)
    buckets = fill_buckets(generate_buckets(period, now), scoped)

    categories = category_items(scoped, fee_rate)
    total = sum((row.revenue for row in categories), round_money(0))

    return AgentPeriodReport(
        period=period.value,
        revenue_trend=[
            RevenueTrendItem(
                date=bucket.label,
                revenue=bucket.revenue,
                order_count=bucket.order_count,
                average_order_value=safe_average(bucket.revenue, bucket.order_count),
            )
            for bucket in buckets
        ],
        orders_by_category=categories,
        top_products=top_products(scoped, total, limits.top_products),
    )


# =============================================================================
# EARNINGS
# =============================================================================

def order_code(order_id: UUID) -> str:
    """Readable order code, e.g. ORD-1A2B3C4D"""
    return f"ORD-{str(order_id)[:8].upper()}"


def earnings_summary(
    agent_id: UUID,
    orders: Sequence[Order],
    now: datetime,
    fee_rate: Decimal,
) -> EarningsSummary:
    """Lifetime earnings of an agent split into platform fees and net income"""
    fee_rate = validate_fee_rate(fee_rate)
    scoped = filter_orders(orders, Scope.agent(agent_id))
    if not scoped:
        return EarningsSummary(platform_fee_rate=fee_rate)

    total = split_commission(aggregate(TimeRange(), scoped).revenue, fee_rate)
    paid = [o for o in scoped if o.payment_status == PaymentStatus.PAID]
    pending = [o for o in scoped if o.payment_status != PaymentStatus.PAID]

    this_month = start_of_month(ensure_utc(now))
    last_month = TimeRange(add_months(this_month, -1), this_month - timedelta(microseconds=1))

    return EarningsSummary(
        total_earnings=total.revenue,
        total_platform_fees=total.platform_commission,
        net_earnings=total.agent_earnings,
        pending_earnings=split_commission(aggregate(TimeRange(), pending).revenue, fee_rate).agent_earnings,
        paid_earnings=split_commission(aggregate(TimeRange(), paid).revenue, fee_rate).agent_earnings,
        total_orders=len(scoped),
        average_earnings_per_order=safe_average(total.agent_earnings, len(scoped)),
        last_month_earnings=split_commission(aggregate(last_month, scoped).revenue, fee_rate).agent_earnings,
        platform_fee_rate=fee_rate,
    )


def earnings_history(
    agent_id: UUID,
    orders: Sequence[Order],
    fee_rate: Decimal,
    page: int = 1,
    page_size: int = 10,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    limits: ReportLimits = DEFAULT_LIMITS,
) -> EarningsHistory:
    """
    Paginated ledger of an agent's orders, newest first.

    ``end_date`` covers the whole day. Cancelled orders are listed with a
    zero fee and zero net earnings.
    """
    fee_rate = validate_fee_rate(fee_rate)
    if start_date and end_date and start_date > end_date:
        raise ReportValidationError("Invalid date range. Start date must be before or equal to end date.")

    time_range = TimeRange(
        datetime.combine(start_date, time.min) if start_date else None,
        datetime.combine(end_date, time.max) if end_date else None,
    )
    rows = [
        o for o in filter_orders(orders, Scope.agent(agent_id), time_range, exclude_cancelled=False)
        if (status is None or o.status == status)
        and (payment_status is None or o.payment_status == payment_status)
    ]
    rows.sort(key=lambda o: str(o.order_id))
    rows.sort(key=lambda o: o.order_date, reverse=True)

    page_rows, total_pages = paginate(rows, page, page_size, limits.max_page_size)

    items = []
    for order in page_rows:
        split = split_commission(0 if order.is_cancelled else order.grand_total, fee_rate)
        items.append(
            EarningHistoryItem(
                order_id=order.order_id,
                order_code=order_code(order.order_id),
                customer_name=order.customer_name or "Unknown",
                order_date=order.order_date,
                order_status=order.status.value,
                payment_status=order.payment_status.value,
                order_amount=round_money(order.grand_total),
                platform_fee=split.platform_commission,
                net_earnings=split.agent_earnings,
            )
        )

    return EarningsHistory(
        items=items,
        total_count=len(rows),
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )
