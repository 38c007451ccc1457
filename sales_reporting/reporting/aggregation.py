"""
Aggregator

Sums revenue and counts orders per bucket, per calendar day and per category,
and derives average order value, percentages and commission splits.

Time series are built from order grand totals; dimensional breakdowns
(category, product, agent) are built from recorded line-item totals.
"""

from bisect import bisect_right
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence, Union
from uuid import UUID

import polars as pl

from .exceptions import ReportValidationError
from .frames import from_cents, line_item_frame, total_revenue
from .models import Bucket, Order, ensure_utc
from .periods import TimeRange

CENT = Decimal("0.01")
TENTH = Decimal("0.1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")
UNCATEGORIZED = "Uncategorized"


def round_money(value: Union[Decimal, int, float]) -> Decimal:
    """Round a monetary value to cents (half up)"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def percentage(part: Decimal, total: Decimal) -> Decimal:
    """Share of ``total`` as a percentage with one decimal; 0 when total is 0"""
    if not total:
        return Decimal("0.0")
    return (Decimal(part) / Decimal(total) * HUNDRED).quantize(TENTH, rounding=ROUND_HALF_UP)


def safe_average(total: Decimal, count: int) -> Decimal:
    """``total / count`` rounded to cents, or 0 when there is nothing to average"""
    if count <= 0:
        return round_money(0)
    return round_money(Decimal(total) / count)


# =============================================================================
# COMMISSION
# =============================================================================

@dataclass(frozen=True)
class CommissionSplit:
    """Platform / agent split of a revenue amount"""
    revenue: Decimal
    platform_commission: Decimal
    agent_earnings: Decimal


def validate_fee_rate(rate: Decimal) -> Decimal:
    rate = Decimal(str(rate))
    if rate < 0 or rate > 1:
        raise ReportValidationError(f"Platform fee rate must be between 0 and 1, got {rate}")
    return rate


def split_commission(revenue: Decimal, rate: Decimal) -> CommissionSplit:
    """
    Split revenue between platform and agent.

    ``platform_commission = round(revenue * rate, 2)`` and
    ``agent_earnings = round(revenue * (1 - rate), 2)``; the two add up to the
    revenue within one cent.
    """
    rate = validate_fee_rate(rate)
    revenue = Decimal(revenue)
    return CommissionSplit(
        revenue=round_money(revenue),
        platform_commission=round_money(revenue * rate),
        agent_earnings=round_money(revenue * (1 - rate)),
    )


# =============================================================================
# TIME-BASED AGGREGATION
# =============================================================================

@dataclass(frozen=True)
class AggregateMetrics:
    """Revenue, order count and average order value of a window"""
    revenue: Decimal
    order_count: int
    average_order_value: Decimal


def aggregate(window: Union[Bucket, TimeRange], orders: Iterable[Order]) -> AggregateMetrics:
    """
    Aggregate the orders whose date falls inside ``window``.

    Cancelled orders are never counted.
    """
    revenue = ZERO
    count = 0
    for order in orders:
        if order.is_cancelled or not window.contains(order.order_date):
            continue
        revenue += order.grand_total
        count += 1
    return AggregateMetrics(
        revenue=round_money(revenue),
        order_count=count,
        average_order_value=safe_average(revenue, count),
    )


def fill_buckets(
    buckets: Sequence[Bucket],
    orders: Iterable[Order],
    fee_rate: Optional[Decimal] = None,
) -> List[Bucket]:
    """
    Accumulate orders into their buckets.

    The buckets are expected to be chronological and non-overlapping (as built
    by ``generate_buckets``). Orders are assumed to be pre-filtered to the
    wanted scope; cancelled orders are skipped regardless. With a fee rate,
    each bucket also receives its platform commission.

    Returns:
        The same bucket objects, populated
    """
    starts = [bucket.start for bucket in buckets]
    for order in orders:
        if order.is_cancelled:
            continue
        # last bucket opening at or before the order
        index = bisect_right(starts, order.order_date) - 1
        if index < 0 or not buckets[index].contains(order.order_date):
            continue
        buckets[index].revenue += order.grand_total
        buckets[index].order_count += 1

    for bucket in buckets:
        bucket.revenue = round_money(bucket.revenue)
        if fee_rate is not None:
            bucket.commission = split_commission(bucket.revenue, fee_rate).platform_commission
    return list(buckets)


@dataclass(frozen=True)
class TrendPoint:
    """Daily revenue point"""
    date: str
    revenue: Decimal
    order_count: int
    average_order_value: Decimal


def daily_buckets(start: datetime, end: datetime) -> List[Bucket]:
    """One bucket per calendar day from ``start``'s date through ``end``'s date"""
    start, end = ensure_utc(start), ensure_utc(end)
    day = start.date()
    buckets = []
    while day <= end.date():
        opens = datetime.combine(day, time.min, tzinfo=start.tzinfo)
        buckets.append(Bucket(start=opens, end=opens + timedelta(days=1), label=day.isoformat()))
        day += timedelta(days=1)
    return buckets


def daily_trend(orders: Iterable[Order], time_range: TimeRange) -> List[TrendPoint]:
    """
    Build the always-daily revenue trend across an explicit range.

    Only orders inside the range are counted, so partial first and last days
    are honoured.
    """
    in_range = [order for order in orders if time_range.contains(order.order_date)]
    buckets = fill_buckets(daily_buckets(time_range.start, time_range.end), in_range)
    return [
        TrendPoint(
            date=bucket.label,
            revenue=bucket.revenue,
            order_count=bucket.order_count,
            average_order_value=safe_average(bucket.revenue, bucket.order_count),
        )
        for bucket in buckets
    ]


# =============================================================================
# CATEGORY BREAKDOWN
# =============================================================================

@dataclass(frozen=True)
class CategoryBreakdown:
    """Revenue and order count attributed to one category"""
    category_id: Optional[UUID]
    category_name: str
    order_count: int
    revenue: Decimal
    percentage: Decimal
    agent_earnings: Optional[Decimal] = None


def aggregate_by_category(
    orders: Iterable[Order],
    fee_rate: Optional[Decimal] = None,
) -> List[CategoryBreakdown]:
    """
    Group line-item revenue by product category.

    Args:
        orders: Pre-filtered orders
        fee_rate: When given, each row carries the agent's net earnings

    Returns:
        Categories ordered by revenue (desc), then name
    """
    frame = line_item_frame(orders)
    if frame.height == 0:
        return []

    grouped = (
        frame.group_by("category_id")
        .agg(
            pl.col("category_name").first().alias("category_name"),
            pl.col("order_id").n_unique().alias("order_count"),
            pl.col("revenue_cents").sum().alias("revenue_cents"),
        )
        .sort(["revenue_cents", "category_name"], descending=[True, False], nulls_last=True)
    )
    total = total_revenue(frame)

    rows = []
    for row in grouped.to_dicts():
        revenue = from_cents(row["revenue_cents"])
        rows.append(
            CategoryBreakdown(
                category_id=UUID(row["category_id"]) if row["category_id"] else None,
                category_name=row["category_name"] or UNCATEGORIZED,
                order_count=row["order_count"],
                revenue=revenue,
                percentage=percentage(revenue, total),
                agent_earnings=split_commission(revenue, fee_rate).agent_earnings if fee_rate is not None else None,
            )
        )
    return rows
