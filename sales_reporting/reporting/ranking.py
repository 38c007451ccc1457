"""
Ranking Engine

Rolls line items up per product and per sales agent, and selects bounded,
ordered top-N lists.

Ties on the ranking metric are broken by ascending entity id, so results are
deterministic whatever order the order source returned rows in.
"""

from decimal import Decimal
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Union
from uuid import UUID

import polars as pl

from .aggregation import percentage
from .frames import from_cents, line_item_frame
from .models import Order, RankedEntity, SalesAgent

Metric = Union[int, Decimal]


def top_n(
    entities: Iterable[RankedEntity],
    metric: Callable[[RankedEntity], Metric],
    n: int,
) -> List[RankedEntity]:
    """
    Select at most ``n`` entities, highest metric first.

    Args:
        entities: Candidates
        metric: Selector of the ranking metric
        n: Maximum result length

    Returns:
        List of length <= n, non-increasing by metric
    """
    if n <= 0:
        return []
    ordered = sorted(entities, key=lambda entity: entity.entity_id)
    ordered.sort(key=metric, reverse=True)
    return ordered[:n]


def by_revenue(entity: RankedEntity) -> Decimal:
    return entity.revenue


def by_quantity(entity: RankedEntity) -> int:
    return entity.quantity


def with_shares(entities: Sequence[RankedEntity], total: Decimal) -> List[RankedEntity]:
    """Set each entity's share of ``total`` (the report's category total)"""
    for entity in entities:
        entity.share = percentage(entity.revenue, total)
    return list(entities)


def product_rollup(orders: Iterable[Order]) -> List[RankedEntity]:
    """
    Units sold, revenue and distinct order count per product.

    Attributes carry ``category_name``.
    """
    frame = line_item_frame(orders)
    if frame.height == 0:
        return []

    grouped = frame.group_by("product_id").agg(
        pl.col("product_name").first().alias("product_name"),
        pl.col("category_name").first().alias("category_name"),
        pl.col("quantity").sum().alias("quantity"),
        pl.col("revenue_cents").sum().alias("revenue_cents"),
        pl.col("order_id").n_unique().alias("order_count"),
    )
    return [
        RankedEntity(
            entity_id=row["product_id"],
            name=row["product_name"],
            revenue=from_cents(row["revenue_cents"]),
            quantity=int(row["quantity"]),
            order_count=int(row["order_count"]),
            attributes={"category_name": row["category_name"]},
        )
        for row in grouped.to_dicts()
    ]


def agent_rollup(
    orders: Iterable[Order],
    agents: Optional[Mapping[UUID, SalesAgent]] = None,
) -> List[RankedEntity]:
    """
    Line-item revenue and distinct order count per sales agent.

    Attributes carry the ``agent`` record when the directory knows it.
    """
    frame = line_item_frame(orders)
    if frame.height == 0:
        return []

    agents = agents or {}
    grouped = frame.group_by("sale_agent_id").agg(
        pl.col("revenue_cents").sum().alias("revenue_cents"),
        pl.col("order_id").n_unique().alias("order_count"),
    )

    result = []
    for row in grouped.to_dicts():
        agent = agents.get(UUID(row["sale_agent_id"]))
        result.append(
            RankedEntity(
                entity_id=row["sale_agent_id"],
                name=agent.full_name if agent else "Unknown",
                revenue=from_cents(row["revenue_cents"]),
                order_count=int(row["order_count"]),
                attributes={"agent": agent},
            )
        )
    return result
