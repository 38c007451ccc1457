"""
Line-Item Frames

Flattens orders into a polars DataFrame of line items for dimensional
rollups (category, product, agent). Revenue is carried as integer cents so
that group sums stay exact.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

import polars as pl

from .models import Order

CENT = Decimal("0.01")

LINE_ITEM_SCHEMA = {
    "order_id": pl.Utf8,
    "sale_agent_id": pl.Utf8,
    "product_id": pl.Utf8,
    "product_name": pl.Utf8,
    "category_id": pl.Utf8,
    "category_name": pl.Utf8,
    "quantity": pl.Int64,
    "revenue_cents": pl.Int64,
}


def to_cents(amount: Decimal) -> int:
    """Convert a monetary amount to whole cents"""
    return int(Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP) * 100)


def from_cents(cents: int) -> Decimal:
    """Convert whole cents back to a two-decimal amount"""
    return (Decimal(int(cents or 0)) / 100).quantize(CENT)


def line_item_frame(orders: Iterable[Order]) -> pl.DataFrame:
    """
    Build a line-item frame from already-filtered orders.

    Cancelled orders are skipped here as well, so no rollup built from the
    frame can carry cancelled revenue.
    """
    columns = {name: [] for name in LINE_ITEM_SCHEMA}
    for order in orders:
        if order.is_cancelled:
            continue
        for item in order.items:
            category = item.product.category
            columns["order_id"].append(str(order.order_id))
            columns["sale_agent_id"].append(str(order.sale_agent_id))
            columns["product_id"].append(str(item.product.product_id))
            columns["product_name"].append(item.product.name)
            columns["category_id"].append(str(category.category_id) if category else None)
            columns["category_name"].append(category.name if category else None)
            columns["quantity"].append(item.quantity)
            columns["revenue_cents"].append(to_cents(item.total_price))
    return pl.DataFrame(columns, schema=LINE_ITEM_SCHEMA)


def total_revenue(frame: pl.DataFrame) -> Decimal:
    """Sum of line-item revenue in a frame"""
    if frame.height == 0:
        return from_cents(0)
    return from_cents(frame["revenue_cents"].sum())
