"""
Reporting Service

Async entry point of the reporting engine. Resolves the acting identity and
request parameters, loads the ledger from an ``OrderSource`` and hands it to
the assembler.

The platform fee rate is read through ``fee_rate_provider`` on every call and
``now`` through ``clock``, so neither is frozen at construction time.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Awaitable, Callable, Optional, TypeVar
from uuid import UUID

import structlog
from pydantic import ValidationError

from sales_reporting.config import BusinessSettings, current_platform_fee_rate

from . import assembler
from .aggregation import validate_fee_rate
from .assembler import ReportLimits
from .exceptions import ReportValidationError, UnauthenticatedError
from .filters import Scope
from .models import OrderStatus, PaymentStatus
from .periods import Period, parse_period
from .schemas import (
    AdminDashboardSummary,
    AdminRevenueChart,
    AgentDashboardSummary,
    AgentPeriodReport,
    CompositeReport,
    EarningsHistory,
    EarningsSummary,
    RevenueChart,
)
from .sources import OrderSource

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def limits_from_settings(settings: Optional[BusinessSettings] = None) -> ReportLimits:
    """Build report limits from the business settings"""
    settings = settings or BusinessSettings()
    return ReportLimits(
        low_stock_threshold=settings.low_stock_threshold,
        list_size=settings.dashboard_list_size,
        top_agents=settings.top_agents_limit,
        top_products=settings.top_products_limit,
        max_page_size=settings.max_page_size,
    )


def _require_agent(agent_id: Optional[UUID]) -> UUID:
    if agent_id is None:
        logger.warning("Report requested without an acting identity")
        raise UnauthenticatedError()
    return agent_id


class ReportingService:
    """
    Produces dashboard summaries, revenue charts, composite reports and
    earnings views for sales agents and administrators.

    Args:
        source: Ledger to read from
        fee_rate_provider: Returns the current platform fee rate
        clock: Returns the current UTC instant
        limits: List sizes and thresholds
        default_report_days: Composite report window when no range is given
    """

    def __init__(
        self,
        source: OrderSource,
        fee_rate_provider: Callable[[], Decimal] = current_platform_fee_rate,
        clock: Callable[[], datetime] = utc_now,
        limits: Optional[ReportLimits] = None,
        default_report_days: int = 7,
    ):
        self.source = source
        self.fee_rate_provider = fee_rate_provider
        self.clock = clock
        self.limits = limits or ReportLimits()
        self.default_report_days = default_report_days

    async def _load(self, what: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except Exception as e:
            logger.error("Failed to load report data", source=what, error=str(e), error_type=type(e).__name__)
            raise

    def _fee_rate(self) -> Decimal:
        """Current fee rate; a misconfigured rate is reported as a validation error"""
        try:
            return validate_fee_rate(self.fee_rate_provider())
        except ValidationError as e:
            logger.error("Invalid platform fee rate configuration", error=str(e))
            raise ReportValidationError("Platform fee rate must be between 0 and 1") from e

    def _report_range(self, start: Optional[datetime], end: Optional[datetime]):
        now = self.clock()
        end = end or now
        start = start or end - timedelta(days=self.default_report_days)
        return start, end

    # =========================================================================
    # SALES AGENT VIEWS
    # =========================================================================

    async def agent_summary(self, agent_id: Optional[UUID], period: Optional[str] = None) -> AgentDashboardSummary:
        """Dashboard summary; an unknown or missing period means all time"""
        agent_id = _require_agent(agent_id)
        resolved = parse_period(period, default=None)
        logger.info("Building agent summary", agent_id=str(agent_id), period=resolved.value if resolved else None)

        orders = await self._load("orders", self.source.orders_for_agent(agent_id))
        products = await self._load("products", self.source.products(agent_id))
        return assembler.agent_summary(agent_id, orders, products, resolved, self.clock(), self.limits)

    async def agent_revenue_chart(self, agent_id: Optional[UUID], period: Optional[str] = None) -> RevenueChart:
        """Revenue chart; an unknown or missing period means the current week"""
        agent_id = _require_agent(agent_id)
        resolved = parse_period(period, default=Period.WEEK)
        logger.info("Building agent revenue chart", agent_id=str(agent_id), period=resolved.value)

        orders = await self._load("orders", self.source.orders_for_agent(agent_id))
        return assembler.revenue_chart(orders, Scope.agent(agent_id), resolved, self.clock())

    async def agent_composite_report(
        self,
        agent_id: Optional[UUID],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category_id: Optional[UUID] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> CompositeReport:
        agent_id = _require_agent(agent_id)
        start, end = self._report_range(start, end)
        fee_rate = self._fee_rate()
        logger.info(
            "Building agent composite report",
            agent_id=str(agent_id),
            start=start.isoformat(),
            end=end.isoformat(),
            page=page,
        )

        orders = await self._load("orders", self.source.orders_for_agent(agent_id))
        products = await self._load("products", self.source.products(agent_id))
        return assembler.composite_report(
            Scope.agent(agent_id),
            orders,
            products,
            [],
            start,
            end,
            fee_rate,
            category_id=category_id,
            page=page,
            page_size=page_size,
            limits=self.limits,
        )

    async def agent_period_report(
        self,
        agent_id: Optional[UUID],
        period: Optional[str] = None,
        category_id: Optional[UUID] = None,
    ) -> AgentPeriodReport:
        agent_id = _require_agent(agent_id)
        resolved = parse_period(period, default=Period.WEEK)
        logger.info("Building agent period report", agent_id=str(agent_id), period=resolved.value)

        orders = await self._load("orders", self.source.orders_for_agent(agent_id))
        return assembler.agent_period_report(
            agent_id,
            orders,
            resolved,
            self.clock(),
            self._fee_rate(),
            category_id=category_id,
            limits=self.limits,
        )

    # =========================================================================
    # ADMIN VIEWS
    # =========================================================================

    async def admin_summary(self, period: Optional[str] = None) -> AdminDashboardSummary:
        resolved = parse_period(period, default=None)
        fee_rate = self._fee_rate()
        logger.info("Building admin summary", period=resolved.value if resolved else None)

        orders = await self._load("orders", self.source.all_orders())
        products = await self._load("products", self.source.products())
        agents = await self._load("sales_agents", self.source.sales_agents())
        return assembler.admin_summary(orders, products, agents, resolved, self.clock(), fee_rate, self.limits)

    async def admin_revenue_chart(self, period: Optional[str] = None) -> AdminRevenueChart:
        resolved = parse_period(period, default=Period.WEEK)
        fee_rate = self._fee_rate()
        logger.info("Building admin revenue chart", period=resolved.value)

        orders = await self._load("orders", self.source.all_orders())
        return assembler.admin_revenue_chart(orders, resolved, self.clock(), fee_rate)

    async def admin_composite_report(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category_id: Optional[UUID] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> CompositeReport:
        start, end = self._report_range(start, end)
        fee_rate = self._fee_rate()
        logger.info("Building admin composite report", start=start.isoformat(), end=end.isoformat(), page=page)

        orders = await self._load("orders", self.source.all_orders())
        products = await self._load("products", self.source.products())
        agents = await self._load("sales_agents", self.source.sales_agents())
        return assembler.composite_report(
            Scope.platform(),
            orders,
            products,
            agents,
            start,
            end,
            fee_rate,
            category_id=category_id,
            page=page,
            page_size=page_size,
            limits=self.limits,
        )

    # =========================================================================
    # EARNINGS
    # =========================================================================

    async def earnings_summary(self, agent_id: Optional[UUID]) -> EarningsSummary:
        agent_id = _require_agent(agent_id)
        logger.info("Building earnings summary", agent_id=str(agent_id))

        orders = await self._load("orders", self.source.orders_for_agent(agent_id))
        return assembler.earnings_summary(agent_id, orders, self.clock(), self._fee_rate())

    async def earnings_history(
        self,
        agent_id: Optional[UUID],
        page: int = 1,
        page_size: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[OrderStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> EarningsHistory:
        agent_id = _require_agent(agent_id)
        logger.info("Building earnings history", agent_id=str(agent_id), page=page, page_size=page_size)

        orders = await self._load("orders", self.source.orders_for_agent(agent_id))
        return assembler.earnings_history(
            agent_id,
            orders,
            self._fee_rate(),
            page=page,
            page_size=page_size,
            start_date=start_date,
            end_date=end_date,
            status=status,
            payment_status=payment_status,
            limits=self.limits,
        )