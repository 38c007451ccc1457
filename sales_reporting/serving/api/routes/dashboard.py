"""
Dashboard API Endpoints

Dashboard summaries, revenue charts and reports for sales agents and
administrators.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
import structlog

from sales_reporting.reporting.schemas import (
    AdminDashboardSummary,
    AdminRevenueChart,
    AgentDashboardSummary,
    AgentPeriodReport,
    CompositeReport,
    RevenueChart,
)
from sales_reporting.reporting.service import ReportingService
from sales_reporting.serving.api.dependencies import (
    Actor,
    get_reporting_service,
    require_admin,
    require_user,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


# =============================================================================
# SALES AGENT
# =============================================================================

@router.get("/summary", response_model=AgentDashboardSummary)
async def get_summary(
    period: Optional[str] = Query(None, description="day | week | month | year; omit for all time"),
    actor: Actor = Depends(require_user),
    service: ReportingService = Depends(get_reporting_service),
) -> AgentDashboardSummary:
    """Dashboard summary of the calling sales agent"""
    return await service.agent_summary(actor.user_id, period)


@router.get("/revenue-chart", response_model=RevenueChart)
async def get_revenue_chart(
    period: Optional[str] = Query("week", description="day | week | month | year"),
    actor: Actor = Depends(require_user),
    service: ReportingService = Depends(get_reporting_service),
) -> RevenueChart:
    """Revenue chart of the calling sales agent"""
    return await service.agent_revenue_chart(actor.user_id, period)


@router.get("/reports", response_model=CompositeReport)
async def get_reports(
    from_date: Optional[datetime] = Query(None, alias="from"),
    to_date: Optional[datetime] = Query(None, alias="to"),
    category_id: Optional[UUID] = None,
    page: int = 1,
    page_size: int = 10,
    actor: Actor = Depends(require_user),
    service: ReportingService = Depends(get_reporting_service),
) -> CompositeReport:
    """
    Composite report of the calling sales agent.

    Defaults to the last seven days ending now.
    """
    return await service.agent_composite_report(
        actor.user_id,
        start=from_date,
        end=to_date,
        category_id=category_id,
        page=page,
        page_size=page_size,
    )


@router.get("/agent-reports", response_model=AgentPeriodReport)
async def get_agent_reports(
    period: Optional[str] = Query("week", description="day | week | month | year"),
    category_id: Optional[UUID] = None,
    actor: Actor = Depends(require_user),
    service: ReportingService = Depends(get_reporting_service),
) -> AgentPeriodReport:
    """Period report of the calling sales agent"""
    return await service.agent_period_report(actor.user_id, period, category_id)


# =============================================================================
# ADMINISTRATOR
# =============================================================================

@router.get("/admin-summary", response_model=AdminDashboardSummary)
async def get_admin_summary(
    period: Optional[str] = Query(None, description="day | week | month | year; omit for all time"),
    actor: Actor = Depends(require_admin),
    service: ReportingService = Depends(get_reporting_service),
) -> AdminDashboardSummary:
    """Platform-wide dashboard summary"""
    logger.info("Admin summary requested", admin_id=str(actor.user_id))
    return await service.admin_summary(period)


@router.get("/admin-revenue-chart", response_model=AdminRevenueChart)
async def get_admin_revenue_chart(
    period: Optional[str] = Query("week", description="day | week | month | year"),
    actor: Actor = Depends(require_admin),
    service: ReportingService = Depends(get_reporting_service),
) -> AdminRevenueChart:
    """Platform revenue and commission chart"""
    return await service.admin_revenue_chart(period)


@router.get("/admin-reports", response_model=CompositeReport)
async def get_admin_reports(
    from_date: Optional[datetime] = Query(None, alias="from"),
    to_date: Optional[datetime] = Query(None, alias="to"),
    category_id: Optional[UUID] = None,
    page: int = 1,
    page_size: int = 10,
    actor: Actor = Depends(require_admin),
    service: ReportingService = Depends(get_reporting_service),
) -> CompositeReport:
    """Platform-wide composite report with salesperson contributions"""
    logger.info("Admin report requested", admin_id=str(actor.user_id))
    return await service.admin_composite_report(
        start=from_date,
        end=to_date,
        category_id=category_id,
        page=page,
        page_size=page_size,
    )
