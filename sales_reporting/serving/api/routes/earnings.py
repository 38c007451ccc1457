"""
Earnings API Endpoints

Earnings summary and paginated earnings ledger of the calling sales agent.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from sales_reporting.reporting.models import OrderStatus, PaymentStatus
from sales_reporting.reporting.schemas import EarningsHistory, EarningsSummary
from sales_reporting.reporting.service import ReportingService
from sales_reporting.serving.api.dependencies import Actor, get_reporting_service, require_user

router = APIRouter()


@router.get("/summary", response_model=EarningsSummary)
async def get_earnings_summary(
    actor: Actor = Depends(require_user),
    service: ReportingService = Depends(get_reporting_service),
) -> EarningsSummary:
    return await service.earnings_summary(actor.user_id)


@router.get("/history", response_model=EarningsHistory)
async def get_earnings_history(
    page: int = 1,
    page_size: int = 10,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    actor: Actor = Depends(require_user),
    service: ReportingService = Depends(get_reporting_service),
) -> EarningsHistory:
    """Orders of the calling agent with fee and net earnings, newest first"""
    return await service.earnings_history(
        actor.user_id,
        page=page,
        page_size=page_size,
        start_date=start_date,
        end_date=end_date,
        status=status,
        payment_status=payment_status,
    )
