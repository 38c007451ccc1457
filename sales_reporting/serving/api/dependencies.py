"""
API Dependencies

Acting identity and reporting service wiring for route handlers.

Authentication is handled upstream: the gateway forwards the verified user
id and role in the ``X-User-Id`` and ``X-User-Role`` headers.
"""

from dataclasses import dataclass
from typing import AsyncGenerator, Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from sales_reporting.config import BusinessSettings, current_platform_fee_rate
from sales_reporting.database.connection import get_db_dependency
from sales_reporting.database.models import UserRole
from sales_reporting.database.repository import SqlAlchemyOrderSource
from sales_reporting.reporting.exceptions import ForbiddenError, UnauthenticatedError
from sales_reporting.reporting.service import ReportingService, limits_from_settings


@dataclass(frozen=True)
class Actor:
    """Authenticated caller"""
    user_id: Optional[UUID]
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


async def get_actor(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Actor:
    """Read the caller from gateway headers; a malformed id is rejected"""
    user_id = None
    if x_user_id:
        try:
            user_id = UUID(x_user_id)
        except ValueError:
            raise UnauthenticatedError("Invalid user identity")
    return Actor(user_id=user_id, role=x_user_role.lower() if x_user_role else None)


async def require_user(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.user_id is None:
        raise UnauthenticatedError()
    return actor


async def require_admin(actor: Actor = Depends(require_user)) -> Actor:
    if not actor.is_admin:
        raise ForbiddenError("Administrator role required")
    return actor


async def get_reporting_service(
    db: AsyncSession = Depends(get_db_dependency),
) -> AsyncGenerator[ReportingService, None]:
    """Reporting service reading the ledger through the request's session"""
    settings = BusinessSettings()
    yield ReportingService(
        SqlAlchemyOrderSource(db),
        fee_rate_provider=current_platform_fee_rate,
        limits=limits_from_settings(settings),
        default_report_days=settings.default_report_days,
    )
