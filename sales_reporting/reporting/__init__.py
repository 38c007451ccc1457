"""
Sales Reporting Engine
Reporting Module
"""
from .exceptions import ForbiddenError, ReportingError, ReportValidationError, UnauthenticatedError
from .filters import Scope
from .models import Category, Order, OrderItem, OrderStatus, PaymentStatus, Product, ProductStatus, SalesAgent
from .periods import Period, TimeRange, generate_buckets, parse_period, resolve_period
from .service import ReportingService, limits_from_settings
from .sources import InMemoryOrderSource, OrderSource

__all__ = [
    "Category",
    "ForbiddenError",
    "InMemoryOrderSource",
    "Order",
    "OrderItem",
    "OrderSource",
    "OrderStatus",
    "PaymentStatus",
    "Period",
    "Product",
    "ProductStatus",
    "ReportingError",
    "ReportingService",
    "ReportValidationError",
    "SalesAgent",
    "Scope",
    "TimeRange",
    "UnauthenticatedError",
    "generate_buckets",
    "limits_from_settings",
    "parse_period",
    "resolve_period",
]
