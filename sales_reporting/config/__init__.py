"""
Sales Reporting Engine
Configuration Module
"""
from .settings import Settings, BusinessSettings, get_settings, current_platform_fee_rate

__all__ = ["Settings", "BusinessSettings", "get_settings", "current_platform_fee_rate"]
