"""
Sales Reporting Engine
Database Module
"""
from .connection import close_database, get_db, get_db_dependency, init_database
from .models import Base, CategoryRecord, OrderItemRecord, OrderRecord, ProductRecord, UserRecord, UserRole
from .repository import SqlAlchemyOrderSource

__all__ = [
    "Base",
    "CategoryRecord",
    "OrderItemRecord",
    "OrderRecord",
    "ProductRecord",
    "SqlAlchemyOrderSource",
    "UserRecord",
    "UserRole",
    "close_database",
    "get_db",
    "get_db_dependency",
    "init_database",
]
