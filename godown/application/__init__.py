"""Application services."""

from .catalog import CatalogService
from .expenses import ExpenseService
from .productivity import ProductivityService
from .sales import NO_RECORDS_MESSAGE, NO_SOURCES_MESSAGE, SalesService, SourceImportError, SourceMerger
from .state import (
    configure_services,
    get_catalog_service,
    get_entity_store,
    get_expense_service,
    get_productivity_service,
    get_sales_service,
    reset_dashboard_state,
)

__all__ = [
    "CatalogService",
    "ExpenseService",
    "NO_RECORDS_MESSAGE",
    "NO_SOURCES_MESSAGE",
    "ProductivityService",
    "SalesService",
    "SourceImportError",
    "SourceMerger",
    "configure_services",
    "get_catalog_service",
    "get_entity_store",
    "get_expense_service",
    "get_productivity_service",
    "get_sales_service",
    "reset_dashboard_state",
]
