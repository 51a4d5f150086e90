"""Process-wide service wiring."""
from __future__ import annotations

from godown.application.catalog import CatalogService
from godown.application.expenses import ExpenseService
from godown.application.productivity import ProductivityService
from godown.application.sales import SalesService
from godown.core.settings import Settings
from godown.infrastructure import InMemoryEntityStore, configure_sheet_client

_store = InMemoryEntityStore()
_catalog = CatalogService(_store)
_expenses = ExpenseService(_store)
_productivity = ProductivityService(_store)
_sales = SalesService(_store)


def configure_services(settings: Settings) -> None:
    """Rebuild the analytics services with the given runtime settings."""

    global _productivity, _sales
    _productivity = ProductivityService(_store, policy=settings.stage_absence_policy)
    _sales = SalesService(_store, fetch_timeout=settings.fetch_timeout, top_n=settings.top_n)


def get_entity_store() -> InMemoryEntityStore:
    return _store


def get_catalog_service() -> CatalogService:
    return _catalog


def get_expense_service() -> ExpenseService:
    return _expenses


def get_productivity_service() -> ProductivityService:
    return _productivity


def get_sales_service() -> SalesService:
    return _sales


def reset_dashboard_state() -> None:
    """Reset the in-memory store and the sheet client (used in tests)."""

    _store.reset()
    configure_sheet_client(None)
