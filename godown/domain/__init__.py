"""Domain layer definitions."""

from .entities import DataSource, Employee, Expense, ExpenseCategory, Product, Unit, WorkEntry, WorkType
from .sales import SalesRecord

__all__ = [
    "DataSource",
    "Employee",
    "Expense",
    "ExpenseCategory",
    "Product",
    "SalesRecord",
    "Unit",
    "WorkEntry",
    "WorkType",
]
