"""Expense tracking: purchases by category and replacements of earlier purchases."""
from __future__ import annotations

import logging
from dataclasses import asdict, replace
from typing import Any, Iterable

from godown.core.schema import ExpenseCreate, ExpenseUpdate
from godown.core.validation import ValidationError, validate_replacement
from godown.domain import Expense
from godown.domain.entities import EXPENSE_ACTIVE, EXPENSE_REPLACED
from godown.infrastructure import EntityStore

logger = logging.getLogger(__name__)

# fields an update may change but never clear
_REQUIRED = ("item_name", "amount", "category_id", "expense_date")


class ExpenseService:
    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def _category_names(self) -> dict[int, str]:
        return {item.id: item.name for item in self._store.list_catalog("expense_categories")}

    def _check_category(self, category_id: int) -> None:
        if category_id not in self._category_names():
            raise ValidationError(f"unknown expense category {category_id}")

    def describe(self, expenses: Iterable[Expense]) -> list[dict[str, Any]]:
        names = self._category_names()
        rows = []
        for expense in expenses:
            row = asdict(expense)
            name = names.get(expense.category_id)
            row["category"] = {"id": expense.category_id, "name": name} if name is not None else None
            rows.append(row)
        return rows

    def list_expenses(self) -> list[dict[str, Any]]:
        expenses = sorted(
            self._store.list_expenses(),
            key=lambda expense: (expense.expense_date, expense.id),
            reverse=True,
        )
        return self.describe(expenses)

    def record_expense(self, payload: ExpenseCreate) -> Expense:
        """Store a purchase; a replacement marks the expense it supersedes as replaced."""

        self._check_category(payload.category_id)
        expense = Expense(id=0, status=EXPENSE_ACTIVE, **payload.model_dump())

        original = None
        if expense.original_expense_id is not None:
            try:
                original = self._store.get_expense(expense.original_expense_id)
            except KeyError as exc:
                raise ValidationError(f"unknown expense {expense.original_expense_id}") from exc
        validate_replacement(expense, original)

        created = self._store.add_expense(expense)
        if original is not None:
            self._store.save_expense(replace(original, status=EXPENSE_REPLACED))
            logger.info("Expense %s replaced by %s", original.id, created.id)
        return created

    def update_expense(self, expense_id: int, payload: ExpenseUpdate) -> Expense:
        expense = self._store.get_expense(expense_id)
        changes = payload.model_dump(exclude_unset=True)
        for key in _REQUIRED:
            if key in changes and changes[key] is None:
                changes.pop(key)
        if "category_id" in changes:
            self._check_category(changes["category_id"])
        return self._store.save_expense(replace(expense, **changes))

    def set_status(self, expense_id: int, status: str) -> Expense:
        expense = self._store.get_expense(expense_id)
        return self._store.save_expense(replace(expense, status=status))

    def delete_expense(self, expense_id: int) -> None:
        self._store.delete_expense(expense_id)


__all__ = ["ExpenseService"]
