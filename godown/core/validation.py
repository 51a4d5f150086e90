from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from godown.domain.entities import EXPENSE_ACTIVE, STATUS_COMPLETE, STATUS_IN_PROGRESS, Expense, WorkEntry

ModelT = TypeVar("ModelT", bound=BaseModel)


class ValidationError(Exception):
    """Raised when domain validation fails."""


class ConflictError(Exception):
    """Raised when an operation is not allowed in the entity's current state."""


def validate_name(name: str | None, kind: str = "name") -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"{kind} is required")
    return cleaned


def validate_work_entry(entry: WorkEntry) -> None:
    if entry.target_quantity is None or entry.target_quantity <= 0:
        raise ValidationError("target_quantity must be a positive integer")
    if entry.status not in {STATUS_IN_PROGRESS, STATUS_COMPLETE}:
        raise ValidationError(f"unknown status {entry.status!r}")
    if entry.status == STATUS_IN_PROGRESS and entry.actual_quantity is not None:
        raise ValidationError("actual_quantity must stay empty while the entry is in progress")
    if entry.status == STATUS_COMPLETE:
        if entry.actual_quantity is None:
            raise ValidationError("a complete entry requires actual_quantity")
        if entry.actual_quantity < 0:
            raise ValidationError("actual_quantity cannot be negative")


def ensure_editable(entry: WorkEntry) -> None:
    if entry.status == STATUS_COMPLETE:
        raise ConflictError(f"work entry {entry.id} is already complete")


def parse_payload(model: type[ModelT], payload: dict | None) -> ModelT:
    """Validate a raw request body against ``model``, raising ``ValidationError``."""

    try:
        return model.model_validate(payload or {})
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}" for error in exc.errors()
        )
        raise ValidationError(problems) from exc


def validate_replacement(expense: Expense, original: Expense | None) -> None:
    if not expense.is_replacement:
        if expense.original_expense_id is not None:
            raise ValidationError("original_expense_id is only allowed on a replacement")
        return
    if expense.original_expense_id is None or original is None:
        raise ValidationError("a replacement must name the expense it replaces")
    if not (expense.replacement_reason or "").strip():
        raise ValidationError("a replacement requires replacement_reason")
    if original.status != EXPENSE_ACTIVE:
        raise ConflictError(f"expense {original.id} is already {original.status}")
