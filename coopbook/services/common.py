import calendar
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Tuple, TypeVar

from coopbook.models.base import to_money
from coopbook.services.errors import ValidationError

T = TypeVar("T")


def new_id() -> str:
    return str(uuid.uuid4())


def replace_by_id(records: Tuple[T, ...], updated: T) -> Tuple[T, ...]:
    """Return a new tuple with the record sharing ``updated.id`` swapped out."""
    return tuple(updated if r.id == updated.id else r for r in records)


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_money(value, label: str = "Amount") -> Decimal:
    """to_money for caller input: anything that is not a finite number is a ValidationError."""
    try:
        amount = to_money(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{label} must be a number, got {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{label} must be a number, got {value!r}")
    return amount


def parse_choice(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Unknown {label}: {value!r}")
