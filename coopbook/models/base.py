from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce a number or numeric string into a Decimal amount."""
    if value is None:
        return ZERO
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class RecordModel(BaseModel):
    """Immutable ledger record serialized with camelCase keys."""

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
