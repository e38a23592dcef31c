from datetime import datetime
from decimal import Decimal

from coopbook.models.base import RecordModel


class MaturityOverride(RecordModel):
    """Administrator-supplied interest replacing the computed projection."""
    member_id: str
    manual_interest: Decimal
    is_override: bool = True
    updated_at: datetime
