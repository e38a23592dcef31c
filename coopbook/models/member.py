from pydantic import Field
from typing import Optional
from datetime import date
from decimal import Decimal
import enum

from coopbook.models.base import RecordModel, ZERO


class MemberStatus(str, enum.Enum):
    """Member status enum."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Member(RecordModel):
    """Society member with denormalized deposit and loan totals."""
    id: str
    name: str
    father_name: Optional[str] = None
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    join_date: date
    status: MemberStatus = MemberStatus.ACTIVE
    total_deposits: Decimal = Field(default=ZERO)
    total_loans: Decimal = Field(default=ZERO)
    has_paid_maintenance: bool = False
