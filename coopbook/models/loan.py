from pydantic import Field
from typing import Optional
from datetime import date
from decimal import Decimal
import enum

from coopbook.models.base import RecordModel, ZERO


class LoanStatus(str, enum.Enum):
    """Loan status."""
    PENDING = "pending"
    APPROVED = "approved"
    ACTIVE = "active"
    COMPLETED = "completed"
    DEFAULTED = "defaulted"


class LoanRequestStatus(str, enum.Enum):
    """Loan request status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Loan(RecordModel):
    """Disbursed loan. remaining_balance never drops below zero."""
    id: str
    member_id: str
    request_id: Optional[str] = None
    amount: Decimal
    interest_rate: Decimal
    tenure: int
    emi_amount: Decimal
    remaining_balance: Decimal = Field(ge=0)
    status: LoanStatus = LoanStatus.ACTIVE
    start_date: date
    maturity_date: date
    purpose: str = ""

    @property
    def principal_recovered(self) -> Decimal:
        return self.amount - self.remaining_balance


class LoanRequest(RecordModel):
    """Loan request with member name and deposits snapshotted at request time."""
    id: str
    member_id: str
    member_name: str
    amount: Decimal
    purpose: str = "Loan Request"
    requested_date: date
    status: LoanRequestStatus = LoanRequestStatus.PENDING
    total_deposits: Decimal = Field(default=ZERO)
    approved_amount: Optional[Decimal] = None
    approved_date: Optional[date] = None
    rejection_reason: Optional[str] = None
