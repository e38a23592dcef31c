from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from decimal import Decimal


class MaturityProjection(BaseModel):
    """36-month maturity projection row for one member."""
    member_id: str
    member_name: str
    join_date: date
    current_deposit: Decimal
    outstanding_loan: Decimal
    tenure: int
    months_completed: int
    monthly_deposit: Decimal
    target_deposit: Decimal
    projected_interest: Decimal
    manual_interest: Decimal
    settled_interest: Decimal
    monthly_interest_share: Decimal
    current_accrued_interest: Decimal
    maturity_amount: Decimal
    net_payable: Decimal
    status: str
    is_override: bool


class MaturityOverrideRequest(BaseModel):
    """Schema for setting a manual maturity interest."""
    amount: Decimal = Field(..., ge=0, description="Manual interest replacing the computed projection")


class MaturityOverrideResponse(BaseModel):
    member_id: str
    manual_interest: Optional[Decimal] = None
    is_override: bool
