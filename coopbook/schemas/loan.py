from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from decimal import Decimal

from coopbook.models.loan import LoanStatus


class LoanRequestCreate(BaseModel):
    """Schema for submitting a loan request."""
    member_id: str = Field(..., description="Requesting member")
    amount: Decimal = Field(..., gt=0, description="Requested amount")
    purpose: Optional[str] = Field(None, description="Purpose of the loan")


class LoanApproveRequest(BaseModel):
    """Schema for approving a loan request."""
    approved_amount: Optional[Decimal] = Field(None, gt=0, description="Amount to disburse, defaults to the requested amount")
    start_date: Optional[date] = Field(None, description="Disbursement date, defaults to today")


class LoanRejectRequest(BaseModel):
    reason: str = Field(..., min_length=1, description="Reason shown to the member")


class InstallmentRequest(BaseModel):
    member_id: str
    amount: Decimal = Field(..., gt=0)


class LoanUpdate(BaseModel):
    """Administrative loan correction."""
    amount: Optional[Decimal] = Field(None, gt=0)
    interest_rate: Optional[Decimal] = Field(None, ge=0)
    tenure: Optional[int] = Field(None, gt=0)
    emi_amount: Optional[Decimal] = Field(None, ge=0)
    remaining_balance: Optional[Decimal] = Field(None, ge=0)
    status: Optional[LoanStatus] = None
    start_date: Optional[date] = None
    maturity_date: Optional[date] = None
    purpose: Optional[str] = None
