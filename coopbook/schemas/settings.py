from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal


class SettingsUpdate(BaseModel):
    """Schema for the Control Center form. Unset fields keep their value."""
    society_name: Optional[str] = None
    registration_number: Optional[str] = None
    society_address: Optional[str] = None
    contact_email: Optional[str] = None
    currency: Optional[str] = None
    interest_rate: Optional[Decimal] = Field(None, ge=0, le=100, description="Annual loan interest rate percentage")
    loan_tenure_months: Optional[int] = Field(None, gt=0, description="Default loan tenure")
    loan_limit_percent: Optional[Decimal] = Field(None, ge=0, le=100, description="Loan limit as a share of deposits")
    fine_amount: Optional[Decimal] = Field(None, ge=0, description="Late payment fine")
    grace_period_days: Optional[int] = Field(None, ge=0, description="Days after a due date before a loan is overdue")
    maintenance_fee: Optional[Decimal] = Field(None, ge=0, description="Default maintenance fee")
