from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from decimal import Decimal

from coopbook.models.passbook import EntryType, PaymentMode


class PassbookEntryCreate(BaseModel):
    """Schema for adding a passbook entry. Any subset of components may be set."""
    deposit_amount: Decimal = Field(Decimal("0"), ge=0, description="Deposit credited to the member")
    installment_amount: Decimal = Field(Decimal("0"), ge=0, description="Loan principal repaid")
    interest_amount: Decimal = Field(Decimal("0"), ge=0, description="Loan interest paid")
    fine_amount: Decimal = Field(Decimal("0"), ge=0, description="Late fine paid")
    withdrawal_amount: Decimal = Field(Decimal("0"), ge=0, description="Savings withdrawn")
    entry_date: Optional[date] = Field(None, description="Entry date, defaults to today")
    payment_mode: PaymentMode = Field(PaymentMode.CASH, description="cash, bank, upi or cheque")
    description: str = Field("", description="Free text shown in the passbook")
    loan_id: Optional[str] = Field(None, description="Loan the installment is applied to")
    entry_type: Optional[EntryType] = Field(None, description="Overrides the derived entry type")

    def components(self) -> dict:
        return {
            "deposit_amount": self.deposit_amount,
            "installment_amount": self.installment_amount,
            "interest_amount": self.interest_amount,
            "fine_amount": self.fine_amount,
            "withdrawal_amount": self.withdrawal_amount,
        }
