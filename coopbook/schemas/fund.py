from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal

from coopbook.models.fund import ExpenseCategory, FundDirection


class AdminFundCreate(BaseModel):
    """Schema for an admin fund injection or withdrawal."""
    amount: Decimal = Field(..., gt=0, description="Amount moved")
    type: FundDirection = Field(..., description="INJECT or WITHDRAW")
    description: str = Field("", description="Reason for the movement")


class ExpenseEntryCreate(BaseModel):
    """Schema for an expense ledger entry."""
    amount: Decimal = Field(..., gt=0, description="Amount spent or received")
    type: FundDirection = Field(FundDirection.EXPENSE, description="INCOME or EXPENSE")
    category: Optional[ExpenseCategory] = Field(None, description="Expense category")
    description: str = Field("", description="What the money was for")


class MaintenanceFeeRequest(BaseModel):
    member_id: str
    amount: Optional[Decimal] = Field(None, gt=0, description="Defaults to the configured maintenance fee")
