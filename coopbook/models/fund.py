from typing import Optional
from datetime import date, datetime
from decimal import Decimal
import enum

from coopbook.models.base import RecordModel


class FundDirection(str, enum.Enum):
    """Direction of a fund ledger movement."""
    INJECT = "INJECT"
    WITHDRAW = "WITHDRAW"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class ExpenseCategory(str, enum.Enum):
    """Expense ledger category."""
    MAINTENANCE_FEE = "MAINTENANCE_FEE"
    STATIONERY = "STATIONERY"
    PRINTING = "PRINTING"
    LOAN_FORMS = "LOAN_FORMS"
    REFRESHMENTS = "REFRESHMENTS"
    OTHER = "OTHER"


class FundEntry(RecordModel):
    """Admin fund transaction or expense ledger entry."""
    id: str
    date: date
    type: FundDirection
    category: Optional[ExpenseCategory] = None
    amount: Decimal
    description: str = ""
    member_id: Optional[str] = None
    member_name: Optional[str] = None
    running_balance: Decimal
    created_at: datetime
