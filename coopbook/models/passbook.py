from pydantic import Field
from typing import Optional
from datetime import date
from decimal import Decimal
import enum

from coopbook.models.base import RecordModel, ZERO


class EntryType(str, enum.Enum):
    """Passbook entry type."""
    DEPOSIT = "deposit"
    INSTALLMENT = "installment"
    INTEREST = "interest"
    FINE = "fine"
    WITHDRAWAL = "withdrawal"
    LOAN = "loan"


class PaymentMode(str, enum.Enum):
    """How the money moved."""
    CASH = "cash"
    BANK = "bank"
    UPI = "upi"
    CHEQUE = "cheque"


class EntryComponents(RecordModel):
    """Component amounts carried by a single passbook entry."""
    deposit_amount: Decimal = Field(default=ZERO)
    installment_amount: Decimal = Field(default=ZERO)
    interest_amount: Decimal = Field(default=ZERO)
    fine_amount: Decimal = Field(default=ZERO)
    withdrawal_amount: Decimal = Field(default=ZERO)

    @property
    def credits(self) -> Decimal:
        return self.deposit_amount + self.interest_amount + self.fine_amount

    @property
    def debits(self) -> Decimal:
        return self.installment_amount + self.withdrawal_amount

    @property
    def net_delta(self) -> Decimal:
        """Signed change this entry makes to the member's running balance."""
        return self.credits - self.debits

    def nonzero(self):
        """Yield (entry type, amount) for each nonzero component in ledger order."""
        pairs = (
            (EntryType.DEPOSIT, self.deposit_amount),
            (EntryType.INSTALLMENT, self.installment_amount),
            (EntryType.INTEREST, self.interest_amount),
            (EntryType.FINE, self.fine_amount),
            (EntryType.WITHDRAWAL, self.withdrawal_amount),
        )
        for entry_type, amount in pairs:
            if amount:
                yield entry_type, amount


class PassbookEntry(EntryComponents):
    """Append-only passbook record for one member."""
    id: str
    member_id: str
    loan_id: Optional[str] = None
    date: date
    type: EntryType
    payment_mode: PaymentMode = PaymentMode.CASH
    balance: Decimal
    description: str = ""
