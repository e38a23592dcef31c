from coopbook.db.base import Base

# Import the snapshot table so Alembic can detect it
from coopbook.models.snapshot import StateSnapshot
from coopbook.models.member import Member, MemberStatus
from coopbook.models.passbook import (
    EntryComponents,
    EntryType,
    PassbookEntry,
    PaymentMode,
)
from coopbook.models.loan import Loan, LoanRequest, LoanRequestStatus, LoanStatus
from coopbook.models.fund import ExpenseCategory, FundDirection, FundEntry
from coopbook.models.maturity import MaturityOverride
from coopbook.models.settings import SocietySettings
from coopbook.models.state import LedgerState

__all__ = [
    "Base",
    "StateSnapshot",
    "Member",
    "MemberStatus",
    "EntryComponents",
    "EntryType",
    "PassbookEntry",
    "PaymentMode",
    "Loan",
    "LoanRequest",
    "LoanRequestStatus",
    "LoanStatus",
    "ExpenseCategory",
    "FundDirection",
    "FundEntry",
    "MaturityOverride",
    "SocietySettings",
    "LedgerState",
]
