from pydantic import Field
from typing import Tuple, Optional

from coopbook.models.base import RecordModel
from coopbook.models.member import Member
from coopbook.models.passbook import PassbookEntry
from coopbook.models.loan import Loan, LoanRequest
from coopbook.models.fund import FundEntry
from coopbook.models.maturity import MaturityOverride
from coopbook.models.settings import SocietySettings


class LedgerState(RecordModel):
    """One immutable revision of the whole society book.

    Mutations never edit a LedgerState; they build the next revision with
    ``model_copy(update=...)`` and hand it to the state store.
    """
    revision: int = 0
    settings: SocietySettings = Field(default_factory=SocietySettings)
    members: Tuple[Member, ...] = ()
    passbook: Tuple[PassbookEntry, ...] = ()
    loans: Tuple[Loan, ...] = ()
    loan_requests: Tuple[LoanRequest, ...] = ()
    admin_fund_ledger: Tuple[FundEntry, ...] = ()
    expense_ledger: Tuple[FundEntry, ...] = ()
    maturity_overrides: Tuple[MaturityOverride, ...] = ()

    def find_member(self, member_id: str) -> Optional[Member]:
        return next((m for m in self.members if m.id == member_id), None)

    def find_loan(self, loan_id: str) -> Optional[Loan]:
        return next((l for l in self.loans if l.id == loan_id), None)

    def find_request(self, request_id: str) -> Optional[LoanRequest]:
        return next((r for r in self.loan_requests if r.id == request_id), None)

    def find_override(self, member_id: str) -> Optional[MaturityOverride]:
        return next((o for o in self.maturity_overrides if o.member_id == member_id), None)
