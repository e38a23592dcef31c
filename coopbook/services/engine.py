"""Engine facade used by the API and forms.

Every mutation returns an OperationResult. Components raise LedgerError
subclasses; this module is where they are turned into structured failures.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, List, Dict, Callable, Any

from coopbook.core.config import settings, STATE_FILE_PATH
from coopbook.models.fund import ExpenseCategory, FundDirection
from coopbook.models.passbook import EntryType, PaymentMode
from coopbook.schemas.common import OperationResult
from coopbook.schemas.maturity import MaturityProjection
from coopbook.schemas.report import AuditReport, CashbookReport, DefaulterRow, MemberReport
from coopbook.services.backup import BackupService
from coopbook.services.errors import LedgerError
from coopbook.services.fund import AdminFundLedger, ExpenseLedger
from coopbook.services.loan import LoanBook
from coopbook.services.maturity import MaturityCalculator
from coopbook.services.member import MemberDirectory
from coopbook.services.passbook import MemberEntries, PassbookLedger
from coopbook.services.persistence import (
    InMemoryStatePort,
    JsonFileStatePort,
    SqlAlchemyStatePort,
    StatePort,
)
from coopbook.services.report import AuditReportEngine
from coopbook.services.settings import SettingsService
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)


class LedgerEngine:
    """All society components wired onto one state store."""

    def __init__(self, port: Optional[StatePort] = None, snapshot_version: str = None):
        self.store = StateStore(port, snapshot_version or settings.SNAPSHOT_VERSION)
        self.members = MemberDirectory(self.store)
        self.passbook = PassbookLedger(self.store)
        self.loans = LoanBook(self.store)
        self.admin_fund = AdminFundLedger(self.store)
        self.expenses = ExpenseLedger(self.store)
        self.maturity = MaturityCalculator(self.store)
        self.reports = AuditReportEngine(self.store, self.maturity)
        self.backup = BackupService(self.store)
        self.settings = SettingsService(self.store)

    @property
    def state(self):
        return self.store.current

    def _run(self, action: str, operation: Callable[[], Any], success_message: str) -> OperationResult:
        try:
            data = operation()
        except LedgerError as e:
            logger.warning(f"{action} failed: {e}")
            return OperationResult(success=False, message=str(e), error=e.kind)
        return OperationResult(success=True, message=success_message, data=data)

    # Members

    def register_member(self, name: str, phone: str, join_date: Optional[date] = None, **profile) -> OperationResult:
        return self._run(
            "register_member",
            lambda: self.members.register_member(name, phone, join_date, **profile),
            "Member registered successfully",
        )

    def update_member(self, member_id: str, **changes) -> OperationResult:
        return self._run(
            "update_member",
            lambda: self.members.update_member(member_id, **changes),
            "Member updated successfully",
        )

    def activate_member(self, member_id: str) -> OperationResult:
        return self._run("activate_member", lambda: self.members.activate_member(member_id), "Member activated")

    def deactivate_member(self, member_id: str) -> OperationResult:
        return self._run("deactivate_member", lambda: self.members.deactivate_member(member_id), "Member deactivated")

    # Passbook

    def append_entry(
        self,
        member_id: str,
        components,
        entry_date: Optional[date] = None,
        mode: PaymentMode = PaymentMode.CASH,
        description: str = "",
        loan_id: Optional[str] = None,
        entry_type: Optional[EntryType] = None
    ) -> OperationResult:
        return self._run(
            "append_entry",
            lambda: self.passbook.append_entry(
                member_id, components, entry_date, mode, description, loan_id, entry_type
            ),
            "Passbook entry added",
        )

    def current_balance(self, member_id: str) -> Decimal:
        return self.passbook.current_balance(member_id)

    def entries_for(self, member_id: str) -> MemberEntries:
        return self.passbook.entries_for(member_id)

    # Loans

    def request_loan(self, member_id: str, amount, purpose: str = None) -> OperationResult:
        return self._run(
            "request_loan",
            lambda: self.loans.request_loan(member_id, amount, purpose),
            "Loan request submitted successfully",
        )

    def approve_loan(self, request_id: str, approved_amount=None, start_date: Optional[date] = None) -> OperationResult:
        return self._run(
            "approve_loan",
            lambda: self.loans.approve_loan(request_id, approved_amount, start_date),
            "Loan approved and disbursed",
        )

    def reject_loan(self, request_id: str, reason: str) -> OperationResult:
        return self._run("reject_loan", lambda: self.loans.reject_loan(request_id, reason), "Loan request rejected")

    def apply_installment(self, member_id: str, loan_id: str, amount) -> OperationResult:
        return self._run(
            "apply_installment",
            lambda: self.loans.apply_installment(member_id, loan_id, amount),
            "Installment applied",
        )

    def mark_loan_defaulted(self, loan_id: str) -> OperationResult:
        return self._run("mark_loan_defaulted", lambda: self.loans.mark_defaulted(loan_id), "Loan marked as defaulted")

    def delete_loan(self, loan_id: str) -> OperationResult:
        return self._run("delete_loan", lambda: self.loans.delete_loan(loan_id), "Loan deleted")

    def update_loan(self, loan_id: str, **changes) -> OperationResult:
        return self._run("update_loan", lambda: self.loans.update_loan(loan_id, **changes), "Loan updated")

    # Fund ledgers

    def add_admin_transaction(
        self,
        amount,
        direction: FundDirection,
        description: str = "",
        entry_date: Optional[date] = None
    ) -> OperationResult:
        return self._run(
            "add_admin_transaction",
            lambda: self.admin_fund.append(amount, direction, description, entry_date=entry_date),
            "Admin fund transaction recorded",
        )

    def delete_admin_transaction(self, entry_id: str) -> OperationResult:
        return self._run(
            "delete_admin_transaction",
            lambda: self.admin_fund.delete(entry_id),
            "Admin fund transaction deleted",
        )

    def add_expense_entry(
        self,
        amount,
        direction: FundDirection,
        description: str = "",
        category: Optional[ExpenseCategory] = None,
        entry_date: Optional[date] = None
    ) -> OperationResult:
        return self._run(
            "add_expense_entry",
            lambda: self.expenses.append(amount, direction, description, category, entry_date),
            "Expense ledger entry recorded",
        )

    def add_expense(
        self,
        amount,
        category: ExpenseCategory,
        description: str,
        entry_date: Optional[date] = None
    ) -> OperationResult:
        return self._run(
            "add_expense",
            lambda: self.expenses.add_expense(amount, category, description, entry_date),
            "Expense recorded",
        )

    def delete_expense_entry(self, entry_id: str) -> OperationResult:
        return self._run("delete_expense_entry", lambda: self.expenses.delete(entry_id), "Expense entry deleted")

    def collect_maintenance_fee(
        self,
        member_id: str,
        amount=None,
        entry_date: Optional[date] = None
    ) -> OperationResult:
        return self._run(
            "collect_maintenance_fee",
            lambda: self.expenses.collect_maintenance_fee(member_id, amount, entry_date),
            "Maintenance fee collected",
        )

    # Maturity

    def get_maturity_data(self, as_of: Optional[date] = None) -> List[MaturityProjection]:
        return self.maturity.get_maturity_data(as_of=as_of)

    def set_maturity_override(self, member_id: str, amount) -> OperationResult:
        return self._run(
            "set_maturity_override",
            lambda: self.maturity.set_override(member_id, amount),
            "Maturity override saved",
        )

    def clear_maturity_override(self, member_id: str) -> OperationResult:
        return self._run(
            "clear_maturity_override",
            lambda: self.maturity.clear_override(member_id),
            "Maturity override cleared",
        )

    # Reports

    def get_audit_data(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        as_of: Optional[date] = None
    ) -> AuditReport:
        return self.reports.get_audit_data(start_date, end_date, as_of)

    def get_cashbook_data(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> CashbookReport:
        return self.reports.get_cashbook_data(start_date, end_date)

    def get_member_summary_data(self) -> List[MemberReport]:
        return self.reports.get_member_summary_data()

    def get_defaulters_data(self, as_of: Optional[date] = None) -> List[DefaulterRow]:
        return self.reports.get_defaulters_data(as_of)

    # Settings and backup

    def update_settings(self, **changes) -> OperationResult:
        return self._run("update_settings", lambda: self.settings.update_settings(**changes), "Settings updated")

    def reset_settings(self) -> OperationResult:
        return self._run("reset_settings", self.settings.reset_settings, "Settings reset to defaults")

    def export_data(self) -> str:
        return self.backup.export_data()

    def import_data(self, json_data: str) -> OperationResult:
        return self.backup.import_data(json_data)

    def factory_reset(self) -> OperationResult:
        def reset():
            self.backup.factory_reset()

        return self._run("factory_reset", reset, "All data cleared")

    # Read-side totals

    def admin_fund_summary(self) -> Dict[str, Decimal]:
        return self.admin_fund.summary()

    def expense_summary(self) -> Dict[str, Decimal]:
        return self.expenses.summary()

    def maintenance_stats(self) -> Dict[str, object]:
        return self.expenses.maintenance_stats()

    def society_cash_in_hand(self) -> Decimal:
        return self.reports.society_cash_in_hand()


def build_state_port(backend: Optional[str] = None) -> StatePort:
    """Pick the persistence port configured by STATE_BACKEND."""
    backend = (backend or settings.STATE_BACKEND).lower()
    if backend == "memory":
        return InMemoryStatePort()
    if backend == "file":
        return JsonFileStatePort(STATE_FILE_PATH)
    if backend == "sql":
        from coopbook.db.base import SessionLocal
        return SqlAlchemyStatePort(SessionLocal, settings.STATE_KEY)
    raise ValueError(f"Unknown state backend: {backend}")
