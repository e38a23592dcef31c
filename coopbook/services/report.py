"""Audit reports reconciled from the merged society ledger."""
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, List

from coopbook.models.base import ZERO
from coopbook.models.fund import FundDirection
from coopbook.models.loan import LoanStatus
from coopbook.models.passbook import EntryType
from coopbook.models.state import LedgerState
from coopbook.schemas.report import (
    AssetSummary,
    AuditReport,
    AuditSummary,
    CashbookReport,
    CashbookRow,
    DailyLedgerRow,
    DefaulterRow,
    ExpenseSummary,
    IncomeSummary,
    LedgerTransaction,
    LoanSummary,
    MemberReport,
    ModeBalances,
)
from coopbook.services.common import add_months
from coopbook.services.loan import outstanding_balance
from coopbook.services.maturity import MaturityCalculator
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)

LOAN_GIVEN = "LOAN_GIVEN"
CREDIT_TYPES = {"DEPOSIT", "INSTALLMENT", "INTEREST", "FINE", "INCOME", "INJECT"}
CASH_MODE = "CASH"


def is_credit(transaction_type: str) -> bool:
    return transaction_type.upper() in CREDIT_TYPES


def merge_transactions(
    state: LedgerState,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> List[LedgerTransaction]:
    """
    Merge passbook, loan disbursements, expense and admin fund ledgers.

    Each nonzero passbook component becomes its own transaction carrying the
    entry's payment mode. Rows outside [start, end] are dropped and the rest
    sorted by date; same-day rows keep merge order.
    """
    transactions: List[LedgerTransaction] = []

    for entry in state.passbook:
        for entry_type, amount in entry.nonzero():
            transactions.append(LedgerTransaction(
                date=entry.date,
                type=entry_type.value.upper(),
                amount=amount,
                mode=entry.payment_mode.value.upper(),
                source="PASSBOOK",
                reference_id=entry.id,
                member_id=entry.member_id,
                description=entry.description,
            ))

    for loan in state.loans:
        transactions.append(LedgerTransaction(
            date=loan.start_date,
            type=LOAN_GIVEN,
            amount=loan.amount,
            mode=CASH_MODE,
            source="LOAN",
            reference_id=loan.id,
            member_id=loan.member_id,
            description=loan.purpose,
        ))

    for source, entries in (("EXPENSE", state.expense_ledger), ("ADMIN", state.admin_fund_ledger)):
        for entry in entries:
            transactions.append(LedgerTransaction(
                date=entry.date,
                type=entry.type.value,
                amount=entry.amount,
                mode=CASH_MODE,
                source=source,
                reference_id=entry.id,
                member_id=entry.member_id,
                description=entry.description,
            ))

    in_range = [
        t for t in transactions
        if (start is None or t.date >= start) and (end is None or t.date <= end)
    ]
    return sorted(in_range, key=lambda t: t.date)


def build_daily_ledger(transactions: List[LedgerTransaction]) -> List[DailyLedgerRow]:
    running = ZERO
    rows = []
    for t in transactions:
        value = abs(t.amount)
        credit = is_credit(t.type)
        running += value if credit else -value
        cash_in = value if credit else ZERO
        cash_out = ZERO if credit else value
        rows.append(DailyLedgerRow(
            date=t.date,
            type=t.type,
            description=t.description,
            deposit=value if t.type == "DEPOSIT" else ZERO,
            emi=value if t.type == "INSTALLMENT" else ZERO,
            loan_out=value if t.type == LOAN_GIVEN else ZERO,
            interest=value if t.type == "INTEREST" else ZERO,
            fine=value if t.type == "FINE" else ZERO,
            cash_in=cash_in,
            cash_out=cash_out,
            net_flow=cash_in - cash_out,
            running_balance=running,
        ))
    return rows


def build_cashbook(transactions: List[LedgerTransaction]):
    """Split the merged list into cash, bank and UPI running balances.

    Modes containing "bank" or "upi" go to those buckets; everything else
    (cash, cheque, unknown) is cash.
    """
    cash = bank = upi = ZERO
    rows = []
    for t in transactions:
        mode = t.mode.lower()
        value = abs(t.amount)
        signed = value if is_credit(t.type) else -value
        flows = {"cash_in": ZERO, "cash_out": ZERO, "bank_in": ZERO, "bank_out": ZERO, "upi_in": ZERO, "upi_out": ZERO}

        if "bank" in mode:
            bucket = "bank"
            bank += signed
        elif "upi" in mode:
            bucket = "upi"
            upi += signed
        else:
            bucket = "cash"
            cash += signed
        flows[f"{bucket}_in" if signed > ZERO else f"{bucket}_out"] = value

        rows.append(CashbookRow(
            date=t.date,
            type=t.type,
            description=t.description,
            closing=cash + bank + upi,
            **flows,
        ))
    return rows, ModeBalances(cash=cash, bank=bank, upi=upi)


def default_range(start: Optional[date], end: Optional[date], as_of: date):
    start = start or date(as_of.year, 1, 1)
    end = end or date(as_of.year, 12, 31)
    return start, end


class AuditReportEngine:
    """Pure read-side reports. Nothing here mutates the state."""

    def __init__(self, store: StateStore, maturity: MaturityCalculator):
        self.store = store
        self.maturity = maturity

    def get_audit_data(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        as_of: Optional[date] = None
    ) -> AuditReport:
        state = self.store.current
        as_of = as_of or date.today()
        start, end = default_range(start_date, end_date, as_of)

        transactions = merge_transactions(state, start, end)
        cashbook, balances = build_cashbook(transactions)
        maturity = self.maturity.get_maturity_data(as_of=as_of, state=state)

        return AuditReport(
            start_date=start,
            end_date=end,
            summary=self._summary(state, maturity),
            daily_ledger=build_daily_ledger(transactions),
            cashbook=cashbook,
            mode_balances=balances,
            member_reports=self._member_reports(state),
            defaulters=self._defaulters(state, as_of),
            maturity=maturity,
        )

    def get_cashbook_data(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        as_of: Optional[date] = None
    ) -> CashbookReport:
        start, end = default_range(start_date, end_date, as_of or date.today())
        rows, balances = build_cashbook(merge_transactions(self.store.current, start, end))
        return CashbookReport(start_date=start, end_date=end, rows=rows, balances=balances)

    def get_member_summary_data(self) -> List[MemberReport]:
        reports = self._member_reports(self.store.current)
        return sorted(reports, key=lambda r: r.net_worth, reverse=True)

    def get_defaulters_data(self, as_of: Optional[date] = None) -> List[DefaulterRow]:
        return self._defaulters(self.store.current, as_of or date.today())

    def society_cash_in_hand(self) -> Decimal:
        """All-time inflows minus outflows across every ledger."""
        rows = build_daily_ledger(merge_transactions(self.store.current))
        return rows[-1].running_balance if rows else ZERO

    def _summary(self, state: LedgerState, maturity) -> AuditSummary:
        def component_total(field: str) -> Decimal:
            return sum((getattr(e, field) for e in state.passbook), ZERO)

        def fund_total(direction: FundDirection) -> Decimal:
            return sum((e.amount for e in state.expense_ledger if e.type == direction), ZERO)

        return AuditSummary(
            income=IncomeSummary(
                interest=component_total("interest_amount"),
                fine=component_total("fine_amount"),
                other=fund_total(FundDirection.INCOME),
            ),
            expenses=ExpenseSummary(
                operating=fund_total(FundDirection.EXPENSE),
                maturity_interest=sum((m.settled_interest for m in maturity), ZERO),
            ),
            loans=LoanSummary(
                issued=sum((l.amount for l in state.loans), ZERO),
                recovered=component_total("installment_amount"),
                pending=sum(
                    (l.remaining_balance for l in state.loans if l.status == LoanStatus.ACTIVE), ZERO
                ),
            ),
            assets=AssetSummary(deposits=sum((m.total_deposits for m in state.members), ZERO)),
        )

    def _member_reports(self, state: LedgerState) -> List[MemberReport]:
        reports = []
        for member in state.members:
            totals = {t: ZERO for t in EntryType}
            for entry in state.passbook:
                if entry.member_id != member.id:
                    continue
                for entry_type, amount in entry.nonzero():
                    totals[entry_type] += amount

            active_balance = outstanding_balance(state, member.id)
            reports.append(MemberReport(
                member_id=member.id,
                name=member.name,
                phone=member.phone,
                email=member.email,
                status=member.status.value,
                join_date=member.join_date,
                total_deposits=member.total_deposits,
                loan_taken=sum((l.amount for l in state.loans if l.member_id == member.id), ZERO),
                principal_paid=totals[EntryType.INSTALLMENT],
                interest_paid=totals[EntryType.INTEREST],
                fine_paid=totals[EntryType.FINE],
                active_loan_balance=active_balance,
                net_worth=member.total_deposits - active_balance,
            ))
        return reports

    def _defaulters(self, state: LedgerState, as_of: date) -> List[DefaulterRow]:
        """
        Active loans past their next due date plus the grace period.

        The next due date is one month after the last installment the
        recovered principal fully covers.
        """
        grace = timedelta(days=state.settings.grace_period_days)
        rows = []
        for loan in state.loans:
            if loan.status != LoanStatus.ACTIVE or loan.remaining_balance <= ZERO:
                continue

            covered = int(loan.principal_recovered // loan.emi_amount) if loan.emi_amount > ZERO else 0
            next_due = add_months(loan.start_date, covered + 1)
            if as_of <= next_due + grace:
                continue

            days_overdue = (as_of - next_due).days
            member = state.find_member(loan.member_id)
            if days_overdue > 60:
                severity = "Critical"
            elif days_overdue > 30:
                severity = "Warning"
            else:
                severity = "Overdue"

            rows.append(DefaulterRow(
                loan_id=loan.id,
                member_id=loan.member_id,
                member_name=member.name if member else "Unknown Member",
                member_phone=member.phone if member else "",
                loan_amount=loan.amount,
                remaining_balance=loan.remaining_balance,
                pending_emi=min(loan.emi_amount, loan.remaining_balance),
                next_due_date=next_due,
                days_overdue=days_overdue,
                status=severity,
            ))
        if rows:
            logger.info(f"{len(rows)} overdue loan(s) as of {as_of}")
        return sorted(rows, key=lambda r: r.days_overdue, reverse=True)
