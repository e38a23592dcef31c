from pydantic import BaseModel
from typing import Optional, List
from datetime import date
from decimal import Decimal

from coopbook.schemas.maturity import MaturityProjection


class LedgerTransaction(BaseModel):
    """One row of the merged society ledger."""
    date: date
    type: str
    amount: Decimal
    mode: str
    source: str
    reference_id: str
    member_id: Optional[str] = None
    description: str = ""


class DailyLedgerRow(BaseModel):
    date: date
    type: str
    description: str
    deposit: Decimal
    emi: Decimal
    loan_out: Decimal
    interest: Decimal
    fine: Decimal
    cash_in: Decimal
    cash_out: Decimal
    net_flow: Decimal
    running_balance: Decimal


class CashbookRow(BaseModel):
    date: date
    type: str
    description: str
    cash_in: Decimal
    cash_out: Decimal
    bank_in: Decimal
    bank_out: Decimal
    upi_in: Decimal
    upi_out: Decimal
    closing: Decimal


class ModeBalances(BaseModel):
    cash: Decimal
    bank: Decimal
    upi: Decimal

    @property
    def total(self) -> Decimal:
        return self.cash + self.bank + self.upi


class CashbookReport(BaseModel):
    start_date: date
    end_date: date
    rows: List[CashbookRow]
    balances: ModeBalances


class IncomeSummary(BaseModel):
    interest: Decimal
    fine: Decimal
    other: Decimal


class ExpenseSummary(BaseModel):
    operating: Decimal
    maturity_interest: Decimal


class LoanSummary(BaseModel):
    issued: Decimal
    recovered: Decimal
    pending: Decimal


class AssetSummary(BaseModel):
    deposits: Decimal


class AuditSummary(BaseModel):
    income: IncomeSummary
    expenses: ExpenseSummary
    loans: LoanSummary
    assets: AssetSummary


class MemberReport(BaseModel):
    member_id: str
    name: str
    phone: str
    email: Optional[str] = None
    status: str
    join_date: date
    total_deposits: Decimal
    loan_taken: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    fine_paid: Decimal
    active_loan_balance: Decimal
    net_worth: Decimal


class DefaulterRow(BaseModel):
    loan_id: str
    member_id: str
    member_name: str
    member_phone: str
    loan_amount: Decimal
    remaining_balance: Decimal
    pending_emi: Decimal
    next_due_date: date
    days_overdue: int
    status: str


class AuditReport(BaseModel):
    """Five-part audit report over one date range."""
    start_date: date
    end_date: date
    summary: AuditSummary
    daily_ledger: List[DailyLedgerRow]
    cashbook: List[CashbookRow]
    mode_balances: ModeBalances
    member_reports: List[MemberReport]
    defaulters: List[DefaulterRow]
    maturity: List[MaturityProjection]
