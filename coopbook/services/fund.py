import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional, Dict, Tuple

from coopbook.models.base import ZERO
from coopbook.models.fund import ExpenseCategory, FundDirection, FundEntry
from coopbook.models.state import LedgerState
from coopbook.services.common import new_id, parse_choice, parse_money, replace_by_id
from coopbook.services.errors import NotFoundError, ValidationError
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)


def recompute_running_balances(entries: Tuple[FundEntry, ...], credit: FundDirection) -> Tuple[FundEntry, ...]:
    """Rebuild every running balance in ledger order."""
    balance = ZERO
    rebuilt = []
    for entry in entries:
        balance += entry.amount if entry.type == credit else -entry.amount
        if entry.running_balance != balance:
            entry = entry.model_copy(update={"running_balance": balance})
        rebuilt.append(entry)
    return tuple(rebuilt)


class FundLedger:
    """One-dimensional ledger with a credit and a debit direction.

    The admin fund ledger uses INJECT/WITHDRAW, the expense ledger
    INCOME/EXPENSE. Both live in the same state under different slices.
    """

    def __init__(self, store: StateStore, slice_name: str, credit: FundDirection, debit: FundDirection):
        self.store = store
        self.slice_name = slice_name
        self.credit = credit
        self.debit = debit

    def entries(self, state: Optional[LedgerState] = None) -> Tuple[FundEntry, ...]:
        return getattr(state or self.store.current, self.slice_name)

    def balance(self) -> Decimal:
        entries = self.entries()
        return entries[-1].running_balance if entries else ZERO

    def _new_entry(
        self,
        amount,
        direction: FundDirection,
        description: str,
        category: Optional[ExpenseCategory] = None,
        entry_date: Optional[date] = None,
        member_id: str = None,
        member_name: str = None
    ) -> FundEntry:
        direction = parse_choice(FundDirection, direction, "fund direction")
        if direction not in (self.credit, self.debit):
            raise ValidationError(
                f"{direction.value} is not valid for this ledger, use {self.credit.value} or {self.debit.value}"
            )
        amount = parse_money(amount)
        if amount <= ZERO:
            raise ValidationError("Amount must be greater than zero")
        if category is not None:
            category = parse_choice(ExpenseCategory, category, "expense category")

        signed = amount if direction == self.credit else -amount
        return FundEntry(
            id=new_id(),
            date=entry_date or date.today(),
            type=direction,
            category=category,
            amount=amount,
            description=description or "",
            member_id=member_id,
            member_name=member_name,
            running_balance=self.balance() + signed,
            created_at=datetime.now(timezone.utc),
        )

    def append(
        self,
        amount,
        direction: FundDirection,
        description: str = "",
        category: Optional[ExpenseCategory] = None,
        entry_date: Optional[date] = None
    ) -> Decimal:
        """Append an entry and return the new running balance."""
        state = self.store.current
        entry = self._new_entry(amount, direction, description, category, entry_date)
        self.store.commit(
            state.model_copy(update={self.slice_name: self.entries(state) + (entry,)}),
            action=f"{self.slice_name}.append {entry.id}",
        )
        logger.info(f"{self.slice_name}: {entry.type.value} {entry.amount}, balance {entry.running_balance}")
        return entry.running_balance

    def delete(self, entry_id: str) -> FundEntry:
        """Remove an entry and recompute every running balance after it."""
        state = self.store.current
        entries = self.entries(state)
        removed = next((e for e in entries if e.id == entry_id), None)
        if not removed:
            raise NotFoundError(f"Ledger entry {entry_id} not found")

        remaining = recompute_running_balances(
            tuple(e for e in entries if e.id != entry_id), self.credit
        )
        self.store.commit(
            state.model_copy(update={self.slice_name: remaining}),
            action=f"{self.slice_name}.delete {entry_id}",
        )
        logger.info(f"{self.slice_name}: deleted {entry_id}, balances recomputed")
        return removed

    def summary(self) -> Dict[str, Decimal]:
        """Totals by full scan, independent of the stored running balances."""
        credits = sum((e.amount for e in self.entries() if e.type == self.credit), ZERO)
        debits = sum((e.amount for e in self.entries() if e.type == self.debit), ZERO)
        return {
            self.credit.value.lower(): credits,
            self.debit.value.lower(): debits,
            "net_balance": credits - debits,
        }


class AdminFundLedger(FundLedger):
    """Administrative fund: money injected into or withdrawn from the society."""

    def __init__(self, store: StateStore):
        super().__init__(store, "admin_fund_ledger", FundDirection.INJECT, FundDirection.WITHDRAW)

    def summary(self) -> Dict[str, Decimal]:
        totals = super().summary()
        return {
            "total_injected": totals["inject"],
            "total_withdrawn": totals["withdraw"],
            "net_balance": totals["net_balance"],
        }


class ExpenseLedger(FundLedger):
    """Operating ledger: maintenance fee income and society expenses."""

    def __init__(self, store: StateStore):
        super().__init__(store, "expense_ledger", FundDirection.INCOME, FundDirection.EXPENSE)

    def summary(self) -> Dict[str, Decimal]:
        totals = super().summary()
        return {
            "total_income": totals["income"],
            "total_expenses": totals["expense"],
            "net_balance": totals["net_balance"],
        }

    def add_expense(
        self,
        amount,
        category: ExpenseCategory,
        description: str,
        entry_date: Optional[date] = None
    ) -> Decimal:
        category = parse_choice(ExpenseCategory, category, "expense category")
        if category == ExpenseCategory.MAINTENANCE_FEE:
            raise ValidationError("Maintenance fees are collected, not spent")
        return self.append(amount, FundDirection.EXPENSE, description, category, entry_date)

    def collect_maintenance_fee(self, member_id: str, amount=None, entry_date: Optional[date] = None) -> FundEntry:
        """Record a member's maintenance fee as income and flag the member as paid."""
        state = self.store.current
        member = state.find_member(member_id)
        if not member:
            raise NotFoundError(f"Member {member_id} not found")

        fee = parse_money(amount, "Maintenance fee") if amount is not None else state.settings.maintenance_fee
        entry = self._new_entry(
            fee,
            FundDirection.INCOME,
            f"Maintenance fee from {member.name}",
            category=ExpenseCategory.MAINTENANCE_FEE,
            entry_date=entry_date,
            member_id=member.id,
            member_name=member.name,
        )
        self.store.commit(
            state.model_copy(update={
                "expense_ledger": state.expense_ledger + (entry,),
                "members": replace_by_id(
                    state.members, member.model_copy(update={"has_paid_maintenance": True})
                ),
            }),
            action=f"expense_ledger.maintenance {member_id}",
        )
        logger.info(f"Maintenance fee {fee} collected from {member.name}")
        return entry

    def maintenance_stats(self) -> Dict[str, object]:
        state = self.store.current
        fees = sum(
            (e.amount for e in state.expense_ledger
             if e.category == ExpenseCategory.MAINTENANCE_FEE and e.type == FundDirection.INCOME),
            ZERO,
        )
        expenses = sum((e.amount for e in state.expense_ledger if e.type == FundDirection.EXPENSE), ZERO)
        return {
            "total_fees_collected": fees,
            "total_expenses": expenses,
            "net_balance": fees - expenses,
            "members_paid_count": sum(1 for m in state.members if m.has_paid_maintenance),
        }
