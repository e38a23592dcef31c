from datetime import date
from decimal import Decimal

import pytest

from coopbook.models.fund import ExpenseCategory, FundDirection
from coopbook.models.passbook import PaymentMode

AS_OF = date(2024, 6, 30)


@pytest.fixture
def society(engine, member, active_loan):
    other = engine.register_member("Gopal Rao", "9000000005", join_date=date(2024, 1, 1)).data
    engine.append_entry(member.id, {"deposit_amount": 1000}, entry_date=date(2024, 1, 5))
    engine.append_entry(other.id, {"deposit_amount": 2000}, entry_date=date(2024, 1, 5), mode=PaymentMode.BANK)
    engine.append_entry(
        member.id,
        {"installment_amount": 1000, "interest_amount": 120, "fine_amount": 10},
        entry_date=date(2024, 2, 1),
        mode=PaymentMode.UPI,
        loan_id=active_loan.id,
    )
    engine.append_entry(other.id, {"withdrawal_amount": 500}, entry_date=date(2024, 3, 1))
    engine.add_admin_transaction(20000, FundDirection.INJECT, "Seed capital", entry_date=date(2024, 1, 1))
    engine.add_expense(300, ExpenseCategory.PRINTING, "Passbooks", entry_date=date(2024, 1, 10))
    engine.collect_maintenance_fee(other.id, entry_date=date(2024, 1, 10))
    # outside the reporting year
    engine.append_entry(other.id, {"deposit_amount": 700}, entry_date=date(2023, 12, 31))
    return engine


def test_reports_reconcile(society):
    report = society.get_audit_data(as_of=AS_OF)

    final = report.daily_ledger[-1].running_balance
    assert final == report.mode_balances.total
    assert final == report.cashbook[-1].closing
    assert final == sum((r.cash_in - r.cash_out for r in report.daily_ledger), Decimal("0"))


def test_daily_ledger_contents(society):
    report = society.get_audit_data(as_of=AS_OF)

    assert report.start_date == date(2024, 1, 1)
    assert report.end_date == date(2024, 12, 31)
    dates = [r.date for r in report.daily_ledger]
    assert dates == sorted(dates)
    assert date(2023, 12, 31) not in dates

    loan_rows = [r for r in report.daily_ledger if r.type == "LOAN_GIVEN"]
    assert [r.loan_out for r in loan_rows] == [Decimal("12000")]
    # 1000 + 2000 deposits, 1130 repaid, 20000 injected, 200 fee; 12000 lent, 500 withdrawn, 300 spent
    assert report.daily_ledger[-1].running_balance == Decimal("11530")


def test_cashbook_mode_buckets(society):
    cashbook = society.get_cashbook_data(date(2024, 1, 1), date(2024, 12, 31))

    assert cashbook.balances.bank == Decimal("2000")
    assert cashbook.balances.upi == Decimal("1130")
    assert cashbook.balances.cash == Decimal("8400")


def test_summary(society):
    summary = society.get_audit_data(as_of=AS_OF).summary

    assert summary.income.interest == Decimal("120")
    assert summary.income.fine == Decimal("10")
    assert summary.income.other == Decimal("200")
    assert summary.expenses.operating == Decimal("300")
    assert summary.loans.issued == Decimal("12000")
    assert summary.loans.recovered == Decimal("1000")
    assert summary.loans.pending == Decimal("11000")
    assert summary.assets.deposits == Decimal("3700")


def test_reports_are_deterministic(society):
    first = society.get_audit_data(date(2024, 1, 1), date(2024, 12, 31), AS_OF)
    second = society.get_audit_data(date(2024, 1, 1), date(2024, 12, 31), AS_OF)

    assert first == second


def test_narrow_range(society):
    report = society.get_audit_data(date(2024, 2, 1), date(2024, 2, 28), AS_OF)

    assert {r.type for r in report.daily_ledger} == {"INSTALLMENT", "INTEREST", "FINE"}
    assert report.daily_ledger[-1].running_balance == Decimal("1130")


def test_member_summary_sorted_by_net_worth(society, member):
    reports = society.get_member_summary_data()

    assert [r.net_worth for r in reports] == sorted((r.net_worth for r in reports), reverse=True)
    mine = next(r for r in reports if r.member_id == member.id)
    assert mine.loan_taken == Decimal("12000")
    assert mine.principal_paid == Decimal("1000")
    assert mine.interest_paid == Decimal("120")
    assert mine.active_loan_balance == Decimal("11000")
    assert mine.net_worth == Decimal("-10000")


def test_cash_in_hand_covers_all_dates(society):
    assert society.society_cash_in_hand() == Decimal("12230")


def test_defaulter_severity(engine, active_loan):
    assert engine.get_defaulters_data(date(2024, 2, 1)) == []

    row = engine.get_defaulters_data(date(2024, 2, 2))[0]
    assert row.next_due_date == date(2024, 2, 1)
    assert row.days_overdue == 1
    assert row.status == "Overdue"
    assert row.pending_emi == Decimal("1000")

    assert engine.get_defaulters_data(date(2024, 3, 15))[0].status == "Warning"
    assert engine.get_defaulters_data(date(2024, 4, 15))[0].status == "Critical"


def test_installments_move_the_next_due_date(engine, member, active_loan):
    engine.append_entry(member.id, {"installment_amount": 2000}, entry_date=date(2024, 2, 1), loan_id=active_loan.id)

    row = engine.get_defaulters_data(date(2024, 4, 15))[0]

    assert row.next_due_date == date(2024, 4, 1)
    assert row.days_overdue == 14


def test_grace_period(engine, active_loan):
    engine.update_settings(grace_period_days=15)

    assert engine.get_defaulters_data(date(2024, 2, 16)) == []
    assert engine.get_defaulters_data(date(2024, 2, 17))[0].days_overdue == 16


def test_completed_and_defaulted_loans_are_not_listed(engine, member, active_loan):
    engine.mark_loan_defaulted(active_loan.id)

    assert engine.get_defaulters_data(date(2024, 12, 1)) == []
