from datetime import date
from decimal import Decimal

from coopbook.models.fund import ExpenseCategory, FundDirection


def test_admin_fund_running_balance(engine):
    assert engine.add_admin_transaction(5000, FundDirection.INJECT, "Seed capital").data == Decimal("5000")
    assert engine.add_admin_transaction(2000, FundDirection.WITHDRAW, "Bank charges").data == Decimal("3000")

    assert engine.admin_fund_summary() == {
        "total_injected": Decimal("5000"),
        "total_withdrawn": Decimal("2000"),
        "net_balance": Decimal("3000"),
    }


def test_admin_fund_rejects_other_directions_and_bad_amounts(engine):
    assert engine.add_admin_transaction(100, FundDirection.INCOME).error == "validation"
    assert engine.add_admin_transaction(0, FundDirection.INJECT).error == "validation"
    assert engine.add_admin_transaction(-10, FundDirection.INJECT).error == "validation"
    assert engine.state.admin_fund_ledger == ()


def test_delete_recomputes_running_balances(engine):
    engine.add_admin_transaction(5000, FundDirection.INJECT)
    engine.add_admin_transaction(2000, FundDirection.WITHDRAW)
    engine.add_admin_transaction(1000, FundDirection.INJECT)
    first = engine.state.admin_fund_ledger[0]

    assert engine.delete_admin_transaction(first.id).success

    balances = [e.running_balance for e in engine.state.admin_fund_ledger]
    assert balances == [Decimal("-2000"), Decimal("-1000")]
    assert engine.admin_fund.balance() == engine.admin_fund_summary()["net_balance"]


def test_delete_unknown_entry(engine):
    assert engine.delete_expense_entry("missing").error == "not_found"


def test_expense_ledger(engine):
    engine.add_expense_entry(500, FundDirection.INCOME, "Form sales")
    engine.add_expense(120, ExpenseCategory.STATIONERY, "Registers")

    assert engine.expense_summary() == {
        "total_income": Decimal("500"),
        "total_expenses": Decimal("120"),
        "net_balance": Decimal("380"),
    }
    assert engine.state.expense_ledger[-1].category == ExpenseCategory.STATIONERY


def test_maintenance_fee_cannot_be_spent(engine):
    result = engine.add_expense(200, ExpenseCategory.MAINTENANCE_FEE, "Oops")

    assert result.error == "validation"


def test_collect_maintenance_fee(engine, member):
    result = engine.collect_maintenance_fee(member.id, entry_date=date(2024, 1, 2))

    assert result.success
    entry = result.data
    assert entry.amount == Decimal("200")
    assert entry.type == FundDirection.INCOME
    assert entry.member_name == member.name
    assert engine.state.find_member(member.id).has_paid_maintenance

    engine.add_expense(50, ExpenseCategory.REFRESHMENTS, "Tea")
    stats = engine.maintenance_stats()
    assert stats["total_fees_collected"] == Decimal("200")
    assert stats["total_expenses"] == Decimal("50")
    assert stats["members_paid_count"] == 1


def test_maintenance_fee_for_unknown_member(engine):
    assert engine.collect_maintenance_fee("missing").error == "not_found"


def test_fund_inputs_are_validated_before_recording(engine, member):
    assert engine.add_admin_transaction(100, "BOGUS").error == "validation"
    assert engine.add_admin_transaction("abc", FundDirection.INJECT).error == "validation"
    assert engine.add_expense("12.5x", ExpenseCategory.STATIONERY, "Paper").error == "validation"
    assert engine.add_expense(100, "travel", "Bus fare").error == "validation"
    assert engine.collect_maintenance_fee(member.id, "ten").error == "validation"

    assert engine.state.admin_fund_ledger == ()
    assert engine.state.expense_ledger == ()


def test_string_direction_is_accepted(engine):
    result = engine.add_admin_transaction("500", "INJECT", "Seed capital")

    assert result.success
    assert engine.state.admin_fund_ledger[0].type == FundDirection.INJECT
    assert engine.state.admin_fund_ledger[0].created_at.tzinfo is not None
