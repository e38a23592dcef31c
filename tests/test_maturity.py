from datetime import date, timedelta
from decimal import Decimal

JOIN = date(2024, 1, 1)
AS_OF = JOIN + timedelta(days=360)


def projection_for(engine, member_id, as_of=AS_OF):
    return next(p for p in engine.get_maturity_data(as_of) if p.member_id == member_id)


def test_projection_after_twelve_months(engine, member):
    engine.append_entry(member.id, {"deposit_amount": 1000}, entry_date=date(2024, 1, 5))

    p = projection_for(engine, member.id)

    assert p.monthly_deposit == Decimal("1000")
    assert p.target_deposit == Decimal("36000")
    assert p.projected_interest == Decimal("4320")
    assert p.settled_interest == Decimal("4320")
    assert p.maturity_amount == Decimal("40320")
    assert p.months_completed == 12
    assert p.current_accrued_interest == Decimal("1440")
    assert p.monthly_interest_share == Decimal("120")
    assert p.net_payable == Decimal("40320")
    assert p.status == "running"
    assert not p.is_override


def test_monthly_deposit_is_earliest_dated_deposit(engine, member):
    engine.append_entry(member.id, {"deposit_amount": 2000}, entry_date=date(2024, 3, 1))
    engine.append_entry(member.id, {"deposit_amount": 1000}, entry_date=date(2024, 2, 1))

    p = projection_for(engine, member.id)

    assert p.monthly_deposit == Decimal("1000")
    assert p.current_deposit == Decimal("3000")


def test_member_without_deposits(engine, member):
    p = projection_for(engine, member.id)

    assert p.monthly_deposit == 0
    assert p.maturity_amount == 0


def test_months_completed_is_clamped(engine, member):
    assert projection_for(engine, member.id, date(2030, 1, 1)).months_completed == 36
    assert projection_for(engine, member.id, date(2030, 1, 1)).status == "matured"
    assert projection_for(engine, member.id, date(2023, 6, 1)).months_completed == 0


def test_outstanding_loan_reduces_net_payable(engine, member, active_loan):
    engine.append_entry(member.id, {"deposit_amount": 1000}, entry_date=date(2024, 1, 5))

    p = projection_for(engine, member.id)

    assert p.outstanding_loan == Decimal("12000")
    assert p.net_payable == Decimal("28320")


def test_override_replaces_projected_interest(engine, member):
    engine.append_entry(member.id, {"deposit_amount": 1000}, entry_date=date(2024, 1, 5))

    assert engine.set_maturity_override(member.id, 5000).success
    p = projection_for(engine, member.id)
    assert p.is_override
    assert p.manual_interest == Decimal("5000")
    assert p.settled_interest == Decimal("5000")
    assert p.maturity_amount == Decimal("41000")

    engine.set_maturity_override(member.id, 3600)
    assert len(engine.state.maturity_overrides) == 1

    assert engine.clear_maturity_override(member.id).success
    p = projection_for(engine, member.id)
    assert not p.is_override
    assert p.settled_interest == Decimal("4320")


def test_clear_without_override_is_a_no_op(engine, member, port):
    saves = port.saves

    result = engine.clear_maturity_override(member.id)

    assert result.success
    assert port.saves == saves


def test_override_validation(engine, member):
    assert engine.set_maturity_override(member.id, -1).error == "validation"
    assert engine.set_maturity_override("missing", 100).error == "not_found"
    assert engine.set_maturity_override(member.id, "n/a").error == "validation"
    assert engine.state.maturity_overrides == ()
