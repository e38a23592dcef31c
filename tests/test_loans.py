from datetime import date
from decimal import Decimal

from coopbook.models.loan import LoanRequestStatus, LoanStatus


def test_request_for_unknown_member(engine):
    result = engine.request_loan("missing", 5000)

    assert not result.success
    assert result.error == "not_found"
    assert result.message == "Member not found. Please try again."


def test_request_snapshots_member(engine, member):
    engine.append_entry(member.id, {"deposit_amount": 1000})

    request = engine.request_loan(member.id, 5000, "School fees").data

    assert request.status == LoanRequestStatus.PENDING
    assert request.member_name == member.name
    assert request.total_deposits == Decimal("1000")
    assert engine.loans.pending_requests() == [request]


def test_approve_creates_active_loan(engine, member, active_loan):
    assert active_loan.status == LoanStatus.ACTIVE
    assert active_loan.emi_amount == Decimal("1000")
    assert active_loan.remaining_balance == Decimal("12000")
    assert active_loan.tenure == 12
    assert active_loan.interest_rate == Decimal("12")
    assert active_loan.maturity_date == date(2025, 1, 1)

    request = engine.state.find_request(active_loan.request_id)
    assert request.status == LoanRequestStatus.APPROVED
    assert request.approved_amount == Decimal("12000")
    assert engine.state.find_member(member.id).total_loans == Decimal("12000")
    assert engine.loans.pending_requests() == []


def test_approve_twice_is_rejected(engine, active_loan):
    result = engine.approve_loan(active_loan.request_id)

    assert result.error == "invalid_state"
    assert len(engine.state.loans) == 1


def test_approved_amount_may_differ(engine, member):
    request = engine.request_loan(member.id, 12000).data

    loan = engine.approve_loan(request.id, approved_amount=6000).data

    assert loan.amount == Decimal("6000")
    assert loan.emi_amount == Decimal("500")


def test_emi_is_rounded_to_cents(engine, member):
    request = engine.request_loan(member.id, 10000).data

    loan = engine.approve_loan(request.id).data

    assert loan.emi_amount == Decimal("833.33")


def test_twelve_installments_complete_the_loan(engine, member, active_loan):
    for month in range(1, 13):
        result = engine.append_entry(
            member.id,
            {"installment_amount": 1000},
            entry_date=date(2024, month, 1),
            loan_id=active_loan.id,
        )
        assert result.success

    loan = engine.state.find_loan(active_loan.id)
    assert loan.remaining_balance == 0
    assert loan.status == LoanStatus.COMPLETED

    engine.append_entry(member.id, {"installment_amount": 1000}, loan_id=active_loan.id)
    loan = engine.state.find_loan(active_loan.id)
    assert loan.remaining_balance == 0
    assert loan.status == LoanStatus.COMPLETED
    assert engine.loans.outstanding_balance(member.id) == 0


def test_overpayment_floors_at_zero(engine, member, active_loan):
    result = engine.apply_installment(member.id, active_loan.id, 15000)

    assert result.data.remaining_balance == 0
    assert result.data.status == LoanStatus.COMPLETED


def test_installment_against_another_members_loan(engine, active_loan):
    other = engine.register_member("Kiran", "9000000009").data

    result = engine.apply_installment(other.id, active_loan.id, 1000)

    assert result.error == "not_found"
    assert engine.state.find_loan(active_loan.id).remaining_balance == Decimal("12000")


def test_reject_request(engine, member):
    request = engine.request_loan(member.id, 5000).data

    rejected = engine.reject_loan(request.id, "Insufficient deposits").data

    assert rejected.status == LoanRequestStatus.REJECTED
    assert rejected.rejection_reason == "Insufficient deposits"
    assert engine.state.loans == ()
    assert engine.approve_loan(request.id).error == "invalid_state"


def test_defaulted_loan_ignores_installments(engine, member, active_loan):
    assert engine.mark_loan_defaulted(active_loan.id).success

    engine.append_entry(member.id, {"installment_amount": 1000}, loan_id=active_loan.id)

    loan = engine.state.find_loan(active_loan.id)
    assert loan.status == LoanStatus.DEFAULTED
    assert loan.remaining_balance == Decimal("12000")
    assert engine.mark_loan_defaulted(active_loan.id).error == "invalid_state"


def test_update_loan_rejects_negative_balance(engine, active_loan):
    result = engine.update_loan(active_loan.id, remaining_balance=-1)

    assert result.error == "validation"
    assert engine.state.find_loan(active_loan.id).remaining_balance == Decimal("12000")


def test_update_loan_fields(engine, active_loan):
    assert engine.update_loan(active_loan.id, member_id="someone").error == "validation"

    result = engine.update_loan(active_loan.id, purpose="Dairy cow")

    assert result.success
    assert engine.state.find_loan(active_loan.id).purpose == "Dairy cow"


def test_delete_loan(engine, active_loan):
    assert engine.delete_loan(active_loan.id).success
    assert engine.state.find_loan(active_loan.id) is None
    assert engine.delete_loan(active_loan.id).error == "not_found"


def test_non_numeric_amounts_are_validation_failures(engine, member, active_loan):
    requests = len(engine.state.loan_requests)

    assert engine.request_loan(member.id, "five thousand").error == "validation"
    assert engine.apply_installment(member.id, active_loan.id, "abc").error == "validation"

    assert len(engine.state.loan_requests) == requests
    assert engine.state.find_loan(active_loan.id).remaining_balance == Decimal("12000")
