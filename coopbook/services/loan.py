import logging
from datetime import date
from decimal import Decimal
from typing import Optional, List, Tuple

from pydantic import ValidationError as SchemaValidationError

from coopbook.models.base import ZERO, round_money
from coopbook.models.loan import Loan, LoanRequest, LoanRequestStatus, LoanStatus
from coopbook.models.state import LedgerState
from coopbook.services.common import add_months, new_id, parse_money, replace_by_id
from coopbook.services.errors import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)

LOAN_EDITABLE_FIELDS = {
    "amount",
    "interest_rate",
    "tenure",
    "emi_amount",
    "remaining_balance",
    "status",
    "start_date",
    "maturity_date",
    "purpose",
}


def settle_installment(loan: Loan, amount: Decimal) -> Loan:
    """Apply an installment to a loan.

    Only active loans move. The balance is floored at zero and the loan is
    completed exactly when it reaches zero.
    """
    if loan.status != LoanStatus.ACTIVE:
        return loan
    remaining = max(ZERO, loan.remaining_balance - amount)
    status = LoanStatus.COMPLETED if remaining == ZERO else LoanStatus.ACTIVE
    return loan.model_copy(update={"remaining_balance": remaining, "status": status})


def apply_installment_to_state(
    state: LedgerState,
    member_id: str,
    loan_id: str,
    amount: Decimal
) -> Tuple[LedgerState, Loan]:
    """Return the next state with the installment applied to ``loan_id``."""
    loan = state.find_loan(loan_id)
    if not loan or loan.member_id != member_id:
        raise NotFoundError(f"Loan {loan_id} not found for member {member_id}")

    settled = settle_installment(loan, amount)
    if settled is loan:
        logger.info(f"Installment on loan {loan_id} ignored, loan is {loan.status.value}")
        return state, loan

    if settled.status == LoanStatus.COMPLETED:
        logger.info(f"Loan {loan_id} fully repaid and completed")
    return state.model_copy(update={"loans": replace_by_id(state.loans, settled)}), settled


def outstanding_balance(state: LedgerState, member_id: str) -> Decimal:
    """Sum of remaining balances on the member's active loans."""
    return sum(
        (l.remaining_balance for l in state.loans
         if l.member_id == member_id and l.status == LoanStatus.ACTIVE),
        ZERO,
    )


class LoanBook:
    """Loan requests, approvals and the active-loan balance state machine."""

    def __init__(self, store: StateStore):
        self.store = store

    def get_loan(self, loan_id: str) -> Loan:
        loan = self.store.current.find_loan(loan_id)
        if not loan:
            raise NotFoundError(f"Loan {loan_id} not found")
        return loan

    def get_request(self, request_id: str) -> LoanRequest:
        request = self.store.current.find_request(request_id)
        if not request:
            raise NotFoundError(f"Loan request {request_id} not found")
        return request

    def loans_for(self, member_id: str) -> List[Loan]:
        return [l for l in self.store.current.loans if l.member_id == member_id]

    def active_loans(self) -> List[Loan]:
        return [l for l in self.store.current.loans if l.status == LoanStatus.ACTIVE]

    def pending_requests(self) -> List[LoanRequest]:
        return [
            r for r in self.store.current.loan_requests
            if r.status == LoanRequestStatus.PENDING
        ]

    def outstanding_balance(self, member_id: str) -> Decimal:
        return outstanding_balance(self.store.current, member_id)

    def request_loan(
        self,
        member_id: str,
        amount,
        purpose: str = None,
        requested_date: Optional[date] = None
    ) -> LoanRequest:
        """Create a pending request, snapshotting the member's name and deposits."""
        state = self.store.current
        member = state.find_member(member_id)
        if not member:
            logger.warning(f"Loan request failed: member {member_id} not found")
            raise NotFoundError("Member not found. Please try again.")

        amount = parse_money(amount, "Loan amount")
        if amount <= ZERO:
            raise ValidationError("Loan amount must be greater than zero")

        request = LoanRequest(
            id=new_id(),
            member_id=member.id,
            member_name=member.name,
            amount=amount,
            purpose=purpose or "Loan Request",
            requested_date=requested_date or date.today(),
            status=LoanRequestStatus.PENDING,
            total_deposits=member.total_deposits,
        )
        self.store.commit(
            state.model_copy(update={"loan_requests": (request,) + state.loan_requests}),
            action=f"loan.request {request.id}",
        )
        logger.info(f"Loan request {request.id} created for {member.name}: {amount}")
        return request

    def approve_loan(
        self,
        request_id: str,
        approved_amount=None,
        start_date: Optional[date] = None
    ) -> Loan:
        """Approve a pending request and disburse exactly one active loan.

        The approved amount may differ from the requested amount. EMI is the
        approved amount spread over the configured tenure.
        """
        state = self.store.current
        request = self.get_request(request_id)
        if request.status != LoanRequestStatus.PENDING:
            raise InvalidStateError(
                f"Loan request {request_id} is {request.status.value}, only pending requests can be approved"
            )

        amount = parse_money(approved_amount, "Approved amount") if approved_amount is not None else request.amount
        if amount <= ZERO:
            raise ValidationError("Approved amount must be greater than zero")

        tenure = state.settings.loan_tenure_months
        if tenure <= 0:
            raise ValidationError("Loan tenure must be at least one month")

        start = start_date or date.today()
        loan = Loan(
            id=new_id(),
            member_id=request.member_id,
            request_id=request.id,
            amount=amount,
            interest_rate=state.settings.interest_rate,
            tenure=tenure,
            emi_amount=round_money(amount / tenure),
            remaining_balance=amount,
            status=LoanStatus.ACTIVE,
            start_date=start,
            maturity_date=add_months(start, tenure),
            purpose=request.purpose,
        )
        approved_request = request.model_copy(update={
            "status": LoanRequestStatus.APPROVED,
            "approved_amount": amount,
            "approved_date": start,
        })

        members = state.members
        member = state.find_member(request.member_id)
        if member:
            members = replace_by_id(
                members,
                member.model_copy(update={"total_loans": member.total_loans + amount}),
            )

        self.store.commit(
            state.model_copy(update={
                "loans": state.loans + (loan,),
                "loan_requests": replace_by_id(state.loan_requests, approved_request),
                "members": members,
            }),
            action=f"loan.approve {request_id} -> {loan.id}",
        )
        logger.info(f"Loan request {request_id} approved: loan {loan.id} for {amount}, EMI {loan.emi_amount}")
        return loan

    def reject_loan(self, request_id: str, reason: str) -> LoanRequest:
        state = self.store.current
        request = self.get_request(request_id)
        if request.status != LoanRequestStatus.PENDING:
            raise InvalidStateError(
                f"Loan request {request_id} is {request.status.value}, only pending requests can be rejected"
            )

        rejected = request.model_copy(update={
            "status": LoanRequestStatus.REJECTED,
            "rejection_reason": reason,
        })
        self.store.commit(
            state.model_copy(update={"loan_requests": replace_by_id(state.loan_requests, rejected)}),
            action=f"loan.reject {request_id}",
        )
        logger.info(f"Loan request {request_id} rejected: {reason}")
        return rejected

    def apply_installment(self, member_id: str, loan_id: str, amount) -> Loan:
        """Apply an installment outside the passbook (corrections, imports)."""
        amount = parse_money(amount, "Installment amount")
        if amount <= ZERO:
            raise ValidationError("Installment amount must be greater than zero")

        state = self.store.current
        next_state, loan = apply_installment_to_state(state, member_id, loan_id, amount)
        if next_state is not state:
            self.store.commit(next_state, action=f"loan.installment {loan_id}")
        return loan

    def mark_defaulted(self, loan_id: str) -> Loan:
        """Flag an active loan as defaulted. Called by external policy only."""
        state = self.store.current
        loan = self.get_loan(loan_id)
        if loan.status != LoanStatus.ACTIVE:
            raise InvalidStateError(f"Only active loans can default, loan {loan_id} is {loan.status.value}")

        defaulted = loan.model_copy(update={"status": LoanStatus.DEFAULTED})
        self.store.commit(
            state.model_copy(update={"loans": replace_by_id(state.loans, defaulted)}),
            action=f"loan.default {loan_id}",
        )
        logger.warning(f"Loan {loan_id} marked defaulted with {loan.remaining_balance} outstanding")
        return defaulted

    def delete_loan(self, loan_id: str) -> Loan:
        """Administrative removal. Ledger history is not re-derived."""
        state = self.store.current
        loan = self.get_loan(loan_id)
        self.store.commit(
            state.model_copy(update={"loans": tuple(l for l in state.loans if l.id != loan_id)}),
            action=f"loan.delete {loan_id}",
        )
        logger.info(f"Loan deleted: {loan_id}")
        return loan

    def update_loan(self, loan_id: str, **changes) -> Loan:
        """Administrative correction. Ledger history is not re-derived."""
        state = self.store.current
        loan = self.get_loan(loan_id)

        unknown = set(changes) - LOAN_EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        try:
            updated = Loan.model_validate({
                **loan.model_dump(),
                **{k: v for k, v in changes.items() if v is not None},
            })
        except SchemaValidationError as e:
            raise ValidationError(f"Invalid loan update: {e.errors()[0]['msg']}")

        self.store.commit(
            state.model_copy(update={"loans": replace_by_id(state.loans, updated)}),
            action=f"loan.update {loan_id}",
        )
        logger.info(f"Loan updated: {loan_id} {changes}")
        return updated
