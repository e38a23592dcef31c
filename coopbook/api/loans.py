from fastapi import APIRouter, Depends, HTTPException
from typing import Optional

from coopbook.core.audit import write_audit_log
from coopbook.core.dependencies import ensure_success, get_actor, get_engine
from coopbook.schemas.loan import (
    InstallmentRequest,
    LoanApproveRequest,
    LoanRejectRequest,
    LoanRequestCreate,
    LoanUpdate,
)
from coopbook.services.engine import LedgerEngine
from coopbook.services.errors import NotFoundError

router = APIRouter(prefix="/api/loans", tags=["loans"])


@router.get("")
def list_loans(
    member_id: Optional[str] = None,
    active_only: bool = False,
    engine: LedgerEngine = Depends(get_engine)
):
    """List loans in disbursement order."""
    if member_id:
        return engine.loans.loans_for(member_id)
    if active_only:
        return engine.loans.active_loans()
    return list(engine.state.loans)


@router.get("/requests")
def list_loan_requests(pending_only: bool = True, engine: LedgerEngine = Depends(get_engine)):
    if pending_only:
        return engine.loans.pending_requests()
    return list(engine.state.loan_requests)


@router.post("/requests", status_code=201)
def request_loan(
    payload: LoanRequestCreate,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.request_loan(payload.member_id, payload.amount, payload.purpose))
    write_audit_log(actor, "Loan request", f"request_id={result.data.id} amount={payload.amount}")
    return {"message": result.message, "request": result.data}


@router.post("/requests/{request_id}/approve")
def approve_loan(
    request_id: str,
    payload: Optional[LoanApproveRequest] = None,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    """Approve a pending request and disburse the loan."""
    payload = payload or LoanApproveRequest()
    result = ensure_success(engine.approve_loan(request_id, payload.approved_amount, payload.start_date))
    loan = result.data
    write_audit_log(actor, "Approve loan", f"request_id={request_id} loan_id={loan.id} amount={loan.amount}")
    return {"message": result.message, "loan": loan}


@router.post("/requests/{request_id}/reject")
def reject_loan(
    request_id: str,
    payload: LoanRejectRequest,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.reject_loan(request_id, payload.reason))
    write_audit_log(actor, "Reject loan", f"request_id={request_id} reason={payload.reason}")
    return {"message": result.message, "request": result.data}


@router.get("/{loan_id}")
def get_loan(loan_id: str, engine: LedgerEngine = Depends(get_engine)):
    try:
        return engine.loans.get_loan(loan_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{loan_id}/installments")
def apply_installment(
    loan_id: str,
    payload: InstallmentRequest,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    """Apply a repayment without a passbook entry (corrections)."""
    result = ensure_success(engine.apply_installment(payload.member_id, loan_id, payload.amount))
    write_audit_log(actor, "Loan installment", f"loan_id={loan_id} amount={payload.amount}")
    return {"message": result.message, "loan": result.data}


@router.post("/{loan_id}/default")
def mark_defaulted(
    loan_id: str,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.mark_loan_defaulted(loan_id))
    write_audit_log(actor, "Default loan", f"loan_id={loan_id}")
    return {"message": result.message, "loan": result.data}


@router.put("/{loan_id}")
def update_loan(
    loan_id: str,
    payload: LoanUpdate,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    changes = payload.model_dump(exclude_unset=True)
    result = ensure_success(engine.update_loan(loan_id, **changes))
    write_audit_log(actor, "Update loan", f"loan_id={loan_id} fields={sorted(changes)}")
    return {"message": result.message, "loan": result.data}


@router.delete("/{loan_id}")
def delete_loan(
    loan_id: str,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.delete_loan(loan_id))
    write_audit_log(actor, "Delete loan", f"loan_id={loan_id}")
    return {"message": result.message}
