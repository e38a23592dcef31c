from fastapi import APIRouter, Depends, HTTPException

from coopbook.core.audit import write_audit_log
from coopbook.core.dependencies import ensure_success, get_actor, get_engine
from coopbook.schemas.passbook import PassbookEntryCreate
from coopbook.services.engine import LedgerEngine

router = APIRouter(prefix="/api/passbook", tags=["passbook"])


@router.get("/{member_id}")
def get_passbook(member_id: str, engine: LedgerEngine = Depends(get_engine)):
    """Member passbook in append order with the current balance and typed totals."""
    if not engine.state.find_member(member_id):
        raise HTTPException(status_code=404, detail="Member not found")
    return {
        "member_id": member_id,
        "balance": engine.current_balance(member_id),
        "totals": engine.passbook.member_totals(member_id),
        "entries": list(engine.entries_for(member_id)),
    }


@router.post("/{member_id}/entries", status_code=201)
def add_entry(
    member_id: str,
    payload: PassbookEntryCreate,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.append_entry(
        member_id,
        payload.components(),
        entry_date=payload.entry_date,
        mode=payload.payment_mode,
        description=payload.description,
        loan_id=payload.loan_id,
        entry_type=payload.entry_type,
    ))
    entry = result.data
    write_audit_log(
        actor,
        "Passbook entry",
        f"member_id={member_id} entry_id={entry.id} type={entry.type.value} balance={entry.balance}",
    )
    return {"message": result.message, "entry": entry}
