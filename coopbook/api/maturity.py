from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from datetime import date

from coopbook.core.audit import write_audit_log
from coopbook.core.dependencies import ensure_success, get_actor, get_engine
from coopbook.schemas.maturity import (
    MaturityOverrideRequest,
    MaturityOverrideResponse,
    MaturityProjection,
)
from coopbook.services.engine import LedgerEngine
from coopbook.services.errors import NotFoundError

router = APIRouter(prefix="/api/maturity", tags=["maturity"])


@router.get("", response_model=List[MaturityProjection])
def get_maturity_data(as_of: Optional[date] = None, engine: LedgerEngine = Depends(get_engine)):
    """36-month maturity projection for every member."""
    return engine.get_maturity_data(as_of)


@router.get("/{member_id}", response_model=MaturityProjection)
def get_member_maturity(
    member_id: str,
    as_of: Optional[date] = None,
    engine: LedgerEngine = Depends(get_engine)
):
    try:
        return engine.maturity.project(member_id, as_of)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{member_id}/override", response_model=MaturityOverrideResponse)
def set_override(
    member_id: str,
    payload: MaturityOverrideRequest,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.set_maturity_override(member_id, payload.amount))
    write_audit_log(actor, "Maturity override", f"member_id={member_id} amount={payload.amount}")
    return MaturityOverrideResponse(
        member_id=member_id,
        manual_interest=result.data.manual_interest,
        is_override=True,
    )


@router.delete("/{member_id}/override", response_model=MaturityOverrideResponse)
def clear_override(
    member_id: str,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    ensure_success(engine.clear_maturity_override(member_id))
    write_audit_log(actor, "Clear maturity override", f"member_id={member_id}")
    return MaturityOverrideResponse(member_id=member_id, is_override=False)
