from fastapi import APIRouter, Depends, HTTPException
from typing import Optional

from coopbook.core.audit import write_audit_log
from coopbook.core.dependencies import ensure_success, get_actor, get_engine
from coopbook.models.member import MemberStatus
from coopbook.schemas.member import MemberCreate, MemberUpdate
from coopbook.services.engine import LedgerEngine
from coopbook.services.errors import NotFoundError

router = APIRouter(prefix="/api/members", tags=["members"])


@router.get("")
def list_members(
    status: Optional[MemberStatus] = None,
    engine: LedgerEngine = Depends(get_engine)
):
    """List members, optionally filtered by status."""
    return engine.members.list_members(status)


@router.post("", status_code=201)
def register_member(
    payload: MemberCreate,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.register_member(**payload.model_dump()))
    write_audit_log(actor, "Register member", f"member_id={result.data.id} phone={payload.phone}")
    return {"message": result.message, "member": result.data}


@router.get("/{member_id}")
def get_member(member_id: str, engine: LedgerEngine = Depends(get_engine)):
    try:
        return engine.members.get_member(member_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{member_id}")
def update_member(
    member_id: str,
    payload: MemberUpdate,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    changes = payload.model_dump(exclude_unset=True)
    result = ensure_success(engine.update_member(member_id, **changes))
    write_audit_log(actor, "Update member", f"member_id={member_id} fields={sorted(changes)}")
    return {"message": result.message, "member": result.data}


@router.post("/{member_id}/activate")
def activate_member(
    member_id: str,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.activate_member(member_id))
    write_audit_log(actor, "Activate member", f"member_id={member_id}")
    return {"message": result.message, "member": result.data}


@router.post("/{member_id}/deactivate")
def deactivate_member(
    member_id: str,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    result = ensure_success(engine.deactivate_member(member_id))
    write_audit_log(actor, "Deactivate member", f"member_id={member_id}")
    return {"message": result.message, "member": result.data}
