from fastapi import APIRouter, Depends

from coopbook.core.audit import write_audit_log
from coopbook.core.dependencies import ensure_success, get_actor, get_engine
from coopbook.schemas.settings import SettingsUpdate
from coopbook.services.engine import LedgerEngine

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("")
def get_settings(engine: LedgerEngine = Depends(get_engine)):
    return engine.settings.get_settings()


@router.put("")
def update_settings(
    payload: SettingsUpdate,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    changes = payload.model_dump(exclude_unset=True)
    result = ensure_success(engine.update_settings(**changes))
    write_audit_log(actor, "Update settings", f"fields={sorted(changes)}")
    return {"message": result.message, "settings": result.data}


@router.post("/reset")
def reset_settings(actor: str = Depends(get_actor), engine: LedgerEngine = Depends(get_engine)):
    result = ensure_success(engine.reset_settings())
    write_audit_log(actor, "Reset settings")
    return {"message": result.message, "settings": result.data}
