from fastapi import APIRouter, Depends, Request, Response
from datetime import datetime

from coopbook.core.audit import write_audit_log
from coopbook.core.dependencies import ensure_success, get_actor, get_engine
from coopbook.services.engine import LedgerEngine

router = APIRouter(prefix="/api/backup", tags=["backup"])


@router.get("/export")
def export_data(actor: str = Depends(get_actor), engine: LedgerEngine = Depends(get_engine)):
    """Download the full snapshot document."""
    filename = f"society_backup_{datetime.now().strftime('%Y%m%d')}.json"
    write_audit_log(actor, "Export backup", f"file={filename}")
    return Response(
        content=engine.export_data(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
async def import_data(
    request: Request,
    actor: str = Depends(get_actor),
    engine: LedgerEngine = Depends(get_engine)
):
    """Replace the whole state with an uploaded backup document."""
    body = await request.body()
    result = ensure_success(engine.import_data(body.decode("utf-8", errors="replace")))
    write_audit_log(actor, "Import backup", f"revision={engine.state.revision}")
    return {"message": result.message}


@router.post("/factory-reset")
def factory_reset(actor: str = Depends(get_actor), engine: LedgerEngine = Depends(get_engine)):
    result = ensure_success(engine.factory_reset())
    write_audit_log(actor, "Factory reset", "all data cleared")
    return {"message": result.message}
