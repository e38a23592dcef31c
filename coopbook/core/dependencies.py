from typing import Optional

from fastapi import Header, HTTPException, Request, status

from coopbook.schemas.common import OperationResult
from coopbook.services.engine import LedgerEngine

ERROR_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
}


def get_engine(request: Request) -> LedgerEngine:
    """The engine created at startup and attached to the app state."""
    return request.app.state.ledger


def ensure_success(result: OperationResult) -> OperationResult:
    """Raise an HTTPException for a failed engine result."""
    if not result.success:
        raise HTTPException(
            status_code=ERROR_STATUS.get(result.error, status.HTTP_400_BAD_REQUEST),
            detail=result.message,
        )
    return result


def get_actor(x_actor: Optional[str] = Header(None)) -> str:
    """Name recorded in the audit trail for this request."""
    return x_actor or "system"
