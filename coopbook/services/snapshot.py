"""Conversion between LedgerState and the persisted snapshot document."""
from datetime import datetime, timezone
from typing import Dict, Any

from coopbook.models.state import LedgerState

COLLECTION_KEYS = (
    "members",
    "passbook",
    "loans",
    "loanRequests",
    "adminFundLedger",
    "expenseLedger",
    "maturityOverrides",
)


class SnapshotFormatError(ValueError):
    """Document is missing required top-level keys."""
    pass


def state_to_document(state: LedgerState, version: str) -> Dict[str, Any]:
    """Dump a state revision into the camelCase snapshot document."""
    body = state.model_dump(mode="json", by_alias=True, exclude={"revision"})
    return {
        "version": version,
        **body,
        "exportDate": datetime.now(timezone.utc).isoformat(),
    }


def state_from_document(document: Dict[str, Any], revision: int = 0) -> LedgerState:
    """Validate a snapshot document into a LedgerState.

    Raises SnapshotFormatError when ``version`` or ``settings`` is missing and
    pydantic's ValidationError when a record does not validate.
    """
    if not isinstance(document, dict):
        raise SnapshotFormatError("Snapshot document must be an object")
    if not document.get("version") or not document.get("settings"):
        raise SnapshotFormatError("Invalid backup file format")

    payload = {key: document.get(key) or [] for key in COLLECTION_KEYS}
    payload["settings"] = document["settings"]
    payload["revision"] = revision
    return LedgerState.model_validate(payload)
