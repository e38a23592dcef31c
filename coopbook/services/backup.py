import json
import logging

from coopbook.models.state import LedgerState
from coopbook.schemas.common import OperationResult
from coopbook.services.snapshot import SnapshotFormatError, state_from_document
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)


class BackupService:
    """Export and import of the full snapshot document."""

    def __init__(self, store: StateStore):
        self.store = store

    def export_data(self) -> str:
        return json.dumps(self.store.to_document(), indent=2)

    def import_data(self, json_data: str) -> OperationResult:
        """Replace the whole state with a backup. Never raises on bad input."""
        try:
            document = json.loads(json_data)
            imported = state_from_document(document, revision=self.store.current.revision)
        except SnapshotFormatError:
            logger.warning("Backup import rejected: missing version or settings")
            return OperationResult(success=False, message="Invalid backup file format", error="validation")
        except (ValueError, TypeError) as e:
            logger.warning(f"Backup import failed to parse: {e}")
            return OperationResult(success=False, message="Failed to parse backup file", error="validation")

        self.store.commit(imported, action="backup.import")
        logger.info(
            f"Backup imported: {len(imported.members)} members, {len(imported.passbook)} passbook entries, "
            f"{len(imported.loans)} loans"
        )
        return OperationResult(success=True, message="Data imported successfully")

    def factory_reset(self) -> LedgerState:
        """Wipe every ledger and restore default settings."""
        state = self.store.commit(
            LedgerState(revision=self.store.current.revision), action="backup.factory_reset"
        )
        logger.warning("Society state reset to factory defaults")
        return state
