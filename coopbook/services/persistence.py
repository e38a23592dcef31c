"""Persistence ports for the state store.

A port loads and saves the whole snapshot document. The store calls
``save`` after every successful mutation.
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class StatePort:
    """Key-value persistence contract for snapshot documents."""

    def load(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def save(self, document: Dict[str, Any]) -> None:
        raise NotImplementedError


class InMemoryStatePort(StatePort):
    """Keeps the serialized document in memory (tests, demos)."""

    def __init__(self, document: Optional[Dict[str, Any]] = None):
        self._payload = json.dumps(document) if document is not None else None
        self.saves = 0

    def load(self) -> Optional[Dict[str, Any]]:
        if self._payload is None:
            return None
        return json.loads(self._payload)

    def save(self, document: Dict[str, Any]) -> None:
        self._payload = json.dumps(document)
        self.saves += 1


class JsonFileStatePort(StatePort):
    """Writes the document to a JSON file, replacing it atomically."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, document: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
        os.replace(tmp_path, self.path)


class SqlAlchemyStatePort(StatePort):
    """Stores the document in the ``state_snapshot`` table, one row per key."""

    def __init__(self, session_factory, state_key: str = "society"):
        self.session_factory = session_factory
        self.state_key = state_key

    def load(self) -> Optional[Dict[str, Any]]:
        from coopbook.models.snapshot import StateSnapshot

        db = self.session_factory()
        try:
            row = db.query(StateSnapshot).filter(
                StateSnapshot.state_key == self.state_key
            ).first()
            if not row:
                return None
            document = json.loads(row.document)
            document["revision"] = row.revision
            return document
        finally:
            db.close()

    def save(self, document: Dict[str, Any]) -> None:
        from coopbook.models.snapshot import StateSnapshot

        db = self.session_factory()
        try:
            row = db.query(StateSnapshot).filter(
                StateSnapshot.state_key == self.state_key
            ).first()
            payload = json.dumps(document)
            revision = int(document.get("revision", 0))
            if row:
                row.document = payload
                row.revision = revision
            else:
                row = StateSnapshot(
                    state_key=self.state_key,
                    revision=revision,
                    document=payload,
                )
                db.add(row)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"Failed to persist snapshot for key {self.state_key}")
            raise
        finally:
            db.close()
