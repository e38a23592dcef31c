from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from coopbook.db.base import Base
from coopbook.models.snapshot import StateSnapshot
from coopbook.models.state import LedgerState
from coopbook.services.engine import LedgerEngine, build_state_port
from coopbook.services.errors import InvalidStateError
from coopbook.services.persistence import InMemoryStatePort, JsonFileStatePort, SqlAlchemyStatePort
from coopbook.services.state import StateStore


class FailingPort(InMemoryStatePort):
    def save(self, document):
        raise RuntimeError("disk full")


def test_commit_bumps_revision():
    store = StateStore()

    committed = store.commit(store.current.model_copy(), action="noop")

    assert committed.revision == 1
    assert store.current is committed


def test_stale_revision_is_rejected():
    store = StateStore()
    stale = store.current
    store.commit(stale.model_copy(), action="first")

    with pytest.raises(InvalidStateError):
        store.commit(stale.model_copy(), action="second")


def test_failed_save_keeps_previous_state():
    store = StateStore(FailingPort())
    before = store.current

    with pytest.raises(RuntimeError):
        store.commit(before.model_copy(update={"members": ()}), action="save fails")

    assert store.current is before


def test_previous_revisions_are_untouched(engine, member):
    before = engine.state

    engine.append_entry(member.id, {"deposit_amount": 100})

    assert before.passbook == ()
    assert before.find_member(member.id).total_deposits == 0


def test_json_file_port_reloads(tmp_path):
    path = tmp_path / "state.json"
    engine = LedgerEngine(JsonFileStatePort(path))
    member = engine.register_member("Lata", "9000000011", join_date=date(2024, 1, 1)).data
    engine.append_entry(member.id, {"deposit_amount": 1500})

    reloaded = LedgerEngine(JsonFileStatePort(path))

    assert reloaded.state.revision == engine.state.revision
    assert reloaded.current_balance(member.id) == 1500
    assert not (tmp_path / "state.json.tmp").exists()


def test_sqlalchemy_port_reloads(tmp_path):
    db_engine = create_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    Base.metadata.create_all(bind=db_engine)
    session_factory = sessionmaker(bind=db_engine)

    engine = LedgerEngine(SqlAlchemyStatePort(session_factory, "test"))
    member = engine.register_member("Lata", "9000000011").data
    engine.append_entry(member.id, {"deposit_amount": 1500})

    reloaded = LedgerEngine(SqlAlchemyStatePort(session_factory, "test"))
    assert reloaded.state.revision == 2
    assert reloaded.current_balance(member.id) == 1500

    db = session_factory()
    try:
        assert db.query(StateSnapshot).count() == 1
    finally:
        db.close()

    other = LedgerEngine(SqlAlchemyStatePort(session_factory, "other"))
    assert other.state == LedgerState()


def test_build_state_port():
    assert isinstance(build_state_port("memory"), InMemoryStatePort)
    assert isinstance(build_state_port("file"), JsonFileStatePort)
    with pytest.raises(ValueError):
        build_state_port("redis")
