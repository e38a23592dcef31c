import json
from datetime import date

from coopbook.models.fund import FundDirection
from coopbook.services.engine import LedgerEngine
from coopbook.services.persistence import InMemoryStatePort


def populate(engine, member, loan):
    engine.append_entry(member.id, {"deposit_amount": 1000}, entry_date=date(2024, 1, 5))
    engine.append_entry(member.id, {"installment_amount": 1000, "interest_amount": 120}, loan_id=loan.id)
    engine.add_admin_transaction(5000, FundDirection.INJECT, "Seed")
    engine.set_maturity_override(member.id, 4000)
    engine.update_settings(society_name="Sunrise Cooperative")


def test_export_document_shape(engine, member, active_loan):
    populate(engine, member, active_loan)

    document = json.loads(engine.export_data())

    assert document["version"] == "1.0"
    assert "exportDate" in document
    assert document["settings"]["societyName"] == "Sunrise Cooperative"
    for key in ("members", "passbook", "loans", "loanRequests", "adminFundLedger", "expenseLedger", "maturityOverrides"):
        assert key in document
    assert document["loans"][0]["emiAmount"] == "1000.00"


def test_export_import_round_trip(engine, member, active_loan):
    populate(engine, member, active_loan)
    exported = engine.export_data()

    restored = LedgerEngine(InMemoryStatePort())
    result = restored.import_data(exported)

    assert result.success
    assert result.message == "Data imported successfully"
    assert restored.state.model_dump(exclude={"revision"}) == engine.state.model_dump(exclude={"revision"})
    assert restored.current_balance(member.id) == engine.current_balance(member.id)


def test_import_missing_version(engine, member):
    document = json.loads(engine.export_data())
    del document["version"]
    revision = engine.state.revision

    result = engine.import_data(json.dumps(document))

    assert not result.success
    assert result.message == "Invalid backup file format"
    assert engine.state.revision == revision
    assert engine.state.find_member(member.id)


def test_import_missing_settings(engine):
    result = engine.import_data(json.dumps({"version": "1.0", "members": []}))

    assert result.message == "Invalid backup file format"


def test_import_malformed(engine, member):
    assert engine.import_data("{not json").message == "Failed to parse backup file"

    document = json.loads(engine.export_data())
    document["members"] = [{"id": "x", "name": "No Phone"}]
    result = engine.import_data(json.dumps(document))

    assert result.message == "Failed to parse backup file"
    assert engine.state.find_member(member.id)


def test_factory_reset(engine, member, active_loan):
    engine.update_settings(interest_rate=9)

    result = engine.factory_reset()

    assert result.success
    assert engine.state.members == ()
    assert engine.state.loans == ()
    assert engine.state.settings.interest_rate == 12
