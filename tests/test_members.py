from datetime import date

from coopbook.models.member import MemberStatus


def test_register_member(engine):
    result = engine.register_member("Ravi Kumar", "9000000002", join_date=date(2024, 2, 1), email="ravi@example.com")

    assert result.success
    member = result.data
    assert member.status == MemberStatus.ACTIVE
    assert member.total_deposits == 0
    assert engine.state.find_member(member.id) == member


def test_duplicate_phone_is_a_conflict(engine, member):
    result = engine.register_member("Someone Else", member.phone)

    assert not result.success
    assert result.error == "conflict"
    assert result.message == "Phone already exists"
    assert len(engine.state.members) == 1


def test_blank_name_is_rejected(engine):
    result = engine.register_member("   ", "9000000003")

    assert not result.success
    assert result.error == "validation"


def test_update_member_profile(engine, member):
    result = engine.update_member(member.id, address="12 Market Road", name="Asha P.")

    assert result.success
    assert engine.state.find_member(member.id).address == "12 Market Road"
    assert engine.state.find_member(member.id).name == "Asha P."


def test_update_member_cannot_touch_totals(engine, member):
    result = engine.update_member(member.id, total_deposits=5000)

    assert not result.success
    assert result.error == "validation"


def test_update_member_phone_conflict(engine, member):
    other = engine.register_member("Meena", "9000000004").data

    result = engine.update_member(other.id, phone=member.phone)

    assert result.error == "conflict"


def test_update_unknown_member(engine):
    result = engine.update_member("missing", name="Nobody")

    assert result.error == "not_found"


def test_deactivate_and_activate(engine, member):
    assert engine.deactivate_member(member.id).success
    assert engine.members.list_members(MemberStatus.INACTIVE)[0].id == member.id
    assert engine.members.list_members(MemberStatus.ACTIVE) == []

    assert engine.activate_member(member.id).success
    assert engine.state.find_member(member.id).status == MemberStatus.ACTIVE


def test_unchanged_status_does_not_commit(engine, member, port):
    saves = port.saves
    engine.activate_member(member.id)
    assert port.saves == saves
