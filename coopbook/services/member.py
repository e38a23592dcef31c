import logging
from datetime import date
from decimal import Decimal
from typing import Optional, List

from coopbook.models.base import ZERO
from coopbook.models.member import Member, MemberStatus
from coopbook.services.common import new_id, replace_by_id
from coopbook.services.errors import ConflictError, NotFoundError, ValidationError
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"name", "father_name", "phone", "email", "address", "join_date"}


class MemberDirectory:
    """Member registry. Members are never deleted, only deactivated."""

    def __init__(self, store: StateStore):
        self.store = store

    def get_member(self, member_id: str) -> Member:
        member = self.store.current.find_member(member_id)
        if not member:
            raise NotFoundError(f"Member {member_id} not found")
        return member

    def list_members(self, status: Optional[MemberStatus] = None) -> List[Member]:
        members = self.store.current.members
        if status is None:
            return list(members)
        return [m for m in members if m.status == status]

    def total_deposits(self) -> Decimal:
        return sum((m.total_deposits for m in self.store.current.members), ZERO)

    def register_member(
        self,
        name: str,
        phone: str,
        join_date: Optional[date] = None,
        father_name: str = None,
        email: str = None,
        address: str = None
    ) -> Member:
        """Register a new active member. Phone numbers must be unique."""
        state = self.store.current
        if not name or not name.strip():
            raise ValidationError("Member name is required")
        if any(m.phone == phone for m in state.members):
            raise ConflictError("Phone already exists")

        member = Member(
            id=new_id(),
            name=name.strip(),
            father_name=father_name,
            phone=phone,
            email=email,
            address=address,
            join_date=join_date or date.today(),
            status=MemberStatus.ACTIVE,
        )
        self.store.commit(
            state.model_copy(update={"members": state.members + (member,)}),
            action=f"member.register {member.id}",
        )
        logger.info(f"Registered member {member.id} ({member.name})")
        return member

    def update_member(self, member_id: str, **changes) -> Member:
        """Update profile fields. Deposit and loan totals are not editable here."""
        state = self.store.current
        member = self.get_member(member_id)

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        updates = {k: v for k, v in changes.items() if v is not None}
        if "phone" in updates and any(
            m.phone == updates["phone"] and m.id != member_id for m in state.members
        ):
            raise ConflictError("Phone already exists")

        updated = member.model_copy(update=updates)
        self.store.commit(
            state.model_copy(update={"members": replace_by_id(state.members, updated)}),
            action=f"member.update {member_id}",
        )
        return updated

    def set_status(self, member_id: str, status: MemberStatus) -> Member:
        state = self.store.current
        member = self.get_member(member_id)
        if member.status == status:
            return member

        updated = member.model_copy(update={"status": status})
        self.store.commit(
            state.model_copy(update={"members": replace_by_id(state.members, updated)}),
            action=f"member.status {member_id} {status.value}",
        )
        logger.info(f"Member {member_id} status {member.status.value} -> {status.value}")
        return updated

    def activate_member(self, member_id: str) -> Member:
        return self.set_status(member_id, MemberStatus.ACTIVE)

    def deactivate_member(self, member_id: str) -> Member:
        return self.set_status(member_id, MemberStatus.INACTIVE)
