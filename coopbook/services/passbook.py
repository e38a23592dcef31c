import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Dict, Iterator

from coopbook.models.base import ZERO
from coopbook.models.passbook import EntryComponents, EntryType, PassbookEntry, PaymentMode
from coopbook.services.common import new_id, parse_choice, parse_money, replace_by_id
from coopbook.services.errors import NotFoundError, ValidationError
from coopbook.services.loan import apply_installment_to_state
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)


class MemberEntries:
    """Lazy view of one member's passbook in append order.

    Iterating twice walks the same snapshot twice; later appends are not seen.
    """

    def __init__(self, entries, member_id: str):
        self._entries = entries
        self.member_id = member_id

    def __iter__(self) -> Iterator[PassbookEntry]:
        return (e for e in self._entries if e.member_id == self.member_id)


def build_components(components) -> EntryComponents:
    if isinstance(components, EntryComponents):
        values = components.model_dump()
    else:
        values = dict(components or {})
    unknown = sorted(set(values) - set(EntryComponents.model_fields))
    if unknown:
        raise ValidationError(f"Unknown passbook components: {', '.join(unknown)}")
    return EntryComponents(**{k: parse_money(v, k) for k, v in values.items()})


class PassbookLedger:
    """Per-member append-only passbook with running balances."""

    def __init__(self, store: StateStore):
        self.store = store

    def entries_for(self, member_id: str) -> MemberEntries:
        return MemberEntries(self.store.current.passbook, member_id)

    def current_balance(self, member_id: str) -> Decimal:
        """Balance of the most recently appended entry (append order, not date order)."""
        last = None
        for entry in self.entries_for(member_id):
            last = entry
        return last.balance if last else ZERO

    def append_entry(
        self,
        member_id: str,
        components,
        entry_date: Optional[date] = None,
        mode: PaymentMode = PaymentMode.CASH,
        description: str = "",
        loan_id: Optional[str] = None,
        entry_type: Optional[EntryType] = None
    ) -> PassbookEntry:
        """
        Append a passbook entry for a member.

        Deposit, interest and fine components are credits; installment and
        withdrawal components are debits. A nonzero installment is applied to
        ``loan_id`` in the same commit, and the deposit component is added to
        the member's deposit total.

        Args:
            components: EntryComponents or a dict of component amounts
        """
        state = self.store.current
        member = state.find_member(member_id)
        if not member:
            logger.warning(f"Passbook entry rejected: member {member_id} not found")
            raise NotFoundError(f"Member {member_id} not found")

        mode = parse_choice(PaymentMode, mode, "payment mode")
        if entry_type is not None:
            entry_type = parse_choice(EntryType, entry_type, "entry type")
        parts = build_components(components)
        if any(amount < ZERO for amount in parts.model_dump().values()):
            raise ValidationError("Component amounts cannot be negative")

        nonzero = list(parts.nonzero())
        if entry_type is None:
            if not nonzero:
                raise ValidationError("Passbook entry has no amounts")
            entry_type = nonzero[0][0]
        elif not nonzero and entry_type != EntryType.LOAN:
            raise ValidationError("Passbook entry has no amounts")

        if parts.installment_amount > ZERO and not loan_id:
            raise ValidationError("Installment entries must reference a loan")

        next_state = state
        if parts.installment_amount > ZERO:
            next_state, _ = apply_installment_to_state(
                next_state, member_id, loan_id, parts.installment_amount
            )

        entry = PassbookEntry(
            id=new_id(),
            member_id=member_id,
            loan_id=loan_id,
            date=entry_date or date.today(),
            type=entry_type,
            payment_mode=mode,
            balance=self.current_balance(member_id) + parts.net_delta,
            description=description or "",
            **parts.model_dump(),
        )

        members = next_state.members
        if parts.deposit_amount > ZERO:
            members = replace_by_id(
                members,
                member.model_copy(update={"total_deposits": member.total_deposits + parts.deposit_amount}),
            )

        self.store.commit(
            next_state.model_copy(update={
                "passbook": next_state.passbook + (entry,),
                "members": members,
            }),
            action=f"passbook.append {entry.id}",
        )
        logger.info(
            f"Passbook entry {entry.id} for member {member_id}: type={entry_type.value}, "
            f"delta={parts.net_delta}, balance={entry.balance}"
        )
        return entry

    def member_totals(self, member_id: str) -> Dict[str, Decimal]:
        """Typed component subtotals for one member."""
        totals = {t.value: ZERO for t in EntryType if t != EntryType.LOAN}
        for entry in self.entries_for(member_id):
            for entry_type, amount in entry.nonzero():
                totals[entry_type.value] += amount
        return totals
