import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional, List

from coopbook.models.base import ZERO, round_money
from coopbook.models.maturity import MaturityOverride
from coopbook.models.member import Member
from coopbook.models.state import LedgerState
from coopbook.schemas.maturity import MaturityProjection
from coopbook.services.common import parse_money
from coopbook.services.errors import NotFoundError, ValidationError
from coopbook.services.loan import outstanding_balance
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)

MATURITY_TENURE_MONTHS = 36
MATURITY_INTEREST_RATE = Decimal("0.12")
DAYS_PER_MONTH = 30


def monthly_deposit_for(state: LedgerState, member_id: str) -> Decimal:
    """Deposit amount of the member's earliest-dated deposit entry, 0 if none."""
    entries = sorted(
        (e for e in state.passbook if e.member_id == member_id and e.deposit_amount > ZERO),
        key=lambda e: e.date,
    )
    return entries[0].deposit_amount if entries else ZERO


def months_completed(join_date: date, as_of: date) -> int:
    elapsed = (as_of - join_date).days // DAYS_PER_MONTH
    return max(0, min(MATURITY_TENURE_MONTHS, elapsed))


def project_member(state: LedgerState, member: Member, as_of: date) -> MaturityProjection:
    """
    Project a member's payout at the end of the 36-month share scheme.

    The monthly share is the member's first deposit. Interest is a flat 12% of
    the target deposit unless an override supplies it, and accrues evenly
    over the 36 months.
    """
    monthly = monthly_deposit_for(state, member.id)
    target = monthly * MATURITY_TENURE_MONTHS
    projected = round_money(target * MATURITY_INTEREST_RATE)

    override = state.find_override(member.id)
    is_override = bool(override and override.is_override)
    manual = override.manual_interest if override else ZERO
    settled = manual if is_override else projected

    months = months_completed(member.join_date, as_of)
    outstanding = outstanding_balance(state, member.id)
    current_deposit = sum(
        (e.deposit_amount for e in state.passbook if e.member_id == member.id), ZERO
    )
    maturity_amount = target + settled

    return MaturityProjection(
        member_id=member.id,
        member_name=member.name,
        join_date=member.join_date,
        current_deposit=current_deposit,
        outstanding_loan=outstanding,
        tenure=MATURITY_TENURE_MONTHS,
        months_completed=months,
        monthly_deposit=monthly,
        target_deposit=target,
        projected_interest=projected,
        manual_interest=manual,
        settled_interest=settled,
        monthly_interest_share=round_money(settled / MATURITY_TENURE_MONTHS),
        current_accrued_interest=round_money(settled * months / MATURITY_TENURE_MONTHS),
        maturity_amount=maturity_amount,
        net_payable=maturity_amount - outstanding,
        status="matured" if months >= MATURITY_TENURE_MONTHS else "running",
        is_override=is_override,
    )


class MaturityCalculator:
    """Read-side maturity projections plus the per-member interest override."""

    def __init__(self, store: StateStore):
        self.store = store

    def get_maturity_data(self, as_of: Optional[date] = None, state: Optional[LedgerState] = None) -> List[MaturityProjection]:
        state = state or self.store.current
        as_of = as_of or date.today()
        return [project_member(state, member, as_of) for member in state.members]

    def project(self, member_id: str, as_of: Optional[date] = None) -> MaturityProjection:
        state = self.store.current
        member = state.find_member(member_id)
        if not member:
            raise NotFoundError(f"Member {member_id} not found")
        return project_member(state, member, as_of or date.today())

    def set_override(self, member_id: str, amount) -> MaturityOverride:
        """Replace any existing override for the member."""
        state = self.store.current
        if not state.find_member(member_id):
            raise NotFoundError(f"Member {member_id} not found")
        amount = parse_money(amount, "Manual interest")
        if amount < ZERO:
            raise ValidationError("Manual interest cannot be negative")

        override = MaturityOverride(
            member_id=member_id,
            manual_interest=amount,
            is_override=True,
            updated_at=datetime.now(timezone.utc),
        )
        overrides = tuple(o for o in state.maturity_overrides if o.member_id != member_id)
        self.store.commit(
            state.model_copy(update={"maturity_overrides": overrides + (override,)}),
            action=f"maturity.override {member_id}",
        )
        logger.info(f"Maturity interest override for {member_id}: {amount}")
        return override

    def clear_override(self, member_id: str) -> Optional[MaturityOverride]:
        """Remove the member's override; the projection reverts on the next call."""
        state = self.store.current
        if not state.find_member(member_id):
            raise NotFoundError(f"Member {member_id} not found")
        existing = state.find_override(member_id)
        if not existing:
            return None

        self.store.commit(
            state.model_copy(update={
                "maturity_overrides": tuple(
                    o for o in state.maturity_overrides if o.member_id != member_id
                ),
            }),
            action=f"maturity.clear_override {member_id}",
        )
        logger.info(f"Maturity override cleared for {member_id}")
        return existing
