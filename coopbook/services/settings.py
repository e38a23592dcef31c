import logging

from pydantic import ValidationError as SchemaValidationError

from coopbook.models.settings import SocietySettings
from coopbook.services.errors import ValidationError
from coopbook.services.state import StateStore

logger = logging.getLogger(__name__)


class SettingsService:
    """Society profile and financial configuration stored in the state."""

    def __init__(self, store: StateStore):
        self.store = store

    def get_settings(self) -> SocietySettings:
        return self.store.current.settings

    def update_settings(self, **changes) -> SocietySettings:
        state = self.store.current
        unknown = set(changes) - set(SocietySettings.model_fields)
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        try:
            updated = SocietySettings.model_validate({
                **state.settings.model_dump(),
                **{k: v for k, v in changes.items() if v is not None},
            })
        except SchemaValidationError as e:
            raise ValidationError(f"Invalid settings: {e.errors()[0]['msg']}")

        if updated.loan_tenure_months <= 0:
            raise ValidationError("Loan tenure must be at least one month")
        if updated.grace_period_days < 0:
            raise ValidationError("Grace period cannot be negative")

        self.store.commit(state.model_copy(update={"settings": updated}), action="settings.update")
        logger.info(f"Settings updated: {sorted(changes)}")
        return updated

    def reset_settings(self) -> SocietySettings:
        state = self.store.current
        defaults = SocietySettings()
        self.store.commit(state.model_copy(update={"settings": defaults}), action="settings.reset")
        return defaults
