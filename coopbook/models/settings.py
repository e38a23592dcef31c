from decimal import Decimal

from coopbook.models.base import RecordModel


class SocietySettings(RecordModel):
    """Society profile and financial configuration (Control Center)."""
    # Society profile
    society_name: str = "Cooperative Society"
    registration_number: str = ""
    society_address: str = ""
    contact_email: str = ""
    currency: str = "INR"

    # Financial configuration
    interest_rate: Decimal = Decimal("12")
    loan_tenure_months: int = 12
    loan_limit_percent: Decimal = Decimal("80")
    fine_amount: Decimal = Decimal("10")
    grace_period_days: int = 0
    maintenance_fee: Decimal = Decimal("200")
