from decimal import Decimal


def test_defaults(engine):
    settings = engine.settings.get_settings()

    assert settings.interest_rate == Decimal("12")
    assert settings.loan_tenure_months == 12
    assert settings.maintenance_fee == Decimal("200")
    assert settings.grace_period_days == 0


def test_new_loans_use_updated_settings(engine, member):
    assert engine.update_settings(interest_rate=10, loan_tenure_months=6).success

    request = engine.request_loan(member.id, 12000).data
    loan = engine.approve_loan(request.id).data

    assert loan.interest_rate == Decimal("10")
    assert loan.tenure == 6
    assert loan.emi_amount == Decimal("2000")


def test_invalid_settings(engine):
    assert engine.update_settings(loan_tenure_months=0).error == "validation"
    assert engine.update_settings(grace_period_days=-1).error == "validation"
    assert engine.update_settings(colour="blue").error == "validation"
    assert engine.settings.get_settings().loan_tenure_months == 12


def test_reset_settings(engine):
    engine.update_settings(fine_amount=25, society_name="Sunrise")

    result = engine.reset_settings()

    assert result.success
    assert engine.settings.get_settings().fine_amount == Decimal("10")
    assert engine.settings.get_settings().society_name == "Cooperative Society"
