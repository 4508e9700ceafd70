import pytest
from pydantic import ValidationError

from repair_quotes.core.config import Settings
from repair_quotes.service_types.appliance_repair import PricingConfig


def test_pricing_defaults_follow_settings():
    settings = Settings(_env_file=None, DEFAULT_FIXED_VISIT_COST=70, DEFAULT_CARD_FEE_RATE=0.04)
    config = PricingConfig.from_mapping({}, settings.pricing_defaults())
    assert config.fixed_visit_cost_cents == 7000
    assert config.diagnostic_fee_top_load_cents == 19000
    assert str(config.card_fee_rate) == "0.04"


def test_rates_must_be_fractions():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, DEFAULT_PIX_DISCOUNT_RATE=5)


def test_cors_origins_accept_comma_list():
    settings = Settings(_env_file=None, CORS_ORIGINS="http://a.test, http://b.test")
    assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_company_details():
    company = Settings(_env_file=None, COMPANY_NAME="Oficina X").company()
    assert company["name"] == "Oficina X"
    assert set(company) == {"name", "whatsapp", "email", "address", "instagram", "site"}
