from datetime import date

import pytest
from pydantic import ValidationError

from pydantic_models.data.currency import Currency
from pydantic_models.data.quote_meta_model import QuoteMeta
from pydantic_models.data.settings_model import Settings
from shared_modules.entity import CompanyProfile


def test_currency_pair():
    assert Currency.USD.other is Currency.PEN
    assert Currency.PEN.other is Currency.USD
    assert Currency("PEN") is Currency.PEN


@pytest.mark.parametrize("value, expected", [(0, 1), (-3, 1), ("abc", 1), ("", 1), (None, 1), (3.7, 3), ("15", 15)])
def test_validity_days_is_at_least_one(value, expected):
    assert QuoteMeta(validity_days=value).validity_days == expected


def test_issue_date_defaults_to_today():
    assert QuoteMeta().issue_date == date.today()
    assert QuoteMeta(issue_date="invalid").issue_date == date.today()
    assert QuoteMeta(issue_date="2026-03-01").issue_date == date(2026, 3, 1)


def test_settings_accept_camel_case_and_snake_case():
    assert Settings.model_validate({"taxRate": 0.2}).tax_rate == 0.2
    assert Settings(tax_rate=0.2).tax_rate == 0.2


@pytest.mark.parametrize("rate", [0, -1, float("nan"), float("inf")])
def test_exchange_rate_must_be_positive(rate):
    with pytest.raises(ValidationError):
        Settings(exchange_rate=rate)


def test_company_profile_header_lines():
    profile = CompanyProfile(name="ACME", tax_id=20123456789, email="a@acme.pe", phone="")
    assert profile.tax_id == "20123456789"
    assert profile.header_lines() == ["ACME", "20123456789", "a@acme.pe"]
    assert CompanyProfile().header_lines() == []
