import json

import pytest

from pydantic_models.data.currency import Currency
from quotes.modules.exceptions import CatalogValidationError, SettingsValidationError
from quotes.modules.quote_session import QuoteSession


def test_load_creates_one_item_per_service(session):
    assert [i.service_code for i in session.line_items] == session.catalog.codes()
    assert [i.hourly_cost for i in session.line_items] == [60.0, 50.0, 55.0]
    assert session.currency is Currency.PEN
    assert session.meta.quote_number == "COT-001"


def test_compute_uses_current_settings(session):
    totals = session.compute()
    assert totals.subtotal == 10 * 60 + 10 * 50 + 10 * 55
    assert totals.tax == pytest.approx(1650 * 0.18)


def test_switching_currency_does_not_convert_stored_amounts(session):
    before = [i.hourly_cost for i in session.line_items]
    session.set_currency(Currency.USD)
    totals = session.compute()
    assert [i.hourly_cost for i in session.line_items] == before
    assert totals.currency is Currency.USD
    assert totals.total_other == pytest.approx(totals.total * 3.5)


def test_add_service_is_persisted(session, storage, config):
    session.add_service("Hosting anual", default_hourly_cost=20)
    saved = json.loads(storage.get(config.database.catalog_key))
    assert [entry["code"] for entry in saved][-1] == "hosting_anual"


def test_failed_add_keeps_draft(session):
    session.new_service_draft.label = "Otra web"
    session.new_service_draft.code = "creacion_web"
    with pytest.raises(CatalogValidationError):
        session.add_service_from_draft()
    assert session.new_service_draft.label == "Otra web"


def test_successful_add_resets_draft(session):
    session.new_service_draft.label = "Soporte"
    session.new_service_draft.default_hourly_cost = "45"
    service = session.add_service_from_draft()
    assert service.code == "soporte"
    assert service.default_hourly_cost == 45.0
    assert session.new_service_draft.label == ""


def test_delete_service_reassigns_line_items(session):
    figma = session.catalog.find_by_code("diseno_figma")
    assert session.delete_service(figma.id, lambda s: True) is True
    assert "diseno_figma" not in session.catalog.codes()
    assert all(i.service_code in session.catalog.codes() for i in session.line_items)
    assert session.line_items[-1].service_code == "creacion_web"


def test_declined_delete_changes_nothing(session, storage, config):
    figma = session.catalog.find_by_code("diseno_figma")
    assert session.delete_service(figma.id, lambda s: False) is False
    assert storage.get(config.database.catalog_key) is None
    assert len(session.catalog) == 3


def test_replace_catalog_reassigns_line_items(session):
    session.replace_catalog([{"code": "nuevo", "label": "Nuevo", "defaultHourlyCost": 10}])
    assert {i.service_code for i in session.line_items} == {"nuevo"}


def test_change_service_through_session(session):
    session.add_service("Consultoría", code="consultoria", default_hourly_cost=75)
    first, second = session.line_items[0], session.line_items[1]
    session.change_service(first.id, "consultoria")
    assert first.hourly_cost == 75.0
    assert second.service_code == "mantenimiento_web"


def test_add_and_remove_line_items(session):
    item = session.add_line_item("diseno_figma")
    assert item.hours == 10.0
    assert session.line_items[-1] is item
    assert session.remove_line_item(item.id) is True
    assert len(session.line_items) == 3


def test_update_settings_is_persisted(session, storage, config):
    session.update_settings(tax_rate=0.1, exchange_rate="3.75")
    saved = json.loads(storage.get(config.database.settings_key))
    assert saved["taxRate"] == 0.1
    assert saved["exchangeRate"] == 3.75


@pytest.mark.parametrize("patch", [
    {"exchange_rate": 0},
    {"exchange_rate": "abc"},
    {"exchange_rate": -3.5},
    {"currency": "EUR"},
])
def test_invalid_settings_are_rejected(session, patch):
    before = session.settings
    with pytest.raises(SettingsValidationError):
        session.update_settings(**patch)
    assert session.settings == before


@pytest.mark.parametrize("raw", ["abc", "", None, float("nan")])
def test_malformed_tax_rate_is_stored_as_zero(session, storage, config, raw):
    assert session.update_settings(tax_rate=raw).tax_rate == 0.0
    saved = json.loads(storage.get(config.database.settings_key))
    assert saved["taxRate"] == 0.0
    assert session.compute().tax == 0.0


def test_duplicate_ids_in_import_do_not_empty_catalog(session):
    session.replace_catalog([
        {"id": "x", "code": "a", "label": "A"},
        {"id": "x", "code": "b", "label": "B"},
    ])
    ids = [s.id for s in session.catalog]
    assert len(set(ids)) == 2
    assert session.delete_service("x", lambda s: True) is True
    assert session.catalog.codes() == ["b"]
    assert {i.service_code for i in session.line_items} == {"b"}


def test_update_company_profile(session, storage, config):
    profile = session.update_company_profile(phone=999888777)
    assert profile.phone == "999888777"
    assert profile.name == "TU EMPRESA WEB"
    saved = json.loads(storage.get(config.database.settings_key))
    assert saved["companyProfile"]["phone"] == "999888777"


def test_reload_restores_saved_state(session, storage, config):
    session.update_settings(tax_rate=0.16)
    session.add_service("Hosting", default_hourly_cost=20)
    reloaded = QuoteSession.load(config, storage)
    assert reloaded.settings.tax_rate == 0.16
    assert "hosting" in reloaded.catalog.codes()


def test_update_meta_clamps_validity(session):
    assert session.update_meta(validity_days=0).validity_days == 1
    assert session.update_meta(validity_days="abc").validity_days == 1
    assert session.update_meta(validity_days="14", client_name="ACME").validity_days == 14
    assert session.meta.client_name == "ACME"
