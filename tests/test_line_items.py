from quotes.modules.line_items import change_service, new_line_item, remove_line_item, update_line_item


def test_new_line_item_uses_catalog_cost(catalog):
    item = new_line_item(catalog, "mantenimiento_web", hours=8)
    assert item.service_code == "mantenimiento_web"
    assert item.hourly_cost == 50.0
    assert item.hours == 8
    assert item.detail == ""


def test_new_line_item_falls_back_to_first_service(catalog):
    assert new_line_item(catalog).service_code == "creacion_web"
    assert new_line_item(catalog, "unknown").service_code == "creacion_web"


def test_new_line_items_get_unique_ids(catalog):
    ids = {new_line_item(catalog).id for _ in range(20)}
    assert len(ids) == 20


def test_update_line_item_only_touches_editable_fields(catalog):
    item = new_line_item(catalog)
    items = [item]
    update_line_item(items, item.id, hours="12.5", detail="Landing", service_code="diseno_figma", id="x")
    assert item.hours == "12.5"
    assert item.detail == "Landing"
    assert item.service_code == "creacion_web"
    assert item.id != "x"


def test_update_unknown_line_item_returns_none(catalog):
    items = [new_line_item(catalog)]
    assert update_line_item(items, "missing", hours=1) is None
    assert items[0].hours == 10.0


def test_change_service_sets_cost_and_leaves_other_items(catalog):
    catalog.add_service("Consultoría", code="consultoria", suggestion="Sesión de asesoría", default_hourly_cost=75)
    first, second = new_line_item(catalog), new_line_item(catalog, "diseno_figma")
    items = [first, second]

    changed = change_service(items, first.id, "consultoria", catalog)

    assert changed is first
    assert first.service_code == "consultoria"
    assert first.hourly_cost == 75.0
    assert first.detail == "Sesión de asesoría"
    assert second.service_code == "diseno_figma"
    assert second.hourly_cost == 55.0


def test_change_service_keeps_existing_detail(catalog):
    item = new_line_item(catalog)
    item.detail = "Texto propio"
    change_service([item], item.id, "diseno_figma", catalog)
    assert item.detail == "Texto propio"
    assert item.hourly_cost == 55.0


def test_change_service_to_unknown_code_is_ignored(catalog):
    item = new_line_item(catalog)
    assert change_service([item], item.id, "unknown", catalog) is None
    assert item.service_code == "creacion_web"


def test_remove_line_item(catalog):
    items = [new_line_item(catalog), new_line_item(catalog)]
    keep = items[1]
    assert remove_line_item(items, items[0].id) is True
    assert items == [keep]
    assert remove_line_item(items, "missing") is False


def test_non_text_detail_is_stored_as_text(catalog):
    item = new_line_item(catalog)
    update_line_item([item], item.id, detail=5)
    assert item.detail == "5"
    update_line_item([item], item.id, detail=None)
    assert item.detail == ""
    change_service([item], item.id, "diseno_figma", catalog)
    assert item.detail == "Wireframes + UI final, componentes, estilos, prototipo navegable y handoff a desarrollo."
