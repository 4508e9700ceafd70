import pytest

from repair_quotes.service_types.appliance_repair import (
    CatalogPart,
    CatalogService,
    EquipmentType,
    group_by_category,
    parts_for_equipment,
    scope_matches_equipment,
    search_services,
)


@pytest.mark.parametrize("scope", ["ALL", "both", "Every", "AMBOS", "todos"])
def test_universal_scopes_match_everything(scope):
    for equipment in EquipmentType:
        assert scope_matches_equipment(scope, equipment)


def test_legacy_and_current_tags():
    assert scope_matches_equipment("MAQUINA_DE_LAVAR_TOP_LOAD", EquipmentType.TOP_LOAD)
    assert scope_matches_equipment("top_load", EquipmentType.TOP_LOAD)
    assert scope_matches_equipment("LAVA_E_SECA", EquipmentType.FRONT_LOAD_WASHER_DRYER)
    assert scope_matches_equipment(" front_load ", EquipmentType.FRONT_LOAD_WASHER_DRYER)
    assert scope_matches_equipment("SERVICOS_RESIDENCIAIS", EquipmentType.RESIDENTIAL_SERVICES)
    assert not scope_matches_equipment("TOP_LOAD", EquipmentType.FRONT_LOAD_WASHER_DRYER)
    assert not scope_matches_equipment("LAVA_E_SECA", EquipmentType.TOP_LOAD)


def test_empty_scope_matches_nothing():
    assert not scope_matches_equipment("", EquipmentType.TOP_LOAD)
    assert not scope_matches_equipment(None, EquipmentType.TOP_LOAD)


def test_parts_for_equipment_filters():
    parts = [
        CatalogPart("a", "Bomba", "TOP_LOAD", 100),
        CatalogPart("b", "Rolamento", "LAVA_E_SECA", 100),
        CatalogPart("c", "Fusível", "ALL", 100),
    ]
    assert [p.id for p in parts_for_equipment(parts, EquipmentType.TOP_LOAD)] == ["a", "c"]


def _services():
    return [
        CatalogService("1", "Troca de bomba", EquipmentType.TOP_LOAD, 100, category="Hidráulica", tags=("dreno",)),
        CatalogService("2", "Limpeza geral", EquipmentType.TOP_LOAD, 100, category="Manutenção"),
        CatalogService("3", "Regulagem", EquipmentType.TOP_LOAD, 100, notes="Inclui teste de centrifugação"),
    ]


def test_search_services_matches_name_tags_and_notes():
    services = _services()
    assert [s.id for s in search_services(services, "BOMBA")] == ["1"]
    assert [s.id for s in search_services(services, "dreno")] == ["1"]
    assert [s.id for s in search_services(services, "centrifug")] == ["3"]
    assert [s.id for s in search_services(services, "manutenção")] == ["2"]
    assert len(search_services(services, "  ")) == 3


def test_group_by_category_uses_fallback():
    grouped = group_by_category(_services())
    assert list(grouped) == ["Hidráulica", "Manutenção", "OTHER"]
    assert [s.id for s in grouped["OTHER"]] == ["3"]
