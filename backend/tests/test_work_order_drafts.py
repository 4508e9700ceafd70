from decimal import Decimal

import orjson
import pytest

from repair_quotes.schemas import ClientInfo
from repair_quotes.service_types.appliance_repair import (
    CatalogPart,
    CatalogService,
    EquipmentType,
    LogisticsOverride,
    ManualPart,
    ManualService,
    PricingConfig,
    Selection,
    compute_totals,
    suggest_combo,
)
from repair_quotes.services.work_order_drafts import dump_draft, load_draft

CATALOG = [CatalogService("pump-top", "Troca de bomba", EquipmentType.TOP_LOAD, 20000)]
PUMP = CatalogPart("p-pump", "Bomba", "TOP_LOAD", 10000, requires_supplier_logistics=True)


def _selection() -> Selection:
    selection = (
        Selection.start(EquipmentType.TOP_LOAD)
        .select_service("pump-top")
        .add_part(PUMP, 30)
        .add_manual_service(ManualService("ms_1", "Limpeza", 8000, 30))
        .add_manual_part(ManualPart("mp_1", "Mangueira", 2000, 40, True))
        .set_logistics_override(LogisticsOverride.forced_value(2500))
    )
    totals = compute_totals(selection, CATALOG, PricingConfig())
    return selection.with_combo(suggest_combo(totals, PricingConfig())).activate_combo()


def test_draft_restores_selection_and_client():
    selection = _selection()
    client = ClientInfo(client_name="Maria", client_phone="31 99999-0000", machine_brand="Brastemp")

    restored, restored_client = load_draft(dump_draft(selection, client))

    assert restored == selection
    assert restored.active_combo is not None
    assert restored.active_combo.discount_percent == Decimal("10")
    assert restored_client == client


def test_draft_is_plain_json():
    raw = dump_draft(_selection(), ClientInfo(client_name="Maria"))
    data = orjson.loads(raw)
    assert data["equipment_type"] == "TOP_LOAD"
    assert data["service_ids"] == ["pump-top"]
    assert data["logistics_override"] == {"mode": "FORCED_VALUE", "cents": 2500}
    assert data["combo"]["active"] is True


def test_draft_accepts_legacy_equipment():
    raw = orjson.dumps({"equipment_type": "LAVA_E_SECA"})
    selection, client = load_draft(raw)
    assert selection.equipment_type is EquipmentType.FRONT_LOAD_WASHER_DRYER
    assert selection.combo is None
    assert client.client_name == ""


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        b"[]",
        b"{}",
        b'{"equipment_type": "FREEZER"}',
        b'{"equipment_type": "TOP_LOAD", "parts": [{"part_id": "x"}]}',
        b'{"equipment_type": "TOP_LOAD", "logistics_override": {"mode": "SOMETIMES"}}',
    ],
)
def test_malformed_drafts_raise_value_error(raw):
    with pytest.raises(ValueError):
        load_draft(raw)
