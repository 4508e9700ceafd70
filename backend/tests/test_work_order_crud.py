import logging

import pytest
from sqlalchemy.exc import SQLAlchemyError

from repair_quotes import models
from repair_quotes.crud import crud_work_order
from repair_quotes.schemas import ClientInfo
from repair_quotes.service_types.appliance_repair import (
    CatalogPart,
    CatalogService,
    EquipmentType,
    ManualPart,
    ManualService,
    PricingConfig,
    Selection,
    compute_totals,
    suggest_combo,
)

CONFIG = PricingConfig()
CATALOG = [
    CatalogService("diag-top", "Diagnóstico", EquipmentType.TOP_LOAD, 0, is_diagnostic=True),
    CatalogService("pump-top", "Troca de bomba", EquipmentType.TOP_LOAD, 20000, warranty_days=90),
]
PUMP = CatalogPart("p-pump", "Bomba de drenagem", "TOP_LOAD", 10000)
CLIENT = ClientInfo(client_name="Maria", client_phone="31 99999-0000", notes="  ")


def seed(db):
    db.add_all(
        [
            models.ServiceCatalog(id="diag-top", name="Diagnóstico", equipment_type="TOP_LOAD", is_diagnostic=True),
            models.ServiceCatalog(id="pump-top", name="Troca de bomba", equipment_type="TOP_LOAD", labor_base_cents=20000),
            models.PartsCatalog(id="p-pump", name="Bomba de drenagem", equipment_scope="TOP_LOAD", default_cost_cents=10000),
        ]
    )
    db.commit()


def full_quote():
    selection = (
        Selection.start(EquipmentType.TOP_LOAD)
        .select_service("pump-top")
        .select_service("diag-top")
        .add_part(PUMP, 40)
        .add_manual_service(ManualService("ms_1", "Limpeza", 8000, 30))
        .add_manual_part(ManualPart("mp_1", "Mangueira", 2000, 30, True))
    )
    return selection, compute_totals(selection, CATALOG, CONFIG)


def test_payload_maps_header_and_rows():
    selection, totals = full_quote()
    payload = crud_work_order.build_work_order_payload(totals, selection, CLIENT, CONFIG)
    assert payload["status"] == "DRAFT"
    assert payload["client_name"] == "Maria"
    assert payload["notes"] is None
    assert payload["equipment_type"] == "TOP_LOAD"
    assert payload["diagnosis_charged_cents"] == 0
    assert payload["diagnosis_credited"] is False
    assert payload["service_ids"] == ["diag-top", "pump-top"]
    assert payload["manual_services"] == [{"name": "Limpeza", "labor_cents": 8000, "warranty_days": 30}]
    assert payload["card_cents"] == totals.card_cents
    assert [p["part_id"] for p in payload["parts"]] == ["p-pump", None]
    assert payload["parts"][0]["sale_price_cents"] == 14000
    assert payload["parts"][1]["needs_supplier_pickup"] is True


def test_payload_charges_standalone_diagnostic():
    selection = Selection.start(EquipmentType.TOP_LOAD).select_service("diag-top")
    totals = compute_totals(selection, CATALOG, CONFIG)
    payload = crud_work_order.build_work_order_payload(totals, selection, ClientInfo(), CONFIG)
    assert payload["diagnosis_charged_cents"] == 19000
    assert payload["client_name"] == "Cliente"


def test_payload_uses_active_combo_prices():
    selection = Selection.start(EquipmentType.TOP_LOAD).select_service("pump-top").add_part(PUMP, 40)
    totals = compute_totals(selection, CATALOG, CONFIG)
    selection = selection.with_combo(suggest_combo(totals, CONFIG)).activate_combo()
    payload = crud_work_order.build_work_order_payload(totals, selection, CLIENT, CONFIG)
    assert payload["card_cents"] == 30600
    assert payload["pix_cents"] == 29070
    assert payload["real_profit_cents"] == 12540


def test_payload_requires_a_service():
    selection = Selection.start(EquipmentType.TOP_LOAD).add_part(PUMP, 40)
    totals = compute_totals(selection, CATALOG, CONFIG)
    with pytest.raises(ValueError):
        crud_work_order.build_work_order_payload(totals, selection, CLIENT, CONFIG)


def test_create_work_order_persists_rows(db, caplog):
    seed(db)
    selection, totals = full_quote()
    payload = crud_work_order.build_work_order_payload(totals, selection, CLIENT, CONFIG)

    caplog.set_level(logging.INFO, logger="repair_quotes.crud.crud_work_order")
    order = crud_work_order.create_work_order(db, payload)

    stored = crud_work_order.get_work_order(db, order.id)
    assert stored.client_phone == "31 99999-0000"
    assert sorted(s.service_id for s in stored.services) == ["diag-top", "pump-top"]
    assert len(stored.parts) == 2
    manual = [p for p in stored.parts if p.part_id is None]
    assert manual[0].part_name == "Mangueira"
    assert manual[0].cost_real_cents == 2000
    assert stored.manual_services[0]["name"] == "Limpeza"
    assert any("Work order" in r.getMessage() for r in caplog.records)


def test_create_work_order_rolls_back_on_failure(db, monkeypatch, caplog):
    seed(db)
    selection, totals = full_quote()
    payload = crud_work_order.build_work_order_payload(totals, selection, CLIENT, CONFIG)

    def broken_commit():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db, "commit", broken_commit)
    caplog.set_level(logging.ERROR, logger="repair_quotes.crud.crud_work_order")
    with pytest.raises(SQLAlchemyError):
        crud_work_order.create_work_order(db, payload)

    assert db.query(models.WorkOrder).count() == 0
    assert db.query(models.WorkOrderPart).count() == 0
    assert any("Failed to save work order" in r.getMessage() for r in caplog.records)
