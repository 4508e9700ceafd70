from dataclasses import fields
from decimal import Decimal

import pytest

from repair_quotes.service_types.appliance_repair import (
    CatalogPart,
    CatalogService,
    EquipmentType,
    PricingConfig,
    Selection,
    compute_totals,
    suggest_combo,
)
from repair_quotes.services.quote_message import (
    build_client_message,
    build_customer_summary,
    build_technician_summary,
    classify_profit,
    format_brl,
    whatsapp_url,
)

CONFIG = PricingConfig()
CATALOG = [
    CatalogService("diag-top", "Diagnóstico", EquipmentType.TOP_LOAD, 0, is_diagnostic=True),
    CatalogService("pump-top", "Troca de bomba", EquipmentType.TOP_LOAD, 20000, warranty_days=90),
]
PUMP = CatalogPart("p-pump", "Bomba de drenagem", "TOP_LOAD", 10000)


def scenario_a():
    selection = Selection.start(EquipmentType.TOP_LOAD).select_service("pump-top").add_part(PUMP, 40)
    return selection, compute_totals(selection, CATALOG, CONFIG)


@pytest.mark.parametrize(
    "cents,expected",
    [
        (123456, "R$ 1.234,56"),
        (0, "R$ 0,00"),
        (5, "R$ 0,05"),
        (34000, "R$ 340,00"),
        (100000000, "R$ 1.000.000,00"),
        (-1250, "-R$ 12,50"),
    ],
)
def test_format_brl(cents, expected):
    assert format_brl(cents) == expected


def test_classify_profit_thresholds():
    assert classify_profit(-1) == "negative"
    assert classify_profit(0) == "low"
    assert classify_profit(7999) == "low"
    assert classify_profit(8000) == "ok"


def test_customer_summary_exposes_prices_and_names_only():
    selection, totals = scenario_a()
    summary = build_customer_summary(totals, selection, CONFIG)
    assert set(summary) == {
        "card_cents",
        "pix_cents",
        "service_names",
        "part_names",
        "diagnosis_included_free",
        "warranty_days",
        "warranty_note",
    }
    assert summary["card_cents"] == 34000
    assert summary["pix_cents"] == 32300
    assert summary["service_names"] == ["Troca de bomba"]
    assert summary["part_names"] == ["Bomba de drenagem"]


def test_client_message_text():
    selection, totals = scenario_a()
    message = build_client_message(totals, selection, CONFIG, client_name="Maria", company={"name": "LavaProFix"})
    assert message.startswith("Olá, Maria! 👋\n\n✅ Orçamento LavaProFix — Máquina de Lavar")
    assert "Serviços:\n• Troca de bomba\n\nPeças previstas:\n• Bomba de drenagem" in message
    assert "Valor no cartão: R$ 340,00" in message
    assert "Valor no Pix: R$ 323,00" in message
    assert "✅ Diagnóstico técnico incluso (orçamento aprovado)." in message
    assert "Garantia: 90 dias (mão de obra e peças fornecidas pela LavaProFix)." in message
    assert message.endswith("Se estiver ok, posso seguir com o serviço agora.")
    # part cost and profit stay with the technician
    assert "R$ 100,00" not in message
    assert "157,70" not in message


def test_client_message_defaults():
    selection = Selection.start(EquipmentType.TOP_LOAD)
    totals = compute_totals(selection, CATALOG, CONFIG)
    message = build_client_message(totals, selection, CONFIG, client_name="  ")
    assert message.startswith("Olá, Cliente!")
    assert "• (nenhum)" in message
    assert "Peças previstas" not in message
    assert "Garantia: não aplicável para este serviço." in message


def test_client_message_uses_active_combo():
    selection, totals = scenario_a()
    selection = selection.with_combo(suggest_combo(totals, CONFIG))
    assert "R$ 340,00" in build_client_message(totals, selection, CONFIG)
    message = build_client_message(totals, selection.activate_combo(), CONFIG)
    assert "Valor no cartão: R$ 306,00" in message
    assert "Valor no Pix: R$ 290,70" in message


def test_whatsapp_url():
    assert whatsapp_url("Olá", "(31) 98762-3965") == "https://wa.me/5531987623965?text=Ol%C3%A1"
    assert whatsapp_url("a b", None) == "https://wa.me/?text=a%20b"


def test_technician_summary():
    selection, totals = scenario_a()
    summary = build_technician_summary(totals, selection, CONFIG)
    assert summary["equipment_type"] == "TOP_LOAD"
    assert summary["labor_cents"] == 20000
    assert summary["parts_cost_cents"] == 10000
    assert summary["real_profit_cents"] == 15770
    assert summary["effective_real_profit_cents"] == 15770
    assert summary["profit_health"] == "ok"
    assert summary["diagnosis_label"] == "INCLUSO (R$ 0)"
    assert summary["combo_discount_percent"] is None
    assert summary["warranty_days"] == 90
    assert summary["diagnostic_selected"] is False
    assert summary["standalone_diagnostic"] is False
    assert summary["diagnosis_included_free"] is True
    assert summary["diagnostic_fee_cents"] == 19000
    assert summary["diagnosis_charged_cents"] == 0
    assert [s["id"] for s in summary["services"]] == ["pump-top"]
    assert summary["parts"][0]["sale_cents"] == 14000


def test_technician_summary_covers_every_totals_field():
    selection, totals = scenario_a()
    summary = build_technician_summary(totals, selection, CONFIG)
    missing = [f.name for f in fields(totals) if f.name not in summary]
    assert missing == []


def test_technician_summary_uses_effective_profit():
    selection, totals = scenario_a()
    selection = selection.with_combo(suggest_combo(totals, CONFIG)).activate_combo()
    summary = build_technician_summary(totals, selection, CONFIG)
    assert summary["card_cents"] == 34000
    assert summary["pix_cents"] == 32300
    assert summary["effective_card_cents"] == 30600
    assert summary["effective_pix_cents"] == 29070
    assert summary["effective_net_card_cents"] == 29070
    assert summary["effective_real_profit_cents"] == 12540
    assert summary["combo_discount_percent"] == Decimal("10")


def test_technician_summary_flags_standalone_diagnostic():
    selection = Selection.start(EquipmentType.TOP_LOAD).select_service("diag-top")
    totals = compute_totals(selection, CATALOG, CONFIG)
    summary = build_technician_summary(totals, selection, CONFIG)
    assert summary["diagnosis_label"] == "Somente diagnóstico: R$ 190,00"
    assert summary["profit_health"] == "ok"


def test_technician_summary_negative_profit():
    selection = Selection.start(EquipmentType.TOP_LOAD)
    totals = compute_totals(selection, CATALOG, CONFIG)
    summary = build_technician_summary(totals, selection, CONFIG)
    assert summary["profit_health"] == "negative"
    assert summary["diagnosis_label"] == "—"
