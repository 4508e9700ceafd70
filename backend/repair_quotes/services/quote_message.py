"""Customer and technician views of a computed quote.

The customer view and the client message carry prices and item names only;
cost, margin, logistics, card fee and profit stay in the technician view.
"""

from __future__ import annotations

import re
from dataclasses import asdict
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from ..core.config import settings
from ..service_types.appliance_repair import (
    PricingConfig,
    QuoteTotals,
    Selection,
    effective_prices,
)

LOW_PROFIT_THRESHOLD_CENTS = 8000

PROFIT_NEGATIVE = "negative"
PROFIT_LOW = "low"
PROFIT_OK = "ok"

DEFAULT_CLIENT_NAME = "Cliente"


def format_brl(cents: int) -> str:
    """Format integer cents as Brazilian reais, e.g. ``123456 -> "R$ 1.234,56"``."""
    cents = int(cents)
    sign = "-" if cents < 0 else ""
    units, rest = divmod(abs(cents), 100)
    grouped = f"{units:,}".replace(",", ".")
    return f"{sign}R$ {grouped},{rest:02d}"


def classify_profit(real_profit_cents: int) -> str:
    if real_profit_cents < 0:
        return PROFIT_NEGATIVE
    if real_profit_cents < LOW_PROFIT_THRESHOLD_CENTS:
        return PROFIT_LOW
    return PROFIT_OK


def warranty_note(warranty_days: int, company_name: Optional[str] = None) -> str:
    if warranty_days > 0:
        name = company_name or settings.COMPANY_NAME
        return f"Garantia: {warranty_days} dias (mão de obra e peças fornecidas pela {name})."
    return "Garantia: não aplicável para este serviço."


def build_customer_summary(
    totals: QuoteTotals, selection: Selection, config: PricingConfig
) -> Dict[str, Any]:
    prices = effective_prices(totals, selection, config)
    return {
        "card_cents": prices.card_cents,
        "pix_cents": prices.pix_cents,
        "service_names": [s.name for s in totals.services],
        "part_names": [p.name for p in totals.parts],
        "diagnosis_included_free": totals.diagnosis_included_free,
        "warranty_days": totals.warranty_days,
        "warranty_note": warranty_note(totals.warranty_days),
    }


def build_client_message(
    totals: QuoteTotals,
    selection: Selection,
    config: PricingConfig,
    client_name: Optional[str] = None,
    company: Optional[Mapping[str, str]] = None,
) -> str:
    """WhatsApp-ready quote text for the client."""
    company_name = (company or {}).get("name") or settings.COMPANY_NAME
    prices = effective_prices(totals, selection, config)
    name = (client_name or "").strip() or DEFAULT_CLIENT_NAME

    if totals.services:
        services_txt = "\n".join(f"• {s.name}" for s in totals.services)
    else:
        services_txt = "• (nenhum)"
    parts_txt = ""
    if totals.parts:
        parts_txt = "\n\nPeças previstas:\n" + "\n".join(f"• {p.name}" for p in totals.parts)
    diag_txt = ""
    if totals.diagnosis_included_free:
        diag_txt = "\n✅ Diagnóstico técnico incluso (orçamento aprovado)."
    warranty_txt = "\n" + warranty_note(totals.warranty_days, company_name)

    return (
        f"Olá, {name}! 👋\n\n"
        f"✅ Orçamento {company_name} — {totals.equipment_type.label}\n\n"
        f"Serviços:\n{services_txt}{parts_txt}\n\n"
        f"Valor no cartão: {format_brl(prices.card_cents)}\n"
        f"Valor no Pix: {format_brl(prices.pix_cents)}{diag_txt}{warranty_txt}\n\n"
        "Se estiver ok, posso seguir com o serviço agora."
    )


def whatsapp_url(message: str, phone: Optional[str] = None) -> str:
    digits = re.sub(r"\D", "", phone or "")
    base = f"https://wa.me/55{digits}" if digits else "https://wa.me/"
    return f"{base}?text={quote(message, safe='')}"


def diagnosis_label(totals: QuoteTotals) -> str:
    if totals.diagnosis_included_free:
        return "INCLUSO (R$ 0)"
    if totals.standalone_diagnostic:
        return f"Somente diagnóstico: {format_brl(totals.diagnostic_fee_cents)}"
    return "—"


def build_technician_summary(
    totals: QuoteTotals, selection: Selection, config: PricingConfig
) -> Dict[str, Any]:
    """Every Totals figure, plus the prices and profit after an active combo.

    ``card_cents``, ``pix_cents``, ``net_card_cents`` and ``real_profit_cents``
    are the undiscounted totals; the ``effective_*`` keys carry what the client
    pays. ``profit_health`` is classified on the effective profit.
    """
    prices = effective_prices(totals, selection, config)
    return {
        "equipment_type": totals.equipment_type.value,
        "equipment_label": totals.equipment_type.label,
        "services": [asdict(s) for s in totals.services],
        "parts": [asdict(p) for p in totals.parts],
        "services_count": len(totals.services),
        "diagnostic_selected": totals.diagnostic_selected,
        "standalone_diagnostic": totals.standalone_diagnostic,
        "diagnosis_included_free": totals.diagnosis_included_free,
        "diagnostic_fee_cents": totals.diagnostic_fee_cents,
        "diagnosis_charged_cents": totals.diagnosis_charged_cents,
        "diagnosis_label": diagnosis_label(totals),
        "labor_cents": totals.labor_cents,
        "parts_sale_cents": totals.parts_sale_cents,
        "parts_cost_cents": totals.parts_cost_cents,
        "logistics_cents": totals.logistics_cents,
        "card_cents": totals.card_cents,
        "pix_cents": totals.pix_cents,
        "net_card_cents": totals.net_card_cents,
        "fixed_cost_cents": totals.fixed_cost_cents,
        "real_profit_cents": totals.real_profit_cents,
        "warranty_days": totals.warranty_days,
        "effective_card_cents": prices.card_cents,
        "effective_pix_cents": prices.pix_cents,
        "effective_net_card_cents": prices.net_card_cents,
        "effective_real_profit_cents": prices.real_profit_cents,
        "profit_health": classify_profit(prices.real_profit_cents),
        "combo_discount_percent": prices.discount_percent,
    }
