from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List, Mapping, Tuple

from .models import (
    CatalogService,
    EquipmentType,
    LogisticsMode,
    PricedPart,
    PricedService,
    PricingConfig,
    QuoteTotals,
    round_half_up,
)
from .selection import Selection

logger = logging.getLogger(__name__)

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def calc_sale_cents(cost_cents: int, margin_percent: int | Decimal) -> int:
    """Sale price of a part: ``cost * (1 + margin/100)`` rounded half-up to the cent."""
    margin = margin_percent if isinstance(margin_percent, Decimal) else Decimal(str(margin_percent))
    return round_half_up(Decimal(int(cost_cents)) * (_ONE + margin / _HUNDRED))


def apply_rate(amount_cents: int, rate: Decimal) -> int:
    """Return ``amount * (1 - rate)`` rounded half-up, e.g. card fee or Pix discount."""
    return round_half_up(Decimal(int(amount_cents)) * (_ONE - rate))


def _index_catalog(catalog: Iterable[CatalogService] | Mapping[str, CatalogService]) -> Mapping[str, CatalogService]:
    if isinstance(catalog, Mapping):
        return catalog
    return {s.id: s for s in catalog}


def resolve_services(
    selection: Selection,
    catalog: Iterable[CatalogService] | Mapping[str, CatalogService],
) -> Tuple[PricedService, ...]:
    """Catalog services for the selected ids followed by manual services.

    Ids missing from the loaded catalog are dropped, as happens right after an
    equipment switch. Catalog order is preserved.
    """
    by_id = _index_catalog(catalog)
    priced: List[PricedService] = []
    for sid, svc in by_id.items():
        if sid not in selection.service_ids:
            continue
        priced.append(
            PricedService(
                id=svc.id,
                name=svc.name,
                labor_cents=int(svc.labor_base_cents or 0),
                warranty_days=max(0, int(svc.warranty_days or 0)),
                is_diagnostic=bool(svc.is_diagnostic),
            )
        )
    for ms in selection.manual_services:
        priced.append(
            PricedService(
                id=ms.id,
                name=ms.name,
                labor_cents=int(ms.labor_cents),
                warranty_days=max(0, int(ms.warranty_days or 0)),
                is_manual=True,
            )
        )
    return tuple(priced)


def resolve_parts(selection: Selection) -> Tuple[PricedPart, ...]:
    priced: List[PricedPart] = []
    for p in selection.parts:
        priced.append(
            PricedPart(
                part_id=p.part_id,
                name=p.name,
                cost_cents=int(p.cost_cents),
                margin_percent=p.margin_percent,
                needs_supplier_pickup=p.needs_supplier_pickup,
                sale_cents=calc_sale_cents(p.cost_cents, p.margin_percent),
            )
        )
    for mp in selection.manual_parts:
        priced.append(
            PricedPart(
                part_id=None,
                name=mp.name,
                cost_cents=int(mp.cost_cents),
                margin_percent=mp.margin_percent,
                needs_supplier_pickup=mp.needs_supplier_pickup,
                sale_cents=calc_sale_cents(mp.cost_cents, mp.margin_percent),
                is_manual=True,
            )
        )
    return tuple(priced)


def diagnostic_outcome(
    equipment: EquipmentType, services: Tuple[PricedService, ...]
) -> Tuple[bool, bool, bool]:
    """Return ``(diagnostic_selected, standalone_diagnostic, included_free)``.

    Standalone and included-free are mutually exclusive and only apply to the
    machine equipment types.
    """
    diagnostic_selected = any(s.is_diagnostic for s in services)
    has_work = any(not s.is_diagnostic for s in services)
    if not equipment.is_machine:
        return diagnostic_selected, False, False
    standalone = diagnostic_selected and not has_work
    return diagnostic_selected, standalone, has_work


def labor_cents(
    services: Tuple[PricedService, ...], standalone_diagnostic: bool, diagnostic_fee_cents: int
) -> int:
    if standalone_diagnostic:
        return diagnostic_fee_cents
    return sum(s.labor_cents for s in services if not s.is_diagnostic)


def logistics_cents(selection: Selection, parts: Tuple[PricedPart, ...], config: PricingConfig) -> int:
    override = selection.logistics_override
    if override.mode is LogisticsMode.FORCED_VALUE:
        return int(override.cents)
    if override.mode is LogisticsMode.FORCED_ZERO:
        return 0
    if any(p.needs_supplier_pickup for p in parts):
        return config.supplier_logistics_fee_cents
    return 0


def compute_totals(
    selection: Selection,
    catalog: Iterable[CatalogService] | Mapping[str, CatalogService],
    config: PricingConfig,
) -> QuoteTotals:
    """Recompute every quote figure from the selection and configuration."""
    services = resolve_services(selection, catalog)
    parts = resolve_parts(selection)
    equipment = selection.equipment_type

    diag_fee = config.diagnostic_fee_cents(equipment)
    diag_selected, standalone, included_free = diagnostic_outcome(equipment, services)
    labor = labor_cents(services, standalone, diag_fee)

    parts_sale = sum(p.sale_cents for p in parts)
    parts_cost = sum(p.cost_cents for p in parts)
    logistics = logistics_cents(selection, parts, config)

    card = max(0, labor + parts_sale + logistics)
    pix = apply_rate(card, config.pix_discount_rate)
    net_card = apply_rate(card, config.card_fee_rate)
    fixed_cost = config.fixed_visit_cost_cents
    real_profit = net_card - parts_cost - logistics - fixed_cost
    warranty = max([s.warranty_days for s in services] + [0])

    totals = QuoteTotals(
        equipment_type=equipment,
        services=services,
        parts=parts,
        diagnostic_selected=diag_selected,
        standalone_diagnostic=standalone,
        diagnosis_included_free=included_free,
        diagnostic_fee_cents=diag_fee,
        labor_cents=labor,
        parts_sale_cents=parts_sale,
        parts_cost_cents=parts_cost,
        logistics_cents=logistics,
        card_cents=card,
        pix_cents=pix,
        net_card_cents=net_card,
        fixed_cost_cents=fixed_cost,
        real_profit_cents=real_profit,
        warranty_days=warranty,
    )
    logger.debug(
        "Quote totals equipment=%s card=%s pix=%s profit=%s",
        equipment.value,
        card,
        pix,
        real_profit,
    )
    return totals
