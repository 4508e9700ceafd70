from .models import (
    ALLOWED_MARGINS,
    CatalogPart,
    CatalogService,
    ComboState,
    ComboSuggestion,
    EquipmentType,
    LogisticsMode,
    LogisticsOverride,
    ManualPart,
    ManualService,
    PricedPart,
    PricedService,
    PricingConfig,
    QuoteTotals,
    SelectedPart,
    round_half_up,
    units_to_cents,
)
from .selection import Selection
from .admission import AdmissionError, admit_manual_part, admit_manual_service, parse_brl_to_cents
from .scope import group_by_category, parts_for_equipment, scope_matches_equipment, search_services
from .pricing import calc_sale_cents, compute_totals, resolve_parts, resolve_services
from .combo import (
    CANDIDATE_DISCOUNTS,
    REASON_NO_SAFE_DISCOUNT,
    REASON_NOTHING_SELECTED,
    EffectivePrices,
    effective_prices,
    min_profit_cents,
    suggest_combo,
)

__all__ = [
    "ALLOWED_MARGINS",
    "CatalogPart",
    "CatalogService",
    "ComboState",
    "ComboSuggestion",
    "EquipmentType",
    "LogisticsMode",
    "LogisticsOverride",
    "ManualPart",
    "ManualService",
    "PricedPart",
    "PricedService",
    "PricingConfig",
    "QuoteTotals",
    "SelectedPart",
    "Selection",
    "AdmissionError",
    "admit_manual_part",
    "admit_manual_service",
    "parse_brl_to_cents",
    "group_by_category",
    "parts_for_equipment",
    "scope_matches_equipment",
    "search_services",
    "calc_sale_cents",
    "compute_totals",
    "resolve_parts",
    "resolve_services",
    "CANDIDATE_DISCOUNTS",
    "REASON_NO_SAFE_DISCOUNT",
    "REASON_NOTHING_SELECTED",
    "EffectivePrices",
    "effective_prices",
    "min_profit_cents",
    "suggest_combo",
    "round_half_up",
    "units_to_cents",
]
