from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Mapping, Optional, Tuple

_UNIT = Decimal("1")
_HUNDRED = Decimal("100")

ALLOWED_MARGINS: Tuple[int, ...] = (30, 40)

# Currency-unit defaults; overridden by app_config rows and Settings.
DEFAULT_PRICING: dict[str, str] = {
    "fixed_visit_cost": "65.30",
    "diagnostic_fee_top_load": "190",
    "diagnostic_fee_front_load": "230",
    "card_fee_rate": "0.05",
    "pix_discount_rate": "0.05",
    "supplier_logistics_fee": "40",
}


def round_half_up(value: Any) -> int:
    """Round ``value`` to the nearest integer cent, halves away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(_UNIT, rounding=ROUND_HALF_UP))


def to_decimal(value: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return default
    return result if result.is_finite() else default


def units_to_cents(value: Any) -> int:
    """Convert a currency-unit amount (e.g. 65.30) into integer cents."""
    return round_half_up(to_decimal(value, Decimal("0")) * _HUNDRED)


class EquipmentType(str, enum.Enum):
    TOP_LOAD = "TOP_LOAD"
    FRONT_LOAD_WASHER_DRYER = "FRONT_LOAD_WASHER_DRYER"
    RESIDENTIAL_SERVICES = "RESIDENTIAL_SERVICES"

    @classmethod
    def _missing_(cls, value: object):
        key = str(value or "").strip().upper()
        for member in cls:
            if member.value == key:
                return member
        return _LEGACY_EQUIPMENT.get(key)

    @property
    def is_machine(self) -> bool:
        return self in (EquipmentType.TOP_LOAD, EquipmentType.FRONT_LOAD_WASHER_DRYER)

    @property
    def label(self) -> str:
        return _EQUIPMENT_LABELS[self]

    @property
    def stored_values(self) -> Tuple[str, ...]:
        """Every value that may identify this type in stored rows, legacy ones included."""
        return (self.value,) + tuple(k for k, v in _LEGACY_EQUIPMENT.items() if v is self)


_LEGACY_EQUIPMENT = {
    "MAQUINA_DE_LAVAR_TOP_LOAD": EquipmentType.TOP_LOAD,
    "LAVA_E_SECA": EquipmentType.FRONT_LOAD_WASHER_DRYER,
    "LAVA_E_SECA_FRONTAL": EquipmentType.FRONT_LOAD_WASHER_DRYER,
    "SERVICOS_RESIDENCIAIS": EquipmentType.RESIDENTIAL_SERVICES,
}

_EQUIPMENT_LABELS = {
    EquipmentType.TOP_LOAD: "Máquina de Lavar",
    EquipmentType.FRONT_LOAD_WASHER_DRYER: "Lava e Seca",
    EquipmentType.RESIDENTIAL_SERVICES: "Serviços Residenciais",
}


@dataclass(frozen=True)
class CatalogService:
    id: str
    name: str
    equipment_type: EquipmentType
    labor_base_cents: int
    warranty_days: int = 0
    is_diagnostic: bool = False
    category: str = ""
    notes: str = ""
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CatalogPart:
    id: str
    name: str
    equipment_scope: str
    default_cost_cents: int
    requires_supplier_logistics: bool = False
    always_in_stock: bool = False
    default_margin_percent: int = 40

    @property
    def needs_supplier_pickup(self) -> bool:
        # In-stock parts never trigger logistics.
        return self.requires_supplier_logistics and not self.always_in_stock


@dataclass(frozen=True)
class ManualService:
    id: str
    name: str
    labor_cents: int
    warranty_days: int = 0


@dataclass(frozen=True)
class ManualPart:
    id: str
    name: str
    cost_cents: int
    margin_percent: int
    needs_supplier_pickup: bool = False


@dataclass(frozen=True)
class SelectedPart:
    part_id: str
    name: str
    cost_cents: int
    margin_percent: int
    needs_supplier_pickup: bool

    def __post_init__(self) -> None:
        if self.margin_percent not in ALLOWED_MARGINS:
            raise ValueError(
                f"margin_percent must be one of {ALLOWED_MARGINS}, got {self.margin_percent!r}"
            )

    @classmethod
    def from_catalog(cls, part: CatalogPart, margin_percent: int) -> "SelectedPart":
        return cls(
            part_id=part.id,
            name=part.name,
            cost_cents=int(part.default_cost_cents),
            margin_percent=int(margin_percent),
            needs_supplier_pickup=part.needs_supplier_pickup,
        )


class LogisticsMode(str, enum.Enum):
    AUTO = "AUTO"
    FORCED_ZERO = "FORCED_ZERO"
    FORCED_VALUE = "FORCED_VALUE"


@dataclass(frozen=True)
class LogisticsOverride:
    """Supplier-logistics override: automatic, forced to zero or a fixed value."""

    mode: LogisticsMode = LogisticsMode.AUTO
    cents: int = 0

    def __post_init__(self) -> None:
        if self.mode is LogisticsMode.FORCED_VALUE and self.cents < 0:
            raise ValueError("forced logistics value must be non-negative")

    @classmethod
    def auto(cls) -> "LogisticsOverride":
        return cls(LogisticsMode.AUTO, 0)

    @classmethod
    def forced_zero(cls) -> "LogisticsOverride":
        return cls(LogisticsMode.FORCED_ZERO, 0)

    @classmethod
    def forced_value(cls, cents: int) -> "LogisticsOverride":
        return cls(LogisticsMode.FORCED_VALUE, int(cents))


@dataclass(frozen=True)
class PricingConfig:
    """Pricing parameters resolved for a single computation.

    Money is held in integer cents; fee and discount rates are fractions.
    """

    fixed_visit_cost_cents: int = 6530
    diagnostic_fee_top_load_cents: int = 19000
    diagnostic_fee_front_load_cents: int = 23000
    card_fee_rate: Decimal = Decimal("0.05")
    pix_discount_rate: Decimal = Decimal("0.05")
    supplier_logistics_fee_cents: int = 4000

    @classmethod
    def from_mapping(
        cls,
        raw: Optional[Mapping[str, Any]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> "PricingConfig":
        base = dict(DEFAULT_PRICING)
        base.update({k: v for k, v in (defaults or {}).items() if v is not None})
        raw = raw or {}

        def pick(key: str) -> Decimal:
            fallback = to_decimal(base[key], Decimal("0"))
            value = to_decimal(raw.get(key), fallback)
            return value if value >= 0 else fallback

        def pick_rate(key: str) -> Decimal:
            fallback = to_decimal(base[key], Decimal("0"))
            if not 0 <= fallback < 1:
                fallback = to_decimal(DEFAULT_PRICING[key], Decimal("0"))
            value = to_decimal(raw.get(key), fallback)
            return value if 0 <= value < 1 else fallback

        return cls(
            fixed_visit_cost_cents=units_to_cents(pick("fixed_visit_cost")),
            diagnostic_fee_top_load_cents=units_to_cents(pick("diagnostic_fee_top_load")),
            diagnostic_fee_front_load_cents=units_to_cents(pick("diagnostic_fee_front_load")),
            card_fee_rate=pick_rate("card_fee_rate"),
            pix_discount_rate=pick_rate("pix_discount_rate"),
            supplier_logistics_fee_cents=units_to_cents(pick("supplier_logistics_fee")),
        )

    def diagnostic_fee_cents(self, equipment: EquipmentType) -> int:
        if equipment is EquipmentType.TOP_LOAD:
            return self.diagnostic_fee_top_load_cents
        if equipment is EquipmentType.FRONT_LOAD_WASHER_DRYER:
            return self.diagnostic_fee_front_load_cents
        return 0


@dataclass(frozen=True)
class PricedService:
    id: str
    name: str
    labor_cents: int
    warranty_days: int
    is_diagnostic: bool = False
    is_manual: bool = False


@dataclass(frozen=True)
class PricedPart:
    part_id: Optional[str]
    name: str
    cost_cents: int
    margin_percent: int
    needs_supplier_pickup: bool
    sale_cents: int
    is_manual: bool = False


@dataclass(frozen=True)
class QuoteTotals:
    equipment_type: EquipmentType
    services: Tuple[PricedService, ...]
    parts: Tuple[PricedPart, ...]
    diagnostic_selected: bool
    standalone_diagnostic: bool
    diagnosis_included_free: bool
    diagnostic_fee_cents: int
    labor_cents: int
    parts_sale_cents: int
    parts_cost_cents: int
    logistics_cents: int
    card_cents: int
    pix_cents: int
    net_card_cents: int
    fixed_cost_cents: int
    real_profit_cents: int
    warranty_days: int

    @property
    def diagnosis_charged_cents(self) -> int:
        return self.diagnostic_fee_cents if self.standalone_diagnostic else 0

    @property
    def catalog_service_ids(self) -> Tuple[str, ...]:
        return tuple(s.id for s in self.services if not s.is_manual)

    @property
    def non_diagnostic_services(self) -> Tuple[PricedService, ...]:
        return tuple(s for s in self.services if not s.is_diagnostic)


@dataclass(frozen=True)
class ComboSuggestion:
    discount_percent: Optional[Decimal] = None
    discounted_card_cents: Optional[int] = None
    rejected_reason: Optional[str] = None
    min_profit_cents: int = 0
    profit_cents: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.rejected_reason is None and self.discounted_card_cents is not None

    @classmethod
    def rejected(cls, reason: str, min_profit_cents: int = 0) -> "ComboSuggestion":
        return cls(rejected_reason=reason, min_profit_cents=min_profit_cents)


@dataclass(frozen=True)
class ComboState:
    suggestion: ComboSuggestion
    active: bool = False
