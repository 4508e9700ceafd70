from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..service_types.appliance_repair import ALLOWED_MARGINS, EquipmentType, LogisticsMode


class ClientInfo(BaseModel):
    client_name: str = ""
    client_phone: str = ""
    client_address: str = ""
    machine_brand: str = ""
    machine_model: str = ""
    notes: str = ""

    @field_validator("*", mode="before")
    def none_to_empty(cls, v):
        return "" if v is None else v


class LogisticsOverrideIn(BaseModel):
    mode: LogisticsMode = LogisticsMode.AUTO
    # Only read for FORCED_VALUE; omitted means the configured default fee.
    cents: Optional[int] = Field(default=None, ge=0)


class PartSelectionIn(BaseModel):
    part_id: str
    margin_percent: int = 40
    needs_supplier_pickup: Optional[bool] = None

    @field_validator("margin_percent")
    def margin_allowed(cls, v: int) -> int:
        if v not in ALLOWED_MARGINS:
            raise ValueError(f"margin_percent must be one of {list(ALLOWED_MARGINS)}")
        return v


class ManualServiceIn(BaseModel):
    id: Optional[str] = None
    name: str
    # Either the typed amount ("150,00") or pre-parsed cents.
    value: Optional[str] = None
    labor_cents: Optional[int] = None
    warranty_days: int = 0


class ManualPartIn(BaseModel):
    id: Optional[str] = None
    name: str
    cost: Optional[str] = None
    cost_cents: Optional[int] = None
    margin_percent: int = 40
    needs_supplier_pickup: bool = False


class ComboIn(BaseModel):
    discount_percent: Decimal
    discounted_card_cents: int = Field(ge=0)
    active: bool = False


class SelectionIn(BaseModel):
    equipment_type: EquipmentType
    service_ids: List[str] = Field(default_factory=list)
    parts: List[PartSelectionIn] = Field(default_factory=list)
    manual_services: List[ManualServiceIn] = Field(default_factory=list)
    manual_parts: List[ManualPartIn] = Field(default_factory=list)
    logistics_override: LogisticsOverrideIn = Field(default_factory=LogisticsOverrideIn)
    combo: Optional[ComboIn] = None


class QuoteRequest(BaseModel):
    selection: SelectionIn
    client: ClientInfo = Field(default_factory=ClientInfo)


class PricedServiceOut(BaseModel):
    id: str
    name: str
    labor_cents: int
    warranty_days: int
    is_diagnostic: bool
    is_manual: bool

    model_config = {"from_attributes": True}


class PricedPartOut(BaseModel):
    part_id: Optional[str] = None
    name: str
    cost_cents: int
    margin_percent: int
    needs_supplier_pickup: bool
    sale_cents: int
    is_manual: bool

    model_config = {"from_attributes": True}


class TotalsOut(BaseModel):
    equipment_type: EquipmentType
    services: List[PricedServiceOut]
    parts: List[PricedPartOut]
    diagnostic_selected: bool
    standalone_diagnostic: bool
    diagnosis_included_free: bool
    diagnostic_fee_cents: int
    diagnosis_charged_cents: int
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

    model_config = {"from_attributes": True}


class CustomerSummaryOut(BaseModel):
    card_cents: int
    pix_cents: int
    service_names: List[str]
    part_names: List[str]
    diagnosis_included_free: bool
    warranty_days: int
    warranty_note: str


class TechnicianSummaryOut(BaseModel):
    equipment_type: EquipmentType
    equipment_label: str
    services: List[PricedServiceOut]
    parts: List[PricedPartOut]
    services_count: int
    diagnostic_selected: bool
    standalone_diagnostic: bool
    diagnosis_included_free: bool
    diagnostic_fee_cents: int
    diagnosis_charged_cents: int
    diagnosis_label: str
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
    effective_card_cents: int
    effective_pix_cents: int
    effective_net_card_cents: int
    effective_real_profit_cents: int
    profit_health: str
    combo_discount_percent: Optional[Decimal] = None


class QuotePreviewOut(BaseModel):
    totals: TotalsOut
    customer: CustomerSummaryOut
    technician: TechnicianSummaryOut


class ComboOut(BaseModel):
    ok: bool
    discount_percent: Optional[Decimal] = None
    discounted_card_cents: Optional[int] = None
    discounted_pix_cents: Optional[int] = None
    min_profit_cents: int = 0
    profit_cents: Optional[int] = None
    reason: Optional[str] = None


class ClientMessageOut(BaseModel):
    message: str
    whatsapp_url: str


class WorkOrderCreated(BaseModel):
    id: int
    status: str
    diagnosis_charged_cents: int
    card_cents: int
    services_count: int
    parts_count: int
