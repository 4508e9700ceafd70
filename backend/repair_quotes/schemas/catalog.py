from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from ..service_types.appliance_repair import EquipmentType


class CatalogServiceOut(BaseModel):
    id: str
    name: str
    equipment_type: EquipmentType
    category: str
    labor_base_cents: int
    warranty_days: int
    is_diagnostic: bool
    notes: str
    tags: List[str]

    model_config = {"from_attributes": True}


class CatalogPartOut(BaseModel):
    id: str
    name: str
    equipment_scope: str
    default_cost_cents: int
    default_margin_percent: int
    requires_supplier_logistics: bool
    always_in_stock: bool
    needs_supplier_pickup: bool

    model_config = {"from_attributes": True}


class ServiceCategoryGroup(BaseModel):
    category: str
    services: List[CatalogServiceOut]


class PricingConfigOut(BaseModel):
    fixed_visit_cost_cents: int
    diagnostic_fee_top_load_cents: int
    diagnostic_fee_front_load_cents: int
    card_fee_rate: Decimal
    pix_discount_rate: Decimal
    supplier_logistics_fee_cents: int

    model_config = {"from_attributes": True}


class PricingConfigUpdate(BaseModel):
    """Partial update of the app_config pricing rows, in currency units."""

    fixed_visit_cost: Optional[Decimal] = Field(None, ge=0)
    diagnostic_fee_top_load: Optional[Decimal] = Field(None, ge=0)
    diagnostic_fee_front_load: Optional[Decimal] = Field(None, ge=0)
    card_fee_rate: Optional[Decimal] = Field(None, ge=0, lt=1)
    pix_discount_rate: Optional[Decimal] = Field(None, ge=0, lt=1)
    supplier_logistics_fee: Optional[Decimal] = Field(None, ge=0)
