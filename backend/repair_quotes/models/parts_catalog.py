from sqlalchemy import Boolean, Column, Integer, String

from .base import BaseModel


class PartsCatalog(BaseModel):
    __tablename__ = "parts_catalog"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # Legacy and current tags coexist here, see scope_matches_equipment
    equipment_scope = Column(String, nullable=False, default="ALL")
    default_cost_cents = Column(Integer, nullable=False, default=0)
    default_margin_percent = Column(Integer, nullable=False, default=40)
    always_in_stock = Column(Boolean, nullable=False, default=False)
    requires_supplier_logistics = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True, index=True)
