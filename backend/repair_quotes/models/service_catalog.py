from sqlalchemy import Boolean, Column, Integer, JSON, String, Text

from .base import BaseModel


class ServiceCatalog(BaseModel):
    __tablename__ = "service_catalog"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    equipment_type = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True)
    labor_base_cents = Column(Integer, nullable=False, default=0)
    warranty_days = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    avg_time_min = Column(Integer, nullable=True)
    complexity = Column(String, nullable=True)
    tags = Column(JSON, nullable=True)
    # Set by whoever curates the catalog; never inferred from the name.
    is_diagnostic = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True, index=True)
