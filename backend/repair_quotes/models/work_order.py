from sqlalchemy import Boolean, Column, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class WorkOrder(BaseModel):
    """A saved quote for one visit, with its services and parts."""

    __tablename__ = "work_orders"

    id = Column(Integer, primary_key=True, index=True)
    status = Column(String, nullable=False, default="DRAFT")
    client_name = Column(String, nullable=False)
    client_phone = Column(String, nullable=True)
    client_address = Column(String, nullable=True)
    equipment_type = Column(String, nullable=False)
    machine_brand = Column(String, nullable=True)
    machine_model = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    diagnosis_charged_cents = Column(Integer, nullable=False, default=0)
    diagnosis_credited = Column(Boolean, nullable=False, default=False)
    manual_services = Column(JSON, nullable=False, default=list)
    card_cents = Column(Integer, nullable=False, default=0)
    pix_cents = Column(Integer, nullable=False, default=0)
    real_profit_cents = Column(Integer, nullable=False, default=0)
    warranty_days = Column(Integer, nullable=False, default=0)

    services = relationship(
        "WorkOrderService", back_populates="work_order", cascade="all, delete-orphan"
    )
    parts = relationship(
        "WorkOrderPart", back_populates="work_order", cascade="all, delete-orphan"
    )


class WorkOrderService(BaseModel):
    __tablename__ = "work_order_services"

    id = Column(Integer, primary_key=True, index=True)
    work_order_id = Column(Integer, ForeignKey("work_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(String, ForeignKey("service_catalog.id"), nullable=False)

    work_order = relationship("WorkOrder", back_populates="services")


class WorkOrderPart(BaseModel):
    __tablename__ = "work_order_parts"

    id = Column(Integer, primary_key=True, index=True)
    work_order_id = Column(Integer, ForeignKey("work_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # Null for parts typed in manually for this quote
    part_id = Column(String, ForeignKey("parts_catalog.id"), nullable=True)
    part_name = Column(String, nullable=False)
    sale_price_cents = Column(Integer, nullable=False)
    cost_real_cents = Column(Integer, nullable=False)
    margin_percent = Column(Integer, nullable=False)
    needs_supplier_pickup = Column(Boolean, nullable=False, default=False)

    work_order = relationship("WorkOrder", back_populates="parts")
