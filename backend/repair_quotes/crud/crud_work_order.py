from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..service_types.appliance_repair import (
    PricingConfig,
    QuoteTotals,
    Selection,
    effective_prices,
)

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = "Cliente"


def _or_none(value: Optional[str]) -> Optional[str]:
    cleaned = (value or "").strip()
    return cleaned or None


def build_work_order_payload(
    totals: QuoteTotals,
    selection: Selection,
    client: schemas.ClientInfo,
    config: Optional[PricingConfig] = None,
) -> Dict[str, Any]:
    """Map a computed quote onto work-order header and line rows.

    Pure: nothing is written. Raises ``ValueError`` when no service resolved.
    """
    if not totals.services:
        raise ValueError("Select at least one service")

    prices = effective_prices(totals, selection, config or PricingConfig())
    manual_services = [
        {"name": s.name, "labor_cents": s.labor_cents, "warranty_days": s.warranty_days}
        for s in totals.services
        if s.is_manual
    ]
    parts: List[Dict[str, Any]] = [
        {
            "part_id": p.part_id,
            "part_name": p.name,
            "sale_price_cents": p.sale_cents,
            "cost_real_cents": p.cost_cents,
            "margin_percent": p.margin_percent,
            "needs_supplier_pickup": p.needs_supplier_pickup,
        }
        for p in totals.parts
    ]
    return {
        "status": "DRAFT",
        "client_name": _or_none(client.client_name) or DEFAULT_CLIENT_NAME,
        "client_phone": _or_none(client.client_phone),
        "client_address": _or_none(client.client_address),
        "equipment_type": totals.equipment_type.value,
        "machine_brand": _or_none(client.machine_brand),
        "machine_model": _or_none(client.machine_model),
        "notes": _or_none(client.notes),
        "diagnosis_charged_cents": totals.diagnosis_charged_cents,
        "diagnosis_credited": False,
        "manual_services": manual_services,
        "card_cents": prices.card_cents,
        "pix_cents": prices.pix_cents,
        "real_profit_cents": prices.real_profit_cents,
        "warranty_days": totals.warranty_days,
        "service_ids": list(totals.catalog_service_ids),
        "parts": parts,
    }


def create_work_order(db: Session, payload: Dict[str, Any]) -> models.WorkOrder:
    """Persist the header and its service/part rows in a single transaction."""
    header = {k: v for k, v in payload.items() if k not in ("service_ids", "parts")}
    db_order = models.WorkOrder(**header)
    db_order.services = [
        models.WorkOrderService(service_id=sid) for sid in payload.get("service_ids", [])
    ]
    db_order.parts = [models.WorkOrderPart(**row) for row in payload.get("parts", [])]
    try:
        db.add(db_order)
        db.commit()
    except SQLAlchemyError:
        logger.exception(
            "Failed to save work order; equipment=%s services=%s parts=%s",
            payload.get("equipment_type"),
            len(db_order.services),
            len(db_order.parts),
        )
        db.rollback()
        raise
    db.refresh(db_order)
    logger.info(
        "Work order %s saved; equipment=%s services=%s parts=%s",
        db_order.id,
        db_order.equipment_type,
        len(db_order.services),
        len(db_order.parts),
    )
    return db_order


def get_work_order(db: Session, work_order_id: int) -> Optional[models.WorkOrder]:
    return db.query(models.WorkOrder).filter(models.WorkOrder.id == work_order_id).first()
