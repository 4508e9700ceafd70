from typing import Dict, List
import logging

from sqlalchemy.orm import Session

from .. import models
from ..core.config import settings
from ..service_types.appliance_repair import (
    CatalogPart,
    CatalogService,
    EquipmentType,
    PricingConfig,
    parts_for_equipment,
)

logger = logging.getLogger(__name__)


def _to_catalog_service(row: models.ServiceCatalog) -> CatalogService:
    tags = row.tags or []
    if isinstance(tags, str):
        tags = [t.strip() for t in tags.split(",") if t.strip()]
    return CatalogService(
        id=row.id,
        name=row.name,
        equipment_type=EquipmentType(row.equipment_type),
        labor_base_cents=int(row.labor_base_cents or 0),
        warranty_days=max(0, int(row.warranty_days or 0)),
        is_diagnostic=bool(row.is_diagnostic),
        category=row.category or "",
        notes=row.notes or "",
        tags=tuple(str(t) for t in tags),
    )


def _to_catalog_part(row: models.PartsCatalog) -> CatalogPart:
    return CatalogPart(
        id=row.id,
        name=row.name,
        equipment_scope=row.equipment_scope or "",
        default_cost_cents=int(row.default_cost_cents or 0),
        requires_supplier_logistics=bool(row.requires_supplier_logistics),
        always_in_stock=bool(row.always_in_stock),
        default_margin_percent=int(row.default_margin_percent or 40),
    )


def get_active_services(db: Session, equipment: EquipmentType) -> List[CatalogService]:
    rows = (
        db.query(models.ServiceCatalog)
        .filter(
            models.ServiceCatalog.active.is_(True),
            models.ServiceCatalog.equipment_type.in_(equipment.stored_values),
        )
        .order_by(models.ServiceCatalog.category.asc(), models.ServiceCatalog.name.asc())
        .all()
    )
    return [_to_catalog_service(r) for r in rows]


def get_active_parts(db: Session) -> List[CatalogPart]:
    rows = (
        db.query(models.PartsCatalog)
        .filter(models.PartsCatalog.active.is_(True))
        .order_by(models.PartsCatalog.name.asc())
        .all()
    )
    return [_to_catalog_part(r) for r in rows]


def get_parts_for_equipment(db: Session, equipment: EquipmentType) -> List[CatalogPart]:
    return parts_for_equipment(get_active_parts(db), equipment)


def get_config_values(db: Session) -> Dict[str, object]:
    values: Dict[str, object] = {}
    for row in db.query(models.AppConfig).all():
        if row.value_numeric is not None:
            values[row.key] = row.value_numeric
        elif row.value_text:
            values[row.key] = row.value_text
    return values


def load_pricing_config(db: Session) -> PricingConfig:
    """Pricing parameters from app_config, falling back to Settings defaults."""
    raw = get_config_values(db)
    config = PricingConfig.from_mapping(raw, settings.pricing_defaults())
    logger.info("Loaded pricing config keys=%s", sorted(raw))
    return config


def set_config_value(db: Session, key: str, value) -> models.AppConfig:
    row = db.query(models.AppConfig).filter(models.AppConfig.key == key).first()
    if row is None:
        row = models.AppConfig(key=key)
        db.add(row)
    row.value_numeric = value
    row.value_text = None
    db.commit()
    db.refresh(row)
    return row
