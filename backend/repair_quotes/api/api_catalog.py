from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from .. import schemas
from ..crud import crud_catalog
from ..service_types.appliance_repair import EquipmentType, group_by_category, search_services

router = APIRouter(tags=["repair-catalog"])
logger = logging.getLogger(__name__)


@router.get("/catalog/services", response_model=List[schemas.CatalogServiceOut])
def list_services(
    equipment_type: EquipmentType,
    q: Optional[str] = Query(None, description="Filter by name, category, tags or notes"),
    db: Session = Depends(get_db),
):
    services = crud_catalog.get_active_services(db, equipment_type)
    if q:
        services = search_services(services, q)
    return [schemas.CatalogServiceOut.model_validate(s) for s in services]


@router.get("/catalog/services/grouped", response_model=List[schemas.ServiceCategoryGroup])
def list_services_grouped(
    equipment_type: EquipmentType,
    q: Optional[str] = None,
    db: Session = Depends(get_db),
):
    services = crud_catalog.get_active_services(db, equipment_type)
    if q:
        services = search_services(services, q)
    return [
        schemas.ServiceCategoryGroup(
            category=category,
            services=[schemas.CatalogServiceOut.model_validate(s) for s in items],
        )
        for category, items in group_by_category(services).items()
    ]


@router.get("/catalog/parts", response_model=List[schemas.CatalogPartOut])
def list_parts(equipment_type: EquipmentType, db: Session = Depends(get_db)):
    parts = crud_catalog.get_parts_for_equipment(db, equipment_type)
    return [schemas.CatalogPartOut.model_validate(p) for p in parts]


@router.get("/config", response_model=schemas.PricingConfigOut)
def read_pricing_config(db: Session = Depends(get_db)):
    return schemas.PricingConfigOut.model_validate(crud_catalog.load_pricing_config(db))


@router.put("/config", response_model=schemas.PricingConfigOut)
def update_pricing_config(payload: schemas.PricingConfigUpdate, db: Session = Depends(get_db)):
    """Store the given pricing parameters in app_config; omitted keys are left as they are."""
    changes = payload.model_dump(exclude_none=True)
    for key, value in changes.items():
        crud_catalog.set_config_value(db, key, value)
    logger.info("Updated pricing config keys=%s", sorted(changes))
    return schemas.PricingConfigOut.model_validate(crud_catalog.load_pricing_config(db))
