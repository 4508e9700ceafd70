from .app_config import AppConfig
from .service_catalog import ServiceCatalog
from .parts_catalog import PartsCatalog
from .work_order import WorkOrder, WorkOrderService, WorkOrderPart

__all__ = [
    "AppConfig",
    "ServiceCatalog",
    "PartsCatalog",
    "WorkOrder",
    "WorkOrderService",
    "WorkOrderPart",
]
