from . import crud_catalog
from . import crud_work_order
from .crud_work_order import build_work_order_payload, create_work_order
