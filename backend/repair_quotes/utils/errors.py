from typing import Dict
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    field_errors: Dict[str, str],
    code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
) -> HTTPException:
    """Build an HTTPException with the ``{"message", "field_errors"}`` detail and log it."""
    logger.error("%s %s", message, field_errors)
    return HTTPException(
        status_code=code,
        detail={"message": message, "field_errors": field_errors},
    )
