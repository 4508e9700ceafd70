import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy import text

from .api import api_catalog, api_repair_quote
from .core.config import settings
from .core.observability import setup_logging
from .database import Base, SessionLocal, engine
from . import models  # noqa: F401  registers tables on Base.metadata

setup_logging()
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

# Always use ORJSONResponse for JSON payloads.
app = FastAPI(title="Repair Quotes API", default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS origins set to: %s", settings.CORS_ORIGINS)


@app.get("/healthz", tags=["health"])
def healthz():
    """Readiness: the database answers a trivial query."""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        logger.error("Health check failed: %s", exc)
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
            headers={"Cache-Control": "no-store"},
        )
    finally:
        db.close()
    return ORJSONResponse(content={"status": "ok"}, headers={"Cache-Control": "no-store"})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors with details and log them."""
    # ctx can carry the raised exception object, which is not JSON-serializable
    errors = [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors},
    )


api_prefix = settings.API_V1_STR

app.include_router(api_catalog.router, prefix=f"{api_prefix}/repair")
app.include_router(api_repair_quote.router, prefix=f"{api_prefix}/repair")
