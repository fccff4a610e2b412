import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from fleetdesk.config import settings
from fleetdesk.database import check_db_connection
from fleetdesk.utils.exceptions import AppException
from fleetdesk.middleware.error_handler import (
    app_exception_handler,
    validation_exception_handler,
    integrity_error_handler,
    generic_exception_handler,
)

from fleetdesk.api.v1 import companies
from fleetdesk.api.v1 import trucks
from fleetdesk.api.v1 import trailers
from fleetdesk.api.v1 import drivers
from fleetdesk.api.v1 import shipments
from fleetdesk.api.v1 import dashboard

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=APP_VERSION,
        description="Fleet administration API: drivers, trucks, trailers, shipments, companies",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # ─── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ─── Exception Handlers ───────────────────────────────────────────────────
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # ─── Routers ──────────────────────────────────────────────────────────────
    PREFIX = "/api/v1"
    app.include_router(dashboard.router, prefix=PREFIX, tags=["Dashboard"])
    app.include_router(companies.router, prefix=PREFIX, tags=["Companies"])
    app.include_router(trucks.router,    prefix=PREFIX, tags=["Trucks"])
    app.include_router(trailers.router,  prefix=PREFIX, tags=["Trailers"])
    app.include_router(drivers.router,   prefix=PREFIX, tags=["Drivers"])
    app.include_router(shipments.router, prefix=PREFIX, tags=["Shipments"])

    # ─── Startup ──────────────────────────────────────────────────────────────
    @app.on_event("startup")
    def on_startup():
        ok = check_db_connection()
        logger.info("DB connected" if ok else "DB connection FAILED")

    # ─── Health ───────────────────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok", "app": settings.APP_NAME, "version": APP_VERSION}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fleetdesk.main:app", host=settings.APP_HOST, port=settings.APP_PORT,
                reload=settings.is_development)
