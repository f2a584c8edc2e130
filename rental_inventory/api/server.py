"""FastAPI application exposing the inventory service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from rental_inventory import __version__
from rental_inventory.db import init_db
from rental_inventory.utils.logger import get_logger, log_context

from .analytics_routes import router as analytics_router
from .facility_routes import router as facility_router
from .inventory_routes import router as inventory_router
from .responses import register_error_handlers

logger = get_logger("rental_inventory.api.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    init_db()
    logger.info("api.startup", version=__version__)
    yield
    logger.info("api.shutdown")


async def _request_log_context(request: Request, call_next):
    # Repository and error-handler entries logged during the request carry these fields
    with log_context(method=request.method, path=request.url.path):
        response = await call_next(request)
        logger.debug("api.request", status_code=response.status_code)
        return response


def create_app() -> FastAPI:
    """Create the FastAPI app with inventory, facility and analytics routers."""
    app = FastAPI(
        title="Rental Inventory Service",
        version=__version__,
        lifespan=_lifespan,
    )
    register_error_handlers(app)
    app.middleware("http")(_request_log_context)

    app.include_router(inventory_router)
    app.include_router(facility_router)
    app.include_router(analytics_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
