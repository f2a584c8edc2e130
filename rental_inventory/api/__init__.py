"""HTTP API: FastAPI app factory and routers."""

from rental_inventory.api.server import create_app

__all__ = ["create_app"]
