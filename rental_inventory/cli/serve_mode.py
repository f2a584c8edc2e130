"""Serve mode: run the FastAPI app with uvicorn."""

import sys

import typer
import uvicorn

from rental_inventory.api.server import create_app
from rental_inventory.config import API_HOST, API_PORT
from rental_inventory.db import init_db

from .shared import console, logger


def serve(
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the API server"),
    host: str = typer.Option(API_HOST, "--host", "-h", help="Bind host"),
) -> None:
    """Start the inventory HTTP API."""
    init_db()
    log = logger.bind(command="serve", host=host, port=port)
    log.info("serve.start")

    app = create_app()
    console.print(f"[green]Starting inventory API on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: /api/inventory, /api/facilities, /api/analytics/inventory, GET /health[/dim]")
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
