"""Serve mode: run the HTTP API with uvicorn."""

import sys

import typer
import uvicorn

from bookhub.api.server import create_app
from bookhub.config import API_HOST, API_PORT

from .shared import console, logger


def serve(
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the API server"),
    host: str = typer.Option(API_HOST, "--host", "-h", help="Bind host"),
) -> None:
    """Start the catalog/sets/orders API."""
    log = logger.bind(command="serve", host=host, port=port)
    log.info("serve.start")
    app = create_app()

    console.print(f"[green]Starting API server on http://{host}:{port}[/green]")
    console.print("[dim]Docs at /docs, health at /health[/dim]")
    try:
        uvicorn.run(app, host=host, port=port, log_level="info", timeout_graceful_shutdown=15)
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
