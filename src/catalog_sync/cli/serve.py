"""catalog-sync serve: run the HTTP API under uvicorn.

The application is built through the ``create_app`` factory so the stores
are connected inside the server's own event loop.
"""

from __future__ import annotations

import typer

from catalog_sync.config import settings

app = typer.Typer(help="Run the catalog-sync API server")

APP_FACTORY = "catalog_sync.api.app:create_app"


@app.callback(invoke_without_command=True)
def serve(
    host: str = typer.Option(settings.host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to listen on (PORT)"),
    workers: int = typer.Option(1, "--workers", "-w", help="Worker processes"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (dev only)"),
    log_level: str = typer.Option(
        settings.log_level, "--log-level", "-l", help="uvicorn log level"
    ),
) -> None:
    """Start the API server."""
    import uvicorn

    if reload and workers > 1:
        typer.echo("--reload runs a single worker; ignoring --workers", err=True)
        workers = 1

    cache_state = "enabled" if settings.cache_enabled else "disabled"
    typer.echo(f"catalog-sync listening on http://{host}:{port} (cache {cache_state})")

    uvicorn.run(
        app=APP_FACTORY,
        factory=True,
        host=host,
        port=port,
        workers=workers,
        reload=reload,
        log_level=log_level.lower(),
    )
