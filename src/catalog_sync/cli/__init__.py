"""CLI commands for catalog-sync.

Provides command-line interface using Typer:
- catalog-sync serve: Run the API server
- catalog-sync init-index: Create the search index mapping

Usage:
    catalog-sync --help
    catalog-sync serve --port 3000
    catalog-sync init-index
"""

import typer

from catalog_sync.cli.index_cmd import app as index_app
from catalog_sync.cli.serve import app as serve_app

# Main CLI application
app = typer.Typer(
    name="catalog-sync",
    help="catalog-sync: tenant-scoped catalog search kept in sync with the system of record",
    no_args_is_help=True,
)

app.add_typer(serve_app, name="serve")
app.add_typer(index_app, name="init-index")


@app.callback()
def callback() -> None:
    """catalog-sync: tenant-scoped catalog search kept in sync with the system of record."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
