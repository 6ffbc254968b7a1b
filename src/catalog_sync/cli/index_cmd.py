"""CLI command for bootstrapping the search index.

Usage:
    catalog-sync init-index
    catalog-sync init-index --index catelog-v2
"""

from __future__ import annotations

import asyncio

import typer

from catalog_sync.config import settings
from catalog_sync.search.index import ElasticsearchIndex, create_elasticsearch

app = typer.Typer(help="Create the search index mapping if it does not exist")


async def _ensure_index(index_name: str) -> bool:
    index = ElasticsearchIndex(create_elasticsearch(settings), index_name)
    try:
        return await index.ensure_index()
    finally:
        await index.close()


@app.callback(invoke_without_command=True)
def init_index(
    index_name: str = typer.Option(
        settings.elasticsearch_index,
        "--index",
        "-i",
        help="Index name",
    ),
) -> None:
    """Create the catalog index with its mapping."""
    try:
        created = asyncio.run(_ensure_index(index_name))
    except Exception as e:
        typer.echo(f"Failed to initialize index '{index_name}': {e}", err=True)
        raise typer.Exit(code=1)

    if created:
        typer.echo(f"Created index '{index_name}'")
    else:
        typer.echo(f"Index '{index_name}' already exists")
