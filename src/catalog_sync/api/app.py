"""FastAPI application factory for catalog-sync.

Creates the application with:
- Document, search, health and metrics routers
- Lifecycle management for the record store, search index and cache
  connections (created once, shared by every request)
- Tenant and correlation context middleware
- Consistent error envelopes
- ORJSON for fast JSON serialization
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.types import ExceptionHandler

from catalog_sync.api.errors import (
    catalog_exception_handler,
    generic_exception_handler,
    request_validation_exception_handler,
)
from catalog_sync.api.middleware import CorrelationMiddleware
from catalog_sync.api.routers import documents, health, search
from catalog_sync.api.routers import metrics as metrics_router
from catalog_sync.cache import CacheKeys, close_cache, create_cache
from catalog_sync.config import Settings, settings
from catalog_sync.core.errors import CatalogError
from catalog_sync.observability import MetricsMiddleware, configure_logging, get_metrics
from catalog_sync.persistence import MongoRecordStore, create_mongo_client, get_collection
from catalog_sync.search import ElasticsearchIndex, create_elasticsearch
from catalog_sync.sync import CatalogSync
from catalog_sync.tenancy.middleware import TenantMiddleware

logger = logging.getLogger(__name__)


async def build_sync(config: Settings) -> CatalogSync:
    """Connect the three stores and build the synchronization core.

    Creates the search index mapping if the index does not exist yet.
    """
    mongo_client = create_mongo_client(config)
    records = MongoRecordStore(get_collection(mongo_client, config), client=mongo_client)

    index = ElasticsearchIndex(create_elasticsearch(config), config.elasticsearch_index)
    await index.ensure_index()

    cache = create_cache(config)

    return CatalogSync(
        records=records,
        index=index,
        cache=cache,
        keys=CacheKeys(config.redis_key_prefix),
        ttl=config.redis_ttl_seconds,
        timeout=config.store_timeout_seconds,
    )


async def close_sync(sync: CatalogSync) -> None:
    """Close the shared store connections."""
    await close_cache(sync.cache)
    if isinstance(sync.index, ElasticsearchIndex):
        await sync.index.close()
    if isinstance(sync.records, MongoRecordStore) and sync.records.client is not None:
        await sync.records.client.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    On startup:
    - Configure structured logging
    - Initialize Prometheus metrics
    - Connect MongoDB, Elasticsearch (ensuring the index) and Redis Cluster

    On shutdown:
    - Close all store connections opened at startup
    """
    configure_logging(
        json_format=settings.env != "dev",
        level=settings.log_level,
    )
    get_metrics()  # Initialize metrics registry

    logger.info(f"Starting catalog-sync ({settings.env})")
    owns_sync = getattr(app.state, "sync", None) is None
    if owns_sync:
        try:
            app.state.sync = await build_sync(settings)
        except Exception:
            logger.exception("Startup error")
            raise
    cache_state = "enabled" if app.state.sync.cache.enabled else "disabled"
    logger.info(f"catalog-sync startup complete (cache {cache_state})")

    yield

    logger.info("Shutting down catalog-sync")
    if owns_sync:
        await close_sync(app.state.sync)
        app.state.sync = None
    logger.info("catalog-sync shutdown complete")


def create_app(sync: CatalogSync | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        sync: Prebuilt synchronization core. When omitted, the stores are
            connected from settings during startup.
    """
    app = FastAPI(
        title="catalog-sync",
        description="Tenant-scoped catalog search synchronized with the system of record",
        version="0.1.0",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.sync = sync

    # Order matters: CorrelationMiddleware wraps TenantMiddleware so both
    # request and tenant ids are bound while handlers log
    app.add_middleware(TenantMiddleware)
    app.add_middleware(CorrelationMiddleware)
    if settings.enable_metrics:
        app.add_middleware(MetricsMiddleware)

    app.add_exception_handler(CatalogError, cast(ExceptionHandler, catalog_exception_handler))
    app.add_exception_handler(
        RequestValidationError, cast(ExceptionHandler, request_validation_exception_handler)
    )
    app.add_exception_handler(Exception, cast(ExceptionHandler, generic_exception_handler))

    app.include_router(health.router)
    if settings.enable_metrics:
        app.include_router(metrics_router.router)
    app.include_router(documents.router)
    app.include_router(search.router)

    return app
