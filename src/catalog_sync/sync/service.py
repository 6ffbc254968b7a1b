"""Synchronization core: keeps the search index and cache in step with the
record store.

Write path (index, delete) touches the stores in a fixed order:
- index:  fetch (tenant-filtered) -> project -> upsert + refresh -> invalidate
- delete: fetch by id -> ownership check -> delete + refresh -> invalidate

Read path (search, get) is cache-aside: cache -> index -> populate cache.

Failure policy is asymmetric. Record-store and search-index failures on
the critical path abort the operation as InternalError. Cache failures on
any path are logged and treated as a miss or a no-op; a stale entry is
bounded by the cache TTL.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar

import orjson
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from catalog_sync.cache.keys import CacheKeys
from catalog_sync.cache.redis import DEFAULT_TTL, NullCache
from catalog_sync.core.errors import CatalogError, InternalError, NotFoundError, ValidationError
from catalog_sync.core.ids import InvalidRecordId, parse_record_id, stringify_record_id
from catalog_sync.core.model import IndexResult, SearchResult, StoredDocument
from catalog_sync.core.projection import project_record
from catalog_sync.observability.metrics import (
    record_cache_error,
    record_cache_hit,
    record_cache_miss,
    record_store_call,
    record_sync_operation,
)
from catalog_sync.search.query import DEFAULT_OFFSET, DEFAULT_SIZE, SearchQuery
from catalog_sync.tenancy.isolation import owned_by
from catalog_sync.tenancy.resolver import validate_tenant

if TYPE_CHECKING:
    from catalog_sync.cache.redis import DocumentCache
    from catalog_sync.persistence.records import RecordStore
    from catalog_sync.search.index import SearchIndex

logger = logging.getLogger(__name__)

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_TIMEOUT = 5.0


@contextmanager
def _track_operation(operation: str) -> Iterator[None]:
    """Record the outcome of a synchronization operation."""
    try:
        yield
    except ValidationError:
        record_sync_operation(operation, "invalid")
        raise
    except NotFoundError:
        record_sync_operation(operation, "not_found")
        raise
    except Exception:
        record_sync_operation(operation, "error")
        raise
    else:
        record_sync_operation(operation, "ok")


class CatalogSync:
    """Orchestrates the record store, search index and cache.

    All collaborators are long-lived and shared across requests; no
    operation closes or resets them. Operations take no locks: concurrent
    writers to the same id resolve as last-writer-wins in the index.
    """

    def __init__(
        self,
        records: RecordStore,
        index: SearchIndex,
        cache: DocumentCache | None = None,
        keys: CacheKeys | None = None,
        ttl: int = DEFAULT_TTL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.records = records
        self.index = index
        self.cache: DocumentCache = cache if cache is not None else NullCache()
        self.keys = keys or CacheKeys()
        self.ttl = ttl
        self.timeout = timeout

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def index_document(self, tenant_id: str, document_id: str) -> IndexResult:
        """Project a record-store document into the search index.

        The record lookup is tenant-filtered, so another tenant's document
        fails exactly like a missing one. The upsert waits for a refresh
        before the cached copy is invalidated.
        """
        with _track_operation("index"):
            tenant_id = validate_tenant(tenant_id)
            try:
                oid = parse_record_id(document_id)
            except InvalidRecordId:
                raise ValidationError(f"Invalid record identifier: '{document_id}'")

            record = await self._call(
                "records", "find", self.records.find_document(oid, tenant_id)
            )
            if record is None:
                raise NotFoundError()

            try:
                external_id, indexed = project_record(record)
            except PydanticValidationError as exc:
                logger.exception(f"Unexpected record shape for {stringify_record_id(oid)}")
                raise InternalError() from exc

            await self._call(
                "index", "upsert", self.index.upsert(external_id, indexed.to_source())
            )
            await self._cache_delete(self.keys.document(tenant_id, external_id))

            logger.info(f"Indexed document {external_id}")
            return IndexResult(id=external_id, indexed=True)

    async def search(
        self,
        tenant_id: str,
        text: str = "",
        offset: int = DEFAULT_OFFSET,
        size: int = DEFAULT_SIZE,
        status: str | None = None,
    ) -> SearchResult:
        """Ranked, tenant-scoped search with a TTL-bounded result cache.

        Cached pages are returned verbatim and may be stale for up to the
        cache TTL.
        """
        with _track_operation("search"):
            tenant_id = validate_tenant(tenant_id)
            if offset < 0 or size < 0:
                raise ValidationError("Pagination offset and size must be non-negative")
            text = text or ""
            status = status or None

            key = self.keys.search(tenant_id, offset, size, status, text)
            cached = await self._cache_load(key, "search", SearchResult)
            if cached is not None:
                return cached

            query = SearchQuery(
                tenant_id=tenant_id, text=text, offset=offset, size=size, status=status
            )
            result = await self._call("index", "search", self.index.search(query))

            await self._cache_store(key, result.to_body())
            return result

    async def get_document(self, tenant_id: str, document_id: str) -> StoredDocument:
        """Fetch one indexed document, enforcing tenant ownership."""
        with _track_operation("get"):
            tenant_id = validate_tenant(tenant_id)
            document_id = self._require_id(document_id)

            key = self.keys.document(tenant_id, document_id)
            cached = await self._cache_load(key, "doc", StoredDocument)
            if cached is not None:
                return cached

            source = await self._fetch_owned(tenant_id, document_id)
            try:
                document = StoredDocument.model_validate({**source, "id": document_id})
            except PydanticValidationError as exc:
                logger.exception(f"Unexpected index document shape for {document_id}")
                raise InternalError() from exc

            await self._cache_store(key, document.to_body())
            return document

    async def delete_document(self, tenant_id: str, document_id: str) -> None:
        """Delete an indexed document after confirming tenant ownership.

        The ownership check always runs before the delete; a document owned
        by another tenant is reported as not found and left untouched.
        """
        with _track_operation("delete"):
            tenant_id = validate_tenant(tenant_id)
            document_id = self._require_id(document_id)

            await self._fetch_owned(tenant_id, document_id)

            deleted = await self._call("index", "delete", self.index.delete(document_id))
            if not deleted:
                # Removed concurrently between the ownership check and the delete
                raise NotFoundError()

            await self._cache_delete(self.keys.document(tenant_id, document_id))
            logger.info(f"Deleted document {document_id}")

    # -------------------------------------------------------------------------
    # Critical path helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_id(document_id: str) -> str:
        document_id = str(document_id or "").strip()
        if not document_id:
            raise ValidationError("Document identifier is required")
        return document_id

    async def _fetch_owned(self, tenant_id: str, document_id: str) -> dict[str, Any]:
        """Fetch an index document by id; absent and foreign look the same."""
        source = await self._call("index", "get", self.index.get(document_id))
        if source is None or not owned_by(source, tenant_id):
            raise NotFoundError()
        return source

    async def _call(self, store: str, operation: str, call: Awaitable[T]) -> T:
        """Run a critical-path store call under the per-call timeout.

        Any store failure, including a timeout, becomes InternalError; the
        cause is logged here and not exposed to callers.
        """
        start = time.perf_counter()
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except CatalogError:
            raise
        except asyncio.TimeoutError as exc:
            logger.error(f"{store} {operation} timed out after {self.timeout}s")
            raise InternalError() from exc
        except Exception as exc:
            logger.exception(f"{store} {operation} failed")
            raise InternalError() from exc
        finally:
            record_store_call(store, operation, time.perf_counter() - start)

    # -------------------------------------------------------------------------
    # Cache helpers (never raise)
    # -------------------------------------------------------------------------

    async def _cache_load(self, key: str, kind: str, model: type[ModelT]) -> ModelT | None:
        """Read and decode a cached value; any failure counts as a miss."""
        start = time.perf_counter()
        try:
            raw = await asyncio.wait_for(self.cache.get(key), timeout=self.timeout)
        except Exception as exc:
            logger.warning(f"Cache get failed for {key}: {exc!r}")
            record_cache_error("get")
            return None
        finally:
            record_store_call("cache", "get", time.perf_counter() - start)

        if raw is None:
            if self.cache.enabled:
                record_cache_miss(kind)
            return None

        try:
            value = model.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, PydanticValidationError) as exc:
            logger.warning(f"Discarding undecodable cache entry {key}: {exc!r}")
            record_cache_error("decode")
            return None

        record_cache_hit(kind)
        logger.debug(f"Cache hit: {key}")
        return value

    async def _cache_store(self, key: str, body: dict[str, Any]) -> None:
        start = time.perf_counter()
        try:
            await asyncio.wait_for(
                self.cache.set(key, orjson.dumps(body), self.ttl), timeout=self.timeout
            )
        except Exception as exc:
            logger.warning(f"Cache set failed for {key}: {exc!r}")
            record_cache_error("set")
        finally:
            record_store_call("cache", "set", time.perf_counter() - start)

    async def _cache_delete(self, key: str) -> None:
        start = time.perf_counter()
        try:
            await asyncio.wait_for(self.cache.delete(key), timeout=self.timeout)
        except Exception as exc:
            logger.error(f"Cache invalidation failed for {key}: {exc!r}")
            record_cache_error("delete")
        finally:
            record_store_call("cache", "delete", time.perf_counter() - start)
