"""Tests for the Elasticsearch index adapter."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from elasticsearch import NotFoundError as EsNotFoundError

from catalog_sync.config import Settings
from catalog_sync.search.index import (
    INDEX_MAPPINGS,
    ElasticsearchIndex,
    create_elasticsearch,
    parse_search_response,
)
from catalog_sync.search.query import SearchQuery


def _not_found() -> EsNotFoundError:
    return EsNotFoundError("not_found", MagicMock(status=404), {"found": False})


@pytest.fixture
def es_client() -> MagicMock:
    client = MagicMock()
    client.index = AsyncMock()
    client.get = AsyncMock()
    client.delete = AsyncMock()
    client.search = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    client.close = AsyncMock()
    client.indices.exists = AsyncMock(return_value=False)
    client.indices.create = AsyncMock()
    return client


class TestParseSearchResponse:
    """Test conversion of raw search responses."""

    def test_hits_and_total(self) -> None:
        response = {
            "hits": {
                "total": {"value": 42, "relation": "eq"},
                "hits": [
                    {
                        "_id": "a",
                        "_score": 2.5,
                        "_source": {"name": "Mug", "tenantId": "acme", "status": "draft"},
                    }
                ],
            }
        }

        result = parse_search_response(response)

        assert result.total == 42
        assert result.hits[0].id == "a"
        assert result.hits[0].score == 2.5
        assert result.hits[0].name == "Mug"

    def test_integer_total(self) -> None:
        result = parse_search_response({"hits": {"total": 7, "hits": []}})
        assert result.total == 7

    def test_missing_total_falls_back_to_page_length(self) -> None:
        response = {"hits": {"hits": [{"_id": "a", "_source": {"tenantId": "acme"}}]}}
        assert parse_search_response(response).total == 1

    def test_response_object_body(self) -> None:
        response = MagicMock()
        response.body = {"hits": {"total": {"value": 0}, "hits": []}}
        assert parse_search_response(response).total == 0


class TestElasticsearchIndex:
    """Test index operations against a mocked client."""

    @pytest.mark.asyncio
    async def test_ensure_index_creates_mapping(self, es_client: MagicMock) -> None:
        index = ElasticsearchIndex(es_client, "catelog")

        assert await index.ensure_index() is True
        kwargs = es_client.indices.create.call_args.kwargs
        assert kwargs["index"] == "catelog"
        assert kwargs["mappings"] == INDEX_MAPPINGS
        assert INDEX_MAPPINGS["properties"]["tenantId"] == {"type": "keyword"}

    @pytest.mark.asyncio
    async def test_ensure_index_skips_existing(self, es_client: MagicMock) -> None:
        es_client.indices.exists.return_value = True
        index = ElasticsearchIndex(es_client, "catelog")

        assert await index.ensure_index() is False
        es_client.indices.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_upsert_waits_for_refresh(self, es_client: MagicMock) -> None:
        index = ElasticsearchIndex(es_client, "catelog")

        await index.upsert("a", {"name": "Mug"})

        es_client.index.assert_awaited_once_with(
            index="catelog", id="a", document={"name": "Mug"}, refresh="wait_for"
        )

    @pytest.mark.asyncio
    async def test_get_returns_source(self, es_client: MagicMock) -> None:
        es_client.get.return_value = {"found": True, "_source": {"tenantId": "acme"}}
        index = ElasticsearchIndex(es_client, "catelog")

        assert await index.get("a") == {"tenantId": "acme"}

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, es_client: MagicMock) -> None:
        es_client.get.side_effect = _not_found()
        index = ElasticsearchIndex(es_client, "catelog")

        assert await index.get("a") is None

    @pytest.mark.asyncio
    async def test_delete(self, es_client: MagicMock) -> None:
        index = ElasticsearchIndex(es_client, "catelog")

        assert await index.delete("a") is True
        es_client.delete.assert_awaited_once_with(index="catelog", id="a", refresh="wait_for")

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false(self, es_client: MagicMock) -> None:
        es_client.delete.side_effect = _not_found()
        index = ElasticsearchIndex(es_client, "catelog")

        assert await index.delete("a") is False

    @pytest.mark.asyncio
    async def test_search_sends_query(self, es_client: MagicMock) -> None:
        es_client.search.return_value = {"hits": {"total": {"value": 0}, "hits": []}}
        index = ElasticsearchIndex(es_client, "catelog")
        query = SearchQuery(tenant_id="acme", text="mug")

        result = await index.search(query)

        assert result.total == 0
        kwargs = es_client.search.call_args.kwargs
        assert kwargs["index"] == "catelog"
        assert kwargs["query"] == query.to_query()

    @pytest.mark.asyncio
    async def test_health_check(self, es_client: MagicMock) -> None:
        index = ElasticsearchIndex(es_client, "catelog")
        assert await index.health_check() is True

        es_client.ping.side_effect = ConnectionError("down")
        assert await index.health_check() is False


class TestCreateElasticsearch:
    def test_no_auth_without_username(self) -> None:
        with patch("catalog_sync.search.index.AsyncElasticsearch") as client_cls:
            create_elasticsearch(Settings(ELASTICSEARCH_NODE="http://es:9200"))

        args, kwargs = client_cls.call_args
        assert args == ("http://es:9200",)
        assert "basic_auth" not in kwargs

    def test_basic_auth_with_credentials(self) -> None:
        config = Settings(
            ELASTICSEARCH_NODE="http://es:9200",
            ELASTICSEARCH_USERNAME="elastic",
            ELASTICSEARCH_PASSWORD="changeme",
            STORE_TIMEOUT_SECONDS=2.5,
        )
        with patch("catalog_sync.search.index.AsyncElasticsearch") as client_cls:
            create_elasticsearch(config)

        kwargs = client_cls.call_args.kwargs
        assert kwargs["basic_auth"] == ("elastic", "changeme")
        assert kwargs["request_timeout"] == 2.5
