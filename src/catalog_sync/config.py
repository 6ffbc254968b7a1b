from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REDIS_PORT = 6379


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "catalog-sync"
    env: str = Field(default="dev", validation_alias="APP_ENV")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")  # nosec B104
    port: int = Field(default=3000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Record store (MongoDB)
    mongodb_uri: str = Field(default="mongodb://localhost:27017", validation_alias="MONGODB_URI")
    mongodb_db: str = Field(default="catelog", validation_alias="MONGODB_DB")
    mongodb_collection: str = Field(default="catelog", validation_alias="MONGODB_COLLECTION")
    mongodb_max_pool_size: int = Field(default=10, validation_alias="MONGODB_MAX_POOL_SIZE")

    # Search index (Elasticsearch)
    elasticsearch_node: str = Field(
        default="http://localhost:9200", validation_alias="ELASTICSEARCH_NODE"
    )
    elasticsearch_index: str = Field(default="catelog", validation_alias="ELASTICSEARCH_INDEX")
    elasticsearch_username: str | None = Field(
        default=None, validation_alias="ELASTICSEARCH_USERNAME"
    )
    elasticsearch_password: str | None = Field(
        default=None, validation_alias="ELASTICSEARCH_PASSWORD"
    )

    # Cache (Redis Cluster, optional)
    redis_cluster_nodes: str = Field(default="", validation_alias="REDIS_CLUSTER_NODES")
    redis_username: str | None = Field(default=None, validation_alias="REDIS_USERNAME")
    redis_password: str | None = Field(default=None, validation_alias="REDIS_PASSWORD")
    redis_tls: bool = Field(default=False, validation_alias="REDIS_TLS")
    redis_key_prefix: str = Field(default="catelog:", validation_alias="REDIS_KEY_PREFIX")
    # Upper bound on how stale a cached read may be
    redis_ttl_seconds: int = Field(default=300, validation_alias="REDIS_TTL_SECONDS")

    # Applied to every record store, search index and cache call
    store_timeout_seconds: float = Field(default=5.0, validation_alias="STORE_TIMEOUT_SECONDS")

    enable_metrics: bool = Field(default=True, validation_alias="ENABLE_METRICS")

    @field_validator("redis_tls", mode="before")
    @classmethod
    def _parse_redis_tls(cls, value: Any) -> bool:
        # Only a case-insensitive "true" enables TLS
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"

    @property
    def cache_enabled(self) -> bool:
        return bool(self.redis_nodes())

    def redis_nodes(self) -> list[tuple[str, int]]:
        """Parse REDIS_CLUSTER_NODES ("host[:port],...") into (host, port) pairs."""
        nodes: list[tuple[str, int]] = []
        for entry in self.redis_cluster_nodes.split(","):
            entry = entry.strip()
            if not entry:
                continue
            host, _, port = entry.partition(":")
            nodes.append((host, int(port) if port else DEFAULT_REDIS_PORT))
        return nodes


settings = Settings()
