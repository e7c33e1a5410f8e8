"""
Environment-driven configuration.

All tunables are read from environment variables (optionally populated from a
.env file by the entry points via python-dotenv). Malformed numeric values fall
back to their defaults with a warning.

Environment Variables:
- OPENAI_API_KEY: Provider credential (required for live calls)
- OPENAI_MODEL: Chat model (default: gpt-4o-mini)
- OPENAI_TIMEOUT_SECONDS: Provider request timeout (default: 60)
- EMBEDDING_MODEL: Embedding model (default: text-embedding-3-small)
- EMBEDDING_PROVIDER: "openai" or "mock" (default: openai)
- EMBEDDING_DIMENSION: Dimension of mock vectors (default: 1536)
- REDIS_URL: Store URL (default: redis://127.0.0.1:6379)
- REDIS_CONNECT_RETRIES / REDIS_CONNECT_BASE_DELAY_MS: Connect backoff (5 / 200)
- LLM_MAX_ATTEMPTS / LLM_BASE_DELAY_MS / LLM_JITTER_MS: Envelope retry (3 / 500 / 100)
- DEDUP_THRESHOLD: Duplicate cosine threshold (default: 0.95)
- DEDUP_LOCK_TTL_MS: Reactor lock TTL (default: 10000)
- EMBEDDING_CACHE_TTL_SECONDS: Embedding cache TTL (default: 86400)
- POSTS_KEY / POST_GROUPS_KEY: Collection keys (posts / post-groups)
- ANALYSIS_CONCURRENCY: Posts analysed per batch (default: 5)
- POST_GROUP_REFRESH_HOURS: Summary regeneration period (default: 6)
- LOG_LEVEL / LOG_DIR: Logging (INFO / logs)

API_AUTH_ENABLED / API_KEY are read by api.dependencies.auth, not here.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    val = os.getenv(key)
    if val is not None:
        try:
            return int(val)
        except ValueError:
            logger.warning(f"[Settings] Invalid integer for {key}: {val}, using default: {default}")
    return default


def _get_env_float(key: str, default: float) -> float:
    """Get float value from environment variable."""
    val = os.getenv(key)
    if val is not None:
        try:
            return float(val)
        except ValueError:
            logger.warning(f"[Settings] Invalid float for {key}: {val}, using default: {default}")
    return default


@dataclass(frozen=True)
class Settings:
    """Resolved runtime configuration."""

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 60.0
    embedding_model: str = "text-embedding-3-small"
    embedding_provider: str = "openai"
    embedding_dimension: int = 1536
    redis_url: str = "redis://127.0.0.1:6379"
    redis_connect_retries: int = 5
    redis_connect_base_delay_ms: int = 200
    llm_max_attempts: int = 3
    llm_base_delay_ms: int = 500
    llm_jitter_ms: int = 100
    dedup_threshold: float = 0.95
    dedup_lock_ttl_ms: int = 10_000
    embedding_cache_ttl_seconds: int = 86_400
    posts_key: str = "posts"
    post_groups_key: str = "post-groups"
    analysis_concurrency: int = 5
    post_group_refresh_hours: int = 6
    log_level: str = "INFO"
    log_dir: str = "logs"


def normalize_redis_url(url: str) -> str:
    """Prefer IPv4 loopback to avoid ::1 resolution issues on some systems."""
    return url.replace("localhost", "127.0.0.1")


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        openai_timeout_seconds=_get_env_float("OPENAI_TIMEOUT_SECONDS", 60.0),
        embedding_model=os.getenv("EMBEDDING_MODEL", "text-embedding-3-small"),
        embedding_provider=os.getenv("EMBEDDING_PROVIDER", "openai").lower(),
        embedding_dimension=_get_env_int("EMBEDDING_DIMENSION", 1536),
        redis_url=normalize_redis_url(os.getenv("REDIS_URL", "redis://127.0.0.1:6379")),
        redis_connect_retries=_get_env_int("REDIS_CONNECT_RETRIES", 5),
        redis_connect_base_delay_ms=_get_env_int("REDIS_CONNECT_BASE_DELAY_MS", 200),
        llm_max_attempts=_get_env_int("LLM_MAX_ATTEMPTS", 3),
        llm_base_delay_ms=_get_env_int("LLM_BASE_DELAY_MS", 500),
        llm_jitter_ms=_get_env_int("LLM_JITTER_MS", 100),
        dedup_threshold=_get_env_float("DEDUP_THRESHOLD", 0.95),
        dedup_lock_ttl_ms=_get_env_int("DEDUP_LOCK_TTL_MS", 10_000),
        embedding_cache_ttl_seconds=_get_env_int("EMBEDDING_CACHE_TTL_SECONDS", 86_400),
        posts_key=os.getenv("POSTS_KEY", "posts"),
        post_groups_key=os.getenv("POST_GROUPS_KEY", "post-groups"),
        analysis_concurrency=_get_env_int("ANALYSIS_CONCURRENCY", 5),
        post_group_refresh_hours=_get_env_int("POST_GROUP_REFRESH_HOURS", 6),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("LOG_DIR", "logs"),
    )
