"""
Store-resident embedding cache.

Records live under `emb:<post_id>` with a TTL (24h by default) enforced by the
store. Entries are never updated in place. Concurrent writers for the same key
are not coordinated: the embedding of a given text is treated as idempotent,
so the last writer wins.
"""

import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..store.base import KeyValueStore
from .embedder import Embedder

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 86_400
DEFAULT_CACHE_PREFIX = "emb:"


class EmbeddingRecord(BaseModel):
    """Cached embedding of one post."""

    model_config = ConfigDict(populate_by_name=True)

    post_id: str = Field(..., alias="postId")
    vector: List[float]
    computed_at: str = Field(..., alias="computedAt")


class EmbeddingCache:
    """Read-through cache of post embeddings."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        prefix: str = DEFAULT_CACHE_PREFIX,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    def key_for(self, post_id: str) -> str:
        return f"{self.prefix}{post_id}"

    async def get(self, post_id: str) -> Optional[List[float]]:
        """
        Return the cached vector, or None on miss.

        Unreadable entries count as misses so they get recomputed.
        """
        raw = await self.store.get(self.key_for(post_id))
        if raw is None:
            return None

        try:
            data = json.loads(raw)
            if isinstance(data, list):
                # Bare vector, as written by older cache writers
                return [float(v) for v in data]
            return EmbeddingRecord.model_validate(data).vector
        except (json.JSONDecodeError, ValidationError, TypeError, ValueError) as e:
            logger.warning(f"[EmbeddingCache] Unreadable entry for {post_id}, recomputing: {e}")
            return None

    async def put(self, post_id: str, vector: List[float]) -> EmbeddingRecord:
        record = EmbeddingRecord(
            post_id=post_id,
            vector=vector,
            computed_at=datetime.now(timezone.utc).isoformat(),
        )
        await self.store.set(
            self.key_for(post_id),
            record.model_dump_json(by_alias=True),
            ex=self.ttl_seconds,
        )
        return record

    async def get_or_compute(self, post_id: str, text: str, embedder: Embedder) -> List[float]:
        """Return the cached embedding, computing and caching it on miss."""
        vector = await self.get(post_id)
        if vector is not None:
            logger.debug(f"[EmbeddingCache] Hit: {post_id}")
            return vector

        logger.debug(f"[EmbeddingCache] Miss: {post_id}")
        vector = await embedder.embed(text)
        await self.put(post_id, vector)
        return vector
