"""
Embedding generation.

OpenAIEmbedder calls the provider's embeddings endpoint and reuses the
envelope's error classification: rate limits and 5xx are retried with backoff,
quota/credential failures raise QuotaExceededError, anything else propagates.

MockEmbedder produces deterministic pseudo-random vectors for offline
development (EMBEDDING_PROVIDER=mock). Identical text gives identical vectors.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from functools import reduce
from typing import Any, Awaitable, Callable, List, Optional

from ..errors import QuotaExceededError, RetriesExhaustedError
from ..llm.envelope import ErrorDecision, backoff_delay_seconds, classify_error

logger = logging.getLogger(__name__)

DEFAULT_EMBED_MODEL = "text-embedding-3-small"
DEFAULT_EMBED_DIMENSION = 1536

_UINT32 = 0xFFFFFFFF


class Embedder(ABC):
    """Abstract base class for embedding providers."""

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Return the embedding vector for text."""
        pass


class OpenAIEmbedder(Embedder):
    """Embedding provider backed by the OpenAI embeddings API."""

    def __init__(
        self,
        client: Any,
        model: str = DEFAULT_EMBED_MODEL,
        max_attempts: int = 3,
        base_delay_ms: int = 500,
        jitter_ms: int = 100,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.client = client
        self.model = model
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.jitter_ms = jitter_ms
        self._sleep = sleep

    async def embed(self, text: str) -> List[float]:
        """
        Embed text with bounded retry.

        Raises:
            ValueError: If text is empty
            QuotaExceededError: Quota exhausted or credentials rejected
            RetriesExhaustedError: Rate limited / server errors on every attempt
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self.client.embeddings.create(model=self.model, input=text)
                embedding = list(response.data[0].embedding)
                logger.debug(f"[Embedder] Generated embedding: dim={len(embedding)}")
                return embedding
            except Exception as e:
                decision = classify_error(e)
                if decision is ErrorDecision.ABORT_QUOTA:
                    logger.error(f"[Embedder] Quota exhausted or credentials rejected: {e}")
                    raise QuotaExceededError(str(e)) from e
                if decision is ErrorDecision.ABORT_OTHER:
                    raise

                last_error = e
                if attempt < self.max_attempts:
                    delay = backoff_delay_seconds(attempt, self.base_delay_ms, self.jitter_ms)
                    logger.warning(
                        f"[Embedder] Transient error (attempt {attempt}/{self.max_attempts}): {e}. "
                        f"Retrying in {delay:.2f}s"
                    )
                    await self._sleep(delay)

        raise RetriesExhaustedError(self.max_attempts, last_error)


def mock_embedding(text: str, dim: int = DEFAULT_EMBED_DIMENSION) -> List[float]:
    """
    Deterministic pseudo-random vector in [-1, 1] derived from text.

    Uses a 32-bit string hash as seed and a xorshift sequence.
    """
    x = reduce(lambda s, ch: (s * 31 + ord(ch)) & _UINT32, text, 2166136261)
    out = []
    for _ in range(dim):
        x = (x ^ (x << 13)) & _UINT32
        x ^= x >> 17
        x = (x ^ (x << 5)) & _UINT32
        out.append((x % 10000) / 10000 * 2 - 1)
    return out


class MockEmbedder(Embedder):
    """Offline embedder for development and tests."""

    def __init__(self, dimension: int = DEFAULT_EMBED_DIMENSION):
        self.dimension = dimension

    async def embed(self, text: str) -> List[float]:
        return mock_embedding(text, self.dimension)


def create_embedder(settings, client: Any = None) -> Embedder:
    """
    Build the embedder selected by EMBEDDING_PROVIDER.

    Args:
        settings: Settings instance
        client: Provider client (required for the openai provider)
    """
    if settings.embedding_provider == "mock":
        logger.warning("[Embedder] Using mock embeddings - similarity is not semantic")
        return MockEmbedder(settings.embedding_dimension)

    if client is None:
        raise ValueError("OpenAI embedder requires a provider client")

    return OpenAIEmbedder(
        client,
        model=settings.embedding_model,
        max_attempts=settings.llm_max_attempts,
        base_delay_ms=settings.llm_base_delay_ms,
        jitter_ms=settings.llm_jitter_ms,
    )
