"""
Tests for embedding providers.
"""

import openai
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock

from conftest import StubEmbeddingClient, bad_request_error, quota_error, rate_limit_error, server_error
from post_classifier.dedup.embedder import (
    DEFAULT_EMBED_DIMENSION,
    MockEmbedder,
    OpenAIEmbedder,
    create_embedder,
    mock_embedding,
)
from post_classifier.errors import QuotaExceededError, RetriesExhaustedError
from post_classifier.infra.settings import Settings


class TestOpenAIEmbedder:
    """Tests for OpenAIEmbedder retry and classification."""

    @pytest.mark.asyncio
    async def test_embed_success(self):
        client = StubEmbeddingClient({"hello world": [0.1, 0.2, 0.3]})
        embedder = OpenAIEmbedder(client, model="text-embedding-3-small", sleep=AsyncMock())

        vector = await embedder.embed("hello world")

        assert vector == [0.1, 0.2, 0.3]
        assert client.calls == [{"model": "text-embedding-3-small", "input": "hello world"}]

    @pytest.mark.asyncio
    async def test_rate_limit_retried(self):
        sleep = AsyncMock()
        client = StubEmbeddingClient([rate_limit_error(), [1.0, 0.0]])
        embedder = OpenAIEmbedder(client, sleep=sleep)

        assert await embedder.embed("text") == [1.0, 0.0]
        assert len(client.calls) == 2
        sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_quota_aborts_immediately(self):
        client = StubEmbeddingClient([quota_error()])
        embedder = OpenAIEmbedder(client, sleep=AsyncMock())

        with pytest.raises(QuotaExceededError):
            await embedder.embed("text")
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_server_errors_exhaust(self):
        client = StubEmbeddingClient([server_error()])
        embedder = OpenAIEmbedder(client, max_attempts=3, sleep=AsyncMock())

        with pytest.raises(RetriesExhaustedError) as exc_info:
            await embedder.embed("text")
        assert len(client.calls) == 3
        assert isinstance(exc_info.value.last_error, openai.InternalServerError)

    @pytest.mark.asyncio
    async def test_unclassified_propagates(self):
        client = StubEmbeddingClient([bad_request_error()])
        embedder = OpenAIEmbedder(client, sleep=AsyncMock())

        with pytest.raises(openai.BadRequestError):
            await embedder.embed("text")
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_empty_text_rejected(self):
        client = StubEmbeddingClient([[1.0]])
        embedder = OpenAIEmbedder(client, sleep=AsyncMock())

        with pytest.raises(ValueError):
            await embedder.embed("   ")
        assert client.calls == []


class TestMockEmbedding:
    """Tests for the deterministic offline embedding."""

    def test_deterministic(self):
        assert mock_embedding("bitcoin to the moon") == mock_embedding("bitcoin to the moon")

    def test_dimension(self):
        assert len(mock_embedding("abc")) == DEFAULT_EMBED_DIMENSION
        assert len(mock_embedding("abc", dim=8)) == 8

    def test_range(self):
        assert all(-1.0 <= v <= 1.0 for v in mock_embedding("range check", dim=256))

    def test_different_text_differs(self):
        assert mock_embedding("post one", dim=32) != mock_embedding("post two", dim=32)

    @pytest.mark.asyncio
    async def test_mock_embedder(self):
        embedder = MockEmbedder(dimension=16)
        assert await embedder.embed("same") == mock_embedding("same", 16)


class TestCreateEmbedder:
    """Tests for create_embedder."""

    def test_mock_provider(self):
        embedder = create_embedder(Settings(embedding_provider="mock", embedding_dimension=64))
        assert isinstance(embedder, MockEmbedder)
        assert embedder.dimension == 64

    def test_openai_provider(self):
        client = SimpleNamespace()
        settings = Settings(embedding_model="text-embedding-3-large", llm_max_attempts=5)
        embedder = create_embedder(settings, client)
        assert isinstance(embedder, OpenAIEmbedder)
        assert embedder.model == "text-embedding-3-large"
        assert embedder.max_attempts == 5

    def test_openai_provider_requires_client(self):
        with pytest.raises(ValueError):
            create_embedder(Settings())
