"""
Dedup module - embedding-based duplicate removal for the posts collection.
"""

from .similarity import DEFAULT_DUPLICATE_THRESHOLD, cosine_similarity, similarity, is_duplicate
from .embedder import Embedder, OpenAIEmbedder, MockEmbedder, mock_embedding, create_embedder
from .cache import EmbeddingCache, EmbeddingRecord
from .reactor import DedupReactor, DedupOutcome

__all__ = [
    "DEFAULT_DUPLICATE_THRESHOLD",
    "cosine_similarity",
    "similarity",
    "is_duplicate",
    "Embedder",
    "OpenAIEmbedder",
    "MockEmbedder",
    "mock_embedding",
    "create_embedder",
    "EmbeddingCache",
    "EmbeddingRecord",
    "DedupReactor",
    "DedupOutcome",
]
