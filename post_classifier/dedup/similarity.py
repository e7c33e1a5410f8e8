"""
Cosine similarity over embedding vectors.

Scores are the raw cosine in [-1.0, 1.0]; negative scores are kept as-is and
compared directly against the threshold (no absolute value), so
anti-correlated posts are never treated as duplicates. Mismatched dimensions,
empty vectors, zero vectors and vectors holding NaN or infinity yield the 0.0 sentinel instead of raising.
"""

import logging
from typing import Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_DUPLICATE_THRESHOLD = 0.95


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Compute the cosine similarity of two vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        float: Similarity in [-1.0, 1.0], or 0.0 for incomparable input
    """
    if a is None or b is None:
        return 0.0

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)

    if va.ndim != 1 or va.shape != vb.shape or va.size == 0:
        logger.debug(f"[Similarity] Incomparable vectors: {va.shape} vs {vb.shape}")
        return 0.0

    if not (np.all(np.isfinite(va)) and np.all(np.isfinite(vb))):
        logger.debug("[Similarity] Non-finite component in vector")
        return 0.0

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    score = float(np.dot(va, vb) / (norm_a * norm_b))
    # Rounding can push identical vectors to 1.0000000000000002
    return min(1.0, max(-1.0, score))


def is_duplicate(
    a: Optional[Sequence[float]],
    b: Optional[Sequence[float]],
    threshold: float = DEFAULT_DUPLICATE_THRESHOLD,
) -> bool:
    """True when the similarity of a and b is strictly above threshold."""
    return cosine_similarity(a, b) > threshold


similarity = cosine_similarity
