"""
Crypto post classifier.

LLM-backed sentiment, topic and title classification for short social posts,
with embedding-based near-duplicate removal over a Redis-held collection.
"""

__version__ = "1.0.0"
