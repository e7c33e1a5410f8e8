"""
Store module - key-value store access and persisted collections.
"""

from .base import KeyValueStore
from .redis_store import RedisStore, merge_notify_flags
from .posts import (
    Post,
    PostGroup,
    parse_collection,
    load_collection,
    save_collection,
    load_post_groups,
)
from .seed import seed_posts, seed_post_groups, clear_post_groups, verify_post_groups

__all__ = [
    "KeyValueStore",
    "RedisStore",
    "merge_notify_flags",
    "Post",
    "PostGroup",
    "parse_collection",
    "load_collection",
    "save_collection",
    "load_post_groups",
    "seed_posts",
    "seed_post_groups",
    "clear_post_groups",
    "verify_post_groups",
]
