"""
Seeding helpers for the posts and post-groups collections.

Seeding overwrites whole collections; it is an administrative operation and
must not run while the dedup reactor is processing.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from ..errors import MalformedCollectionError
from .base import KeyValueStore
from .posts import load_collection, save_collection
from .seed_data import SEED_POST_GROUPS

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_POSTS_PATH = Path("data") / "sample_posts.json"


async def seed_post_groups(
    store: KeyValueStore,
    key: str = "post-groups",
    dry_run: bool = False,
    limit: Optional[int] = None,
) -> List[dict]:
    """
    Write the bundled sample post groups.

    Args:
        store: Target store
        key: Collection key
        dry_run: Log the plan without writing
        limit: Only seed the first N groups

    Returns:
        The groups that were (or would have been) written
    """
    data = SEED_POST_GROUPS[:limit] if limit else list(SEED_POST_GROUPS)

    if dry_run:
        logger.info(f"[Seed][DRY-RUN] Would seed {len(data)} post group(s) to '{key}'")
    else:
        await save_collection(store, key, data)
        logger.info(f"[Seed] Seeded {len(data)} post group(s) to '{key}'")

    for index, group in enumerate(data, 1):
        logger.info(f"[Seed]   Group {index}: {group['id']} ({len(group['posts'])} posts)")

    return data


async def clear_post_groups(store: KeyValueStore, key: str = "post-groups", dry_run: bool = False) -> None:
    """Delete the post-groups collection."""
    if dry_run:
        logger.info(f"[Seed][DRY-RUN] Would delete '{key}'")
        return
    await store.delete(key)
    logger.info(f"[Seed] Deleted '{key}'")


async def verify_post_groups(store: KeyValueStore, key: str = "post-groups") -> int:
    """Log what is stored under key and return the group count."""
    groups = await load_collection(store, key)
    if not groups:
        logger.warning(f"[Seed] No post groups found under '{key}'")
        return 0

    logger.info(f"[Seed] Found {len(groups)} post group(s) under '{key}'")
    for index, group in enumerate(groups, 1):
        logger.info(f"[Seed]   Group {index}: {group.get('id')} ({len(group.get('posts', []))} posts)")
    return len(groups)


async def seed_posts(
    store: KeyValueStore,
    path: Path = DEFAULT_SAMPLE_POSTS_PATH,
    key: str = "posts",
) -> int:
    """
    Seed the posts collection from a JSON array file.

    A missing file seeds an empty collection. A malformed file raises and
    nothing is written.

    Returns:
        Number of posts written
    """
    posts: list = []
    path = Path(path)

    if path.exists():
        try:
            posts = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise MalformedCollectionError(str(path), f"invalid JSON: {e}") from e
        if not isinstance(posts, list):
            raise MalformedCollectionError(str(path), "expected a JSON array of posts")
        logger.info(f"[Seed] Loaded {len(posts)} posts from {path}")
    else:
        logger.warning(f"[Seed] {path} not found, seeding an empty collection")

    await save_collection(store, key, posts)
    logger.info(f"[Seed] Seeded {len(posts)} posts to '{key}'")
    return len(posts)
