"""
Post-group title and sentiment-summary regeneration.

Every refresh regenerates the title (from the groups' joined post contents)
and the per-sentiment summaries of every stored group, then writes the whole
collection back. Groups whose regeneration fails are written back unchanged.
"""

import logging
from typing import List

from ..errors import QuotaExceededError
from ..llm.envelope import StructuredCaller
from ..store.base import KeyValueStore
from ..store.posts import PostGroup, load_post_groups, save_collection
from .title import generate_sentiment_summaries_for_group, generate_title_for_post

logger = logging.getLogger(__name__)


async def refresh_post_group(caller: StructuredCaller, group: PostGroup) -> PostGroup:
    """Return a copy of group with a new title and summaries."""
    combined = "\n\n".join(post.content for post in group.posts)
    title = await generate_title_for_post(caller, combined)
    summaries = await generate_sentiment_summaries_for_group(caller, group.posts)

    return PostGroup(
        id=group.id,
        title=title,
        bullish_summary=summaries.get("bullishSummary"),
        bearish_summary=summaries.get("bearishSummary"),
        neutral_summary=summaries.get("neutralSummary"),
        posts=group.posts,
    )


async def refresh_post_groups(
    store: KeyValueStore,
    caller: StructuredCaller,
    key: str = "post-groups",
    context: str = "MANUAL",
) -> List[PostGroup]:
    """
    Regenerate titles and summaries for all stored post groups.

    Args:
        store: Key-value store
        caller: Structured caller
        key: Collection key
        context: Label for log lines (MANUAL / CRON)

    Returns:
        The groups as written (empty when nothing was stored)
    """
    groups = await load_post_groups(store, key)
    if not groups:
        logger.info(f"[{context}] No post groups found under '{key}'")
        return []

    refreshed: List[PostGroup] = []
    for group in groups:
        try:
            updated = await refresh_post_group(caller, group)
        except QuotaExceededError:
            raise
        except Exception as e:
            logger.error(f"[{context}] Error generating title/summaries for post group {group.id}: {e}")
            refreshed.append(group)
            continue

        logger.info(f"[{context}] Title for post group {group.id}: {updated.title}")
        refreshed.append(updated)

    await save_collection(store, key, [group.to_json_dict() for group in refreshed])
    logger.info(f"[{context}] Saved {len(refreshed)} post group(s) with titles and summaries")
    return refreshed
