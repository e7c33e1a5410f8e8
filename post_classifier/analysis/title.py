"""
Title and group-summary generation.
"""

import json
import logging
from typing import Any, Dict, List

from ..errors import ContentError, QuotaExceededError
from ..llm.envelope import StructuredCaller, TaskDescriptor
from ..llm.schemas import SentimentSummaries, TitleResult
from .prompts import SUMMARIES_SYSTEM_PROMPT, TITLE_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TITLE_MAX_TOKENS = 200
SUMMARIES_MAX_TOKENS = 800


async def generate_title_for_post(caller: StructuredCaller, post: str) -> str:
    """
    Generate a 5-100 character title for one post.

    Raises:
        QuotaExceededError, RetriesExhaustedError: From the envelope
    """
    task = TaskDescriptor(
        system_instructions=TITLE_SYSTEM_PROMPT,
        user_content=post,
        output_schema=TitleResult,
        max_attempts=caller.policy.max_attempts,
        max_output_tokens=TITLE_MAX_TOKENS,
    )
    result = await caller.call(task)
    return result.title


async def generate_titles_for_posts(caller: StructuredCaller, posts: List[str]) -> List[Dict[str, str]]:
    """Generate titles sequentially; posts whose generation fails are logged and skipped."""
    results = []
    for post in posts:
        try:
            title = await generate_title_for_post(caller, post)
        except QuotaExceededError:
            raise
        except Exception as e:
            logger.error(f"[Title] Generation failed for post '{post[:60]}': {e}")
            continue
        results.append({"post": post, "title": title})
    return results


async def generate_sentiment_summaries_for_group(
    caller: StructuredCaller,
    posts: List[Any],
) -> Dict[str, str]:
    """
    Summarise a group of posts per sentiment.

    Args:
        caller: Structured caller
        posts: Post records (dicts or pydantic models); sent to the model as JSON

    Returns:
        Only the summaries the model produced, keyed bullishSummary /
        bearishSummary / neutralSummary

    Raises:
        ContentError: The model returned no summary at all
    """
    serialisable = [
        p.model_dump(by_alias=True, exclude_none=True) if hasattr(p, "model_dump") else p
        for p in posts
    ]
    task = TaskDescriptor(
        system_instructions=SUMMARIES_SYSTEM_PROMPT,
        user_content=json.dumps(serialisable, ensure_ascii=False),
        output_schema=SentimentSummaries,
        max_attempts=caller.policy.max_attempts,
        max_output_tokens=SUMMARIES_MAX_TOKENS,
    )

    try:
        result = await caller.call(task)
    except Exception as e:
        logger.error(f"[Summaries] Generation failed for {len(posts)} posts: {e}")
        raise

    summaries = result.present()
    if not summaries:
        raise ContentError("Sentiment summaries generation failed: no summaries returned")
    return summaries
