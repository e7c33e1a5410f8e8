"""
Sentiment classification of single posts.
"""

import logging
from typing import Dict, List

from ..errors import QuotaExceededError
from ..llm.envelope import StructuredCaller, TaskDescriptor
from ..llm.schemas import SentimentResult
from .prompts import SENTIMENT_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

SENTIMENT_MAX_TOKENS = 100


async def analyze_sentiment(caller: StructuredCaller, post: str) -> str:
    """Return BULLISH, BEARISH or NEUTRAL for one post."""
    task = TaskDescriptor(
        system_instructions=SENTIMENT_SYSTEM_PROMPT,
        user_content=f'Post: "{post}"',
        output_schema=SentimentResult,
        max_attempts=caller.policy.max_attempts,
        max_output_tokens=SENTIMENT_MAX_TOKENS,
    )
    result = await caller.call(task)
    return result.sentiment


async def analyze_multiple_posts(caller: StructuredCaller, posts: List[str]) -> List[Dict[str, str]]:
    results = []
    for post in posts:
        try:
            sentiment = await analyze_sentiment(caller, post)
        except QuotaExceededError:
            raise
        except Exception as e:
            logger.error(f"[Sentiment] Analysis failed for post '{post[:60]}': {e}")
            continue
        results.append({"post": post, "sentiment": sentiment})
    return results
