"""
Complete post analysis: title, categorization and sentiment for each post.

Each step is attempted independently. analyze_complete_post() raises
PostAnalysisError (carrying the partial result) when any step failed;
analyze_multiple_complete_posts() never raises for a single post and records
a placeholder result instead. QuotaExceededError always propagates.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..errors import PostAnalysisError, QuotaExceededError
from ..llm.envelope import StructuredCaller
from ..llm.schemas import Categorization
from .categorize import categorize_post
from .sentiment import analyze_sentiment
from .title import generate_title_for_post

logger = logging.getLogger(__name__)

DEFAULT_ANALYSIS_CONCURRENCY = 5


def _empty_categorization() -> Categorization:
    return Categorization.model_construct(categories=[], subcategories=[])


@dataclass
class PostAnalysis:
    """Combined analysis of one post."""

    post: str
    title: str = ""
    categorization: Categorization = field(default_factory=_empty_categorization)
    sentiment: str = "NEUTRAL"
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "post": self.post,
            "title": self.title,
            "categorization": {
                "categories": list(self.categorization.categories),
                "subcategories": list(self.categorization.subcategories),
            },
            "sentiment": self.sentiment,
            "errors": list(self.errors),
        }


async def analyze_complete_post(caller: StructuredCaller, post: str) -> PostAnalysis:
    """
    Run title generation, categorization and sentiment analysis for one post.

    Raises:
        PostAnalysisError: One or more steps failed (partial result attached)
        QuotaExceededError: Provider quota exhausted
    """
    result = PostAnalysis(post=post)

    try:
        result.title = await generate_title_for_post(caller, post)
    except QuotaExceededError:
        raise
    except Exception as e:
        logger.error(f"[Analysis] Title generation error: {e}")
        result.errors.append(f"Title generation failed: {e}")

    try:
        result.categorization = await categorize_post(caller, post)
    except QuotaExceededError:
        raise
    except Exception as e:
        logger.error(f"[Analysis] Categorization error: {e}")
        result.errors.append(f"Categorization failed: {e}")

    try:
        result.sentiment = await analyze_sentiment(caller, post)
    except QuotaExceededError:
        raise
    except Exception as e:
        logger.error(f"[Analysis] Sentiment analysis error: {e}")
        result.errors.append(f"Sentiment analysis failed: {e}")

    if result.errors:
        raise PostAnalysisError(result)
    return result


async def _analyze_or_placeholder(caller: StructuredCaller, post: str) -> PostAnalysis:
    try:
        return await analyze_complete_post(caller, post)
    except PostAnalysisError as e:
        logger.warning(f"[Analysis] Complete analysis failed for post '{post[:60]}': {e}")
        return PostAnalysis(post=post, errors=[f"Complete analysis failed: {e}"])


async def analyze_multiple_complete_posts(
    caller: StructuredCaller,
    posts: List[str],
    concurrency: int = DEFAULT_ANALYSIS_CONCURRENCY,
) -> List[PostAnalysis]:
    """
    Analyse posts in chunks of `concurrency`, preserving input order.

    Args:
        caller: Structured caller
        posts: Post contents
        concurrency: Posts analysed at once
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    results: List[PostAnalysis] = []
    for start in range(0, len(posts), concurrency):
        chunk = posts[start:start + concurrency]
        logger.info(
            f"[Analysis] Processing posts {start + 1}-{start + len(chunk)} of {len(posts)}"
        )
        results.extend(await asyncio.gather(*(_analyze_or_placeholder(caller, p) for p in chunk)))
    return results


def extract_post_contents(data: List[Any]) -> List[str]:
    """Pull the `content` of every record that has one."""
    return [item["content"] for item in data if isinstance(item, dict) and item.get("content")]
