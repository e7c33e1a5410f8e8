"""
Analysis module - title, sentiment and category classification of posts.
"""

from .title import (
    generate_title_for_post,
    generate_titles_for_posts,
    generate_sentiment_summaries_for_group,
)
from .sentiment import analyze_sentiment, analyze_multiple_posts
from .categorize import categorize_post
from .complete import (
    PostAnalysis,
    analyze_complete_post,
    analyze_multiple_complete_posts,
    extract_post_contents,
)
from .post_groups import refresh_post_group, refresh_post_groups

__all__ = [
    "generate_title_for_post",
    "generate_titles_for_posts",
    "generate_sentiment_summaries_for_group",
    "analyze_sentiment",
    "analyze_multiple_posts",
    "categorize_post",
    "PostAnalysis",
    "analyze_complete_post",
    "analyze_multiple_complete_posts",
    "extract_post_contents",
    "refresh_post_group",
    "refresh_post_groups",
]
