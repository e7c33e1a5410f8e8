"""
API Schemas package.

Pydantic models for request/response validation.
"""

from .analysis import (
    AnalyzePostsRequest,
    AnalyzePostsResponse,
    PostAnalysisItem,
)
from .dedup import DedupRunResponse
from .post_groups import PostGroupSummary, PostGroupRefreshResponse

__all__ = [
    "AnalyzePostsRequest",
    "AnalyzePostsResponse",
    "PostAnalysisItem",
    "DedupRunResponse",
    "PostGroupSummary",
    "PostGroupRefreshResponse",
]
