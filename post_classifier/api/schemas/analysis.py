"""
Post analysis schemas.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class AnalyzePostsRequest(BaseModel):
    """Request to analyse a batch of posts."""

    posts: List[str] = Field(..., min_length=1, max_length=50, description="Post contents to analyse")
    concurrency: Optional[int] = Field(
        default=None, ge=1, le=10, description="Posts analysed at once (default: ANALYSIS_CONCURRENCY)"
    )


class CategorizationItem(BaseModel):
    categories: List[str] = []
    subcategories: List[str] = []


class PostAnalysisItem(BaseModel):
    """Analysis result for one post."""

    post: str
    title: str = Field(..., description="Generated title (empty when generation failed)")
    categorization: CategorizationItem
    sentiment: str = Field(..., description="BULLISH, BEARISH or NEUTRAL")
    errors: List[str] = Field(default=[], description="Failed steps, if any")


class AnalyzePostsResponse(BaseModel):
    """Response from batch analysis."""

    results: List[PostAnalysisItem]
    succeeded: int
    failed: int
