"""
Post-group schemas.
"""

from typing import List, Optional

from pydantic import BaseModel


class PostGroupSummary(BaseModel):
    id: str
    title: Optional[str] = None
    bullish_summary: Optional[str] = None
    bearish_summary: Optional[str] = None
    neutral_summary: Optional[str] = None
    post_count: int


class PostGroupRefreshResponse(BaseModel):
    """Response from a post-group refresh."""

    refreshed: int
    groups: List[PostGroupSummary] = []
