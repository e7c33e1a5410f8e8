"""
Dedup operation schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field


class DedupRunResponse(BaseModel):
    """Outcome of a manually triggered reactor pass."""

    new_post_id: Optional[str] = Field(default=None, description="Newest post in the collection")
    duplicate_of: Optional[str] = Field(default=None, description="Post the newest one duplicated")
    similarity: Optional[float] = Field(default=None, description="Highest similarity observed")
    removed: bool = Field(..., description="Whether the newest post was removed")
    compared: int = Field(..., description="Number of posts compared")
