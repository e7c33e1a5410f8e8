"""
Post and post-group records and their persisted collections.

Collections are stored as a JSON array under a single key ("posts",
"post-groups"). A payload that is not valid JSON, or not an array, raises
MalformedCollectionError and is never overwritten by the reader.
"""

import json
import logging
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import MalformedCollectionError
from ..llm.schemas import Sentiment
from .base import KeyValueStore

logger = logging.getLogger(__name__)

Source = Literal["TWITTER", "REDDIT", "YOUTUBE", "TELEGRAM", "FARCASTER"]


class Post(BaseModel):
    """A classified social post."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str
    sentiment: Sentiment = "NEUTRAL"
    source: Source = "TWITTER"
    categories: List[str] = Field(default_factory=list, max_length=2)
    subcategories: List[str] = Field(default_factory=list)
    link: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")


class PostGroup(BaseModel):
    """A group of related posts with generated title and sentiment summaries."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Optional[str] = None
    bullish_summary: Optional[str] = Field(default=None, alias="bullishSummary")
    bearish_summary: Optional[str] = Field(default=None, alias="bearishSummary")
    neutral_summary: Optional[str] = Field(default=None, alias="neutralSummary")
    posts: List[Post] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """Serialize with keys ordered id, title, summaries, posts; unset fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_collection(raw: Optional[str], key: str) -> List[Any]:
    """
    Parse a persisted collection payload.

    Args:
        raw: Stored text (None when the key is absent)
        key: Key name, for error messages

    Returns:
        The list of entries ([] when absent)

    Raises:
        MalformedCollectionError: Not JSON, or not a JSON array
    """
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedCollectionError(key, f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedCollectionError(key, f"expected array, got {type(data).__name__}")
    return data


async def load_collection(store: KeyValueStore, key: str) -> List[Any]:
    """Read and parse the collection stored under key."""
    raw = await store.get(key)
    return parse_collection(raw, key)


async def save_collection(store: KeyValueStore, key: str, entries: List[Any]) -> None:
    """Overwrite the collection stored under key."""
    await store.set(key, json.dumps(entries, ensure_ascii=False))
    logger.debug(f"[Posts] Saved {len(entries)} entries to '{key}'")


async def load_post_groups(store: KeyValueStore, key: str = "post-groups") -> List[PostGroup]:
    """Load and validate every post group."""
    entries = await load_collection(store, key)
    try:
        return [PostGroup.model_validate(entry) for entry in entries]
    except ValidationError as e:
        raise MalformedCollectionError(key, f"invalid post group: {e}") from e
