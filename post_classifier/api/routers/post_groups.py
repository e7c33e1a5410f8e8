"""
Post-group router.

Endpoints:
- POST /post-groups/refresh - Regenerate titles and sentiment summaries
"""

from fastapi import APIRouter, Depends, HTTPException

from ...analysis.post_groups import refresh_post_groups
from ...errors import MalformedCollectionError, QuotaExceededError
from ...infra.settings import Settings
from ...llm.envelope import StructuredCaller
from ...store.base import KeyValueStore
from ..dependencies.services import get_caller, get_settings, get_store
from ..schemas.post_groups import PostGroupRefreshResponse, PostGroupSummary

router = APIRouter()


@router.post("/refresh", response_model=PostGroupRefreshResponse)
async def refresh_groups(
    store: KeyValueStore = Depends(get_store),
    caller: StructuredCaller = Depends(get_caller),
    settings: Settings = Depends(get_settings),
):
    try:
        groups = await refresh_post_groups(store, caller, settings.post_groups_key)
    except MalformedCollectionError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except QuotaExceededError as e:
        raise HTTPException(status_code=503, detail=f"Model provider quota exhausted: {e}")

    return PostGroupRefreshResponse(
        refreshed=len(groups),
        groups=[
            PostGroupSummary(
                id=group.id,
                title=group.title,
                bullish_summary=group.bullish_summary,
                bearish_summary=group.bearish_summary,
                neutral_summary=group.neutral_summary,
                post_count=len(group.posts),
            )
            for group in groups
        ],
    )
