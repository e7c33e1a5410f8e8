"""
Post analysis router.

Endpoints:
- POST /analysis/posts - Title, categorization and sentiment for a batch of posts
"""

from fastapi import APIRouter, Depends, HTTPException

from ...analysis.complete import analyze_multiple_complete_posts
from ...errors import QuotaExceededError
from ...infra.settings import Settings
from ...llm.envelope import StructuredCaller
from ..dependencies.services import get_caller, get_settings
from ..schemas.analysis import AnalyzePostsRequest, AnalyzePostsResponse, PostAnalysisItem

router = APIRouter()


@router.post("/posts", response_model=AnalyzePostsResponse)
async def analyze_posts(
    request: AnalyzePostsRequest,
    caller: StructuredCaller = Depends(get_caller),
    settings: Settings = Depends(get_settings),
):
    """
    Run complete analysis for each post.

    Posts whose analysis fails are returned with empty fields and their errors.

    Raises:
        HTTPException: 503 when the model provider quota is exhausted
    """
    concurrency = request.concurrency or settings.analysis_concurrency
    try:
        results = await analyze_multiple_complete_posts(caller, request.posts, concurrency)
    except QuotaExceededError as e:
        raise HTTPException(status_code=503, detail=f"Model provider quota exhausted: {e}")

    items = [PostAnalysisItem(**result.to_dict()) for result in results]
    failed = sum(1 for item in items if item.errors)
    return AnalyzePostsResponse(results=items, succeeded=len(items) - failed, failed=failed)
