"""
Dedup operations router.

Endpoints:
- POST /dedup/run - Run one duplicate-removal pass on the posts collection
"""

from fastapi import APIRouter, Depends, HTTPException

from ...dedup.reactor import DedupReactor
from ...errors import (
    LockLostError,
    MalformedCollectionError,
    QuotaExceededError,
    RetriesExhaustedError,
)
from ..dependencies.services import get_reactor
from ..schemas.dedup import DedupRunResponse

router = APIRouter()


@router.post("/run", response_model=DedupRunResponse)
async def run_dedup(reactor: DedupReactor = Depends(get_reactor)):
    """
    Re-trigger one reactor pass.

    Raises:
        HTTPException: 409 if another pass holds the lock or took it over,
            500 on a malformed collection, 502/503 on embedding provider
            failures
    """
    try:
        outcome = await reactor.trigger()
    except MalformedCollectionError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except LockLostError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except QuotaExceededError as e:
        raise HTTPException(status_code=503, detail=f"Embedding provider quota exhausted: {e}")
    except RetriesExhaustedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if outcome is None:
        raise HTTPException(status_code=409, detail="A deduplication pass is already running")

    return DedupRunResponse(
        new_post_id=outcome.new_post_id,
        duplicate_of=outcome.duplicate_of,
        similarity=outcome.similarity,
        removed=outcome.removed,
        compared=outcome.compared,
    )
