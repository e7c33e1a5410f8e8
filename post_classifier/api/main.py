"""
FastAPI application entry point.

The store connection, provider client, structured caller and dedup reactor
are created in the lifespan and exposed on app.state.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from .. import __version__
from ..infra.settings import load_settings
from ..services import build_services
from .dependencies.auth import verify_api_key
from .routers import analysis, dedup, post_groups

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup builds the service handles; shutdown closes the store connection
    and the provider client.
    """
    settings = load_settings()
    services = await build_services(settings)
    app.state.settings = settings
    app.state.store = services.store
    app.state.caller = services.caller
    app.state.reactor = services.reactor
    logger.info(f"[API] Started (model={settings.openai_model}, store={settings.redis_url})")

    yield

    await services.close()
    logger.info("[API] Stopped")


tags_metadata = [
    {
        "name": "analysis",
        "description": "Post analysis - title generation, categorization and sentiment classification",
    },
    {
        "name": "dedup",
        "description": "Duplicate removal - manually re-trigger one pass over the posts collection",
    },
    {
        "name": "post-groups",
        "description": "Post groups - regenerate group titles and per-sentiment summaries",
    },
]

app = FastAPI(
    title="Crypto Post Classifier API",
    lifespan=lifespan,
    description="""
## Crypto Post Classifier API

Classifies crypto/finance social posts with a language model and keeps the
posts collection free of near-duplicates.

### Authentication
When `API_AUTH_ENABLED=true`, all endpoints except `/health` require an
`X-API-Key` header matching the `API_KEY` environment variable.

### Usage
```bash
# Start server
post-classifier serve --host 127.0.0.1 --port 8000

# Analyse posts
curl -X POST http://localhost:8000/analysis/posts \\
  -H "Content-Type: application/json" \\
  -d '{"posts": ["Bitcoin is going to skyrocket after the halving!"]}'
```
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)


@app.get("/health")
async def health_check():
    """Health check endpoint. Not authenticated."""
    return {"status": "ok", "version": __version__}


auth_dependency = [Depends(verify_api_key)]

app.include_router(
    analysis.router, prefix="/analysis", tags=["analysis"], dependencies=auth_dependency
)
app.include_router(
    dedup.router, prefix="/dedup", tags=["dedup"], dependencies=auth_dependency
)
app.include_router(
    post_groups.router, prefix="/post-groups", tags=["post-groups"], dependencies=auth_dependency
)
