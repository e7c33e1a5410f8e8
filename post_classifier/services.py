"""
Construction of the long-lived service handles.

Both the CLI and the HTTP API build their store connection, provider client,
structured caller and dedup reactor here, so nothing is a process-wide
singleton.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .dedup.embedder import create_embedder
from .dedup.reactor import DedupReactor
from .infra.settings import Settings
from .llm.client import create_client_from_settings
from .llm.envelope import RetryPolicy, StructuredCaller
from .store.base import KeyValueStore
from .store.redis_store import RedisStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Handles shared by one process."""

    settings: Settings
    store: Optional[KeyValueStore] = None
    client: Any = None
    caller: Optional[StructuredCaller] = None
    reactor: Optional[DedupReactor] = None

    async def close(self) -> None:
        if self.store is not None:
            await self.store.close()
        if self.client is not None:
            await self.client.close()
        logger.debug("[Services] Closed")


async def build_services(
    settings: Settings,
    with_store: bool = True,
    with_client: bool = True,
) -> Services:
    """
    Build the handles a command needs.

    The reactor is created only when both the store and (for the openai
    embedding provider) the client are available.

    Raises:
        ConfigurationError: Client requested without OPENAI_API_KEY
        StoreConnectionError: Store unreachable after bounded retries
    """
    services = Services(settings=settings)

    if with_client:
        services.client = create_client_from_settings(settings)
        services.caller = StructuredCaller(services.client, RetryPolicy.from_settings(settings))

    if with_store:
        services.store = await RedisStore.from_settings(settings)
        if services.client is not None or settings.embedding_provider == "mock":
            embedder = create_embedder(settings, services.client)
            services.reactor = DedupReactor.from_settings(settings, services.store, embedder)

    return services


async def run_deduplication_reactor(settings: Settings) -> None:
    """
    Connect to the store and run the dedup reactor until cancelled.

    The provider client is only built for the openai embedding provider.
    """
    services = await build_services(settings, with_client=settings.embedding_provider != "mock")
    try:
        await services.reactor.run()
    finally:
        await services.close()
