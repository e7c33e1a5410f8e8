"""
Provider client construction.

The client is built explicitly and passed to the envelope and embedder; there is
no process-wide singleton.
"""

import logging
from typing import Optional

import httpx
from openai import AsyncOpenAI

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def create_openai_client(
    api_key: Optional[str],
    timeout_seconds: float = 60.0,
    base_url: Optional[str] = None,
) -> AsyncOpenAI:
    """
    Create an async OpenAI client.

    SDK-level retries are disabled; StructuredCaller owns retry and backoff.

    Args:
        api_key: Provider API key
        timeout_seconds: Request timeout
        base_url: Optional alternative endpoint

    Returns:
        AsyncOpenAI client

    Raises:
        ConfigurationError: If the API key is missing or blank
    """
    if not api_key or not api_key.strip():
        raise ConfigurationError(
            "OPENAI_API_KEY is required. Set it in the environment or .env file."
        )

    client_args = {
        "api_key": api_key.strip(),
        "timeout": httpx.Timeout(timeout_seconds, connect=10.0),
        "max_retries": 0,
    }
    if base_url:
        client_args["base_url"] = base_url.strip()

    masked_key = f"...{api_key.strip()[-4:]}"
    logger.debug(f"[Client] OpenAI client created (key={masked_key}, base_url={base_url or 'default'})")
    return AsyncOpenAI(**client_args)


def create_client_from_settings(settings) -> AsyncOpenAI:
    """Create the provider client from Settings."""
    return create_openai_client(
        settings.openai_api_key,
        timeout_seconds=settings.openai_timeout_seconds,
    )
