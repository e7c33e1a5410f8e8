"""
Pytest configuration and shared fixtures.

The key-value store and the model provider are replaced by in-memory fakes.
Provider errors are real openai exceptions built around httpx responses.
"""

import asyncio
import json
import os
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import openai
import pytest
from unittest.mock import AsyncMock

from post_classifier.llm.envelope import RetryPolicy, StructuredCaller
from post_classifier.store.base import KeyValueStore
from post_classifier.store.redis_store import merge_notify_flags


# =============================================================================
# Fake store
# =============================================================================


class FakeStore(KeyValueStore):
    """In-memory KeyValueStore with set-if-absent, TTL bookkeeping and change events."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})
        self.ttls_ms: Dict[str, int] = {}
        self.notify_flags = ""
        self.set_calls: List[tuple] = []
        self.closed = False
        self._watchers: Dict[str, List[asyncio.Queue]] = {}

    def _publish(self, key: str, event: str) -> None:
        for queue in self._watchers.get(key, []):
            queue.put_nowait(event)

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, nx=False, px=None, ex=None):
        self.set_calls.append((key, value, nx, px, ex))
        if nx and key in self.data:
            return False
        self.data[key] = value
        if px is not None:
            self.ttls_ms[key] = px
        elif ex is not None:
            self.ttls_ms[key] = ex * 1000
        else:
            self.ttls_ms.pop(key, None)
        self._publish(key, "set")
        return True

    async def delete(self, key):
        existed = self.data.pop(key, None) is not None
        self.ttls_ms.pop(key, None)
        if existed:
            self._publish(key, "del")

    async def delete_if_equals(self, key, value):
        if self.data.get(key) != value:
            return False
        await self.delete(key)
        return True

    async def expire_if_equals(self, key, value, px):
        if self.data.get(key) != value:
            return False
        self.ttls_ms[key] = px
        return True

    async def ensure_keyspace_notifications(self, flags="KEA"):
        self.notify_flags = merge_notify_flags(self.notify_flags, flags)
        return self.notify_flags

    async def watch(self, key):
        queue: asyncio.Queue = asyncio.Queue()
        self._watchers.setdefault(key, []).append(queue)
        try:
            while True:
                event = await queue.get()
                if event is None:
                    return
                yield event
        finally:
            self._watchers[key].remove(queue)

    def emit(self, key: str, event: str) -> None:
        """Push a raw event to watchers without touching data."""
        self._publish(key, event)

    def stop_watchers(self) -> None:
        for queues in self._watchers.values():
            for queue in queues:
                queue.put_nowait(None)

    async def close(self):
        self.closed = True

    def load(self, key: str) -> Any:
        return json.loads(self.data[key])


# =============================================================================
# Stub provider client
# =============================================================================


def completion(content: Optional[str]) -> SimpleNamespace:
    """Build a chat completion response object."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


Reply = Union[str, None, BaseException]


class StubChatClient:
    """
    Chat-completions stand-in.

    `replies` is either a list consumed in order (the last item repeats) or a
    callable receiving the request kwargs and returning a reply. A reply that
    is an exception is raised.
    """

    def __init__(self, replies: Union[List[Reply], Callable[[dict], Reply]]):
        self.replies = replies
        self.calls: List[dict] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self.close = AsyncMock()

    async def _create(self, **kwargs):
        self.calls.append(kwargs)
        if callable(self.replies):
            reply = self.replies(kwargs)
        elif len(self.replies) > 1:
            reply = self.replies.pop(0)
        else:
            reply = self.replies[0]
        if isinstance(reply, BaseException):
            raise reply
        return completion(reply)


class StubEmbeddingClient:
    """Embeddings stand-in; `vectors` maps input text to a vector or an exception list."""

    def __init__(self, vectors: Union[Dict[str, List[float]], List[Any]]):
        self.vectors = vectors
        self.calls: List[dict] = []
        self.embeddings = SimpleNamespace(create=self._create)

    async def _create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.vectors, list):
            item = self.vectors.pop(0) if len(self.vectors) > 1 else self.vectors[0]
        else:
            item = self.vectors[kwargs["input"]]
        if isinstance(item, BaseException):
            raise item
        return SimpleNamespace(data=[SimpleNamespace(embedding=item)])


# =============================================================================
# Provider error builders
# =============================================================================

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def make_status_error(cls, status: int, code: Optional[str] = None, error_type: Optional[str] = None):
    """Build an openai APIStatusError subclass as the SDK would raise it."""
    response = httpx.Response(status, request=_REQUEST)
    body = {"message": f"status {status}", "code": code, "type": error_type}
    return cls(f"Error code: {status}", response=response, body=body)


def rate_limit_error():
    return make_status_error(openai.RateLimitError, 429, code="rate_limit_exceeded", error_type="requests")


def quota_error():
    return make_status_error(
        openai.RateLimitError, 429, code="insufficient_quota", error_type="insufficient_quota"
    )


def server_error():
    return make_status_error(openai.InternalServerError, 500, error_type="server_error")


def auth_error():
    return make_status_error(openai.AuthenticationError, 401, code="invalid_api_key")


def bad_request_error():
    return make_status_error(openai.BadRequestError, 400, code="invalid_request_error")


def connection_error():
    return openai.APIConnectionError(request=_REQUEST)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def no_sleep():
    return AsyncMock()


@pytest.fixture
def make_caller(no_sleep):
    """Factory: StructuredCaller over a StubChatClient with instant backoff."""

    def _make(replies, max_attempts: int = 3):
        client = StubChatClient(replies)
        policy = RetryPolicy(base_delay_ms=500, jitter_ms=100, model="gpt-4o-mini", max_attempts=max_attempts)
        return StructuredCaller(client, policy, sleep=no_sleep), client

    return _make


@pytest.fixture(autouse=True, scope="function")
def reset_auth_module():
    """
    Reset auth module state before each test.

    Tests run with API_AUTH_ENABLED=false unless they set it explicitly.
    """
    original_auth_enabled = os.environ.get("API_AUTH_ENABLED")
    original_api_key = os.environ.get("API_KEY")

    os.environ["API_AUTH_ENABLED"] = "false"

    yield

    if original_auth_enabled is not None:
        os.environ["API_AUTH_ENABLED"] = original_auth_enabled
    elif "API_AUTH_ENABLED" in os.environ:
        del os.environ["API_AUTH_ENABLED"]

    if original_api_key is not None:
        os.environ["API_KEY"] = original_api_key
    elif "API_KEY" in os.environ:
        del os.environ["API_KEY"]

    import importlib
    import post_classifier.api.dependencies.auth as auth_module
    importlib.reload(auth_module)
