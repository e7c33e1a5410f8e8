"""
Structured-call envelope.

Turns one TaskDescriptor into exactly one validated pydantic model, or a
terminal failure. Each attempt is: chat completion -> JSON extraction ->
JSON parse -> schema validation. Failures go through classify_error():

    RETRY        rate limit, 5xx, extraction / parse / schema failure
    ABORT_QUOTA  insufficient quota, rejected credentials -> QuotaExceededError
    ABORT_OTHER  anything else -> re-raised unchanged

Retries are strictly sequential with exponential backoff plus jitter:
    delay = base_delay * 2^(attempt - 1) + uniform(0, jitter)
Example with 500ms base: ~0.5s -> ~1.0s -> ~2.0s
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

import openai
from pydantic import BaseModel

from ..errors import ContentError, QuotaExceededError, RetriesExhaustedError
from .extraction import extract_json_payload, parse_json_payload
from .schemas import validate

logger = logging.getLogger(__name__)


DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 500
DEFAULT_JITTER_MS = 100
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_OUTPUT_TOKENS = 200

CORRECTIVE_TEMPLATE = (
    'Your previous response was invalid: "{error}". '
    "Provide only valid JSON matching the required shape."
)

_QUOTA_MARKERS = {"insufficient_quota"}
_RATE_LIMIT_MARKERS = {"rate_limit", "rate_limit_exceeded", "rate_limit_error"}


class ErrorDecision(Enum):
    """What the retry loop does with a failed attempt."""
    RETRY = "retry"
    ABORT_QUOTA = "abort_quota"
    ABORT_OTHER = "abort_other"


@dataclass(frozen=True)
class TaskDescriptor:
    """
    One logical "ask the model for JSON matching schema X" request.

    Attributes:
        system_instructions: System prompt text
        user_content: User message text
        output_schema: Pydantic model the reply must satisfy
        max_attempts: Upper bound on model calls for this task
        max_output_tokens: Response token ceiling (None leaves it to the provider)
    """
    system_instructions: str
    user_content: str
    output_schema: Type[BaseModel]
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_output_tokens: Optional[int] = DEFAULT_MAX_OUTPUT_TOKENS

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff, model and default attempt bound shared by every task a caller runs."""
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    jitter_ms: int = DEFAULT_JITTER_MS
    model: str = DEFAULT_MODEL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        return cls(
            base_delay_ms=settings.llm_base_delay_ms,
            jitter_ms=settings.llm_jitter_ms,
            model=settings.openai_model,
            max_attempts=settings.llm_max_attempts,
        )


def _error_markers(exc: BaseException) -> set:
    markers = set()
    for attr in ("code", "type"):
        value = getattr(exc, attr, None)
        if isinstance(value, str):
            markers.add(value)
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        nested = body.get("error") if isinstance(body.get("error"), dict) else body
        for key in ("code", "type"):
            value = nested.get(key)
            if isinstance(value, str):
                markers.add(value)
    return markers


def classify_error(exc: BaseException) -> ErrorDecision:
    """
    Decide whether a failed attempt may be retried.

    Pure function of the exception; independent of the transport call.
    """
    if isinstance(exc, ContentError):
        return ErrorDecision.RETRY

    if isinstance(exc, openai.APIStatusError):
        markers = _error_markers(exc)
        # insufficient_quota arrives as HTTP 429, so check it before rate limits
        if markers & _QUOTA_MARKERS:
            return ErrorDecision.ABORT_QUOTA
        if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return ErrorDecision.ABORT_QUOTA
        if exc.status_code == 429 or markers & _RATE_LIMIT_MARKERS:
            return ErrorDecision.RETRY
        if exc.status_code >= 500:
            return ErrorDecision.RETRY

    return ErrorDecision.ABORT_OTHER


def backoff_delay_seconds(
    attempt: int,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    jitter_ms: int = DEFAULT_JITTER_MS,
    rng: Callable[[float, float], float] = random.uniform,
) -> float:
    """Delay before the attempt that follows `attempt` (1-based)."""
    delay_ms = base_delay_ms * (2 ** (attempt - 1))
    if jitter_ms > 0:
        delay_ms += rng(0, jitter_ms)
    return delay_ms / 1000.0


def build_messages(
    task: TaskDescriptor,
    attempt: int,
    last_error: Optional[BaseException] = None,
) -> List[Dict[str, str]]:
    """Build the conversation for one attempt, appending corrective feedback after a failure."""
    messages = [
        {"role": "system", "content": task.system_instructions},
        {"role": "user", "content": task.user_content},
    ]
    if attempt > 1 and last_error is not None:
        messages.append({
            "role": "user",
            "content": CORRECTIVE_TEMPLATE.format(error=last_error),
        })
    return messages


class StructuredCaller:
    """
    Runs TaskDescriptors against a chat-completions client.

    The client only needs `chat.completions.create(...)` returning an object
    with `choices[0].message.content`, so tests can pass a stub.
    """

    def __init__(
        self,
        client: Any,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            client: openai.AsyncOpenAI (or compatible stub)
            policy: Backoff and model settings
            sleep: Awaitable sleep used between attempts
        """
        self.client = client
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def _complete(self, messages: List[Dict[str, str]], max_tokens: Optional[int]) -> Optional[str]:
        kwargs: Dict[str, Any] = {
            "model": self.policy.model,
            "messages": messages,
            "response_format": {"type": "json_object"},
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens

        response = await self.client.chat.completions.create(**kwargs)
        if not getattr(response, "choices", None):
            return None
        return response.choices[0].message.content

    async def call(self, task: TaskDescriptor) -> BaseModel:
        """
        Execute the task, retrying retryable failures up to task.max_attempts.

        Returns:
            Instance of task.output_schema

        Raises:
            QuotaExceededError: Quota exhausted or credentials rejected
            RetriesExhaustedError: Every attempt failed with a retryable error
            Exception: Unclassified errors propagate unchanged
        """
        schema_name = task.output_schema.__name__
        last_error: Optional[BaseException] = None

        for attempt in range(1, task.max_attempts + 1):
            messages = build_messages(task, attempt, last_error)
            try:
                raw = await self._complete(messages, task.max_output_tokens)
                payload = extract_json_payload(raw)
                parsed = parse_json_payload(payload)
                result = validate(parsed, task.output_schema)
                if attempt > 1:
                    logger.info(f"[Envelope] {schema_name} succeeded on attempt {attempt}/{task.max_attempts}")
                return result
            except Exception as e:
                decision = classify_error(e)
                if decision is ErrorDecision.ABORT_QUOTA:
                    logger.error(f"[Envelope] {schema_name} aborted - quota/credentials: {e}")
                    raise QuotaExceededError(str(e)) from e
                if decision is ErrorDecision.ABORT_OTHER:
                    logger.error(f"[Envelope] {schema_name} aborted - unclassified error: {e}")
                    raise

                last_error = e
                if attempt < task.max_attempts:
                    delay = backoff_delay_seconds(
                        attempt, self.policy.base_delay_ms, self.policy.jitter_ms
                    )
                    logger.warning(
                        f"[Envelope] {schema_name} attempt {attempt}/{task.max_attempts} failed: {e}. "
                        f"Retrying in {delay:.2f}s"
                    )
                    await self._sleep(delay)

        logger.error(
            f"[Envelope] {schema_name} failed after {task.max_attempts} attempts: {last_error}"
        )
        raise RetriesExhaustedError(task.max_attempts, last_error)


async def call_structured(
    client: Any,
    task: TaskDescriptor,
    policy: Optional[RetryPolicy] = None,
) -> BaseModel:
    """Convenience wrapper: run one task with a fresh StructuredCaller."""
    return await StructuredCaller(client, policy).call(task)
