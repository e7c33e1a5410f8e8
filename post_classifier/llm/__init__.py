"""
LLM module - structured model calls with validation and retry.

- schemas: pydantic response shapes and validate()
- extraction: JSON payload extraction from raw replies
- envelope: TaskDescriptor, error classification, StructuredCaller
- client: provider client construction
"""

from ..errors import (
    ClassifierError,
    ConfigurationError,
    ContentError,
    ExtractionError,
    MalformedJSONError,
    SchemaViolation,
    QuotaExceededError,
    RetriesExhaustedError,
    MalformedCollectionError,
    StoreConnectionError,
    PostAnalysisError,
)
from .schemas import (
    CATEGORIES,
    SENTIMENTS,
    SOURCES,
    TitleResult,
    SentimentResult,
    Categorization,
    SentimentSummaries,
    validate,
)
from .extraction import extract_json_payload, parse_json_payload
from .envelope import (
    TaskDescriptor,
    RetryPolicy,
    ErrorDecision,
    StructuredCaller,
    classify_error,
    backoff_delay_seconds,
    build_messages,
    call_structured,
)
from .client import create_openai_client, create_client_from_settings

__all__ = [
    # errors
    "ClassifierError",
    "ConfigurationError",
    "ContentError",
    "ExtractionError",
    "MalformedJSONError",
    "SchemaViolation",
    "QuotaExceededError",
    "RetriesExhaustedError",
    "MalformedCollectionError",
    "StoreConnectionError",
    "PostAnalysisError",
    # schemas
    "CATEGORIES",
    "SENTIMENTS",
    "SOURCES",
    "TitleResult",
    "SentimentResult",
    "Categorization",
    "SentimentSummaries",
    "validate",
    # extraction
    "extract_json_payload",
    "parse_json_payload",
    # envelope
    "TaskDescriptor",
    "RetryPolicy",
    "ErrorDecision",
    "StructuredCaller",
    "classify_error",
    "backoff_delay_seconds",
    "build_messages",
    "call_structured",
    # client
    "create_openai_client",
    "create_client_from_settings",
]
