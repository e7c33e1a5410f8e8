"""
Classifier exceptions.

Content errors (extraction, JSON parse, schema) are retryable inside the
structured-call envelope. QuotaExceededError and RetriesExhaustedError are the
two terminal outcomes surfaced to callers.
"""

from typing import List, Optional, Tuple


class ClassifierError(Exception):
    """Base exception for all classifier errors."""
    pass


class ConfigurationError(ClassifierError):
    """Raised when required configuration (e.g. an API key) is missing."""
    pass


class ContentError(ClassifierError):
    """Base for model replies that could not be turned into a validated result."""
    pass


class ExtractionError(ContentError):
    """Raised when no JSON-shaped payload can be found in a model reply."""
    pass


class MalformedJSONError(ContentError):
    """Raised when the extracted payload is not valid JSON."""

    def __init__(self, reason: str, raw_text: str):
        self.reason = reason
        self.raw_text = raw_text
        preview = raw_text if len(raw_text) <= 200 else raw_text[:200] + "..."
        super().__init__(f"JSON parse error: {reason} (raw: {preview})")


class SchemaViolation(ContentError):
    """
    Raised when a parsed payload does not satisfy the declared schema.

    `field` and `reason` describe the first failure; `errors` holds every
    (field, reason) pair so the whole list can be replayed to the model.
    """

    def __init__(self, field: str, reason: str, errors: Optional[List[Tuple[str, str]]] = None):
        self.field = field
        self.reason = reason
        self.errors = errors or [(field, reason)]
        details = "; ".join(f"{f}: {r}" for f, r in self.errors)
        super().__init__(f"Schema violation - {details}")


class QuotaExceededError(ClassifierError):
    """
    Raised when the provider reports quota exhaustion or rejects credentials.

    Callers must not retry this either; it is a configuration problem.
    """
    pass


class RetriesExhaustedError(ClassifierError):
    """Raised when every allowed attempt failed with a retryable error."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Model call failed after {attempts} attempts. Last error: {last_error}"
        )


class MalformedCollectionError(ClassifierError):
    """Raised when a persisted collection is not a JSON array."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed collection '{key}': {reason}")


class StoreConnectionError(ClassifierError):
    """Raised when the key-value store cannot be reached after all attempts."""
    pass


class PostAnalysisError(ClassifierError):
    """
    Raised when one or more steps of a complete post analysis failed.

    `result` holds whatever the successful steps produced.
    """

    def __init__(self, result):
        self.result = result
        super().__init__("; ".join(result.errors))


class LockLostError(ClassifierError):
    """Raised when a dedup pass finds its collection lock owned by someone else."""

    def __init__(self, lock_key: str):
        self.lock_key = lock_key
        super().__init__(f"Lock '{lock_key}' is no longer held by this pass")
