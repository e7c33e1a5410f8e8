"""
JSON payload extraction from raw model replies.

The model may wrap JSON in a markdown fence or surround it with prose.
Precedence: fenced block > whole trimmed string > first-open/last-close
substring > failure.
"""

import json
import re
from typing import Any, Optional

from ..errors import ExtractionError, MalformedJSONError

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)

_OPENERS = "{["
_CLOSERS = "}]"


def _first_index(text: str, chars: str) -> int:
    positions = [text.find(c) for c in chars]
    positions = [p for p in positions if p != -1]
    return min(positions) if positions else -1


def _last_index(text: str, chars: str) -> int:
    return max(text.rfind(c) for c in chars)


def extract_json_payload(raw_response: Optional[str]) -> str:
    """
    Extract the JSON text from an LLM reply.

    Args:
        raw_response: Raw message content from the model

    Returns:
        The candidate JSON text (not yet parsed)

    Raises:
        ExtractionError: If the reply is empty or holds no JSON-shaped text
    """
    if raw_response is None or not raw_response.strip():
        raise ExtractionError("Empty response from model")

    text = raw_response.strip()

    match = _FENCE_PATTERN.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()

    if text[0] in _OPENERS and text[-1] in _CLOSERS:
        return text

    start = _first_index(text, _OPENERS)
    end = _last_index(text, _CLOSERS)
    if start == -1 or end == -1 or end <= start:
        raise ExtractionError("No JSON object found in response")

    return text[start:end + 1]


def parse_json_payload(payload: str) -> Any:
    """Parse extracted JSON text, raising MalformedJSONError on failure."""
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedJSONError(str(e), payload) from e
