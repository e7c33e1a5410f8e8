"""
Response schemas for structured model calls.

Each schema is a pydantic model. validate() turns a parsed JSON value into a
model instance or raises SchemaViolation with a description that can be fed
back to the model as corrective text.
"""

from typing import Any, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import SchemaViolation

SENTIMENTS = ("BULLISH", "BEARISH", "NEUTRAL")

SOURCES = ("TWITTER", "REDDIT", "YOUTUBE", "TELEGRAM", "FARCASTER")

CATEGORIES = (
    "Cryptocurrency",
    "Blockchain Technology",
    "Decentralized Finance (DeFi)",
    "Non-Fungible Tokens (NFTs)",
    "Trading & Investing",
    "Staking & Yield Farming",
    "Smart Contracts",
    "Security & Privacy",
    "Regulation & Compliance",
    "Web3 & dApps",
    "Artificial Intelligence (AI)",
    "Machine Learning (ML)",
    "Fintech",
    "Infrastructure & Scaling",
    "Market Analysis",
    "Economics",
    "Development & Engineering",
    "Research & Innovation",
)

Sentiment = Literal["BULLISH", "BEARISH", "NEUTRAL"]

ModelT = TypeVar("ModelT", bound=BaseModel)


class TitleResult(BaseModel):
    """Generated title for a post or post group."""

    title: str = Field(..., min_length=5, max_length=100)


class SentimentResult(BaseModel):
    """Sentiment label for a single post."""

    sentiment: Sentiment

    @field_validator("sentiment", mode="before")
    @classmethod
    def _normalize_case(cls, value: Any) -> Any:
        # Models often return "bullish" or " Bullish "
        if isinstance(value, str):
            return value.strip().upper()
        return value


class Categorization(BaseModel):
    """Up to two main categories plus free-form subcategories."""

    categories: List[str] = Field(..., min_length=1, max_length=2)
    subcategories: List[str] = Field(..., min_length=1)

    @field_validator("categories")
    @classmethod
    def _known_categories(cls, value: List[str]) -> List[str]:
        unknown = [c for c in value if c not in CATEGORIES]
        if unknown:
            raise ValueError(
                f"All categories must be from the allowed list; unknown: {unknown}"
            )
        if len(set(value)) != len(value):
            raise ValueError(f"Categories must not repeat: {value}")
        return value

    @field_validator("subcategories")
    @classmethod
    def _non_empty_subcategories(cls, value: List[str]) -> List[str]:
        if any(not s.strip() for s in value):
            raise ValueError("Subcategories cannot be empty strings")
        return value


class SentimentSummaries(BaseModel):
    """Per-sentiment summaries for a group of posts; absent sentiments are omitted."""

    model_config = ConfigDict(populate_by_name=True)

    bullish_summary: Optional[str] = Field(
        default=None, alias="bullishSummary", min_length=10, max_length=500
    )
    bearish_summary: Optional[str] = Field(
        default=None, alias="bearishSummary", min_length=10, max_length=500
    )
    neutral_summary: Optional[str] = Field(
        default=None, alias="neutralSummary", min_length=10, max_length=500
    )

    def present(self) -> dict:
        """Return only the summaries that were produced, keyed by JSON alias."""
        return self.model_dump(by_alias=True, exclude_none=True)


def validate(candidate: Any, schema: Type[ModelT]) -> ModelT:
    """
    Validate a parsed JSON value against a schema.

    Args:
        candidate: Parsed JSON value
        schema: Pydantic model class describing the expected shape

    Returns:
        The validated model instance

    Raises:
        SchemaViolation: With every failing field and reason
    """
    try:
        return schema.model_validate(candidate)
    except ValidationError as e:
        errors = [
            (".".join(str(part) for part in err["loc"]) or "<root>", err["msg"])
            for err in e.errors()
        ]
        field, reason = errors[0]
        raise SchemaViolation(field, reason, errors) from e
