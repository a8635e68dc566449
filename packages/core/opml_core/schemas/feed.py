"""
Feed and validation schemas.

Models exchanged between OPML parsing, feed validation, and reporting.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ValidationStatus(str, Enum):
    """Feed validation status."""

    VALID = "valid"  # Served a recognizable RSS or Atom document
    INVALID = "invalid"  # Responded, but the payload is not a feed
    ERROR = "error"  # Fetch failed (transport, HTTP status, retries exhausted)


class Feed(BaseModel):
    """
    Feed subscription from an OPML outline.

    Attributes:
        title: Display name.
        xml_url: Feed URL as given in the source list.
        html_url: Optional companion website URL.
        category: Category path from outermost to innermost.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    xml_url: str
    html_url: str | None = None
    category: list[str] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """
    Outcome of validating a single feed.

    Holds copies of the feed fields so it can be serialized on its own.
    """

    model_config = ConfigDict(frozen=True)

    feed: str
    url: str
    status: ValidationStatus
    error: str = ""
    categories: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_error_matches_status(self) -> "ValidationResult":
        if self.status == ValidationStatus.VALID and self.error:
            raise ValueError("valid results must not carry an error")
        if self.status != ValidationStatus.VALID and not self.error:
            raise ValueError(f"{self.status.value} results require an error message")
        return self

    @classmethod
    def for_feed(cls, feed: Feed, status: ValidationStatus, error: str = "") -> "ValidationResult":
        """Build a result that echoes the feed's title, URL, and categories."""
        return cls(
            feed=feed.title,
            url=feed.xml_url,
            status=status,
            error=error,
            categories=list(feed.category),
        )


class FeedSummary(BaseModel):
    """Aggregate statistics over a feed list."""

    unique_urls: set[str] = Field(default_factory=set)
    duplicates: list[Feed] = Field(default_factory=list)
    categories: set[str] = Field(default_factory=set)
    domain_counts: dict[str, int] = Field(default_factory=dict)
