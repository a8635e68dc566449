"""
Feed validation.

Fetches feed URLs with bounded retry and exponential backoff, classifies the
response body, and folds every outcome into a ValidationResult.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from time import monotonic

import httpx

from opml_core import get_logger
from opml_core.config import validator_config
from opml_core.schemas import Feed, ValidationResult, ValidationStatus

from .classifier import NotAFeed, classify_document

logger = get_logger(__name__)

MAX_ATTEMPTS = 5
INITIAL_BACKOFF = 1.0

TIMEOUT_MESSAGE = "Network timeout"
MAX_RETRIES_MESSAGE = "Max retry attempts reached"

# Connection failures and malformed requests; worth another attempt
_RETRYABLE_TRANSPORT_ERRORS = (
    httpx.NetworkError,
    httpx.UnsupportedProtocol,
    httpx.LocalProtocolError,
    httpx.InvalidURL,
)


@dataclass(frozen=True)
class ValidationOutcome:
    """Terminal status and diagnostic of a fetch-and-classify run."""

    status: ValidationStatus
    error: str = ""


@dataclass(frozen=True)
class Retry:
    """Attempt hit a retryable condition."""

    reason: str
    # Message to report if this was the last allowed attempt
    exhausted_error: str = MAX_RETRIES_MESSAGE


@dataclass(frozen=True)
class Terminal:
    """Attempt reached a final outcome."""

    outcome: ValidationOutcome


def create_client(
    timeout: float | None = None,
    *,
    follow_redirects: bool | None = None,
    user_agent: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Create the HTTP client shared by a validation batch.

    Args:
        timeout: Per-attempt timeout in seconds. Defaults to configuration.
        follow_redirects: Whether the client follows redirects.
        user_agent: User-Agent header value.
        transport: Optional transport override (used by tests).

    Returns:
        Configured AsyncClient. The caller owns and closes it.
    """
    return httpx.AsyncClient(
        timeout=timeout if timeout is not None else validator_config.timeout,
        follow_redirects=(
            follow_redirects if follow_redirects is not None else validator_config.follow_redirects
        ),
        headers={"User-Agent": user_agent or validator_config.user_agent},
        transport=transport,
    )


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


async def _backoff_sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


async def _attempt(url: str, client: httpx.AsyncClient) -> Retry | Terminal:
    """Run one fetch and classify the result as retry or terminal."""
    try:
        async with client.stream("GET", url) as response:
            if response.is_server_error:
                return Retry(reason=f"HTTP {response.status_code}")
            if not response.is_success:
                return Terminal(
                    ValidationOutcome(ValidationStatus.ERROR, f"HTTP {response.status_code}")
                )
            try:
                body = await response.aread()
            except httpx.TimeoutException:
                return Terminal(ValidationOutcome(ValidationStatus.ERROR, TIMEOUT_MESSAGE))
            except httpx.RequestError as e:
                return Retry(reason=f"Failed to read response body: {_describe(e)}")
    except httpx.TimeoutException:
        return Terminal(ValidationOutcome(ValidationStatus.ERROR, TIMEOUT_MESSAGE))
    except _RETRYABLE_TRANSPORT_ERRORS as e:
        message = _describe(e)
        return Retry(reason=message, exhausted_error=message)
    except httpx.RequestError as e:
        return Terminal(ValidationOutcome(ValidationStatus.ERROR, _describe(e)))

    kind = classify_document(body)
    if isinstance(kind, NotAFeed):
        return Terminal(ValidationOutcome(ValidationStatus.INVALID, kind.reason))
    return Terminal(ValidationOutcome(ValidationStatus.VALID))


async def fetch_and_classify(
    url: str,
    client: httpx.AsyncClient,
    *,
    max_attempts: int = MAX_ATTEMPTS,
    initial_backoff: float = INITIAL_BACKOFF,
) -> ValidationOutcome:
    """
    Fetch a URL and classify the body, retrying transient failures.

    Connection failures, malformed requests, server errors (5xx), and body
    read failures are retried. The backoff doubles after each retry and the
    time already spent on the failed attempt is deducted from the sleep.
    Timeouts, other HTTP statuses, and content problems end immediately.

    Args:
        url: Feed URL, used verbatim.
        client: Shared HTTP client carrying the per-attempt timeout.
        max_attempts: Upper bound on requests issued.
        initial_backoff: First backoff delay in seconds.

    Returns:
        Terminal outcome.
    """
    backoff = initial_backoff

    for attempt in range(1, max_attempts + 1):
        started = monotonic()
        result = await _attempt(url, client)

        if isinstance(result, Terminal):
            return result.outcome

        if attempt == max_attempts:
            logger.info(
                "Giving up on feed after %d attempts",
                attempt,
                extra={"url": url, "reason": result.reason},
            )
            return ValidationOutcome(ValidationStatus.ERROR, result.exhausted_error)

        delay = max(0.0, backoff - (monotonic() - started))
        logger.debug(
            "Retrying feed fetch",
            extra={"url": url, "attempt": attempt, "reason": result.reason, "delay": delay},
        )
        if delay > 0:
            await _backoff_sleep(delay)
        backoff *= 2

    return ValidationOutcome(ValidationStatus.ERROR, MAX_RETRIES_MESSAGE)


async def validate_feed(
    feed: Feed,
    client: httpx.AsyncClient,
    *,
    max_attempts: int | None = None,
    initial_backoff: float | None = None,
) -> ValidationResult:
    """
    Validate that a feed URL serves an RSS or Atom document.

    Never raises for network, HTTP, or content failures; they are reported
    through the result's status and error fields.

    Args:
        feed: Feed to validate.
        client: Shared HTTP client.
        max_attempts: Override for the attempt budget.
        initial_backoff: Override for the first backoff delay.

    Returns:
        Validation result echoing the feed's title, URL, and categories.
    """
    try:
        outcome = await fetch_and_classify(
            feed.xml_url,
            client,
            max_attempts=(
                max_attempts if max_attempts is not None else validator_config.max_attempts
            ),
            initial_backoff=(
                initial_backoff if initial_backoff is not None else validator_config.initial_backoff
            ),
        )
    except Exception as e:
        # One broken feed must not abort the batch
        logger.exception("Unexpected error while validating feed", extra={"url": feed.xml_url})
        outcome = ValidationOutcome(ValidationStatus.ERROR, _describe(e))

    if outcome.status != ValidationStatus.VALID:
        logger.info(
            "Feed validation failed",
            extra={"url": feed.xml_url, "status": outcome.status.value, "error": outcome.error},
        )
    return ValidationResult.for_feed(feed, outcome.status, outcome.error)


async def validate_feeds(
    feeds: Sequence[Feed],
    client: httpx.AsyncClient,
    *,
    max_concurrency: int | None = None,
    max_attempts: int | None = None,
    initial_backoff: float | None = None,
) -> list[ValidationResult]:
    """
    Validate feeds concurrently, one task per feed.

    Args:
        feeds: Feeds to validate.
        client: HTTP client shared by every task.
        max_concurrency: Optional cap on simultaneous validations.
        max_attempts: Override for the attempt budget.
        initial_backoff: Override for the first backoff delay.

    Returns:
        One result per feed, in input order.

    Raises:
        ValueError: If max_concurrency is below 1.
    """
    if max_concurrency is not None and max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency is not None else None

    async def _run(feed: Feed) -> ValidationResult:
        if semaphore is None:
            return await validate_feed(
                feed, client, max_attempts=max_attempts, initial_backoff=initial_backoff
            )
        async with semaphore:
            return await validate_feed(
                feed, client, max_attempts=max_attempts, initial_backoff=initial_backoff
            )

    async with asyncio.TaskGroup() as group:
        tasks = [group.create_task(_run(feed)) for feed in feeds]

    results = [task.result() for task in tasks]
    logger.info(
        "Validated %d feeds",
        len(results),
        extra={
            "valid": sum(r.status == ValidationStatus.VALID for r in results),
            "invalid": sum(r.status == ValidationStatus.INVALID for r in results),
            "error": sum(r.status == ValidationStatus.ERROR for r in results),
        },
    )
    return results
