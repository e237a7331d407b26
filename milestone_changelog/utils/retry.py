"""Retry decorator for GitHub API rate limits.

The Search API allows far fewer requests per minute than the rest of the REST
API, so long milestones can hit its limit while paginating.
"""

import asyncio
import functools
import time
from typing import Any, Callable, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _is_rate_limit_error(exc: RequestFailed) -> bool:
    if isinstance(exc, (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded)):
        return True
    if exc.response.status_code == 429:
        return True
    return exc.response.status_code == 403 and ("rate limit" in str(exc).lower() or exc.response.headers.get("x-ratelimit-remaining") == "0")


def _wait_time(exc: RequestFailed, delay: float) -> float:
    """Return the wait suggested by the error, falling back to the backoff delay."""
    retry_after = getattr(exc, "retry_after", None)
    if retry_after:
        return float(retry_after.total_seconds())

    headers = exc.response.headers
    if headers.get("retry-after"):
        try:
            return float(headers["retry-after"])
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=headers["retry-after"])
    if headers.get("x-ratelimit-reset"):
        try:
            reset_in = int(headers["x-ratelimit-reset"]) - int(time.time())
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=headers["x-ratelimit-reset"])
        else:
            if reset_in > 0:
                return float(reset_in + 1)
    return delay


def retry_on_rate_limit(
    max_retries: int = 5,
    initial_delay: float = 10.0,
    max_delay: float = 120.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Decorator retrying an async GitHub call when it is rate limited.

    Honors the retry-after and x-ratelimit-reset headers when present and
    backs off exponentially otherwise. Errors other than rate limits are
    raised immediately.

    Args:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds between retries
        max_delay: Maximum delay in seconds between retries
        exponential_base: Base for exponential backoff calculation
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} decorated with @retry_on_rate_limit must be async.")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except RequestFailed as exc:
                    if not _is_rate_limit_error(exc):
                        raise
                    if attempt >= max_retries:
                        logger.error("Max retries reached for GitHub rate limit", function=func.__name__, attempts=attempt + 1)
                        raise
                    wait_time = min(_wait_time(exc, delay), max_delay)
                    logger.warning(
                        f"GitHub rate limit hit, retrying in {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        status_code=exc.response.status_code,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)
                    attempt += 1

        return wrapper  # type: ignore

    return decorator
