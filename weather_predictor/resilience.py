"""
Retry for the Weather Predictor provider fetches.

Each provider call gets up to 2 retries with capped, doubling delays.
A call that still fails yields None, so one unavailable source never
takes the whole dashboard down.
"""

import asyncio
import json
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Why a provider fetch failed."""
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    API_ERROR = "api_error"
    PARSE_ERROR = "parse_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 2
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 5.0
    jitter: bool = True
    # Any 5xx is retried as well
    retryable_status_codes: tuple = (408, 429)


DEFAULT_RETRY_CONFIG = RetryConfig()


def classify_failure(exception: BaseException, config: RetryConfig = DEFAULT_RETRY_CONFIG) -> Tuple[ErrorType, bool]:
    """
    Label a failed fetch and decide whether another attempt is worthwhile.

    Returns:
        (error type, retryable)
    """
    if isinstance(exception, httpx.TimeoutException):
        return ErrorType.TIMEOUT, True

    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        retryable = status in config.retryable_status_codes or status >= 500
        if status == 429:
            return ErrorType.RATE_LIMIT, retryable
        return ErrorType.API_ERROR, retryable

    if isinstance(exception, httpx.RequestError):
        return ErrorType.API_ERROR, True

    # A malformed payload comes back malformed again
    if isinstance(exception, (json.JSONDecodeError, KeyError, ValueError, TypeError)):
        return ErrorType.PARSE_ERROR, False

    return ErrorType.UNKNOWN, True


def backoff_delay(retry: int, config: RetryConfig) -> float:
    """Delay before retry number `retry` (1-indexed), plus up to 25% jitter."""
    delay = min(config.base_delay_seconds * 2 ** (retry - 1), config.max_delay_seconds)
    if config.jitter:
        delay += delay * 0.25 * random.random()
    return delay


async def retry_async(
    func: Callable[..., Awaitable[Any]],
    provider_name: str = "unknown",
    config: Optional[RetryConfig] = None,
    *args,
    **kwargs
) -> Optional[Any]:
    """
    Await `func(*args, **kwargs)`, retrying transient failures.

    Returns:
        The call's result, or None once the retries are used up or the
        failure is not retryable
    """
    config = config or DEFAULT_RETRY_CONFIG

    for retry in range(config.max_retries + 1):
        if retry:
            delay = backoff_delay(retry, config)
            logger.info(f"[{provider_name}] Retry {retry}/{config.max_retries} in {delay:.1f}s")
            await asyncio.sleep(delay)

        try:
            return await func(*args, **kwargs)
        except Exception as e:
            error_type, retryable = classify_failure(e, config)
            logger.warning(f"[{provider_name}] Attempt {retry + 1} failed: {error_type.value} - {str(e)[:200]}")
            if not retryable:
                break

    logger.error(f"[{provider_name}] Unavailable, continuing without it")
    return None
