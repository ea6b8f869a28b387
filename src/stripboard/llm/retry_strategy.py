"""Retry strategy for LLM operations."""

import asyncio
import random
import re
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx

from stripboard.config import get_logger
from stripboard.exceptions import LLMRetryableError, RateLimitError

logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE_KEYWORDS = (
    "timeout",
    "timed out",
    "connection",
    "network",
    "temporary",
    "unavailable",
    "bad gateway",
    "gateway timeout",
    "internal server error",
    "too many requests",
)


class RetryStrategy:
    """Handles retry logic with exponential backoff for LLM operations.

    ``max_retries`` is the total number of attempts, so ``max_retries=3``
    means three calls and ``max_retries=0`` still makes one.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_retry_delay: float = 1.0,
        max_retry_delay: float = 10.0,
    ) -> None:
        self.max_retries = max_retries
        self.base_retry_delay = base_retry_delay
        self.max_retry_delay = max_retry_delay

    @property
    def total_attempts(self) -> int:
        return max(1, self.max_retries)

    def calculate_retry_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay with up to 10% jitter."""
        delay = min(self.base_retry_delay * (2 ** (attempt - 1)), self.max_retry_delay)
        jitter = delay * 0.1 * random.random()  # noqa: S311
        return float(delay + jitter)

    def is_retryable_error(self, error: Exception) -> bool:
        """Determine if an error is transient."""
        if isinstance(error, RateLimitError):
            return True

        if isinstance(error, ConnectionError | TimeoutError | httpx.TransportError):
            return True

        error_message = str(error).lower()
        return any(keyword in error_message for keyword in RETRYABLE_KEYWORDS)

    def extract_retry_after(self, error: Exception) -> float | None:
        """Extract retry-after information from error."""
        if isinstance(error, RateLimitError):
            return error.retry_after

        match = re.search(r"retry after (\d+(?:\.\d+)?)", str(error).lower())
        if match:
            return float(match.group(1))
        return None

    async def execute_with_retry(
        self,
        operation_func: Callable[..., Awaitable[T]],
        provider_name: str,
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Execute an operation with exponential backoff retry logic.

        Args:
            operation_func: Async function to execute.
            provider_name: Name of the provider for logging.
            *args: Positional arguments for operation_func.
            **kwargs: Keyword arguments for operation_func.

        Returns:
            Result from operation_func.

        Raises:
            LLMRetryableError: If all retry attempts fail with transient errors.
            Exception: The first non-retryable error, unchanged.
        """
        last_error: Exception | None = None
        total_attempts = self.total_attempts

        for attempt in range(1, total_attempts + 1):
            try:
                return await operation_func(*args, **kwargs)
            except Exception as e:
                last_error = e
                if not self.is_retryable_error(e):
                    raise

                if attempt >= total_attempts:
                    break

                retry_after = self.extract_retry_after(e)
                delay = retry_after or self.calculate_retry_delay(attempt)
                logger.warning(
                    f"Attempt {attempt}/{total_attempts} failed for {provider_name}, "
                    f"retrying in {delay:.2f}s",
                    error=str(e),
                    error_type=type(e).__name__,
                    provider=provider_name,
                    retry_delay=delay,
                )
                await asyncio.sleep(delay)

        raise LLMRetryableError(
            f"Provider {provider_name} failed after {total_attempts} attempts",
            provider=provider_name,
            attempt=total_attempts,
            max_attempts=total_attempts,
            original_error=last_error,
        )
