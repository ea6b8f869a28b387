"""Custom exception hierarchy for Stripboard with helpful error messages."""

from __future__ import annotations

from typing import Any


class StripboardError(Exception):
    """Base exception with helpful formatting for all Stripboard errors.

    Provides structured error messages with hints and details so a producer
    or AD can tell what went wrong with a scheduling run.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            message: Primary error message describing what went wrong
            hint: Optional hint suggesting how to fix the problem
            details: Optional dictionary with additional debugging information
        """
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with hint and details.

        Returns:
            Formatted error string with all available information
        """
        output = f"Error: {self.message}"
        if self.hint:
            output += f"\nHint: {self.hint}"
        if self.details:
            details_str = "\n".join(
                f"  {key}: {value}" for key, value in self.details.items()
            )
            output += f"\nDetails:\n{details_str}"
        return output


class ConfigurationError(StripboardError):
    """Configuration errors including invalid settings and missing config files."""

    pass


class ValidationError(StripboardError):
    """Input validation errors with details about what was expected."""

    pass


class MissingBreakdownError(ValidationError):
    """A requested episode has no breakdown or an empty scene list."""

    def __init__(self, episode_numbers: list[int]) -> None:
        """Initialize with every offending episode.

        Args:
            episode_numbers: Episodes that are missing or have zero scenes
        """
        self.episode_numbers = list(episode_numbers)
        label = ", ".join(str(n) for n in self.episode_numbers)
        super().__init__(
            message=f"Script breakdown missing for episode(s): {label}",
            hint="Generate a script breakdown for every requested episode first",
            details={"episodes": self.episode_numbers},
        )


class ScheduleParseError(StripboardError):
    """A generated schedule response could not be turned into shooting days."""

    def __init__(
        self,
        message: str,
        raw: str | None = None,
        head_chars: int = 500,
        tail_chars: int = 300,
    ) -> None:
        """Initialize parse error with response previews.

        Args:
            message: Error message
            raw: The raw response text that failed to parse
            head_chars: Number of leading characters kept for diagnosis
            tail_chars: Number of trailing characters kept for diagnosis
        """
        text = raw or ""
        self.response_length = len(text)
        self.head = text[:head_chars]
        self.tail = text[-tail_chars:] if len(text) > head_chars else ""
        details: dict[str, Any] = {"response_length": self.response_length}
        if self.head:
            details["response_head"] = self.head
        if self.tail:
            details["response_tail"] = self.tail
        super().__init__(
            message=message,
            hint="The response was not a JSON array of shooting days",
            details=details,
        )


class LLMError(StripboardError):
    """LLM provider errors including rate limits and API issues."""

    pass


class RateLimitError(LLMError):
    """Rate limit exceeded error for LLM providers."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: float | None = None,
        provider: str | None = None,
    ) -> None:
        """Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds to wait before retrying
            provider: Provider that raised the error
        """
        self.retry_after = retry_after
        self.provider = provider
        hint = None
        if retry_after:
            hint = f"Please wait {retry_after} seconds before retrying"
        details: dict[str, Any] = {}
        if provider:
            details["provider"] = provider
        if retry_after:
            details["retry_after"] = retry_after
        super().__init__(message=message, hint=hint, details=details)


class LLMProviderError(LLMError):
    """Generic LLM provider error for non-rate-limit failures."""

    pass


class LLMFallbackError(LLMError):
    """Error raised when every configured LLM provider failed."""

    def __init__(
        self,
        message: str = "All LLM providers failed",
        provider_errors: dict[str, Exception] | None = None,
        attempted_providers: list[str] | None = None,
        fallback_chain: list[str] | None = None,
    ) -> None:
        """Initialize fallback error with per-provider failure information.

        Args:
            message: Primary error message
            provider_errors: Mapping of provider names to their errors
            attempted_providers: Providers that were attempted
            fallback_chain: The order in which providers were tried
        """
        self.provider_errors = provider_errors or {}
        self.attempted_providers = attempted_providers or []
        self.fallback_chain = fallback_chain or []

        hint_parts = []
        if self.attempted_providers:
            hint_parts.append(f"Tried {len(self.attempted_providers)} providers")
        if self.provider_errors:
            hint_parts.append("Check provider credentials and availability")
        hint = ". ".join(hint_parts) if hint_parts else None

        details: dict[str, Any] = {
            "attempted_providers": self.attempted_providers,
            "fallback_chain": self.fallback_chain,
        }
        if self.provider_errors:
            details["provider_errors"] = {
                provider: str(error) for provider, error in self.provider_errors.items()
            }
        super().__init__(message=message, hint=hint, details=details)


class LLMRetryableError(LLMError):
    """Error for transient failures that can be retried with backoff."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retry_after: float | None = None,
        attempt: int | None = None,
        max_attempts: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize retryable error.

        Args:
            message: Error message
            provider: Provider that failed
            retry_after: Suggested retry delay in seconds
            attempt: Current attempt number
            max_attempts: Maximum number of attempts
            original_error: The original exception that caused this error
        """
        self.provider = provider
        self.retry_after = retry_after
        self.attempt = attempt
        self.max_attempts = max_attempts
        self.original_error = original_error

        hint_parts = []
        if retry_after:
            hint_parts.append(f"Retry after {retry_after} seconds")
        if attempt and max_attempts:
            hint_parts.append(f"Attempt {attempt}/{max_attempts}")
        hint = ". ".join(hint_parts) if hint_parts else None

        details: dict[str, Any] = {}
        if provider:
            details["provider"] = provider
        if attempt:
            details["attempt"] = attempt
        if original_error:
            details["original_error"] = (
                f"{type(original_error).__name__}: {original_error}"
            )
        super().__init__(message=message, hint=hint, details=details)


def check_config_keys(config: dict[str, Any]) -> None:
    """Check for common configuration mistakes.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigurationError: With hints about correct configuration keys
    """
    wrong_keys = {
        "api_key": "llm_api_key",  # pragma: allowlist secret
        "model": "llm_model",
        "max_scenes": "max_scenes_per_batch",
        "buffer_minutes": "setup_buffer_minutes",
        "max_days": "series_max_days",
    }

    for wrong, correct in wrong_keys.items():
        if wrong in config:
            raise ConfigurationError(
                message=f"Invalid configuration key '{wrong}'",
                hint=f"Use '{correct}' instead of '{wrong}'",
                details={
                    "found_keys": list(config.keys()),
                    "invalid_key": wrong,
                    "correct_key": correct,
                },
            )
