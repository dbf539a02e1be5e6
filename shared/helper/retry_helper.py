"""Bounded retry for provider calls on hard-fail pipeline stages."""

import asyncio
from typing import Awaitable, Callable, TypeVar

from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import ProviderError

T = TypeVar("T")


class RetryPolicy:
    """Retries an async provider call when it fails with a transient ProviderError.

    Non-transient errors (e.g. a 4xx response) are raised immediately. The
    delay doubles after every failed attempt.

    Attributes:
        attempts (int): Total number of tries, including the first one.
        backoff (float): Seconds to wait before the first retry.
    """

    def __init__(self, helper_config: HelperConfig, attempts: int | None = None, backoff: float | None = None) -> None:
        self.logging = helper_config.get_logger()
        self.attempts = max(1, int(attempts if attempts is not None else helper_config.get_number_val("PROVIDER_RETRY_ATTEMPTS", default=2)))
        self.backoff = float(backoff if backoff is not None else helper_config.get_number_val("PROVIDER_RETRY_BACKOFF", default=0.5))

    async def run(self, operation: Callable[[], Awaitable[T]], label: str) -> T:
        """Await operation(), retrying transient provider failures.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per attempt.
            label: Short description used in log lines (e.g. "query search").

        Returns:
            The result of the first successful attempt.

        Raises:
            ProviderError: The last error once all attempts are exhausted,
                or the first non-transient one.
        """
        delay = self.backoff
        for attempt in range(1, self.attempts + 1):
            try:
                return await operation()
            except ProviderError as exc:
                if not exc.transient or attempt >= self.attempts:
                    raise
                self.logging.warning(
                    "%s failed (attempt %d of %d): %s. Retrying in %.2fs...",
                    label, attempt, self.attempts, exc.detail, delay,
                )
                await asyncio.sleep(delay)
                delay *= 2
        raise RuntimeError("unreachable")
