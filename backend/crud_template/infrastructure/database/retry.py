"""Retry policy for transient database failures.

Transient errors (dropped connections, pool timeouts, connections the driver
invalidated) are retried with capped exponential backoff; every other error
propagates on the first occurrence.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy.exc import DBAPIError, DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from crud_template.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    PoolTimeoutError,
    ConnectionError,
)


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_retry_count: Retries after the first attempt (default: 3).
        initial_delay: Base delay in seconds (default: 1.0).
        max_delay: Maximum delay cap in seconds (default: 30.0).
        backoff_base: Exponential backoff multiplier (default: 2.0).
        jitter_factor: Random jitter range as fraction (default: 0.1 = ±10%).
    """

    max_retry_count: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    backoff_base: float = 2.0
    jitter_factor: float = 0.1

    def __post_init__(self) -> None:
        if self.max_retry_count < 0:
            raise ValueError("max_retry_count must be >= 0")
        if self.initial_delay <= 0:
            raise ValueError("initial_delay must be positive")
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be >= initial_delay")
        if self.backoff_base < 1:
            raise ValueError("backoff_base must be >= 1")
        if not 0 <= self.jitter_factor <= 1:
            raise ValueError("jitter_factor must be between 0 and 1")


class RetryStrategy:
    """Runs an async operation, retrying it on transient store failures."""

    def __init__(
        self,
        config: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._config = config or RetryConfig()
        self._sleep = sleep

    @property
    def config(self) -> RetryConfig:
        return self._config

    def is_transient(self, error: BaseException) -> bool:
        if isinstance(error, DBAPIError) and error.connection_invalidated:
            return True
        return isinstance(error, _TRANSIENT_ERRORS)

    def delay_for(self, attempt: int) -> float:
        """Backoff before retry number ``attempt`` (0-indexed), capped at max_delay."""
        config = self._config
        delay = min(config.initial_delay * (config.backoff_base ** attempt), config.max_delay)
        jitter = delay * config.jitter_factor
        return min(max(0.0, delay + random.uniform(-jitter, jitter)), config.max_delay)

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Await ``operation()``; call it again after transient failures."""
        attempt = 0
        while True:
            try:
                return await operation()
            except Exception as exc:
                if not self.is_transient(exc) or attempt >= self._config.max_retry_count:
                    raise
                delay = self.delay_for(attempt)
                attempt += 1
                logger.warning(
                    "Transient database error (%s), retry %d/%d in %.2fs",
                    type(exc).__name__,
                    attempt,
                    self._config.max_retry_count,
                    delay,
                )
                await self._sleep(delay)


def build_retry_strategy() -> RetryStrategy:
    """Retry strategy configured from application settings."""

    settings = get_settings()
    return RetryStrategy(
        RetryConfig(
            max_retry_count=settings.db_max_retry_count,
            max_delay=settings.db_max_retry_delay,
        )
    )
