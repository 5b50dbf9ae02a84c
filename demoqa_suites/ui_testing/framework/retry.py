# ================================================================================
# Retry Policy Module
# ================================================================================
#
# Re-invokes a fallible operation a bounded number of times, sleeping a fixed
# delay between failures. Stops at the first success; re-raises the last error
# once every attempt has failed.
#
# Key Features:
#   - Fixed delay by default, optional multiplier (no jitter)
#   - Works with sync and async operations
#   - Decorator form for page object methods
#   - Injectable sleep so delays can be observed in unit tests
#
# Usage:
#   result = await retry(lambda: page.locator("#submit").click(), 3, 500)
#
#   @with_retry(RetryConfig(max_attempts=2, delay_ms=500))
#   async def submit(self): ...
#
# ================================================================================

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar, Union

from .log_config import SupportsLogging, get_logger


T = TypeVar("T")

Operation = Callable[[], Union[T, Awaitable[T]]]
SleepFn = Callable[[float], Awaitable[Any]]


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Total number of attempts (1 = no retry)
        delay_ms: Delay before the second attempt
        backoff_multiplier: Delay growth per failure (1.0 = fixed delay)
        max_delay_ms: Upper bound for a single delay
        retry_on: Exception types that trigger another attempt
    """
    max_attempts: int = 2
    delay_ms: int = 500
    backoff_multiplier: float = 1.0
    max_delay_ms: int = 10000
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {self.delay_ms}")


async def _call(op: Operation) -> Any:
    result = op()
    if inspect.isawaitable(result):
        result = await result
    return result


async def retry(
    op: Operation,
    max_attempts: int = 2,
    delay_ms: int = 500,
    config: Optional[RetryConfig] = None,
    description: str = "operation",
    logger: Optional[SupportsLogging] = None,
    sleep: SleepFn = asyncio.sleep,
) -> Any:
    """
    Run `op` until it succeeds or `max_attempts` is reached.

    Args:
        op: Zero-argument callable, sync or async
        max_attempts: Total attempts
        delay_ms: Delay between failed attempts
        config: Full RetryConfig (overrides max_attempts/delay_ms)
        description: Label for log lines
        logger: Logger with debug/info/warning/error
        sleep: Coroutine function used for the delay (seconds)

    Returns:
        The result of the first successful attempt

    Raises:
        The last error raised by `op` once all attempts failed. Errors not
        listed in `config.retry_on` propagate immediately.
    """
    if config is None:
        config = RetryConfig(max_attempts=max_attempts, delay_ms=delay_ms)
    log = logger or get_logger("retry")

    delay: float = min(config.delay_ms, config.max_delay_ms)
    last_error: Optional[BaseException] = None

    for attempt in range(1, config.max_attempts + 1):
        try:
            result = await _call(op)
            if attempt > 1:
                log.info(f"{description} succeeded on attempt {attempt}/{config.max_attempts}")
            return result
        except config.retry_on as e:
            last_error = e
            if attempt == config.max_attempts:
                break
            log.warning(
                f"Attempt {attempt}/{config.max_attempts} failed for {description}: "
                f"{str(e)[:120]}. Retrying in {delay:.0f}ms..."
            )
            await sleep(delay / 1000)
            delay = min(delay * config.backoff_multiplier, config.max_delay_ms)

    if config.max_attempts > 1:
        log.error(f"All {config.max_attempts} attempts failed for {description}: {last_error}")
    raise last_error


def with_retry(config: Optional[RetryConfig] = None):
    """
    Decorator adding retry logic to an async function or method.

    Args:
        config: RetryConfig controlling attempts and delay
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry(
                lambda: func(*args, **kwargs),
                config=config,
                description=func.__name__,
            )
        return wrapper
    return decorator


__all__ = [
    "RetryConfig",
    "retry",
    "with_retry",
]
