# pom_kit/core/controller/runner.py
"""
Caller-side retry for page-object steps.

Page objects never retry on their own. Test code that wants retries wraps a
step explicitly:

    retrier = Retrier(retries=2)
    await retrier.run(login.authenticate, "user@example.com", "secret")

Only "not ready yet" failures are retried (ElementNotReady, WaitError,
NavigationError with kind TIMEOUT). Contract violations and driver failures
surface immediately.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

from ..errors import ElementNotReady, NavigationError, NavigationFailure, WaitError

T = TypeVar("T")


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (ElementNotReady, WaitError)):
        return True
    return isinstance(exc, NavigationError) and exc.kind is NavigationFailure.TIMEOUT


@dataclass
class Attempt:
    """One failed attempt, kept for reporting."""

    index: int
    error: str


@dataclass
class Retrier:
    retries: int = 0
    backoff_s: float = 0.5
    attempts: list[Attempt] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.retries = max(0, self.retries)

    async def run(self, step: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        self.attempts.clear()
        name = getattr(step, "__name__", repr(step))
        attempt = 0
        while True:
            try:
                return await step(*args, **kwargs)
            except Exception as e:
                if not is_transient(e):
                    raise
                attempt += 1
                self.attempts.append(Attempt(index=attempt, error=str(e)))
                if attempt > self.retries:
                    logger.error(f"All {attempt} attempts failed for {name}: {e}")
                    raise
                delay = self.backoff_s * attempt
                logger.warning(
                    f"Attempt {attempt}/{self.retries + 1} failed for {name}: {e}. "
                    f"Retrying in {delay}s..."
                )
                # simple linear backoff
                await asyncio.sleep(delay)
