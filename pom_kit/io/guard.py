"""
Guard around a DriverCapability.

Every suspending call is bounded by `asyncio.wait_for` so that a driver that
never settles still surfaces a typed timeout, and every unexpected exception
is translated into `DriverError` with the original chained as `cause`.

Caveat: when the guard's deadline fires the pending wait is cancelled, but the
browser may still finish (or keep running) the in-flight operation. Whether it
is aborted depends on the driver.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from loguru import logger

from ..core.errors import DriverError, PomError, WaitError
from .driver import (
    Action,
    DriverCapability,
    ElementState,
    EventHandler,
    EventKind,
    LocatorHandle,
    ReadKind,
    Subscription,
)

T = TypeVar("T")

# 给驱动自身的超时留一点余量，让驱动报告的类型化错误优先
DEFAULT_GRACE_MS = 250


class GuardedDriver:
    """
    Wraps a DriverCapability; conforms to the same Protocol.
    Pages only ever talk to the guarded view of their driver.
    """

    def __init__(self, driver: DriverCapability, *, grace_ms: int = DEFAULT_GRACE_MS) -> None:
        self.inner = driver
        self.grace_ms = max(0, grace_ms)

    async def _bounded(
        self,
        coro: Awaitable[T],
        *,
        operation: str,
        timeout_ms: int,
        selector: str | None = None,
        url: str | None = None,
        state: str | None = None,
    ) -> T:
        logger.debug(f"driver.{operation} selector={selector} url={url} timeout={timeout_ms}ms")
        try:
            return await asyncio.wait_for(coro, (timeout_ms + self.grace_ms) / 1000)
        except asyncio.TimeoutError as e:
            logger.warning(f"driver.{operation} did not settle within {timeout_ms}ms")
            raise WaitError(
                "operation did not settle in time",
                operation=operation,
                selector=selector,
                url=url,
                state=state,
                timeout_ms=timeout_ms,
                cause=e,
            ) from e
        except PomError:
            raise
        except Exception as e:  # noqa: BLE001
            logger.warning(f"driver.{operation} failed: {e!r}")
            raise DriverError(
                "driver failure",
                operation=operation,
                selector=selector,
                url=url,
                cause=e,
            ) from e

    # ---------------- navigation ----------------

    async def navigate(self, url: str, *, timeout_ms: int) -> None:
        await self._bounded(
            self.inner.navigate(url, timeout_ms=timeout_ms),
            operation="navigate",
            timeout_ms=timeout_ms,
            url=url,
        )

    def current_url(self) -> str:
        try:
            return self.inner.current_url()
        except PomError:
            raise
        except Exception as e:  # noqa: BLE001
            raise DriverError("cannot read current url", operation="current_url", cause=e) from e

    # ---------------- elements ----------------

    def locate(self, selector: str) -> LocatorHandle:
        return self.inner.locate(selector)

    async def wait_for(
        self, handle: LocatorHandle, state: ElementState, *, timeout_ms: int
    ) -> None:
        await self._bounded(
            self.inner.wait_for(handle, state, timeout_ms=timeout_ms),
            operation=f"wait_for:{state.value}",
            timeout_ms=timeout_ms,
            selector=handle.selector,
            state=state.value,
        )

    async def act(
        self, handle: LocatorHandle, action: Action, *args: str, timeout_ms: int
    ) -> None:
        await self._bounded(
            self.inner.act(handle, action, *args, timeout_ms=timeout_ms),
            operation=action.value,
            timeout_ms=timeout_ms,
            selector=handle.selector,
        )

    async def read(
        self,
        handle: LocatorHandle,
        what: ReadKind,
        *,
        name: str | None = None,
        timeout_ms: int,
    ) -> str | None:
        return await self._bounded(
            self.inner.read(handle, what, name=name, timeout_ms=timeout_ms),
            operation=f"read:{what.value}",
            timeout_ms=timeout_ms,
            selector=handle.selector,
        )

    # ---------------- events ----------------

    def subscribe(self, kind: EventKind, handler: EventHandler) -> Subscription:
        try:
            return self.inner.subscribe(kind, handler)
        except PomError:
            raise
        except Exception as e:  # noqa: BLE001
            raise DriverError(
                "cannot subscribe to driver events",
                operation="subscribe",
                details={"kind": kind.value},
                cause=e,
            ) from e
