"""
Driver capability protocol (abstraction).

This Protocol defines the narrow browser control surface that page objects
rely on. It allows plugging different backends (Playwright, in-memory fakes
for unit tests, future CDP-based drivers) without changing pages.

Notes:
- One capability wraps exactly one browsing context. Operations on it are
  issued sequentially; implementations need not be safe for concurrent calls.
- `locate()` is lazy and never fails; the returned handle is re-evaluated by
  every later call, so it stays valid across navigations.
- Timeouts raise `WaitError`; transport/engine failures raise `DriverError`.
  Any other exception is translated into `DriverError` by `io/guard.py`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol


@dataclass(frozen=True)
class LocatorHandle:
    """Declarative reference to zero-or-more elements on the current document."""

    selector: str


class ElementState(str, Enum):
    PRESENT = "present"
    VISIBLE = "visible"
    GONE = "gone"


class Action(str, Enum):
    CLICK = "click"
    FILL = "fill"
    TYPE = "type"
    PRESS = "press"


class ReadKind(str, Enum):
    TEXT = "text"
    ATTRIBUTE = "attribute"


class EventKind(str, Enum):
    CONSOLE = "console"
    DIALOG = "dialog"
    RESPONSE = "response"
    PAGE_ERROR = "pageerror"


EventHandler = Callable[[Any], Any]


class Subscription(Protocol):
    def cancel(self) -> None: ...


class DriverCapability(Protocol):
    # -------- navigation --------
    async def navigate(self, url: str, *, timeout_ms: int) -> None: ...
    def current_url(self) -> str: ...

    # -------- elements --------
    def locate(self, selector: str) -> LocatorHandle: ...
    async def wait_for(
        self, handle: LocatorHandle, state: ElementState, *, timeout_ms: int
    ) -> None: ...
    async def act(
        self, handle: LocatorHandle, action: Action, *args: str, timeout_ms: int
    ) -> None: ...
    async def read(
        self,
        handle: LocatorHandle,
        what: ReadKind,
        *,
        name: str | None = None,
        timeout_ms: int,
    ) -> str | None: ...

    # -------- events --------
    def subscribe(self, kind: EventKind, handler: EventHandler) -> Subscription: ...
