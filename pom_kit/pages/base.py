"""
Page object contract.

- PageObject: the capability set every page satisfies ({url, navigate}).
- navigate_page(): the shared navigation routine, usable by any object that
  holds a driver and a url (composition, no base class required).
- BasePage: convenience base that owns one driver handle, tracks the
  Constructed -> Navigated -> Released lifecycle, and offers
  locate -> wait-until-ready -> act/read helpers to subclasses.

No retries happen here. Callers that want them layer
`pom_kit.core.controller.runner.Retrier` on top.

Usage:
    class LoginPage(BasePage):
        PAGE = PageName.LOGIN

        @page_action
        async def authenticate(self, username: str, password: str) -> None:
            await self._fill("#username", username)
            ...
"""

from __future__ import annotations

import functools
import time
import weakref
from enum import Enum
from typing import Any, Awaitable, Callable, ClassVar, Dict, List, Optional, Protocol, TypeVar
from urllib.parse import urlsplit

from loguru import logger

from ..core.errors import (
    DriverError,
    DriverInUseError,
    ElementNotReady,
    NavigationError,
    NavigationFailure,
    NotNavigated,
    PageReleasedError,
    WaitError,
)
from ..core.registry import PageDescriptor, PageName, resolve
from ..core.settings import Settings, settings as default_settings
from ..io.driver import (
    Action,
    DriverCapability,
    ElementState,
    EventHandler,
    EventKind,
    LocatorHandle,
    ReadKind,
    Subscription,
)
from ..io.guard import GuardedDriver


class PageState(str, Enum):
    CONSTRUCTED = "constructed"
    NAVIGATED = "navigated"
    RELEASED = "released"


class UrlMatch(str, Enum):
    """How strictly the settled location must equal the page url."""

    EXACT = "exact"
    PATH = "path"  # same origin + same path, query/fragment ignored
    PREFIX = "prefix"  # same origin, path starts with the page path


class PageObject(Protocol):
    @property
    def url(self) -> str: ...

    async def navigate(self) -> None: ...


def location_matches(actual: str, expected: str, match: UrlMatch = UrlMatch.PATH) -> bool:
    if match is UrlMatch.EXACT:
        return actual == expected
    a, e = urlsplit(actual), urlsplit(expected)
    if (a.scheme, a.netloc) != (e.scheme, e.netloc):
        return False
    a_path = a.path.rstrip("/") or "/"
    e_path = e.path.rstrip("/") or "/"
    if match is UrlMatch.PATH:
        return a_path == e_path
    return a_path == e_path or a_path.startswith(e_path.rstrip("/") + "/")


async def navigate_page(
    driver: DriverCapability,
    url: str,
    *,
    timeout_ms: int,
    match: UrlMatch = UrlMatch.PATH,
) -> None:
    """
    Load `url` and verify the settled location.

    Raises NavigationError with kind TIMEOUT, DRIVER_FAILURE or
    UNEXPECTED_LOCATION. Never retries.
    """
    guarded = driver if isinstance(driver, GuardedDriver) else GuardedDriver(driver)
    logger.info(f"Navigating to {url}")
    try:
        await guarded.navigate(url, timeout_ms=timeout_ms)
        actual = guarded.current_url()
    except WaitError as e:
        raise NavigationError(
            NavigationFailure.TIMEOUT,
            "navigation did not settle in time",
            url=url,
            timeout_ms=timeout_ms,
            cause=e,
        ) from e
    except DriverError as e:
        raise NavigationError(
            NavigationFailure.DRIVER_FAILURE,
            "driver failed during navigation",
            url=url,
            timeout_ms=timeout_ms,
            cause=e,
        ) from e

    if not location_matches(actual, url, match):
        raise NavigationError(
            NavigationFailure.UNEXPECTED_LOCATION,
            "navigation settled on a different document",
            url=url,
            actual_url=actual,
        )
    logger.debug(f"Navigated to: {actual}")


# 驱动句柄 -> 当前持有它的页面对象（弱引用，页面被回收即视为释放）
_OWNERS: "weakref.WeakValueDictionary[int, BasePage]" = weakref.WeakValueDictionary()


def _unwrap(driver: Any) -> Any:
    while isinstance(driver, GuardedDriver):
        driver = driver.inner
    return driver


def _claim(driver: Any, page: "BasePage") -> None:
    holder = _OWNERS.get(id(driver))
    if holder is not None and holder is not page:
        raise DriverInUseError(
            f"driver is already owned by {type(holder).__name__}",
            operation="claim",
            details={"page": type(page).__name__},
        )
    _OWNERS[id(driver)] = page


def _unclaim(driver: Any, page: "BasePage") -> None:
    if _OWNERS.get(id(driver)) is page:
        del _OWNERS[id(driver)]


F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def page_action(fn: F) -> F:
    """Mark a domain action: fails fast unless the page is in NAVIGATED state."""

    @functools.wraps(fn)
    async def wrapper(self: "BasePage", *args: Any, **kwargs: Any) -> Any:
        self._require_navigated(fn.__name__)
        return await fn(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class BasePage:
    """
    Base class for page objects built on a DriverCapability.

    Subclasses declare either `PAGE` (registry entry; `url_params()` supplies
    template values) or a literal `URL`. The url is fixed at construction.
    """

    PAGE: ClassVar[Optional[PageName]] = None
    URL: ClassVar[Optional[str]] = None
    URL_MATCH: ClassVar[UrlMatch] = UrlMatch.PATH

    def __init__(
        self,
        driver: DriverCapability,
        *,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or default_settings
        base = self.settings.base_url if base_url is None else base_url
        self._url = self._build_url(base)

        raw = _unwrap(driver)
        _claim(raw, self)
        self._raw_driver = raw
        self.driver = GuardedDriver(raw)
        self.state = PageState.CONSTRUCTED
        self._subscriptions: List[Subscription] = []

    # ---------------- identity ----------------

    @property
    def url(self) -> str:
        return self._url

    @property
    def descriptor(self) -> Optional[PageDescriptor]:
        return resolve(self.PAGE) if self.PAGE is not None else None

    @property
    def name(self) -> str:
        return self.PAGE.value if self.PAGE is not None else type(self).__name__

    def url_params(self) -> Dict[str, Any]:
        """Values for the registry url template. Override for templated pages."""
        return {}

    def _build_url(self, base_url: str) -> str:
        if self.URL is not None:
            if urlsplit(self.URL).scheme:
                return self.URL
            return f"{base_url.rstrip('/')}{self.URL}"
        if self.PAGE is not None:
            return resolve(self.PAGE).url(base_url, **self.url_params())
        raise TypeError(f"{type(self).__name__} must define PAGE or URL")

    # ---------------- lifecycle ----------------

    async def navigate(self, *, timeout_ms: Optional[int] = None) -> None:
        """
        Load this page. On success the page enters NAVIGATED; on any failure it
        falls back to CONSTRUCTED, since the current document is unknown.
        """
        if self.state is PageState.RELEASED:
            raise PageReleasedError(self.name, "navigate")
        try:
            await navigate_page(
                self.driver,
                self.url,
                timeout_ms=(
                    self.settings.navigation_timeout_ms if timeout_ms is None else timeout_ms
                ),
                match=self.URL_MATCH,
            )
        except NavigationError:
            self.state = PageState.CONSTRUCTED
            raise
        self.state = PageState.NAVIGATED

    def release(self) -> None:
        """Terminal: drop event subscriptions and give up the driver handle."""
        if self.state is PageState.RELEASED:
            return
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        _unclaim(self._raw_driver, self)
        self.state = PageState.RELEASED
        logger.debug(f"{self.name} released")

    def __enter__(self) -> "BasePage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def subscribe(self, kind: EventKind, handler: EventHandler) -> Subscription:
        """Listen to driver events for this page's lifetime."""
        if self.state is PageState.RELEASED:
            raise PageReleasedError(self.name, "subscribe")
        sub = self.driver.subscribe(kind, handler)
        self._subscriptions.append(sub)
        return sub

    def _require_navigated(self, operation: str) -> None:
        if self.state is PageState.RELEASED:
            raise PageReleasedError(self.name, operation)
        if self.state is not PageState.NAVIGATED:
            raise NotNavigated(self.name, operation)

    # ---------------- element helpers ----------------

    async def _ready(self, selector: str, *, operation: Optional[str] = None) -> LocatorHandle:
        """Wait until `selector` is present, then visible; ElementNotReady otherwise."""
        self._require_navigated(operation or "ready")
        handle = self.driver.locate(selector)
        started = time.monotonic()
        stages = (
            (ElementState.PRESENT, self.settings.appear_timeout_ms),
            (ElementState.VISIBLE, self.settings.interactive_timeout_ms),
        )
        for state, timeout_ms in stages:
            try:
                await self.driver.wait_for(handle, state, timeout_ms=timeout_ms)
            except WaitError as e:
                elapsed = time.monotonic() - started
                logger.warning(f"{self.name}: {selector} not {state.value} after {elapsed:.2f}s")
                raise ElementNotReady(
                    selector,
                    elapsed,
                    timeout_ms=timeout_ms if e.timeout_ms is None else e.timeout_ms,
                    operation=operation,
                    cause=e,
                ) from e
        return handle

    async def _fill(self, selector: str, value: str) -> None:
        handle = await self._ready(selector, operation="fill")
        await self.driver.act(handle, Action.FILL, value, timeout_ms=self.settings.action_timeout_ms)

    async def _type(self, selector: str, text: str) -> None:
        handle = await self._ready(selector, operation="type")
        await self.driver.act(handle, Action.TYPE, text, timeout_ms=self.settings.action_timeout_ms)

    async def _click(self, selector: str) -> None:
        handle = await self._ready(selector, operation="click")
        await self.driver.act(handle, Action.CLICK, timeout_ms=self.settings.action_timeout_ms)

    async def _press(self, selector: str, key: str) -> None:
        handle = await self._ready(selector, operation="press")
        await self.driver.act(handle, Action.PRESS, key, timeout_ms=self.settings.action_timeout_ms)

    async def _text(self, selector: str) -> Optional[str]:
        handle = await self._ready(selector, operation="read")
        return await self.driver.read(
            handle, ReadKind.TEXT, timeout_ms=self.settings.action_timeout_ms
        )

    async def _attribute(self, selector: str, name: str) -> Optional[str]:
        handle = await self._ready(selector, operation="read")
        return await self.driver.read(
            handle, ReadKind.ATTRIBUTE, name=name, timeout_ms=self.settings.action_timeout_ms
        )

    # ---------------- read-only probes ----------------

    async def _probe(self, selector: str, *, timeout_ms: Optional[int] = None) -> bool:
        """
        Bounded visibility probe. Absence is a normal answer (False);
        a DriverError during the probe propagates.
        """
        self._require_navigated("probe")
        if timeout_ms is None:
            timeout_ms = self.settings.probe_timeout_ms
        handle = self.driver.locate(selector)
        try:
            await self.driver.wait_for(
                handle,
                ElementState.VISIBLE,
                timeout_ms=timeout_ms,
            )
        except WaitError:
            return False
        return True

    async def _probe_text(self, selector: str, *, timeout_ms: Optional[int] = None) -> Optional[str]:
        if timeout_ms is None:
            timeout_ms = self.settings.probe_timeout_ms
        if not await self._probe(selector, timeout_ms=timeout_ms):
            return None
        handle = self.driver.locate(selector)
        try:
            return await self.driver.read(
                handle,
                ReadKind.TEXT,
                timeout_ms=timeout_ms,
            )
        except WaitError:
            # 探测成功后元素又消失（异步重渲染），按缺失处理
            return None
