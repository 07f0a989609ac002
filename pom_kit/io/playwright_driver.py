"""
Playwright-based DriverCapability implementation.

- PlaywrightBrowser owns the Playwright + Chromium lifecycle:
  start() / stop() / new_capability() / close_capability(cap)
- PlaywrightCapability adapts one Playwright `Page` to io/driver.py's
  DriverCapability Protocol:
  navigate / current_url / locate / wait_for / act / read / subscribe

Playwright timeouts become WaitError; any other Playwright error becomes
DriverError. Both keep the original exception as `cause`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from loguru import logger
from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PwError,
    Locator,
    Page,
    Playwright,
    TimeoutError as PwTimeoutError,
    async_playwright,
)

from ..core.errors import DriverError, WaitError
from .driver import Action, ElementState, EventHandler, EventKind, LocatorHandle, ReadKind

# ElementState -> Playwright locator.wait_for(state=...)
_WAIT_STATES: Dict[ElementState, str] = {
    ElementState.PRESENT: "attached",
    ElementState.VISIBLE: "visible",
    ElementState.GONE: "hidden",
}


@dataclass
class PlaywrightSubscription:
    page: Page
    event: str
    handler: EventHandler
    active: bool = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.page.remove_listener(self.event, self.handler)
        self.active = False


class PlaywrightCapability:
    """
    A concrete DriverCapability over a single Playwright `Page`.
    Handles are plain selectors; every call builds a fresh `page.locator()`.
    """

    def __init__(self, page: Page) -> None:
        self.page = page

    # ---------------- navigation ----------------

    async def navigate(self, url: str, *, timeout_ms: int) -> None:
        try:
            await self.page.goto(url, timeout=timeout_ms, wait_until="load")
        except PwTimeoutError as e:
            raise WaitError(
                "navigation timed out", operation="navigate", url=url, timeout_ms=timeout_ms, cause=e
            ) from e
        except PwError as e:
            raise DriverError(str(e), operation="navigate", url=url, cause=e) from e

    def current_url(self) -> str:
        return self.page.url

    # ---------------- elements ----------------

    def locate(self, selector: str) -> LocatorHandle:
        return LocatorHandle(selector)

    async def wait_for(
        self, handle: LocatorHandle, state: ElementState, *, timeout_ms: int
    ) -> None:
        try:
            await self._locator(handle).wait_for(state=_WAIT_STATES[state], timeout=timeout_ms)
        except PwTimeoutError as e:
            raise WaitError(
                f"element not {state.value}",
                operation="wait_for",
                selector=handle.selector,
                state=state.value,
                timeout_ms=timeout_ms,
                cause=e,
            ) from e
        except PwError as e:
            raise DriverError(str(e), operation="wait_for", selector=handle.selector, cause=e) from e

    async def act(
        self, handle: LocatorHandle, action: Action, *args: str, timeout_ms: int
    ) -> None:
        locator = self._locator(handle)
        try:
            if action is Action.CLICK:
                await locator.click(timeout=timeout_ms)
            elif action is Action.FILL:
                await locator.fill(args[0], timeout=timeout_ms)
            elif action is Action.TYPE:
                await locator.press_sequentially(args[0], timeout=timeout_ms)
            elif action is Action.PRESS:
                await locator.press(args[0], timeout=timeout_ms)
            else:
                raise ValueError(f"Unknown action: {action}")
        except PwTimeoutError as e:
            raise WaitError(
                f"{action.value} timed out",
                operation=action.value,
                selector=handle.selector,
                timeout_ms=timeout_ms,
                cause=e,
            ) from e
        except PwError as e:
            raise DriverError(str(e), operation=action.value, selector=handle.selector, cause=e) from e

    async def read(
        self,
        handle: LocatorHandle,
        what: ReadKind,
        *,
        name: Optional[str] = None,
        timeout_ms: int,
    ) -> Optional[str]:
        locator = self._locator(handle)
        try:
            if what is ReadKind.ATTRIBUTE:
                if not name:
                    raise ValueError("read(attribute) requires an attribute name")
                return await locator.get_attribute(name, timeout=timeout_ms)
            text = await locator.text_content(timeout=timeout_ms)
            return text.strip() if text is not None else None
        except PwTimeoutError as e:
            raise WaitError(
                f"read {what.value} timed out",
                operation="read",
                selector=handle.selector,
                timeout_ms=timeout_ms,
                cause=e,
            ) from e
        except PwError as e:
            raise DriverError(str(e), operation="read", selector=handle.selector, cause=e) from e

    # ---------------- events ----------------

    def subscribe(self, kind: EventKind, handler: EventHandler) -> PlaywrightSubscription:
        self.page.on(kind.value, handler)
        return PlaywrightSubscription(page=self.page, event=kind.value, handler=handler)

    # ---------------- internals ----------------

    def _locator(self, handle: LocatorHandle) -> Locator:
        return self.page.locator(handle.selector).first


class PlaywrightBrowser:
    """
    Launches Chromium once and hands out one capability per incognito context.
    Ownership of the browser session stays here, never with page objects.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        slow_mo_ms: int = 0,
        default_timeout_ms: int = 30_000,
    ) -> None:
        self.headless = headless
        self.slow_mo_ms = slow_mo_ms
        self.default_timeout_ms = default_timeout_ms

        self._pw: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: Dict[int, BrowserContext] = {}

    async def __aenter__(self) -> "PlaywrightBrowser":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    # ---------------- lifecycle ----------------

    async def start(self) -> None:
        """Launch Playwright and a Chromium browser once."""
        if self._browser is not None:
            return
        pw = await async_playwright().start()
        self._pw = pw
        self._browser = await pw.chromium.launch(headless=self.headless, slow_mo=self.slow_mo_ms)
        logger.debug(f"Browser started (headless={self.headless})")

    async def stop(self) -> None:
        """Close all contexts and stop Playwright."""
        try:
            for ctx in list(self._contexts.values()):
                try:
                    await ctx.close()
                except PwError as e:
                    logger.warning(f"failed to close context: {e}")
            self._contexts.clear()
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._pw is not None:
                await self._pw.stop()
            self._pw = None
            self._browser = None
            logger.debug("Browser closed")

    async def new_capability(self) -> PlaywrightCapability:
        """Create a fresh incognito context + page wrapped as a capability."""
        if self._browser is None:
            raise RuntimeError("Browser not started. Call start() first.")
        ctx = await self._browser.new_context()
        ctx.set_default_timeout(self.default_timeout_ms)
        page = await ctx.new_page()
        cap = PlaywrightCapability(page)
        self._contexts[id(cap)] = ctx
        return cap

    async def close_capability(self, cap: PlaywrightCapability) -> None:
        """Close the page and its owning context."""
        context = self._contexts.pop(id(cap), None)
        try:
            await cap.page.close()
        finally:
            if context is not None:
                await context.close()
