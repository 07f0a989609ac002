"""
定义项目级异常类型，统一页面对象层的错误语义与捕获边界。
- PomError: 所有自定义异常的基类
- DriverError: 驱动层透传错误（传输/网络/浏览器崩溃等）
- WaitError: 等待元素状态超时
- NavigationError: 页面导航失败（超时 / 驱动故障 / 落在意外的地址）
- ElementNotReady: 交互前元素未就绪（携带 selector 与耗时）
- NotNavigated / PageReleasedError: 页面对象生命周期契约被违反
- DriverInUseError: 同一个驱动句柄被两个页面对象同时持有
- RegistryError: 页面注册表数据非法
"""
# @file purpose: Define error taxonomy for pom-kit.

from __future__ import annotations

from enum import Enum
from typing import Any


class PomError(Exception):
    """
    Base class for all custom errors in pom-kit.
    统一封装上下文，便于测试报告定位到具体页面/动作/元素。
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        selector: str | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.operation: str | None = operation
        self.selector: str | None = selector
        self.url: str | None = url
        self.details: dict[str, Any] = details or {}
        self.cause: BaseException | None = cause

    def __str__(self) -> str:
        head = super().__str__()
        parts = [f"[{self.operation}] {head}" if self.operation else head]
        if self.selector:
            parts.append(f"selector={self.selector}")
        if self.url:
            parts.append(f"url={self.url}")
        if self.details:
            kv = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"details={{ {kv} }}")
        return " | ".join(parts)


class DriverError(PomError):
    """Opaque passthrough of a failure reported by the driver capability."""


class WaitFailure(str, Enum):
    TIMEOUT = "timeout"


class WaitError(PomError):
    """Raised when an element (or a navigation) does not reach a state in time."""

    def __init__(
        self,
        message: str,
        *,
        state: str | None = None,
        timeout_ms: int | None = None,
        kind: WaitFailure = WaitFailure.TIMEOUT,
        **context: Any,
    ) -> None:
        super().__init__(message, **context)
        self.kind = kind
        self.state = state
        self.timeout_ms = timeout_ms


class NavigationFailure(str, Enum):
    TIMEOUT = "timeout"
    DRIVER_FAILURE = "driver_failure"
    UNEXPECTED_LOCATION = "unexpected_location"


class NavigationError(PomError):
    """Raised by navigate() when the target document could not be loaded."""

    def __init__(
        self,
        kind: NavigationFailure,
        message: str,
        *,
        url: str,
        timeout_ms: int | None = None,
        actual_url: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        details: dict[str, Any] = {"kind": kind.value}
        if timeout_ms is not None:
            details["timeout_ms"] = timeout_ms
        if actual_url is not None:
            details["actual_url"] = actual_url
        super().__init__(message, operation="navigate", url=url, details=details, cause=cause)
        self.kind = kind
        self.timeout_ms = timeout_ms
        self.actual_url = actual_url


class ElementNotReady(PomError):
    """An element did not become present/visible before an interaction."""

    def __init__(
        self,
        selector: str,
        elapsed: float,
        *,
        timeout_ms: int | None = None,
        operation: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        details: dict[str, Any] = {"elapsed": round(elapsed, 3)}
        if timeout_ms is not None:
            details["timeout_ms"] = timeout_ms
        super().__init__(
            "element not ready",
            operation=operation,
            selector=selector,
            details=details,
            cause=cause,
        )
        self.elapsed = elapsed
        self.timeout_ms = timeout_ms


class NotNavigated(PomError):
    """An action was attempted on a page object before navigate() succeeded."""

    def __init__(self, page: str, operation: str) -> None:
        super().__init__(
            f"{page} has not been navigated; call navigate() first",
            operation=operation,
            details={"page": page},
        )
        self.page = page


class PageReleasedError(PomError):
    """Any operation on a page object after release()."""

    def __init__(self, page: str, operation: str) -> None:
        super().__init__(
            f"{page} has been released",
            operation=operation,
            details={"page": page},
        )
        self.page = page


class DriverInUseError(PomError):
    """A driver handle is already owned by another live page object."""


class RegistryError(PomError):
    """Raised when the page registry table or a URL template is invalid."""
