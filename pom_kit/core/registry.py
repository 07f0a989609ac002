"""
页面注册表与元数据:
- PageName: 封闭的页面名称集合（枚举），只能取注册表中出现的名字
- PageDescriptor: 不可变的页面描述（名称 + 标题 + URL 模板）
- PageRegistry: 进程启动时由固定表构建，之后只读；构建时做穷尽校验
"""
# @file purpose: Provide the immutable page registry and page metadata.

from __future__ import annotations

import string
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import RegistryError

# 注册表数据版本：修改下表需要重新发布，而不是运行时修改
REGISTRY_VERSION = 1


class PageName(str, Enum):
    LOGIN = "login"
    PROJECT_LIST = "projectList"
    PROJECT_DETAIL = "projectDetail"


class PageDescriptor(BaseModel):
    """One known page: identity is `name`."""

    model_config = ConfigDict(frozen=True)

    name: PageName
    title: str
    url_template: str

    @field_validator("url_template")
    @classmethod
    def _must_be_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("url_template must start with '/'")
        return v

    @property
    def placeholders(self) -> tuple[str, ...]:
        """Template field names, e.g. ('project_id',) for /projects/{project_id}."""
        return tuple(
            field for _, field, _, _ in string.Formatter().parse(self.url_template) if field
        )

    def url(self, base_url: str = "", **params: Any) -> str:
        """Render the template and prefix it with base_url."""
        try:
            path = self.url_template.format(**params)
        except KeyError as e:
            raise RegistryError(
                f"missing url parameter {e.args[0]!r}",
                operation="render_url",
                details={"page": self.name.value, "template": self.url_template},
            ) from e
        return f"{base_url.rstrip('/')}{path}"


# 固定页面表（标题/模板），与 PageName 一一对应
_PAGE_TABLE: tuple[PageDescriptor, ...] = (
    PageDescriptor(name=PageName.LOGIN, title="Login", url_template="/login"),
    PageDescriptor(name=PageName.PROJECT_LIST, title="Project List", url_template="/projects"),
    PageDescriptor(
        name=PageName.PROJECT_DETAIL,
        title="Project Detail",
        url_template="/projects/{project_id}",
    ),
)


class PageRegistry:
    """Read-only catalog of page descriptors, keyed by PageName."""

    def __init__(self, table: Iterable[PageDescriptor]) -> None:
        entries: dict[PageName, PageDescriptor] = {}
        for desc in table:
            if desc.name in entries:
                raise RegistryError(
                    f"duplicate page name: {desc.name.value}", operation="build_registry"
                )
            entries[desc.name] = desc

        missing = [n.value for n in PageName if n not in entries]
        if missing:
            raise RegistryError(
                "registry table is not exhaustive",
                operation="build_registry",
                details={"missing": missing},
            )
        self._entries: Mapping[PageName, PageDescriptor] = MappingProxyType(entries)

    def resolve(self, name: PageName) -> PageDescriptor:
        return self._entries[name]

    def all_names(self) -> tuple[PageName, ...]:
        return tuple(self._entries)

    def descriptors(self) -> tuple[PageDescriptor, ...]:
        return tuple(self._entries.values())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[PageDescriptor]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


REGISTRY = PageRegistry(_PAGE_TABLE)


def resolve(name: PageName) -> PageDescriptor:
    return REGISTRY.resolve(name)


def all_names() -> tuple[PageName, ...]:
    return REGISTRY.all_names()
