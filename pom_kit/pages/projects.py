"""
Project list / project detail page objects.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.registry import PageName
from ..core.settings import Settings
from ..io.driver import DriverCapability
from .base import BasePage, UrlMatch, page_action


def _row(project_id: str) -> str:
    return f'[data-project-id="{project_id}"]'


class ProjectListPage(BasePage):
    PAGE = PageName.PROJECT_LIST

    SEARCH_INPUT = "#project-search"
    PROJECT_TITLE = ".project-title"

    @page_action
    async def search(self, query: str) -> None:
        await self._fill(self.SEARCH_INPUT, query)
        await self._press(self.SEARCH_INPUT, "Enter")

    @page_action
    async def has_project(self, project_id: str) -> bool:
        return await self._probe(_row(project_id))

    @page_action
    async def project_title(self, project_id: str) -> Optional[str]:
        return await self._probe_text(f"{_row(project_id)} {self.PROJECT_TITLE}")

    @page_action
    async def open_project(self, project_id: str) -> None:
        """
        Click the project row. The browser ends up on the detail page; release
        this object before wrapping the driver in a ProjectDetailPage.
        """
        await self._click(_row(project_id))


class ProjectDetailPage(BasePage):
    """Detail screen; matches any sub-path of /projects/<id> (tabs, anchors)."""

    PAGE = PageName.PROJECT_DETAIL
    URL_MATCH = UrlMatch.PREFIX

    HEADING = "h1.project-name"
    DESCRIPTION = ".project-description"
    ARCHIVED_BADGE = ".badge-archived"

    def __init__(
        self,
        driver: DriverCapability,
        project_id: str,
        *,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.project_id = project_id
        super().__init__(driver, base_url=base_url, settings=settings)

    def url_params(self) -> Dict[str, Any]:
        return {"project_id": self.project_id}

    @page_action
    async def title(self) -> str:
        """Heading text; the heading must be ready. An empty heading reads as ''."""
        return await self._text(self.HEADING) or ""

    @page_action
    async def description(self) -> Optional[str]:
        return await self._probe_text(self.DESCRIPTION)

    @page_action
    async def is_archived(self) -> bool:
        return await self._probe(self.ARCHIVED_BADGE)
