"""
Login page object.

Domain actions: authenticate, read the validation message, check the
logged-in indicator. Selectors are plain CSS; real applications should prefer
stable data-testid attributes.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from ..core.registry import PageName
from .base import BasePage, page_action


class LoginPage(BasePage):
    """Login screen (registry entry `login`)."""

    PAGE = PageName.LOGIN

    USERNAME_INPUT = "#username"
    PASSWORD_INPUT = "#password"
    LOGIN_BUTTON = "#login-button"
    ERROR_MESSAGE = ".error-message"
    LOGGED_IN_INDICATOR = ".user-dashboard"

    @page_action
    async def authenticate(self, username: str, password: str) -> None:
        """Fill the credentials and submit. Raises ElementNotReady if the form is missing."""
        logger.info(f"Login (username={username})")
        await self._fill(self.USERNAME_INPUT, username)
        await self._fill(self.PASSWORD_INPUT, password)
        await self._click(self.LOGIN_BUTTON)

    @page_action
    async def error_message(self) -> Optional[str]:
        """Validation message text, or None when no message is shown."""
        return await self._probe_text(self.ERROR_MESSAGE)

    @page_action
    async def is_logged_in(self) -> bool:
        return await self._probe(self.LOGGED_IN_INDICATOR)
