"""
Base Page Object class with common functionality for all pages.
"""

import logging
from typing import Optional

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

logger = logging.getLogger(__name__)

# Visibility probes give the UI this long unless told otherwise
DEFAULT_PROBE_TIMEOUT = 15000


class BasePage:
    """Base class for all Page Objects with common functionality."""

    def __init__(self, page: Page, base_url: str = "http://localhost:8080"):
        self.page = page
        self.base_url = base_url

    # Common selectors
    @property
    def loading_indicator(self) -> Locator:
        """Loading spinner or indicator."""
        return self.page.locator(
            ".loading, .spinner, [data-testid='loading'], [role='progressbar']"
        )

    # Common navigation methods
    async def navigate_to(self, path: str = "") -> None:
        """Navigate to a specific path."""
        url = f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url
        await self.page.goto(url)

    async def wait_for_loading_complete(self, timeout: int = 30000) -> None:
        """Wait for loading indicator to disappear."""
        if await self.loading_indicator.count() == 0:
            return
        await self.loading_indicator.first.wait_for(state="hidden", timeout=timeout)

    def get_current_url(self) -> str:
        return self.page.url

    # Common interaction methods
    async def fill_input(
        self, locator: Locator, value: str, clear_first: bool = True
    ) -> None:
        """Fill an input field."""
        if clear_first:
            await locator.clear()
        await locator.fill(value)

    # Visibility probes
    async def is_displayed(
        self, locator: Locator, timeout: Optional[int] = None
    ) -> bool:
        """
        Wait for an element to become visible.

        Returns:
            True if the element became visible before the timeout, else False.
        """
        try:
            await locator.first.wait_for(
                state="visible",
                timeout=DEFAULT_PROBE_TIMEOUT if timeout is None else timeout,
            )
        except PlaywrightTimeoutError:
            logger.debug("Element not visible: %s", locator)
            return False
        return True

    async def is_hidden(
        self, locator: Locator, timeout: Optional[int] = None
    ) -> bool:
        """Wait for an element to disappear, returning False if it stays."""
        try:
            await locator.first.wait_for(
                state="hidden",
                timeout=DEFAULT_PROBE_TIMEOUT if timeout is None else timeout,
            )
        except PlaywrightTimeoutError:
            return False
        return True

    # Screenshot helper
    async def take_screenshot(self, path: str, full_page: bool = True) -> bytes:
        """Take a screenshot of the page."""
        return await self.page.screenshot(path=path, full_page=full_page)
