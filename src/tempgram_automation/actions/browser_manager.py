"""
Browser setup for scenarios.

BrowserConfig converts the browser section of the environment profile
into Playwright launch and context options; BrowserManager uses it to
start the browser and open the page a scenario drives.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright

from ..config import EnvProfile

logger = logging.getLogger(__name__)


@dataclass
class BrowserConfig:
    """Configuration for a browser instance."""

    # Browser name: chromium, firefox, webkit
    name: str = "chromium"

    # Browser channel: chrome, chrome-beta, msedge, msedge-beta, msedge-dev
    channel: Optional[str] = None

    headless: bool = True

    # Slow down operations by specified milliseconds
    slow_mo: int = 0

    viewport_width: int = 1600
    viewport_height: int = 900
    locale: str = "en-GB"

    # Dates in the chat are compared against UTC
    timezone_id: str = "UTC"

    ignore_https_errors: bool = False
    base_url: Optional[str] = None

    @classmethod
    def from_env_profile(cls, env_profile: EnvProfile) -> "BrowserConfig":
        settings = env_profile.browser
        return cls(
            name=settings.name,
            channel=settings.channel,
            headless=settings.headless,
            slow_mo=settings.slow_mo,
            viewport_width=settings.viewport_width,
            viewport_height=settings.viewport_height,
            locale=settings.locale,
            timezone_id=settings.timezone_id,
            ignore_https_errors=settings.ignore_https_errors,
            base_url=env_profile.base_url,
        )

    def to_launch_options(self) -> Dict[str, Any]:
        """Convert to Playwright browser launch options."""
        options: Dict[str, Any] = {
            "headless": self.headless,
            "slow_mo": self.slow_mo,
        }
        if self.channel:
            options["channel"] = self.channel
        return options

    def to_context_options(self) -> Dict[str, Any]:
        """Convert to Playwright browser context options."""
        options: Dict[str, Any] = {
            "viewport": {
                "width": self.viewport_width,
                "height": self.viewport_height,
            },
            "locale": self.locale,
            "timezone_id": self.timezone_id,
            "ignore_https_errors": self.ignore_https_errors,
            "accept_downloads": True,
        }
        if self.base_url:
            options["base_url"] = self.base_url
        return options


class BrowserManager:
    """Starts browsers and pages configured from an environment profile."""

    def __init__(self, env_profile: EnvProfile) -> None:
        self.env_profile = env_profile
        self.config = BrowserConfig.from_env_profile(env_profile)

    async def setup_browser(self, playwright: Playwright) -> Browser:
        """Launch the configured browser engine."""
        browser_type = getattr(playwright, self.config.name)
        logger.info(
            "Launching %s (headless=%s)", self.config.name, self.config.headless
        )
        return await browser_type.launch(**self.config.to_launch_options())

    async def setup_new_page(self, browser: Browser) -> tuple[BrowserContext, Page]:
        """
        Open an isolated context and a page in it.

        Returns:
            The new context and its page, with the profile timeouts applied.
        """
        context = await browser.new_context(**self.config.to_context_options())
        context.set_default_timeout(self.env_profile.browser.default_timeout_ms)
        context.set_default_navigation_timeout(
            self.env_profile.browser.navigation_timeout_ms
        )

        page = await context.new_page()
        return context, page
