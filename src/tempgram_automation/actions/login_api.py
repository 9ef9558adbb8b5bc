"""
Login and navigation actions backed by the Tempgram API.

Signing in through the API instead of the login form keeps scenarios
focused on the feature under test. Requests go through the page's
APIRequestContext, so the session cookies they receive are shared with
the browser context.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from playwright.async_api import Page

from ..config import EnvProfile
from ..exceptions import LoginError, PageError
from ..pages import MainMenuPage, TempManagerHomePage

logger = logging.getLogger(__name__)


def safe_file_name(name: str) -> str:
    """Sanitize a test name for use as a file name."""
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in name)


class LoginApiActions:
    """API sign-in plus the navigation that follows it."""

    def __init__(
        self,
        page: Page,
        env_profile: EnvProfile,
        main_menu_page: MainMenuPage,
        home_page: TempManagerHomePage,
    ) -> None:
        self.page = page
        self.env_profile = env_profile
        self.main_menu_page = main_menu_page
        self.home_page = home_page
        self._token: Optional[str] = None

    @property
    def headers(self) -> Dict[str, str]:
        """Get request headers with authentication."""
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an API request using Playwright's request context.

        Returns:
            The decoded JSON object, or a dict with ``error``, ``status`` and
            ``message`` keys when the API answered with an error status.
            A JSON body that is not an object comes back under ``body``.
        """
        url = f"{self.env_profile.api_url}/{endpoint.lstrip('/')}"

        response = await self.page.request.fetch(
            url,
            method=method,
            headers=self.headers,
            data=data,
        )

        if not response.ok:
            return {
                "error": True,
                "status": response.status,
                "message": await response.text(),
            }

        try:
            body = await response.json()
        except ValueError:
            # Empty or non-JSON success body
            return {"status": response.status}

        if not isinstance(body, dict):
            return {"status": response.status, "body": body}
        return body

    async def sign_in(self, email: str) -> Dict[str, Any]:
        """
        Sign in a scenario user.

        Raises:
            LoginError: If the API rejects the credentials.
        """
        logger.info("Signing in as %s", email)
        self._token = None
        result = await self.request(
            "POST",
            self.env_profile.login_endpoint,
            {"email": email, "password": self.env_profile.user_password},
        )
        if result.get("error"):
            raise LoginError(
                email, result.get("status"), {"message": result.get("message")}
            )

        token = result.get("token")
        if token:
            self._token = token
        return result

    async def sign_in_and_navigate_to_temp_manager_home_page(self, email: str) -> None:
        await self.sign_in(email)
        await self.home_page.goto()

    async def sign_in_and_verify_main_menu_page_is_displayed(self, email: str) -> None:
        """
        Sign in and land on the main menu.

        Raises:
            PageError: If the main menu does not show up after signing in.
        """
        await self.sign_in(email)
        await self.main_menu_page.goto()
        if not await self.main_menu_page.should_main_menu_page_be_displayed():
            raise PageError(
                f"Main menu not displayed after signing in as '{email}'",
                {"url": self.page.url},
            )

    async def go_to_url(self, url: str) -> None:
        logger.debug("Navigating to %s", url)
        await self.page.goto(url)
        await self.home_page.wait_for_loading_complete()

    def get_current_url(self) -> str:
        return self.page.url

    async def get_screenshot(self, name: Optional[str] = None) -> Optional[Path]:
        """
        Save a full page screenshot under the results directory.

        Returns:
            Path of the screenshot, or None when screenshots are disabled.
        """
        if not self.env_profile.screenshots_enabled:
            return None

        directory = self.env_profile.screenshots_dir
        directory.mkdir(parents=True, exist_ok=True)

        stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        file_name = f"{stamp}_{safe_file_name(name)}.png" if name else f"{stamp}.png"
        path = directory / file_name

        await self.home_page.take_screenshot(str(path))
        logger.debug("Saved screenshot %s", path)
        return path
