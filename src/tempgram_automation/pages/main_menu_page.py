"""
Main Menu Page Object for the Tempgram landing page and application switcher.
"""

from playwright.async_api import Locator, Page

from .base_page import BasePage


class MainMenuPage(BasePage):
    """Page Object for the Tempgram main menu."""

    def __init__(self, page: Page, base_url: str = "http://localhost:8080"):
        super().__init__(page, base_url)
        self.path = "/"

    # Selectors
    @property
    def main_menu(self) -> Locator:
        """Main menu container shown after sign in."""
        return self.page.locator(
            "[data-testid='main-menu'], .main-menu, nav[aria-label='Main menu']"
        )

    @property
    def menu_button(self) -> Locator:
        """Button opening the application menu."""
        return self.page.locator(
            "[data-testid='main-menu-button'], button[aria-label='Menu'], "
            ".main-menu-toggle"
        )

    @property
    def temp_manager_link(self) -> Locator:
        """Link to the TempManager application."""
        return self.page.locator(
            "[data-testid='temp-manager-link'], a:has-text('TempManager')"
        )

    # Actions
    async def goto(self) -> None:
        await self.navigate_to(self.path)

    async def open_menu(self) -> None:
        """Open the application menu."""
        await self.menu_button.first.click()
        await self.temp_manager_link.first.wait_for(state="visible")

    async def click_on_temp_manager_link(self) -> None:
        await self.temp_manager_link.first.click()
        await self.wait_for_loading_complete()

    # Checks
    async def should_main_menu_page_be_displayed(self) -> bool:
        return await self.is_displayed(self.main_menu)
