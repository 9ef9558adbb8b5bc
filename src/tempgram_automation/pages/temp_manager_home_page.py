"""
TempManager Home Page Object: the transactions grid and the top navigation bar.
"""

import logging
from typing import Optional

from playwright.async_api import Locator, Page

from ..exceptions import PageError
from .base_page import BasePage

logger = logging.getLogger(__name__)


class TempManagerHomePage(BasePage):
    """Page Object for the TempManager transactions home page."""

    def __init__(self, page: Page, base_url: str = "http://localhost:8080",
                 path: str = "/temp-manager/transactions"):
        super().__init__(page, base_url)
        self.path = path

    # Selectors - Transactions grid
    @property
    def transactions_grid(self) -> Locator:
        """Grid listing the transactions."""
        return self.page.locator(
            "[data-testid='transactions-grid'], .transactions-grid, "
            "table.transactions"
        )

    def transaction_id_link(self, transaction_id: str) -> Locator:
        """Link of a transaction in the grid."""
        return self.transactions_grid.locator(
            f"[data-testid='transaction-id-{transaction_id}'], "
            f"a:text-is('{transaction_id}')"
        )

    # Selectors - Top navigation bar
    @property
    def top_unread_message_badge(self) -> Locator:
        """Unread chat messages badge on the top navigation bar."""
        return self.page.locator(
            "[data-testid='top-unread-message-badge'], .top-nav .unread-badge"
        )

    @property
    def top_chat_button(self) -> Locator:
        """Chat button on the top navigation bar."""
        return self.page.locator(
            "[data-testid='top-chat-button'], .top-nav button[aria-label='Chat']"
        )

    @property
    def unread_messages_dropdown(self) -> Locator:
        """Dropdown listing the conversations with unread messages."""
        return self.page.locator(
            "[data-testid='unread-messages-dropdown'], .unread-messages-dropdown"
        )

    @property
    def unread_message_links(self) -> Locator:
        """Entries of the unread messages dropdown."""
        return self.unread_messages_dropdown.locator(
            "[data-testid='unread-message-link'], a"
        )

    # Actions
    async def goto(self) -> None:
        await self.navigate_to(self.path)
        await self.wait_for_loading_complete()

    async def click_on_transaction_id(self, transaction_id: str) -> None:
        """Open a transaction from the grid."""
        link = self.transaction_id_link(transaction_id)
        await link.first.wait_for(state="visible")
        await link.first.click()
        await self.wait_for_loading_complete()

    async def click_on_top_chat_button(self) -> None:
        await self.top_chat_button.first.click()
        await self.unread_messages_dropdown.first.wait_for(state="visible")

    async def click_on_unread_message_link(self, index: int = 0) -> None:
        await self.unread_message_links.nth(index).click()
        await self.wait_for_loading_complete()

    # Getters
    async def get_unread_message_count(self) -> int:
        """Number shown on the unread message badge."""
        text = (await self.top_unread_message_badge.first.inner_text()).strip()
        try:
            return int(text)
        except ValueError as e:
            raise PageError(
                "Unread message badge does not show a number", {"text": text}
            ) from e

    async def get_unread_message_content(self, index: int = 0) -> str:
        """
        Text of an unread message entry.

        The entry renders the transaction, the unread count and the
        conversation title on separate lines.
        """
        text = await self.unread_message_links.nth(index).inner_text()
        logger.debug("Unread message entry %d: %r", index, text)
        return text.strip()

    # Checks
    async def should_temp_manager_home_page_be_displayed(self) -> bool:
        return await self.is_displayed(self.transactions_grid)

    async def should_top_unread_message_badge_be_visible(
        self, timeout: Optional[int] = None
    ) -> bool:
        """Wait for the unread badge, which appears once the chat service pushes it."""
        return await self.is_displayed(self.top_unread_message_badge, timeout=timeout)
