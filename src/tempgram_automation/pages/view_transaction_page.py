"""
View Transaction Page Object, including the transaction preview sidebar.
"""

from playwright.async_api import Locator

from .base_page import BasePage


class ViewTransactionPage(BasePage):
    """Page Object for a single transaction."""

    # Selectors
    @property
    def view_transaction_container(self) -> Locator:
        return self.page.locator(
            "[data-testid='view-transaction'], .view-transaction"
        )

    @property
    def transaction_id_label(self) -> Locator:
        return self.view_transaction_container.locator(
            "[data-testid='transaction-id'], .transaction-id"
        )

    @property
    def maximize_view_button(self) -> Locator:
        return self.page.locator(
            "[data-testid='maximize-view'], button[aria-label='Maximize']"
        )

    @property
    def chat_icon(self) -> Locator:
        """Floating chat icon at the bottom right of the transaction."""
        return self.page.locator(
            "[data-testid='chat-icon'], .chat-fab, button[aria-label='Chat']"
        )

    @property
    def conversations_modal(self) -> Locator:
        return self.page.locator(
            "[data-testid='conversations-modal'], .conversations-modal"
        )

    @property
    def preview_sidebar(self) -> Locator:
        """Sidebar preview opened from a notification email link."""
        return self.page.locator(
            "[data-testid='transaction-preview-sidebar'], .transaction-preview-sidebar"
        )

    @property
    def preview_transaction_id_label(self) -> Locator:
        return self.preview_sidebar.locator(
            "[data-testid='transaction-id'], .transaction-id"
        )

    # Actions
    async def click_on_maximize_view(self) -> None:
        await self.maximize_view_button.first.click()

    async def click_on_chat_icon(self) -> None:
        await self.chat_icon.first.click()

    # Getters
    async def get_transaction_id(self, is_preview: bool = False) -> str:
        """Transaction id shown on the page, or on the preview sidebar."""
        label = self.preview_transaction_id_label if is_preview else self.transaction_id_label
        text = await label.first.inner_text()
        return text.strip().lstrip("#").strip()

    # Checks
    async def wait_for_view_transaction_page_to_be_displayed(
        self, transaction_id: str
    ) -> bool:
        """Wait for the page of the given transaction."""
        if not await self.is_displayed(self.view_transaction_container):
            return False
        return await self.get_transaction_id() == transaction_id

    async def should_chat_icon_be_visible(self) -> bool:
        return await self.is_displayed(self.chat_icon)

    async def should_conversations_modal_be_displayed(self) -> bool:
        return await self.is_displayed(self.conversations_modal)

    async def should_transaction_preview_sidebar_be_displayed(self) -> bool:
        return await self.is_displayed(self.preview_sidebar)
