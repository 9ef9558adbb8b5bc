"""
Conversations Modal Page Object for the transaction chat.

The modal has two views: the list of conversations of the transaction
(with the form to start a new one) and the contents of a single
conversation, where messages and attachments are sent.
"""

import logging
import re
from dataclasses import dataclass, field

from playwright.async_api import Locator, expect

from ..exceptions import PageError
from .base_page import BasePage

logger = logging.getLogger(__name__)

# Dialogs stamp messages as '2026/10/19 14:05'
DIALOG_TIMESTAMP_PATTERN = re.compile(r"^\s*(\d{4}/\d{2}/\d{2})\s+(\d{1,2}:\d{2})\s*$")

ATTACHMENT_UPLOAD_TIMEOUT = 60000


@dataclass
class ChatMessageDetails:
    """A message dialog as rendered in the conversation contents."""

    name: str
    date: str
    time: str
    text: str
    attachments: list[str] = field(default_factory=list)


def split_dialog_timestamp(timestamp: str) -> tuple[str, str]:
    """
    Split a dialog timestamp into its date and time.

    Raises:
        PageError: If the timestamp is not in 'YYYY/MM/DD HH:MM' form.
    """
    match = DIALOG_TIMESTAMP_PATTERN.match(timestamp)
    if not match:
        raise PageError("Unexpected message timestamp", {"timestamp": timestamp})
    return match.group(1), match.group(2)


class ConversationsModal(BasePage):
    """Page Object for the chat conversations modal."""

    # Selectors - Conversations list
    @property
    def container(self) -> Locator:
        return self.page.locator(
            "[data-testid='conversations-modal'], .conversations-modal"
        )

    @property
    def new_conversation_button(self) -> Locator:
        return self.container.locator(
            "[data-testid='new-conversation'], button:has-text('New Conversation')"
        )

    @property
    def conversation_titles(self) -> Locator:
        """Titles of the conversation cards."""
        return self.container.locator(
            "[data-testid='conversation-title'], .conversation-card .title"
        )

    def conversation_title(self, title: str) -> Locator:
        return self.conversation_titles.filter(has_text=title)

    # Selectors - New conversation form
    @property
    def new_conversation_content_box(self) -> Locator:
        return self.container.locator(
            "[data-testid='new-conversation-box'], .new-conversation"
        )

    @property
    def conversation_title_input(self) -> Locator:
        return self.new_conversation_content_box.locator(
            "[data-testid='conversation-title-input'], input[name='title']"
        )

    @property
    def participant_input(self) -> Locator:
        return self.new_conversation_content_box.locator(
            "[data-testid='participant-input'], input[name='participant']"
        )

    @property
    def add_participant_button(self) -> Locator:
        return self.new_conversation_content_box.locator(
            "[data-testid='add-participant'], button:has-text('Add')"
        )

    @property
    def added_participants(self) -> Locator:
        return self.new_conversation_content_box.locator(
            "[data-testid='added-participant'], .participant-chip"
        )

    @property
    def start_conversation_button(self) -> Locator:
        return self.new_conversation_content_box.locator(
            "[data-testid='start-conversation'], button:has-text('Start Conversation')"
        )

    # Selectors - Conversation contents
    @property
    def conversation_contents(self) -> Locator:
        return self.container.locator(
            "[data-testid='conversation-contents'], .conversation-contents"
        )

    @property
    def back_button(self) -> Locator:
        return self.container.locator(
            "[data-testid='conversation-back'], button[aria-label='Back']"
        )

    @property
    def message_input(self) -> Locator:
        return self.conversation_contents.locator(
            "[data-testid='message-input'], textarea"
        )

    @property
    def attachment_input(self) -> Locator:
        return self.conversation_contents.locator("input[type='file']")

    @property
    def attachment_upload_progress(self) -> Locator:
        return self.conversation_contents.locator(
            "[data-testid='attachment-uploading'], .attachment-uploading"
        )

    @property
    def send_message_button(self) -> Locator:
        return self.conversation_contents.locator(
            "[data-testid='send-message'], button[aria-label='Send']"
        )

    @property
    def dialogs(self) -> Locator:
        """Message dialogs of the open conversation."""
        return self.conversation_contents.locator(
            "[data-testid='chat-dialog'], .chat-dialog"
        )

    # Actions - Conversations list
    async def click_on_new_conversation(self) -> None:
        await self.new_conversation_button.first.click()

    async def click_on_conversation_title(self, title: str) -> None:
        await self.conversation_title(title).first.click()

    async def click_on_back_button(self) -> None:
        await self.back_button.first.click()
        await self.conversation_titles.first.wait_for(state="visible")

    # Actions - New conversation form
    async def enter_conversation_title(self, title: str) -> None:
        await self.fill_input(self.conversation_title_input, title)

    async def enter_new_participant(self, email: str) -> None:
        await self.fill_input(self.participant_input, email)

    async def click_on_add_participant_button(self) -> None:
        """Add the typed participant and wait for it to show up in the form."""
        before = await self.added_participants.count()
        await self.add_participant_button.first.click()
        await expect(self.added_participants).to_have_count(before + 1)

    async def click_on_start_conversation_button(self) -> None:
        await self.start_conversation_button.first.click()
        await self.wait_for_loading_complete()

    # Actions - Conversation contents
    async def type_message(self, message: str) -> None:
        await self.fill_input(self.message_input, message)

    async def upload_attachment(self, file_path: str) -> None:
        logger.debug("Attaching %s", file_path)
        await self.attachment_input.set_input_files(file_path)

    async def click_on_send_message_button(self, is_attachment: bool = False) -> None:
        """
        Send the typed message and wait for its dialog.

        Args:
            is_attachment: The message carries an attachment, so wait for
                the upload to finish as well.
        """
        before = await self.dialogs.count()
        await self.send_message_button.first.click()

        if is_attachment:
            await self.attachment_upload_progress.first.wait_for(
                state="hidden", timeout=ATTACHMENT_UPLOAD_TIMEOUT
            )
        await expect(self.dialogs).to_have_count(before + 1)

    # Getters
    async def get_added_participants_list(self) -> list[str]:
        return [text.strip() for text in await self.added_participants.all_inner_texts()]

    async def get_number_of_dialogs_in_conversation_contents_modal(self) -> int:
        await self.dialogs.first.wait_for(state="visible")
        return await self.dialogs.count()

    async def get_message_details_with_index(self, index: int) -> ChatMessageDetails:
        """Read the sender, timestamp, text and attachments of a dialog."""
        dialog = self.dialogs.nth(index)
        await dialog.wait_for(state="visible")

        name = await dialog.locator(
            "[data-testid='dialog-sender'], .sender-name"
        ).first.inner_text()
        timestamp = await dialog.locator(
            "[data-testid='dialog-timestamp'], .message-timestamp"
        ).first.inner_text()
        text = await dialog.locator(
            "[data-testid='dialog-text'], .message-text"
        ).first.inner_text()
        attachments = await dialog.locator(
            "[data-testid='dialog-attachment'], .attachment-name"
        ).all_inner_texts()

        date, time = split_dialog_timestamp(timestamp)
        return ChatMessageDetails(
            name=name.strip(),
            date=date,
            time=time,
            text=text.strip(),
            attachments=[attachment.strip() for attachment in attachments],
        )

    # Checks
    async def should_new_conversation_content_box_be_displayed(self) -> bool:
        return await self.is_displayed(self.new_conversation_content_box)

    async def should_start_conversation_button_enabled_or_disabled(
        self, is_enabled: bool
    ) -> bool:
        """Check the start button reaches the expected enabled state."""
        button = self.start_conversation_button.first
        try:
            if is_enabled:
                await expect(button).to_be_enabled()
            else:
                await expect(button).to_be_disabled()
        except AssertionError:
            return False
        return True

    async def should_conversation_title_present_in_conversations_list(
        self, title: str
    ) -> bool:
        return await self.is_displayed(self.conversation_title(title))

    async def should_conversation_contents_modal_be_displayed(self) -> bool:
        return await self.is_displayed(self.conversation_contents)
