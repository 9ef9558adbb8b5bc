"""
Scenario data sets.

A data set is a JSON document describing the accounts, the transaction
and the conversations a scenario works with. The models below validate
it on load so a typo in a data file fails before the browser starts.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from .exceptions import DataSetError

logger = logging.getLogger(__name__)


class ScenarioUser(BaseModel):
    """An account that signs in during the scenario."""

    email: str
    full_name: str = ""
    company: str = ""
    company_public_name: str = ""

    @property
    def sender_name(self) -> str:
        """Sender label shown on chat dialogs inside the application."""
        return f"{self.full_name} ({self.company})"

    @property
    def public_sender_name(self) -> str:
        """Sender label used in notification emails."""
        return f"{self.full_name} ({self.company_public_name})"


class Participant(BaseModel):
    """A conversation participant."""

    email: str
    name: str = ""
    company: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.company})"


class Attachment(BaseModel):
    """A file uploaded with a chat message."""

    path: str
    file_name: str
    base_dir: Optional[Path] = Field(default=None, exclude=True)

    @property
    def full_path(self) -> Path:
        """Absolute path of the file, relative paths resolve against the data set."""
        path = Path(self.path) / self.file_name
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path


class Messages(BaseModel):
    content: list[str] = Field(min_length=1)
    attachment: Optional[Attachment] = None


class SingleParticipantConversation(BaseModel):
    title: str
    participant: Participant
    messages: Messages


class MultiParticipantConversation(BaseModel):
    title: str
    participant1: Participant
    participant2: Participant
    messages: Messages


class ChatDataSet(BaseModel):
    """Data set of the chat-with-registered-users scenario."""

    transaction_id: str
    transaction_number: str
    user: ScenarioUser
    user2: ScenarioUser
    conversation1: SingleParticipantConversation
    conversation2: MultiParticipantConversation

    def notification_subject(self, conversation_title: str) -> str:
        """Subject prefix of the notification email for a conversation."""
        return (
            f"New message(s): {self.user.company_public_name} "
            f"#{self.transaction_number}: {conversation_title}"
        )

    @property
    def new_message_notification_text(self) -> str:
        """Opening paragraph of every chat notification email."""
        return (
            f"You have received new messages for transaction "
            f"#{self.transaction_number} - {self.user.company_public_name} in Tempgram"
        )


def load_data_set(path: str | Path) -> ChatDataSet:
    """
    Load and validate a chat scenario data set.

    Args:
        path: Path to the JSON data set.

    Returns:
        Validated ChatDataSet with attachment paths anchored at the data set's folder.

    Raises:
        DataSetError: If the file is missing, is not JSON or does not validate.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise DataSetError(f"Data set not found: {path}") from e
    except json.JSONDecodeError as e:
        raise DataSetError(
            f"Data set is not valid JSON: {path}", {"error": str(e)}
        ) from e

    try:
        data_set = ChatDataSet.model_validate(raw)
    except ValidationError as e:
        raise DataSetError(
            f"Data set failed validation: {path}",
            {"errors": e.errors(include_url=False)},
        ) from e

    attachment = data_set.conversation2.messages.attachment
    if attachment is not None:
        attachment.base_dir = path.parent

    logger.debug(
        "Loaded data set %s for transaction %s", path.name, data_set.transaction_id
    )
    return data_set
