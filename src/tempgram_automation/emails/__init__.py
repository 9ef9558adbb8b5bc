"""Notification email access and parsing."""

from .manager import EmailManager
from .parser import (
    ChatNotificationMessage,
    EmailParser,
    ParsedEmail,
    extract_chat_messages,
    extract_text,
    extract_transaction_link,
)

__all__ = [
    "EmailManager",
    "EmailParser",
    "ParsedEmail",
    "ChatNotificationMessage",
    "extract_text",
    "extract_chat_messages",
    "extract_transaction_link",
]
