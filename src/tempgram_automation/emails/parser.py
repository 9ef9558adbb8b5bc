"""
Notification email parser.

This module turns raw RFC 822 messages fetched from the test mailboxes
into ParsedEmail objects, and extracts the pieces of a Tempgram chat
notification the scenarios assert on: visible text, the chat messages
quoted in the digest and the link back to the transaction.
"""

import email
import email.header
import email.utils
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from email.message import Message
from typing import Optional

from bs4 import BeautifulSoup

from ..exceptions import EmailParseError

logger = logging.getLogger(__name__)

# '19 October 2026 at 14:05 UTC'
MESSAGE_TIMESTAMP_PATTERN = re.compile(
    r"^\d{1,2}\s+[A-Z][a-z]+\s+\d{4}\s+at\s+\d{1,2}:\d{2}\s+UTC$"
)

TRANSACTION_LINK_PATTERN = re.compile(
    r"https://[^\s\"'<>]+/transactions/[^\s\"'<>]+/verify[^\s\"'<>]*",
    re.IGNORECASE,
)

# Lines that end the quoted messages of a digest, along with a bare
# transaction link line
FOOTER_PREFIXES = (
    "go to transaction",
    "view transaction",
    "reply in tempgram",
    "you are receiving this",
)


@dataclass
class ParsedEmail:
    """Represents a parsed notification email."""

    uid: str = ""
    message_id: str = ""
    from_address: str = ""
    to_addresses: list[str] = field(default_factory=list)
    subject: str = ""
    date: Optional[datetime] = None
    body_text: Optional[str] = None
    body_html: Optional[str] = None
    attachment_names: list[str] = field(default_factory=list)


@dataclass
class ChatNotificationMessage:
    """A chat message as quoted in a notification email."""

    sender_name: str
    date_and_time: str
    message: str


class EmailParser:
    """
    Parser for raw email messages.

    Handles MIME multipart messages and the usual transfer encodings
    (quoted-printable, base64), keeping the first text/plain and
    text/html parts as the body.
    """

    def parse(self, raw_message: bytes | str, uid: str = "") -> ParsedEmail:
        """
        Parse a raw email message.

        Args:
            raw_message: The raw email message as bytes or string.
            uid: IMAP UID the message was fetched with.

        Returns:
            ParsedEmail object containing the extracted data.

        Raises:
            EmailParseError: If the message cannot be parsed.
        """
        if isinstance(raw_message, str):
            raw_bytes = raw_message.encode("utf-8", errors="replace")
        else:
            raw_bytes = raw_message

        try:
            msg = email.message_from_bytes(raw_bytes)
        except (TypeError, ValueError) as e:
            raise EmailParseError(
                f"Failed to parse email message: {e}", {"uid": uid}
            ) from e

        parsed = ParsedEmail(uid=uid)
        self._extract_headers(msg, parsed)
        self._extract_content(msg, parsed)

        logger.debug(
            "Parsed email uid=%s subject=%r attachments=%d",
            uid,
            parsed.subject,
            len(parsed.attachment_names),
        )
        return parsed

    def _extract_headers(self, msg: Message, parsed: ParsedEmail) -> None:
        parsed.message_id = self._decode_header(msg.get("Message-ID", ""))
        parsed.from_address = email.utils.parseaddr(
            self._decode_header(msg.get("From", ""))
        )[1].lower()
        parsed.to_addresses = [
            addr.lower()
            for _, addr in email.utils.getaddresses(
                [self._decode_header(msg.get("To", ""))]
            )
            if addr
        ]
        parsed.subject = self._decode_header(msg.get("Subject", ""))

        date_header = msg.get("Date", "")
        if date_header:
            try:
                parsed.date = email.utils.parsedate_to_datetime(date_header)
            except (TypeError, ValueError):
                logger.warning("Failed to parse date: %s", date_header)

    def _extract_content(self, msg: Message, parsed: ParsedEmail) -> None:
        for part in msg.walk():
            # Skip the container parts
            if part.is_multipart():
                continue

            content_type = part.get_content_type()
            disposition = part.get_content_disposition()

            if disposition == "attachment" or (
                disposition == "inline" and part.get_filename()
            ):
                parsed.attachment_names.append(
                    self._decode_header(part.get_filename() or "")
                )
            elif content_type == "text/plain" and parsed.body_text is None:
                parsed.body_text = self._get_payload_decoded(part)
            elif content_type == "text/html" and parsed.body_html is None:
                parsed.body_html = self._get_payload_decoded(part)

    def _get_payload_decoded(self, part: Message) -> str:
        """Get decoded text payload from message part."""
        payload = part.get_payload(decode=True)
        if payload is None:
            return ""

        charset = part.get_content_charset() or "utf-8"
        try:
            return payload.decode(charset, errors="replace")
        except LookupError:
            # Unknown charset name
            return payload.decode("utf-8", errors="replace")

    def _decode_header(self, header_value: str) -> str:
        """Decode an email header value, handling encoded words."""
        if not header_value:
            return ""

        result_parts = []
        for content, charset in email.header.decode_header(str(header_value)):
            if isinstance(content, bytes):
                try:
                    result_parts.append(
                        content.decode(charset or "utf-8", errors="replace")
                    )
                except LookupError:
                    result_parts.append(content.decode("utf-8", errors="replace"))
            else:
                result_parts.append(content)

        # Folded headers keep their CRLF + whitespace after decoding
        return re.sub(r"\s*\r?\n\s*", " ", "".join(result_parts)).strip()


def _soup(parsed: ParsedEmail) -> Optional[BeautifulSoup]:
    if not parsed.body_html:
        return None
    return BeautifulSoup(parsed.body_html, "html.parser")


def _visible_lines(parsed: ParsedEmail) -> list[str]:
    """Non-empty text lines of the email, preferring the HTML rendering."""
    soup = _soup(parsed)
    if soup is not None:
        for hidden in soup(["style", "script", "head"]):
            hidden.decompose()
        text = soup.get_text("\n")
    else:
        text = parsed.body_text or ""

    lines = (re.sub(r"[ \t\xa0]+", " ", line).strip() for line in text.splitlines())
    return [line for line in lines if line]


def extract_text(parsed: ParsedEmail, html_tag: Optional[str] = None) -> str:
    """
    Get the visible text of an email.

    Args:
        parsed: The parsed email.
        html_tag: When given, only the text inside elements with this tag
            name is returned, one element per line.

    Returns:
        The text, lines separated by newlines.
    """
    if html_tag is None:
        return "\n".join(_visible_lines(parsed))

    soup = _soup(parsed)
    if soup is None:
        raise EmailParseError(
            f"Email has no HTML body to read <{html_tag}> elements from",
            {"uid": parsed.uid, "subject": parsed.subject},
        )
    return "\n".join(
        element.get_text(" ", strip=True) for element in soup.find_all(html_tag)
    )


def _is_footer(line: str) -> bool:
    if line.lower().startswith(FOOTER_PREFIXES):
        return True
    return TRANSACTION_LINK_PATTERN.fullmatch(line) is not None


def extract_chat_messages(parsed: ParsedEmail) -> list[ChatNotificationMessage]:
    """
    Extract the chat messages quoted in a notification email.

    A message starts with the sender line directly followed by its
    timestamp line. Every following line up to the next sender, or up
    to the footer of the email, belongs to the message text. Several
    messages sent in a row by the same sender are grouped by the
    application under a single header, so their texts come back joined
    with newlines.

    Args:
        parsed: The parsed notification email.

    Returns:
        Messages in the order they appear in the email.
    """
    lines = _visible_lines(parsed)
    header_indexes = [
        index - 1
        for index, line in enumerate(lines)
        if index > 0 and MESSAGE_TIMESTAMP_PATTERN.match(line)
    ]

    messages = []
    for position, header in enumerate(header_indexes):
        end = (
            header_indexes[position + 1]
            if position + 1 < len(header_indexes)
            else len(lines)
        )
        body = []
        for line in lines[header + 2:end]:
            if _is_footer(line):
                break
            body.append(line)

        messages.append(
            ChatNotificationMessage(
                sender_name=lines[header],
                date_and_time=lines[header + 1],
                message="\n".join(body),
            )
        )

    logger.debug("Found %d chat message(s) in email uid=%s", len(messages), parsed.uid)
    return messages


def extract_transaction_link(parsed: ParsedEmail) -> str:
    """
    Get the link to the transaction from a notification email.

    Raises:
        EmailParseError: If the email does not contain a transaction link.
    """
    soup = _soup(parsed)
    if soup is not None:
        for anchor in soup.find_all("a", href=True):
            match = TRANSACTION_LINK_PATTERN.search(anchor["href"])
            if match:
                return match.group(0)

    for body in (parsed.body_text, parsed.body_html):
        if body:
            match = TRANSACTION_LINK_PATTERN.search(body)
            if match:
                return match.group(0)

    raise EmailParseError(
        "No transaction link found in email",
        {"uid": parsed.uid, "subject": parsed.subject},
    )
