"""
Mailbox access for notification email checks.

EmailManager reads the IMAP mailboxes of the scenario accounts. The
imaplib calls block, so every public method runs them in a worker
thread and is awaited like the browser actions it is used alongside.
"""

import asyncio
import imaplib
import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ..config import EnvProfile
from ..exceptions import (
    EmailError,
    EmailNotFoundError,
    EmailTimeoutError,
    MailboxConnectionError,
    MissingConfigError,
)
from .parser import (
    ChatNotificationMessage,
    EmailParser,
    ParsedEmail,
    extract_chat_messages,
    extract_text,
    extract_transaction_link,
)

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[], imaplib.IMAP4]


class EmailManager:
    """Reads and clears the test mailboxes over IMAP."""

    def __init__(
        self,
        env_profile: EnvProfile,
        connection_factory: Optional[ConnectionFactory] = None,
        parser: Optional[EmailParser] = None,
    ) -> None:
        """
        Initialize the email manager.

        Args:
            env_profile: Profile holding the IMAP settings and passwords.
            connection_factory: Callable returning an unauthenticated IMAP
                connection. Defaults to one built from the IMAP settings.
            parser: Parser for fetched messages.
        """
        self.env_profile = env_profile
        self.settings = env_profile.imap
        self._connection_factory = connection_factory or self._default_connection
        self.parser = parser or EmailParser()

    def _default_connection(self) -> imaplib.IMAP4:
        if self.settings.use_ssl:
            return imaplib.IMAP4_SSL(self.settings.host, self.settings.port)
        return imaplib.IMAP4(self.settings.host, self.settings.port)

    @contextmanager
    def _mailbox(self, username: str) -> Iterator[imaplib.IMAP4]:
        """Open, authenticate and select the mailbox of a user."""
        try:
            conn = self._connection_factory()
        except OSError as e:
            raise MailboxConnectionError(
                f"Cannot connect to IMAP server {self.settings.host}:{self.settings.port}",
                {"error": str(e)},
            ) from e

        try:
            try:
                conn.login(username, self.env_profile.password_for(username))
            except imaplib.IMAP4.error as e:
                raise MailboxConnectionError(
                    f"IMAP login rejected for '{username}'", {"error": str(e)}
                ) from e

            typ, data = conn.select(self.settings.mailbox)
            if typ != "OK":
                raise MailboxConnectionError(
                    f"Cannot select mailbox '{self.settings.mailbox}' for '{username}'",
                    {"response": data},
                )
            yield conn
        finally:
            try:
                conn.logout()
            except (imaplib.IMAP4.error, OSError):
                logger.debug("IMAP logout failed for %s", username)

    @staticmethod
    def _search_uids(conn: imaplib.IMAP4) -> list[str]:
        typ, data = conn.uid("SEARCH", None, "ALL")
        if typ != "OK":
            raise EmailError("IMAP search failed", {"response": data})
        raw = data[0] or b""
        uids = raw.decode().split() if isinstance(raw, bytes) else str(raw).split()
        return sorted(uids, key=int)

    @staticmethod
    def _fetch_raw(conn: imaplib.IMAP4, uid: str) -> bytes:
        typ, data = conn.uid("FETCH", uid, "(RFC822)")
        if typ != "OK":
            raise EmailError(f"IMAP fetch failed for UID {uid}", {"response": data})
        for item in data:
            if isinstance(item, tuple):
                return item[1]
        raise EmailNotFoundError(f"No email with UID {uid}")

    # Blocking operations

    def _purge(self, username: str) -> int:
        with self._mailbox(username) as conn:
            uids = self._search_uids(conn)
            if uids:
                typ, data = conn.uid("STORE", ",".join(uids), "+FLAGS", r"(\Deleted)")
                if typ != "OK":
                    raise EmailError(
                        f"IMAP store failed for '{username}'", {"response": data}
                    )
                typ, data = conn.expunge()
                if typ != "OK":
                    raise EmailError(
                        f"IMAP expunge failed for '{username}'", {"response": data}
                    )
        logger.info("Purged %d email(s) from %s", len(uids), username)
        return len(uids)

    def _uids(self, username: str) -> list[str]:
        with self._mailbox(username) as conn:
            return self._search_uids(conn)

    def _parsed(self, username: str, uid: str) -> ParsedEmail:
        with self._mailbox(username) as conn:
            raw = self._fetch_raw(conn, uid)
        return self.parser.parse(raw, uid=uid)

    def _parsed_many(self, username: str, uids: list[str]) -> list[ParsedEmail]:
        with self._mailbox(username) as conn:
            return [self.parser.parse(self._fetch_raw(conn, uid), uid=uid) for uid in uids]

    def _first(self, username: str) -> ParsedEmail:
        with self._mailbox(username) as conn:
            uids = self._search_uids(conn)
            if not uids:
                raise EmailNotFoundError(f"Mailbox of '{username}' is empty")
            return self.parser.parse(self._fetch_raw(conn, uids[0]), uid=uids[0])

    # Public API

    async def purge_emails(self, username: str) -> int:
        """Delete every email in a user's mailbox, returning how many were removed."""
        return await asyncio.to_thread(self._purge, username)

    async def purge_emails_for_all_users(self) -> None:
        """
        Delete every email of all configured scenario mailboxes.

        Raises:
            MissingConfigError: If no scenario mailboxes are configured.
        """
        if not self.settings.accounts:
            raise MissingConfigError("TEMPGRAM_IMAP_ACCOUNTS")
        for username in self.settings.accounts:
            await self.purge_emails(username)

    async def get_email_uids(self, username: str) -> list[str]:
        """UIDs of the emails in a mailbox, oldest first."""
        return await asyncio.to_thread(self._uids, username)

    async def get_email_count(self, username: str) -> int:
        return len(await self.get_email_uids(username))

    async def list_emails(self, username: str) -> list[ParsedEmail]:
        """Fetch and parse every email in a mailbox, oldest first."""
        uids = await self.get_email_uids(username)
        return await asyncio.to_thread(self._parsed_many, username, uids)

    async def wait_for_email(
        self,
        username: str,
        timeout_ms: int,
        expected_count: int = 1,
    ) -> int:
        """
        Poll a mailbox until it holds at least the expected number of emails.

        Args:
            username: Mailbox to poll.
            timeout_ms: How long to keep polling.
            expected_count: Minimum number of emails to wait for.

        Returns:
            The number of emails in the mailbox.

        Raises:
            EmailTimeoutError: If the emails did not arrive in time.
        """
        deadline = time.monotonic() + timeout_ms / 1000
        interval = self.settings.poll_interval_ms / 1000

        while True:
            count = await self.get_email_count(username)
            if count >= expected_count:
                logger.info("%s received %d email(s)", username, count)
                return count

            if time.monotonic() >= deadline:
                raise EmailTimeoutError(username, expected_count, count, timeout_ms)

            logger.debug(
                "Waiting for %d email(s) for %s, found %d", expected_count, username, count
            )
            await asyncio.sleep(interval)

    async def get_uid_with_partial_subject(
        self,
        username: str,
        uids: list[str],
        partial_subject: str,
    ) -> str:
        """
        Find the first email among the given UIDs whose subject contains a text.

        Raises:
            EmailNotFoundError: If no subject contains the text.
        """
        parsed_emails = await asyncio.to_thread(self._parsed_many, username, uids)
        for parsed in parsed_emails:
            if partial_subject in parsed.subject:
                return parsed.uid

        raise EmailNotFoundError(
            f"No email for '{username}' with subject containing '{partial_subject}'",
            {"subjects": [parsed.subject for parsed in parsed_emails]},
        )

    async def get_subject_of_first_email(self, username: str) -> str:
        parsed = await asyncio.to_thread(self._first, username)
        return parsed.subject

    async def get_email_by_uid(self, username: str, uid: str) -> ParsedEmail:
        return await asyncio.to_thread(self._parsed, username, uid)

    async def get_text_in_email_by_uid(
        self,
        username: str,
        uid: str,
        html_tag: Optional[str] = None,
    ) -> str:
        """
        Get the visible text of an email.

        Args:
            username: Mailbox holding the email.
            uid: UID of the email.
            html_tag: Restrict the text to the elements with this tag name.
        """
        parsed = await self.get_email_by_uid(username, uid)
        return extract_text(parsed, html_tag)

    async def get_all_chat_messages(
        self, username: str, uid: str
    ) -> list[ChatNotificationMessage]:
        """Chat messages quoted in a notification email."""
        parsed = await self.get_email_by_uid(username, uid)
        return extract_chat_messages(parsed)

    async def get_transactions_link_from_first_available_email(
        self, username: str
    ) -> str:
        """Transaction link of the oldest email in a mailbox."""
        parsed = await asyncio.to_thread(self._first, username)
        return extract_transaction_link(parsed)
