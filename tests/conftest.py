"""
Pytest fixtures for tempgram-automation tests.

This module provides the fixtures shared by the unit tests: an isolated
environment profile, notification email builders and an in-memory IMAP
server standing in for the test mailboxes.
"""

import imaplib
import threading
import os
import sys
from email.message import EmailMessage
from typing import Optional

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from tempgram_automation.config import EnvProfile  # noqa: E402


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "e2e: scenario driving a live Tempgram environment"
    )


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def clean_env(monkeypatch):
    """Remove TEMPGRAM_* variables so profiles only see what a test sets."""
    for key in list(os.environ):
        if key.startswith("TEMPGRAM_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def env_profile(clean_env, tmp_path) -> EnvProfile:
    """Profile pointing at a local application and an in-memory mail server."""
    clean_env.setenv("TEMPGRAM_IMAP_PASSWORD", "mailbox-secret")
    clean_env.setenv("TEMPGRAM_IMAP_POLL_INTERVAL_MS", "100")
    clean_env.setenv(
        "TEMPGRAM_IMAP_ACCOUNTS", "hana.sato@example.test,marcus.lee@example.test"
    )
    return EnvProfile(
        base_url="https://app.tempgram.test",
        user_password="user-secret",
        results_dir=tmp_path / "results",
    )


# =============================================================================
# Notification Emails
# =============================================================================

NOTIFICATION_HTML = """\
<html>
  <head><style>p {{ margin: 0; }}</style></head>
  <body>
    <p>You have received new messages for transaction #000417 - Northwind Exports in Tempgram</p>
    <p><strong>Conversation: {title}</strong></p>
    {messages}
    <p><a href="https://app.tempgram.test/transactions/8812/verify?token=abc">Go to transaction</a></p>
    <p>You are receiving this email because you take part in this conversation.</p>
  </body>
</html>
"""

MESSAGE_HTML = """\
    <div class="message">
      <p class="sender">{sender}</p>
      <p class="date">{date}</p>
      {lines}
    </div>
"""


def build_notification_html(title: str, messages: list[tuple[str, str, list[str]]]) -> str:
    """Render a chat notification body from (sender, date, lines) tuples."""
    rendered = "".join(
        MESSAGE_HTML.format(
            sender=sender,
            date=date,
            lines="".join(f"<p>{line}</p>" for line in lines),
        )
        for sender, date, lines in messages
    )
    return NOTIFICATION_HTML.format(title=title, messages=rendered)


def build_email(
    subject: str,
    html: Optional[str] = None,
    text: Optional[str] = None,
    to: str = "hana.sato@example.test",
    attachment: Optional[tuple[str, bytes]] = None,
) -> bytes:
    """Build a raw RFC 822 message."""
    msg = EmailMessage()
    msg["From"] = "Tempgram <no-reply@tempgram.test>"
    msg["To"] = to
    msg["Subject"] = subject
    msg["Date"] = "Mon, 19 Oct 2026 09:30:00 +0000"
    msg["Message-ID"] = "<notification-1@tempgram.test>"

    msg.set_content(text or "This email needs an HTML capable client.")
    if html is not None:
        msg.add_alternative(html, subtype="html")
    if attachment is not None:
        name, content = attachment
        msg.add_attachment(
            content, maintype="application", subtype="octet-stream", filename=name
        )
    return msg.as_bytes()


@pytest.fixture
def notification_email() -> bytes:
    """Notification with two messages of one sender and a reply."""
    html = build_notification_html(
        "Presentation documents",
        [
            (
                "Olivia Baker (Northwind Exports)",
                "19 October 2026 at 09:15 UTC",
                ["Please check the invoice.", "The packing list is attached."],
            ),
            (
                "Hana Sato (Northwind Exports)",
                "19 October 2026 at 09:20 UTC",
                ["Checked, all fine."],
            ),
        ],
    )
    return build_email(
        "New message(s): Northwind Exports #000417: Presentation documents", html=html
    )


# =============================================================================
# In-memory IMAP server
# =============================================================================

class FakeImapServer:
    """Mailboxes keyed by user, each mapping UID to a raw message."""

    def __init__(self, password: str = "mailbox-secret"):
        self.password = password
        self.mailboxes: dict[str, dict[str, bytes]] = {}
        self.connections: list["FakeImapConnection"] = []
        self._next_uid = 1
        self.lock = threading.Lock()
        # Replies for the deleting commands, set to "NO" to make them fail
        self.store_status = "OK"
        self.expunge_status = "OK"

    def deliver(self, user: str, raw: bytes) -> str:
        with self.lock:
            uid = str(self._next_uid)
            self._next_uid += 1
            self.mailboxes.setdefault(user, {})[uid] = raw
        return uid

    def connect(self) -> "FakeImapConnection":
        conn = FakeImapConnection(self)
        self.connections.append(conn)
        return conn


class FakeImapConnection:
    """Implements the imaplib calls EmailManager makes."""

    def __init__(self, server: FakeImapServer):
        self.server = server
        self.user: Optional[str] = None
        self.deleted: set[str] = set()
        self.logged_out = False

    @property
    def box(self) -> dict[str, bytes]:
        return self.server.mailboxes.setdefault(self.user, {})

    def login(self, user, password):
        if password != self.server.password:
            raise imaplib.IMAP4.error("[AUTHENTICATIONFAILED] Invalid credentials")
        self.user = user
        return "OK", [b"Logged in"]

    def select(self, mailbox="INBOX"):
        if mailbox != "INBOX":
            return "NO", [b"Mailbox does not exist"]
        return "OK", [str(len(self.box)).encode()]

    def uid(self, command, *args):
        if command == "SEARCH":
            with self.server.lock:
                uids = sorted(self.box, key=int)
            return "OK", [" ".join(uids).encode()]
        if command == "FETCH":
            uid = args[0]
            if uid not in self.box:
                return "OK", [None]
            raw = self.box[uid]
            header = f"{uid} (UID {uid} RFC822 {{{len(raw)}}}".encode()
            return "OK", [(header, raw), b")"]
        if command == "STORE":
            if self.server.store_status != "OK":
                return self.server.store_status, [b"STORE not permitted"]
            self.deleted.update(args[0].split(","))
            return "OK", []
        return "BAD", [f"Unsupported command {command}".encode()]

    def expunge(self):
        if self.server.expunge_status != "OK":
            return self.server.expunge_status, [b"EXPUNGE not permitted"]
        for uid in self.deleted:
            self.box.pop(uid, None)
        self.deleted.clear()
        return "OK", []

    def logout(self):
        self.logged_out = True
        return "BYE", []


@pytest.fixture
def imap_server() -> FakeImapServer:
    return FakeImapServer()


@pytest.fixture
def make_email():
    return build_email


@pytest.fixture
def make_notification_html():
    return build_notification_html
