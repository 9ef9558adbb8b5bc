#!/usr/bin/env python3
"""
Command-line interface for tempgram-automation.

The scenarios themselves run under pytest. This CLI covers the chores
around them: inspecting the active environment profile and looking
into or clearing the test mailboxes.

Usage:
    tempgram-automation [OPTIONS] COMMAND

Commands:
    config                  Show the active environment profile
    mailbox count USER      Number of emails in a mailbox
    mailbox list USER       UIDs and subjects of the emails in a mailbox
    mailbox purge [USER]    Delete emails of one or all scenario mailboxes
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from tempgram_automation import __version__, get_version
from tempgram_automation.config import EnvProfile, get_env_profile
from tempgram_automation.emails import EmailManager
from tempgram_automation.exceptions import TempgramAutomationError

SECRET_FIELDS = ("user_password", "password", "passwords")


def setup_logging(
    level: str = "INFO",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file: Optional[str] = None,
) -> None:
    """
    Configure logging for the automation framework.

    Args:
        level: Log level name.
        log_format: Format string for log records.
        log_file: Optional file receiving the log as well.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=log_format,
        handlers=handlers,
        force=True,
    )

    if level.upper() != "DEBUG":
        logging.getLogger("asyncio").setLevel(logging.WARNING)


def _masked(data: dict) -> dict:
    masked = {}
    for key, value in data.items():
        if isinstance(value, dict) and key not in SECRET_FIELDS:
            masked[key] = _masked(value)
        elif key in SECRET_FIELDS and value:
            masked[key] = "********"
        else:
            masked[key] = value
    return masked


def show_config(env_profile: EnvProfile) -> int:
    data = _masked(env_profile.model_dump(mode="json"))
    print(json.dumps(data, indent=2, sort_keys=True))
    return 0


async def run_mailbox_command(
    email_manager: EmailManager, action: str, user: Optional[str]
) -> int:
    """Run a mailbox sub-command, printing its result."""
    if action == "purge":
        if user:
            removed = await email_manager.purge_emails(user)
            print(f"{user}: removed {removed} email(s)")
        else:
            await email_manager.purge_emails_for_all_users()
            print(f"Purged {len(email_manager.settings.accounts)} mailbox(es)")
        return 0

    if not user:
        print(f"Error: 'mailbox {action}' needs a USER", file=sys.stderr)
        return 2

    if action == "count":
        print(await email_manager.get_email_count(user))
    else:
        for parsed in await email_manager.list_emails(user):
            print(f"{parsed.uid}\t{parsed.subject}")
    return 0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="tempgram-automation",
        description="Tempgram end-to-end automation tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Show the profile built from the environment:
        tempgram-automation config

    Clear all scenario mailboxes before a run:
        tempgram-automation mailbox purge

Environment Variables:
    TEMPGRAM_CONFIG_FILE    TOML profile to load instead of the environment
    TEMPGRAM_BASE_URL       Web application URL
    TEMPGRAM_IMAP_HOST      Mail server holding the test mailboxes
        """,
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"tempgram-automation {get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("config", help="Show the active environment profile")

    mailbox = subparsers.add_parser("mailbox", help="Inspect or clear test mailboxes")
    mailbox.add_argument("action", choices=["count", "list", "purge"])
    mailbox.add_argument("user", nargs="?", help="Mailbox address")

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point of the CLI.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = parse_args(argv)

    try:
        env_profile = get_env_profile()
    except (TempgramAutomationError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        "DEBUG" if args.debug else env_profile.logging.level,
        env_profile.logging.format,
        env_profile.logging.file,
    )
    logger = logging.getLogger(__name__)
    logger.debug("tempgram-automation v%s, environment %s", __version__, env_profile.environment)

    if args.command == "config":
        return show_config(env_profile)

    try:
        return asyncio.run(
            run_mailbox_command(EmailManager(env_profile), args.action, args.user)
        )
    except TempgramAutomationError as e:
        logger.error("Mailbox command failed: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
