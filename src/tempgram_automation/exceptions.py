"""
Custom exceptions for the Tempgram automation framework.

This module defines the exceptions raised by the configuration layer,
the email tooling and the browser actions so that test failures carry
a readable message and the context needed to debug them.
"""

from typing import Any, Optional


class TempgramAutomationError(Exception):
    """Base exception for all automation framework errors."""

    def __init__(self, message: str,
                 details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


# Configuration Exceptions
class ConfigurationError(TempgramAutomationError):
    """Base exception for configuration-related errors."""


class MissingConfigError(ConfigurationError):
    """Raised when a required configuration value is missing."""

    def __init__(
        self,
        config_key: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"Missing required configuration: {config_key}"
        super().__init__(message, details)
        self.config_key = config_key


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        config_key: str,
        value: Any,
        reason: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize invalid config error.

        Args:
            config_key: The configuration key with the invalid value.
            value: The invalid value.
            reason: Why the value is invalid.
            details: Optional dictionary with additional error details.
        """
        message = f"Invalid value for '{config_key}': {reason}"
        super().__init__(message, details)
        self.config_key = config_key
        self.value = value
        self.reason = reason


class DataSetError(TempgramAutomationError):
    """Raised when a scenario data set cannot be loaded or validated."""


# Email Exceptions
class EmailError(TempgramAutomationError):
    """Base exception for mailbox and notification email errors."""


class MailboxConnectionError(EmailError):
    """Raised when the IMAP server cannot be reached or rejects the login."""


class EmailNotFoundError(EmailError):
    """Raised when no email matches the requested criteria."""


class EmailTimeoutError(EmailError):
    """Raised when the expected emails do not arrive in time."""

    def __init__(
        self,
        username: str,
        expected: int,
        received: int,
        timeout_ms: int,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize email timeout error.

        Args:
            username: Mailbox that was polled.
            expected: Number of emails that were expected.
            received: Number of emails present when the wait gave up.
            timeout_ms: How long the wait lasted in milliseconds.
            details: Optional dictionary with additional error details.
        """
        message = (
            f"Expected {expected} email(s) for '{username}' within "
            f"{timeout_ms}ms, found {received}"
        )
        super().__init__(message, details)
        self.username = username
        self.expected = expected
        self.received = received
        self.timeout_ms = timeout_ms


class EmailParseError(EmailError):
    """Raised when a notification email does not have the expected content."""


# Browser / API Exceptions
class LoginError(TempgramAutomationError):
    """Raised when the login API refuses the credentials."""

    def __init__(
        self,
        email: str,
        status: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        message = f"Login failed for '{email}'"
        if status is not None:
            message += f" (HTTP {status})"
        super().__init__(message, details)
        self.email = email
        self.status = status


class ScenarioLoadError(TempgramAutomationError):
    """Raised when the backend cannot load the scenario test data."""


class PageError(TempgramAutomationError):
    """Raised when a page object finds the UI in an unexpected state."""
