"""
Environment profile for the Tempgram automation framework.

This module provides configuration loading from environment variables
and TOML files, with type-safe settings classes for the browser, the
IMAP mailboxes used to verify notification emails, and logging.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Optional

import tomllib

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .exceptions import InvalidConfigError, MissingConfigError


class BrowserSettings(BaseSettings):
    """Browser launch and context settings."""

    model_config = SettingsConfigDict(
        env_prefix="TEMPGRAM_BROWSER_",
        extra="ignore",
    )

    name: str = Field(default="chromium", description="chromium, firefox or webkit")
    channel: Optional[str] = Field(None, description="Browser channel, e.g. chrome")
    headless: bool = Field(default=True, description="Run without a window")
    slow_mo: int = Field(default=0, ge=0, description="Delay between actions in ms")
    viewport_width: int = Field(default=1600, ge=1)
    viewport_height: int = Field(default=900, ge=1)
    locale: str = Field(default="en-GB", description="Browser locale")
    timezone_id: str = Field(default="UTC", description="Browser timezone")
    default_timeout_ms: int = Field(default=30000, ge=0)
    navigation_timeout_ms: int = Field(default=60000, ge=0)
    ignore_https_errors: bool = Field(default=False)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate the browser engine name."""
        v_lower = v.lower()
        if v_lower not in ("chromium", "firefox", "webkit"):
            raise ValueError("Browser must be one of: chromium, firefox, webkit")
        return v_lower


class ImapSettings(BaseSettings):
    """Mail server settings used to read notification emails."""

    model_config = SettingsConfigDict(
        env_prefix="TEMPGRAM_IMAP_",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="IMAP server host")
    port: int = Field(default=993, ge=1, le=65535, description="IMAP server port")
    use_ssl: bool = Field(default=True, description="Connect with IMAP over SSL")
    mailbox: str = Field(default="INBOX", description="Mailbox holding notifications")
    password: str = Field(default="", description="Password shared by test mailboxes")
    passwords: dict[str, str] = Field(
        default_factory=dict, description="Per-mailbox password overrides"
    )
    poll_interval_ms: int = Field(default=2000, ge=100)
    accounts: Annotated[list[str], NoDecode] = Field(
        default_factory=list, description="Mailboxes purged before a scenario"
    )

    @field_validator("accounts", mode="before")
    @classmethod
    def parse_accounts(cls, v: Any) -> list[str]:
        """Parse accounts from a comma-separated string or list."""
        if isinstance(v, str):
            if not v.strip():
                return []
            return [account.strip() for account in v.split(",")]
        return v

    @field_validator("passwords", mode="after")
    @classmethod
    def normalize_password_keys(cls, v: dict[str, str]) -> dict[str, str]:
        """Mailbox names are case-insensitive."""
        return {key.lower(): value for key, value in v.items()}


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="TEMPGRAM_LOG_",
        extra="ignore",
    )

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    file: Optional[str] = Field(None, description="Log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper


class EnvProfile(BaseSettings):
    """Environment profile aggregating all configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TEMPGRAM_",
        extra="ignore",
    )

    environment: str = Field(default="local", description="Environment name")
    base_url: str = Field(
        default="http://localhost:8080", description="Web application URL"
    )
    api_url: str = Field(default="", description="Backend API URL")
    user_password: str = Field(default="", description="Password of the test users")

    login_endpoint: str = Field(default="auth/login")
    home_path: str = Field(default="/temp-manager/transactions")
    scenario_endpoint: str = Field(default="test-data/scenarios")
    load_scenarios: bool = Field(
        default=False, description="Ask the backend to load scenario data"
    )

    scenario_load_timeout_ms: int = Field(default=180000, ge=0)
    email_long_timeout_ms: int = Field(default=60000, ge=0)

    results_dir: Path = Field(default=Path("test-results"))
    screenshots_enabled: bool = Field(default=True)

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    imap: ImapSettings = Field(default_factory=ImapSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("base_url", "api_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @model_validator(mode="after")
    def default_api_url(self) -> "EnvProfile":
        """The API is served under the web application unless told otherwise."""
        if not self.api_url:
            self.api_url = f"{self.base_url}/api"
        return self

    @property
    def email_timeout_for_registered_users_ms(self) -> int:
        """Registered users get their notification digest later than guests."""
        return self.email_long_timeout_ms * 2

    @property
    def screenshots_dir(self) -> Path:
        return self.results_dir / "screenshots"

    def password_for(self, email: str) -> str:
        """
        Get the IMAP password for a mailbox.

        Args:
            email: Mailbox address.

        Returns:
            The per-mailbox override if one is configured, else the shared password.
        """
        return self.imap.passwords.get(email.lower(), self.imap.password)

    @classmethod
    def from_toml(cls, path: str | Path) -> "EnvProfile":
        """
        Load the profile from a TOML configuration file.

        Args:
            path: Path to the TOML configuration file.

        Returns:
            EnvProfile instance with loaded configuration.

        Raises:
            MissingConfigError: If the file does not exist.
            InvalidConfigError: If the file cannot be parsed.
        """
        path = Path(path)
        if not path.exists():
            raise MissingConfigError(str(path), {"reason": "file not found"})

        try:
            with open(path, "rb") as f:
                config_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise InvalidConfigError(
                config_key="config_file",
                value=str(path),
                reason=f"Failed to parse TOML: {e}",
            ) from e

        return cls._from_dict(config_data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "EnvProfile":
        """Create a profile from a dictionary of TOML sections."""
        profile_kwargs: dict[str, Any] = {}

        if "app" in data:
            profile_kwargs.update(data["app"])

        if "browser" in data:
            profile_kwargs["browser"] = BrowserSettings(**data["browser"])

        if "imap" in data:
            profile_kwargs["imap"] = ImapSettings(**data["imap"])

        if "logging" in data:
            profile_kwargs["logging"] = LoggingSettings(**data["logging"])

        return cls(**profile_kwargs)

    def validate_required(self) -> None:
        """
        Validate that the values a live scenario needs are present.

        Raises:
            MissingConfigError: If required configuration is missing.
        """
        if not self.user_password:
            raise MissingConfigError("TEMPGRAM_USER_PASSWORD")
        if not self.imap.password and not self.imap.passwords:
            raise MissingConfigError("TEMPGRAM_IMAP_PASSWORD")
        if not self.imap.accounts:
            raise MissingConfigError("TEMPGRAM_IMAP_ACCOUNTS")


@lru_cache()
def get_env_profile() -> EnvProfile:
    """
    Get the cached environment profile.

    Settings come from TEMPGRAM_CONFIG_FILE when it points at an existing
    TOML file, otherwise from environment variables.

    Returns:
        EnvProfile instance.
    """
    config_file = os.getenv("TEMPGRAM_CONFIG_FILE")

    if config_file and Path(config_file).exists():
        return EnvProfile.from_toml(config_file)
    return EnvProfile()


def reload_env_profile() -> EnvProfile:
    """
    Reload the profile, clearing the cache.

    Returns:
        Fresh EnvProfile instance.
    """
    get_env_profile.cache_clear()
    return get_env_profile()
