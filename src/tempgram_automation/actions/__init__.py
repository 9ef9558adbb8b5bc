"""Browser, login and scenario actions."""

from .browser_manager import BrowserConfig, BrowserManager
from .login_api import LoginApiActions
from .page_provider import PageProvider
from .scenario_helper import ScenarioHelper

__all__ = [
    "BrowserConfig",
    "BrowserManager",
    "LoginApiActions",
    "PageProvider",
    "ScenarioHelper",
]
