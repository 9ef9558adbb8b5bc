"""
Pytest fixtures for Playwright E2E scenarios.

A scenario module shares one browser page across its tests, which run in
file order like the steps of a user journey. All async fixtures live on
the module's event loop so the page survives from one test to the next.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from playwright.async_api import Browser, Playwright, async_playwright

from tempgram_automation.actions import BrowserManager, PageProvider, ScenarioHelper
from tempgram_automation.actions.login_api import safe_file_name
from tempgram_automation.config import EnvProfile, get_env_profile
from tempgram_automation.emails import ChatNotificationMessage

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ScenarioState:
    """Values one step of a scenario hands over to the later steps."""

    transactions_page_url: str = ""
    transaction_link_from_email: str = ""
    all_email_uids: list[str] = field(default_factory=list)
    email_uid_conversation1: Optional[str] = None
    email_uid_conversation2: Optional[str] = None
    conversation1_messages: list[ChatNotificationMessage] = field(default_factory=list)
    conversation2_messages: list[ChatNotificationMessage] = field(default_factory=list)


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def env_profile() -> EnvProfile:
    """Profile of the environment under test."""
    profile = get_env_profile()
    profile.validate_required()
    return profile


@pytest.fixture(scope="module")
def state() -> ScenarioState:
    return ScenarioState()


# =============================================================================
# Playwright Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="module", loop_scope="module")
async def playwright_instance() -> AsyncGenerator[Playwright, None]:
    """Create a Playwright instance for the scenario."""
    async with async_playwright() as pw:
        yield pw


@pytest_asyncio.fixture(scope="module", loop_scope="module")
async def browser(
    playwright_instance: Playwright, env_profile: EnvProfile
) -> AsyncGenerator[Browser, None]:
    """Launch the configured browser, closing it once the scenario is done."""
    browser = await BrowserManager(env_profile).setup_browser(playwright_instance)
    yield browser
    await browser.close()


@pytest_asyncio.fixture(scope="module", loop_scope="module")
async def page_provider(
    request, browser: Browser, env_profile: EnvProfile
) -> AsyncGenerator[PageProvider, None]:
    """
    Open the scenario's page and load its test data.

    The backend scenario is named after the test module file.
    """
    context, page = await BrowserManager(env_profile).setup_new_page(browser)
    provider = PageProvider(page, env_profile)

    await asyncio.wait_for(
        ScenarioHelper.load_scenario_if_needed(
            provider.login_api_actions, request.module.__file__
        ),
        timeout=env_profile.scenario_load_timeout_ms / 1000,
    )

    yield provider
    await context.close()


@pytest_asyncio.fixture(loop_scope="module", autouse=True)
async def screenshot_after_step(
    request, page_provider: PageProvider
) -> AsyncGenerator[None, None]:
    """Keep a screenshot of the page as every step left it."""
    yield
    path = await page_provider.login_api_actions.get_screenshot(
        safe_file_name(request.node.name)
    )
    if path is not None:
        logger.info("Screenshot of %s: %s", request.node.name, path)
