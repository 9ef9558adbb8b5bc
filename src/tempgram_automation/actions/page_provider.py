"""Page objects and actions sharing one browser page."""

from typing import Optional

from playwright.async_api import Page

from ..config import EnvProfile
from ..emails import EmailManager
from ..pages import (
    ConversationsModal,
    MainMenuPage,
    TempManagerHomePage,
    ViewTransactionPage,
)
from .login_api import LoginApiActions


class PageProvider:
    """Builds every page object a scenario needs around the same page."""

    def __init__(
        self,
        page: Page,
        env_profile: EnvProfile,
        email_manager: Optional[EmailManager] = None,
    ) -> None:
        base_url = env_profile.base_url

        self.page = page
        self.main_menu_page = MainMenuPage(page, base_url)
        self.temp_manager_home_page = TempManagerHomePage(
            page, base_url, env_profile.home_path
        )
        self.view_transaction_page = ViewTransactionPage(page, base_url)
        self.conversations_modal = ConversationsModal(page, base_url)
        self.login_api_actions = LoginApiActions(
            page, env_profile, self.main_menu_page, self.temp_manager_home_page
        )
        self.email_manager = email_manager or EmailManager(env_profile)
