"""
Page Objects for the Tempgram web application.
"""

from .base_page import BasePage
from .conversations_modal import ChatMessageDetails, ConversationsModal
from .main_menu_page import MainMenuPage
from .temp_manager_home_page import TempManagerHomePage
from .view_transaction_page import ViewTransactionPage

__all__ = [
    "BasePage",
    "MainMenuPage",
    "TempManagerHomePage",
    "ViewTransactionPage",
    "ConversationsModal",
    "ChatMessageDetails",
]
