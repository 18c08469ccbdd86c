"""
================================================================================
Lab Home Page Object (Async / Playwright)
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import allure

from qaframework.ui_testing.framework.locators import By
from qaframework.ui_testing.framework.page_base import BasePage

if TYPE_CHECKING:
    from .login_page import LoginPage


PATH_HOME = "/HomePage.do"

LINK_LOGOUT = By.css("a[href*='LogOut'], a[href*='logout'], #logout")
MAIN_MENU = By.id("mainMenu")


class HomePage(BasePage):
    """Lab home page object (async), reached after a successful login."""

    URL_PATH = PATH_HOME
    SERVER = "lab"

    async def is_logged_in(self) -> bool:
        return await self.has_element_without_wait(LINK_LOGOUT)

    async def has_main_menu(self) -> bool:
        return await self.has_element_without_wait(MAIN_MENU)

    @allure.step("Logout")
    async def log_out(self) -> "LoginPage":
        from .login_page import LoginPage

        await self.click_on(LINK_LOGOUT)
        return await LoginPage.reached_from(self)
