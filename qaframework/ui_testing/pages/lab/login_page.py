"""
================================================================================
Lab Login Page Object (Async / Playwright)
================================================================================

Login screen of the Lab sub-system.

Credentials default to `credentials.lab_username` / `credentials.lab_password`
from the test properties.

================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import allure
from loguru import logger
from playwright.async_api import Locator

from qaframework.ui_testing.framework.browser_manager import NavigationSession
from qaframework.ui_testing.framework.locators import By
from qaframework.ui_testing.framework.page_base import BasePage

if TYPE_CHECKING:
    from .home_page import HomePage


PATH_LOGIN = "/LoginPage.do"
LOGOUT_PATH = "/logout"

FIELD_USERNAME = By.id("loginName")
FIELD_PASSWORD = By.id("password")
BUTTON_SUBMIT = By.id("submitButton")

# Browser interstitial shown for the lab server's self-signed certificate
BUTTON_ADVANCED = By.id("details-button")
LINK_PROCEED = By.id("proceed-link")


class LoginPage(BasePage):
    """Lab login page object (async)."""

    URL_PATH = PATH_LOGIN
    ALIAS_URL_PATH = LOGOUT_PATH
    SERVER = "lab"

    def __init__(self, session: NavigationSession):
        super().__init__(session)
        self.username = self.properties.lab_username
        self.password = self.properties.lab_password

    @allure.step("Open lab login page")
    async def go(self) -> None:
        await self.go_to_lab_page(PATH_LOGIN)
        await self._accept_self_assigned_cert()
        await self.wait_for_page()

    async def enter_username(self, username: str) -> None:
        await self.set_text_no_enter(FIELD_USERNAME, username)

    async def enter_password(self, password: str) -> None:
        await self.set_text_no_enter(FIELD_PASSWORD, password)

    async def get_login_button(self) -> Locator:
        return await self.find_element(BUTTON_SUBMIT)

    @allure.step("Login (username={username})")
    async def login_as(self, username: str, password: str) -> "HomePage":
        """Submit credentials and return the ready home page."""
        from .home_page import HomePage

        await self.enter_username(username)
        await self.enter_password(password)
        await self.click_on(BUTTON_SUBMIT)
        return await HomePage.reached_from(self)

    @allure.step("Login with invalid credentials (username={username})")
    async def login_with_invalid_credentials(self, username: str, password: str) -> "LoginPage":
        """Submit credentials the server rejects; the login page reloads."""
        await self.enter_username(username)
        await self.enter_password(password)
        submit = await self.finder.capture_element(BUTTON_SUBMIT)
        await self.click_on(BUTTON_SUBMIT)
        return await LoginPage.reached_from(self, stale_element=submit)

    async def go_to_home_page(self) -> "HomePage":
        """Open the login page and sign in with the configured lab credentials."""
        await self.go()
        return await self.login_as(self.username, self.password)

    async def _accept_self_assigned_cert(self) -> None:
        if await self.has_element_without_wait(BUTTON_ADVANCED):
            logger.info("Self-signed certificate warning shown, proceeding")
            await self.click_on(BUTTON_ADVANCED)
            await self.click_on(LINK_PROCEED)
