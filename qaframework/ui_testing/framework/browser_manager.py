"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management and navigation sessions for UI automation.

Features:
    - Single browser instance per run
    - Isolated contexts for test independence
    - NavigationSession: one live page shared by every page object of a test
    - DialogMonitor: records native dialogs until a test accepts/dismisses them

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Dialog,
    Page,
    Playwright,
)

from qaframework.common.test_properties import TestProperties

from .readiness import WaitConfig, poll_until


class DialogMonitor:
    """
    Keeps native dialogs (alert/confirm/prompt) open until handled.

    With a listener registered Playwright no longer auto-dismisses dialogs,
    so every recorded dialog blocks the page until `accept` or `dismiss`.
    """

    def __init__(self, page: Page):
        self._pending: Deque[Dialog] = deque()
        page.on("dialog", self._on_dialog)

    def _on_dialog(self, dialog: Dialog) -> None:
        logger.debug(f"Dialog opened ({dialog.type}): {dialog.message}")
        self._pending.append(dialog)

    def peek(self, dialog_type: Optional[str] = None) -> Optional[Dialog]:
        """Oldest pending dialog, optionally restricted to one type."""
        for dialog in self._pending:
            if dialog_type is None or dialog.type == dialog_type:
                return dialog
        return None

    @property
    def pending(self) -> List[Dialog]:
        return list(self._pending)

    async def wait_for(
        self,
        config: WaitConfig,
        dialog_type: Optional[str] = None,
        timeout_log_level: str = "ERROR",
    ) -> Dialog:
        async def present() -> Optional[Dialog]:
            return self.peek(dialog_type)

        return await poll_until(
            present,
            config,
            description=f"{dialog_type or 'any'} dialog",
            timeout_log_level=timeout_log_level,
        )

    async def accept(self, dialog: Dialog, prompt_text: Optional[str] = None) -> None:
        self._pending.remove(dialog)
        if prompt_text is None:
            await dialog.accept()
        else:
            await dialog.accept(prompt_text)

    async def dismiss(self, dialog: Dialog) -> None:
        self._pending.remove(dialog)
        await dialog.dismiss()


class NavigationSession:
    """
    One live browser page shared by all page objects within a test.

    The session outlives every page object built on it. Page objects never
    take ownership of it; closing the page is the creator's job.

    Usage:
        session = NavigationSession(page)
        login = LoginPage(session)
        await login.go()
    """

    def __init__(self, page: Page, properties: Optional[TestProperties] = None):
        """
        Initialize session.

        Args:
            page: Playwright Page object
            properties: Test configuration. Defaults to the shared instance.
        """
        self.page = page
        self.properties = properties or TestProperties.instance()
        self.dialogs = DialogMonitor(page)

    @property
    def wait_config(self) -> WaitConfig:
        """Default bound for every wait in this session."""
        return WaitConfig(
            timeout=self.properties.max_wait_seconds,
            poll_interval=self.properties.poll_interval_seconds,
        )

    @property
    def current_url(self) -> str:
        return self.page.url


class BrowserManager:
    """
    Manages browser instances and contexts for UI testing.

    Features:
        - Single browser instance for performance
        - Isolated contexts for test independence
        - Navigation sessions bound to the shared test properties

    Usage:
        async with BrowserManager() as manager:
            session = await manager.new_session()
            home = await LoginPage(session).go_to_home_page()
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": [
            "--ignore-certificate-errors",
        ],
    }

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
        properties: Optional[TestProperties] = None,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode (defaults to `browser.headless`)
            browser_type: 'chromium', 'firefox' or 'webkit' (defaults to `browser.type`)
            properties: Test configuration handed to every session
        """
        self.properties = properties or TestProperties.instance()
        self.headless = self.properties.headless if headless is None else headless
        self.browser_type = browser_type or self.properties.browser_type

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry - start browser."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close browser."""
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()

        if self.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
        }

        self._browser = await browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.browser_type} "
            f"(headless={self.headless})"
        )

    async def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            await context.close()
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, etc.
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **options}
        context = await self._browser.new_context(**context_options)
        self._contexts.append(context)
        return context

    async def new_session(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> NavigationSession:
        """
        Open a page and wrap it in a NavigationSession.

        Args:
            context: Existing context to use (creates new if None)
            **context_options: Options for new context
        """
        if context is None:
            context = await self.new_context(**context_options)
        page = await context.new_page()
        return NavigationSession(page, self.properties)

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
    "DialogMonitor",
    "NavigationSession",
]
