"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Page identity (canonical / alias / reject paths, ready indicator)
    - Readiness wait after every navigation
    - Server-group aware URL building (EMR, Lab, Facility)
    - Guarded page-to-page transitions
    - Shortcuts to element lookup and form interaction helpers
    - Screenshot and debugging utilities

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Type, TypeVar

import allure
import pytest
from loguru import logger
from playwright.async_api import ElementHandle, Locator

from .browser_manager import NavigationSession
from .element_actions import ElementActions
from .endpoints import ServerEndpoints
from .locators import ElementFinder, ElementLocator, to_ms
from .readiness import (
    READY_STATE_COMPLETE,
    READY_STATE_SCRIPT,
    PageDescriptor,
    WaitTimeoutError,
    poll_until,
    wait_for_page_ready,
)


# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent / "screenshots"

FOCUS_BY_ID_SCRIPT = "id => !!document.activeElement && document.activeElement.id === id"
FOCUS_BY_CSS_SCRIPT = """([tag, attr, value]) => {
    const el = document.activeElement;
    return !!el && el.tagName.toLowerCase() === tag.toLowerCase() && el.getAttribute(attr) === value;
}"""

P = TypeVar("P", bound="BasePage")


class SamePageTransitionError(RuntimeError):
    """Raised when a page object is built from a parent of its own class without a stale element."""
    pass


def js_variable_script(name: str) -> str:
    """JavaScript expression that is true when `name` is defined and not null."""
    return f"(typeof {name} !== 'undefined') && {name} !== null"


class BasePage:
    """
    Base class for all page objects.

    A page object is bound to one page of the application and is rebuilt after
    every navigation; its DOM is only guaranteed right after `wait_for_page()`.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/LoginPage.do"
            SERVER = "lab"

            async def submit(self) -> "HomePage":
                await self.click_on(BUTTON_SUBMIT)
                return await HomePage.reached_from(self)
    """

    # Override in subclasses
    URL_PATH: str = ""
    ALIAS_URL_PATH: Optional[str] = None
    REJECT_URL_PATH: Optional[str] = None
    READY_INDICATOR: Optional[str] = None
    SERVER: str = "emr"

    def __init__(self, session: NavigationSession):
        """
        Initialize page object.

        Args:
            session: Navigation session shared by every page object of the test

        Raises:
            InvalidServerUrlError: If any configured server URL is malformed
        """
        if not self.URL_PATH:
            raise TypeError(f"{type(self).__name__} must define URL_PATH")
        self.session = session
        self.properties = session.properties
        self.endpoints = ServerEndpoints.from_properties(self.properties)
        self.finder = ElementFinder(session)
        self.actions = ElementActions(self.finder)

    @property
    def page(self):
        """Underlying Playwright page."""
        return self.session.page

    @classmethod
    def descriptor(cls) -> PageDescriptor:
        return PageDescriptor(
            path=cls.URL_PATH,
            alias_path=cls.ALIAS_URL_PATH,
            reject_path=cls.REJECT_URL_PATH,
            ready_indicator=cls.READY_INDICATOR,
            server=cls.SERVER,
        )

    # =========================================================================
    # Transitions
    # =========================================================================

    @classmethod
    def from_parent(cls: Type[P], parent: "BasePage") -> P:
        """
        Build this page object on the parent's session.

        Raises:
            SamePageTransitionError: If `parent` already is a `cls`; use
                `reached_from(parent, stale_element=...)` for same-page reloads.
        """
        if isinstance(parent, cls):
            raise SamePageTransitionError(
                f"{cls.__name__} -> {cls.__name__}: when returning the same page "
                f"pass the element that goes stale to reached_from()"
            )
        return cls(parent.session)

    @classmethod
    async def reached_from(
        cls: Type[P],
        parent: "BasePage",
        stale_element: Optional[ElementHandle] = None,
        timeout: Optional[float] = None,
    ) -> P:
        """
        Page object for the page a navigation action on `parent` leads to.

        Returns only once the new page is ready.

        Args:
            parent: Page object the action was performed on
            stale_element: Element of the old DOM; required when the action
                reloads the same page, waited on until it goes stale
            timeout: Optional wait bound in seconds
        """
        if stale_element is None:
            page = cls.from_parent(parent)
        else:
            page = cls(parent.session)
            await page.finder.wait_for_staleness_of(stale_element, timeout)
        await page.wait_for_page(timeout)
        logger.info(f"Reached {cls.__name__}: {page.get_current_absolute_url()}")
        return page

    # =========================================================================
    # Readiness
    # =========================================================================

    async def wait_for_page(self: P, timeout: Optional[float] = None) -> P:
        """
        Wait until the browser settled on this page.

        Landing on REJECT_URL_PATH also settles the wait; check `is_rejected()`.

        Raises:
            WaitTimeoutError: If the page is not ready in time
        """
        await wait_for_page_ready(
            self.session,
            self.descriptor(),
            self.session.wait_config.with_timeout(timeout),
        )
        return self

    def is_rejected(self) -> bool:
        """True when the browser currently shows this page's reject path."""
        reject = self.REJECT_URL_PATH
        return bool(reject) and reject in self.get_current_absolute_url()

    async def wait_for_page_to_load(self) -> None:
        """
        Wait for the document to finish loading.

        Reports a test failure instead of raising WaitTimeoutError.
        """
        async def load_complete() -> bool:
            return await self.page.evaluate(READY_STATE_SCRIPT) == READY_STATE_COMPLETE

        try:
            await poll_until(load_complete, self.session.wait_config, "document to finish loading")
        except WaitTimeoutError:
            pytest.fail("Timeout waiting for Page.")

    async def wait_for_element_with_specified_max_timeout(self, by: ElementLocator, seconds: float) -> None:
        """Wait for this page, then for `by` to be visible, both bounded by `seconds`."""
        await wait_for_page_ready(
            self.session,
            self.descriptor(),
            self.session.wait_config.with_timeout(seconds),
        )
        await self.finder.wait_for_element(by, seconds)

    async def wait_for_js_variable(self, var_name: str, timeout: Optional[float] = None) -> None:
        async def defined() -> bool:
            return await self.page.evaluate(js_variable_script(var_name))

        await poll_until(
            defined,
            self.session.wait_config.with_timeout(timeout),
            description=f"JavaScript variable {var_name}",
        )

    async def wait_for_focus_by_id(self, element_id: str, timeout: Optional[float] = None) -> None:
        async def focused() -> bool:
            return await self.page.evaluate(FOCUS_BY_ID_SCRIPT, element_id)

        await poll_until(
            focused,
            self.session.wait_config.with_timeout(timeout),
            description=f"focus on #{element_id}",
        )

    async def wait_for_focus_by_css(self, tag: str, attr: str, value: str, timeout: Optional[float] = None) -> None:
        async def focused() -> bool:
            return await self.page.evaluate(FOCUS_BY_CSS_SCRIPT, [tag, attr, value])

        await poll_until(
            focused,
            self.session.wait_config.with_timeout(timeout),
            description=f"focus on {tag}[{attr}={value}]",
        )

    # =========================================================================
    # URLs and navigation
    # =========================================================================

    def new_context_page_url(self, page_url: str) -> str:
        return self.endpoints.context(page_url)

    def new_absolute_emr_page_url(self, page_url: str) -> str:
        return self.endpoints.absolute("emr", page_url)

    def new_absolute_lab_page_url(self, page_url: str) -> str:
        return self.endpoints.absolute("lab", page_url)

    def new_absolute_facility_page_url(self, page_url: str) -> str:
        return self.endpoints.absolute("facility", page_url)

    def get_context_page_url(self) -> str:
        return self.new_context_page_url(self.URL_PATH)

    def get_absolute_page_url(self) -> str:
        return self.endpoints.absolute(self.SERVER, self.URL_PATH)

    def get_current_absolute_url(self) -> str:
        return self.page.url

    async def _navigate(self, url: str) -> None:
        with allure.step(f"Navigate to {url}"):
            await self.page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=to_ms(self.session.wait_config.timeout),
            )
            logger.debug(f"Navigated to: {url}")

    async def go_to_emr_page(self, address: str) -> None:
        await self._navigate(self.new_absolute_emr_page_url(address))

    async def go_to_lab_page(self, address: str) -> None:
        await self._navigate(self.new_absolute_lab_page_url(address))

    async def go_to_facility_page(self, address: str) -> None:
        await self._navigate(self.new_absolute_facility_page_url(address))

    async def go(self) -> None:
        """Navigate to this page and wait until it is ready."""
        await self._navigate(self.get_absolute_page_url())
        await self.wait_for_page()

    async def refresh_page(self) -> None:
        await self.page.reload()

    # =========================================================================
    # Page-level queries
    # =========================================================================

    async def execute_script(self, script: str, arg: Any = None) -> Any:
        """Evaluate a JavaScript expression or function in the page."""
        return await self.page.evaluate(script, arg)

    async def title(self) -> str:
        return await self.page.title()

    async def contains_text(self, text: str) -> bool:
        return text in await self.page.content()

    # =========================================================================
    # Element shortcuts
    # =========================================================================

    async def find_element(self, by: ElementLocator, timeout: Optional[float] = None) -> Locator:
        return await self.finder.find_element(by, timeout)

    async def find_elements(self, by: ElementLocator, timeout: Optional[float] = None) -> List[Locator]:
        return await self.finder.find_elements(by, timeout)

    async def find_element_without_wait(self, by: ElementLocator) -> Optional[Locator]:
        return await self.finder.find_element_without_wait(by)

    async def has_element_without_wait(self, by: ElementLocator) -> bool:
        return await self.finder.has_element_without_wait(by)

    async def get_elements_if_existing(self, by: ElementLocator) -> List[Locator]:
        return await self.finder.get_elements_if_existing(by)

    async def wait_for_element(self, by: ElementLocator, timeout: Optional[float] = None) -> None:
        await self.finder.wait_for_element(by, timeout)

    async def get_text(self, by: ElementLocator) -> str:
        return await self.actions.get_text(by)

    async def set_text(self, by: ElementLocator, text: str) -> None:
        await self.actions.set_text(by, text)

    async def set_text_no_enter(self, by: ElementLocator, text: str) -> None:
        await self.actions.set_text_no_enter(by, text)

    async def click_on(self, by: ElementLocator) -> None:
        await self.actions.click_on(by)

    async def select_from(self, by: ElementLocator, visible_text: str) -> None:
        await self.actions.select_from(by, visible_text)

    async def get_validation_errors(self) -> List[str]:
        return await self.actions.get_validation_errors()

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = SCREENSHOT_DIR / f"{name}_{timestamp}.png"

        await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            allure.attach.file(
                str(filepath),
                name=name,
                attachment_type=allure.attachment_type.PNG,
            )

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Validation errors shown on the page
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}", attach_to_allure=True)

            allure.attach(
                self.get_current_absolute_url(),
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )

            errors = await self.get_validation_errors()
            if errors:
                allure.attach(
                    "\n".join(errors),
                    name="Validation errors",
                    attachment_type=allure.attachment_type.TEXT,
                )


__all__ = [
    "BasePage",
    "SamePageTransitionError",
]
