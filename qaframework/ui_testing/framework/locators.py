"""
================================================================================
Locators and Element Access
================================================================================

Locator vocabulary and bounded-wait element lookup.

Features:
    - (strategy, value) locators rendered to Playwright selectors
    - Visible / present / clickable / hidden / stale waits with per-call timeouts
    - No-wait variants for optional elements that never raise on absence

Wait behaviour is scoped to each call. Nothing here changes a session-wide
timeout, so one lookup can never shorten or extend another.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from loguru import logger
from playwright.async_api import ElementHandle, Locator
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .readiness import WaitTimeoutError, poll_until

if TYPE_CHECKING:
    from .browser_manager import NavigationSession


IS_CONNECTED_SCRIPT = "el => el.isConnected"


def to_ms(seconds: float) -> int:
    """Seconds to Playwright milliseconds. Playwright reads 0 as "no timeout"."""
    return max(int(seconds * 1000), 1)


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


@dataclass(frozen=True)
class ElementLocator:
    """
    A (strategy, value) pair passed opaquely to the browser.

    Attributes:
        strategy: One of the By.* strategy names
        value: Strategy-specific value (id, name, CSS, XPath, ...)
    """
    strategy: str
    value: str

    @property
    def selector(self) -> str:
        """Playwright selector equivalent of this locator."""
        if self.strategy == By.ID:
            return f"[id={_quote(self.value)}]"
        if self.strategy == By.NAME:
            return f"[name={_quote(self.value)}]"
        if self.strategy == By.CLASS_NAME:
            return f"[class~={_quote(self.value)}]"
        if self.strategy == By.LINK_TEXT:
            return f"a:text-is({_quote(self.value)})"
        if self.strategy == By.XPATH:
            return f"xpath={self.value}"
        if self.strategy in (By.CSS_SELECTOR, By.TAG_NAME):
            return f"css={self.value}"
        raise ValueError(f"Unsupported locator strategy: {self.strategy!r}")

    def __str__(self) -> str:
        return f"By.{self.strategy}: {self.value}"


class By:
    """
    Locator factories.

    Usage:
        >>> By.id("loginName")
        ElementLocator(strategy='id', value='loginName')
    """

    ID = "id"
    NAME = "name"
    CSS_SELECTOR = "css selector"
    XPATH = "xpath"
    TAG_NAME = "tag name"
    CLASS_NAME = "class name"
    LINK_TEXT = "link text"

    @staticmethod
    def id(value: str) -> ElementLocator:
        return ElementLocator(By.ID, value)

    @staticmethod
    def name(value: str) -> ElementLocator:
        return ElementLocator(By.NAME, value)

    @staticmethod
    def css(value: str) -> ElementLocator:
        return ElementLocator(By.CSS_SELECTOR, value)

    @staticmethod
    def xpath(value: str) -> ElementLocator:
        return ElementLocator(By.XPATH, value)

    @staticmethod
    def tag_name(value: str) -> ElementLocator:
        return ElementLocator(By.TAG_NAME, value)

    @staticmethod
    def class_name(value: str) -> ElementLocator:
        return ElementLocator(By.CLASS_NAME, value)

    @staticmethod
    def link_text(value: str) -> ElementLocator:
        return ElementLocator(By.LINK_TEXT, value)

    @staticmethod
    def from_href(href: str) -> ElementLocator:
        # hrefs tend to be stable enough for XPath
        return By.xpath(f"//a[@href='{href}']")


class ElementFinder:
    """
    Bounded-wait element lookup on top of the session's Playwright page.

    Every waiting helper takes an optional `timeout` in seconds; when omitted
    the session's max wait applies.

    Usage:
        finder = ElementFinder(session)
        username = await finder.find_element(By.id("loginName"))
        banner = await finder.find_element_without_wait(By.id("details-button"))
    """

    def __init__(self, session: "NavigationSession"):
        self.session = session

    @property
    def page(self):
        return self.session.page

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.session.wait_config.timeout if timeout is None else timeout

    def locator(self, by: ElementLocator) -> Locator:
        """Raw (lazy) Playwright locator for `by`."""
        return self.page.locator(by.selector)

    async def _wait_for_state(self, by: ElementLocator, state: str, timeout: Optional[float]) -> Locator:
        seconds = self._timeout(timeout)
        element = self.locator(by).first
        try:
            await element.wait_for(state=state, timeout=to_ms(seconds))
        except PlaywrightTimeoutError as e:
            message = f"Timeout after {seconds}s waiting for {by} to be {state}"
            logger.error(message)
            raise WaitTimeoutError(message) from e
        return element

    # =========================================================================
    # Waiting lookups
    # =========================================================================

    async def find_element(self, by: ElementLocator, timeout: Optional[float] = None) -> Locator:
        """First element matching `by`, once visible."""
        return await self._wait_for_state(by, "visible", timeout)

    async def find_elements(self, by: ElementLocator, timeout: Optional[float] = None) -> List[Locator]:
        """All elements matching `by`, once at least one is present in the DOM."""
        await self._wait_for_state(by, "attached", timeout)
        return await self.locator(by).all()

    async def find_element_by_id(self, element_id: str, timeout: Optional[float] = None) -> Locator:
        return await self.find_element(By.id(element_id), timeout)

    async def find_element_by_name(self, name: str, timeout: Optional[float] = None) -> Locator:
        return await self.find_element(By.name(name), timeout)

    async def wait_for_element(self, by: ElementLocator, timeout: Optional[float] = None) -> None:
        await self._wait_for_state(by, "visible", timeout)

    async def wait_for_element_to_be_hidden(self, by: ElementLocator, timeout: Optional[float] = None) -> None:
        """Wait until the element is invisible or gone."""
        await self._wait_for_state(by, "hidden", timeout)

    async def wait_for_element_to_be_enabled(self, by: ElementLocator, timeout: Optional[float] = None) -> Locator:
        """Wait until the element is visible and enabled (clickable)."""
        element = self.locator(by).first

        async def clickable() -> bool:
            if await self.locator(by).count() == 0:
                return False
            return await element.is_visible() and await element.is_enabled()

        await poll_until(
            clickable,
            self.session.wait_config.with_timeout(timeout),
            description=f"{by} to be clickable",
        )
        return element

    async def wait_for_text_to_be_present_in_element(
        self,
        by: ElementLocator,
        text: str,
        timeout: Optional[float] = None,
    ) -> None:
        element = self.locator(by).first

        async def text_present() -> bool:
            if await self.locator(by).count() == 0 or not await element.is_visible():
                return False
            return text in (await element.inner_text())

        await poll_until(
            text_present,
            self.session.wait_config.with_timeout(timeout),
            description=f"text {text!r} in {by}",
        )

    async def capture_element(self, by: ElementLocator, timeout: Optional[float] = None) -> ElementHandle:
        """
        Pin the current DOM node for `by`.

        Unlike a Locator, the returned handle goes stale once the node leaves
        the document, which is what `wait_for_staleness_of` watches for.
        """
        element = await self.find_element(by, timeout)
        return await element.element_handle()

    async def wait_for_staleness_of(self, element: ElementHandle, timeout: Optional[float] = None) -> None:
        """Wait until `element` no longer belongs to the current document."""

        async def is_stale() -> bool:
            try:
                return not await element.evaluate(IS_CONNECTED_SCRIPT)
            except PlaywrightError:
                # Execution context destroyed: the page navigated away
                return True

        await poll_until(
            is_stale,
            self.session.wait_config.with_timeout(timeout),
            description="element to become stale",
        )

    async def has_element(self, by: ElementLocator, timeout: Optional[float] = None) -> bool:
        """True once `by` is visible; raises WaitTimeoutError otherwise."""
        await self.find_element(by, timeout)
        return True

    # =========================================================================
    # No-wait lookups (never raise on absence)
    # =========================================================================

    async def find_element_without_wait(
        self,
        by: ElementLocator,
        timeout: Optional[float] = None,
    ) -> Optional[Locator]:
        """
        Probe for an optional element.

        Args:
            by: Element locator
            timeout: Probe bound in seconds. Defaults to the configured
                optional-element probe, which is much shorter than the max wait.

        Returns:
            The first matching element, or None when absent
        """
        seconds = self.session.properties.optional_element_seconds if timeout is None else timeout
        element = self.locator(by).first
        try:
            await element.wait_for(state="attached", timeout=to_ms(seconds))
        except PlaywrightTimeoutError:
            logger.debug(f"Optional element absent after {seconds}s: {by}")
            return None
        return element

    async def get_elements_if_existing(self, by: ElementLocator) -> List[Locator]:
        """Elements currently matching `by`, without waiting. Empty when absent."""
        return await self.locator(by).all()

    async def has_element_without_wait(self, by: ElementLocator, timeout: Optional[float] = None) -> bool:
        return await self.find_element_without_wait(by, timeout) is not None


__all__ = [
    "By",
    "ElementFinder",
    "ElementLocator",
    "IS_CONNECTED_SCRIPT",
    "to_ms",
]
