# ================================================================================
# Element Actions Module
# ================================================================================
#
# Form interaction helpers composed over ElementFinder: typing, clicking,
# dropdowns, hover, JavaScript-forced clicks, native dialogs and validation
# error collection.
#
# Key Features:
#   - Bounded waits before every interaction (no fixed sleeps)
#   - JavaScript click for elements that ignore native events
#   - Dialog accept/dismiss through the session's DialogMonitor
#   - Allure step integration
#
# Usage:
#   actions = ElementActions(finder)
#   await actions.set_text_no_enter(By.id("loginName"), "admin")
#   await actions.click_on(By.id("submitButton"))
#
# ================================================================================

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import allure
from loguru import logger
from playwright.async_api import Locator

from .locators import By, ElementFinder, ElementLocator
from .readiness import WaitTimeoutError, poll_until

if TYPE_CHECKING:
    from playwright.async_api import Dialog


# Mirrors WebDriver attribute semantics: live `value`, boolean properties as
# "true"/null, everything else from the DOM attribute.
ATTRIBUTE_SCRIPT = """(el, name) => {
    const prop = el[name];
    if (typeof prop === 'boolean') return prop ? 'true' : null;
    if (name === 'value' && prop !== undefined && prop !== null) return String(prop);
    return el.getAttribute(name);
}"""
JS_CLICK_SCRIPT = "el => el.click()"
HAS_FOCUS_SCRIPT = "el => el === document.activeElement"
QUERY_ATTRIBUTE_SCRIPT = "([css, attribute]) => document.querySelector(css)[attribute]"
SET_ATTRIBUTE_SCRIPT = "([css, attribute, value]) => { document.querySelector(css)[attribute] = value; }"

VALIDATION_ERROR_CLASSES = ("field-error", "error")


class ElementActions:
    """
    Standard interaction idioms on top of element lookup.

    Driver-level failures (detached element, element not interactable)
    propagate unchanged; nothing here retries.

    Example:
        actions = ElementActions(ElementFinder(session))
        await actions.select_from(By.id("sampleType"), "Serum")
        errors = await actions.get_validation_errors()
    """

    def __init__(self, finder: ElementFinder):
        self.finder = finder
        self.session = finder.session

    @property
    def page(self):
        return self.session.page

    # =========================================================================
    # Text
    # =========================================================================

    async def get_text(self, by: ElementLocator) -> str:
        element = await self.finder.find_element(by)
        return await element.inner_text()

    async def set_text(self, by: ElementLocator, text: str) -> None:
        """Clear the field, type `text` and press Enter."""
        await self._set_text(await self.finder.find_element(by), text)

    async def set_text_by_id(self, element_id: str, text: str) -> None:
        await self._set_text(await self.finder.find_element_by_id(element_id), text)

    async def set_text_no_enter(self, by: ElementLocator, text: str) -> None:
        await self._set_text_no_enter(await self.finder.find_element(by), text)

    async def set_text_to_field_inside_span(self, span_id: str, text: str) -> None:
        span = await self.finder.find_element_by_id(span_id)
        await self._set_text(span.locator(By.tag_name("input").selector).first, text)

    async def clear_text(self, by: ElementLocator) -> None:
        element = await self.finder.find_element(by)
        await element.clear()

    async def _set_text(self, element: Locator, text: str) -> None:
        await self._set_text_no_enter(element, text)
        await element.press("Enter")

    async def _set_text_no_enter(self, element: Locator, text: str) -> None:
        await element.clear()
        await element.fill(text)

    # =========================================================================
    # Clicks and pointer
    # =========================================================================

    async def click_on(self, by: ElementLocator) -> None:
        with allure.step(f"Click: {by}"):
            element = await self.finder.find_element(by)
            await element.click()

    async def click_on_last(self, by: ElementLocator) -> None:
        await self.finder.find_elements(by)
        await self.finder.locator(by).last.click()

    async def click_on_link_from_href(self, href: str) -> None:
        await self.click_on(By.from_href(href))

    async def click_by_javascript(self, by: ElementLocator) -> None:
        """Click through the DOM for elements that swallow native pointer events."""
        element = await self.finder.find_element(by)
        await element.evaluate(JS_CLICK_SCRIPT)

    async def hover_on(self, by: ElementLocator) -> None:
        element = await self.finder.find_element(by)
        await element.hover()

    # =========================================================================
    # Dropdowns
    # =========================================================================

    async def select_from(self, by: ElementLocator, visible_text: str) -> None:
        """Select the option whose visible text is `visible_text`."""
        with allure.step(f"Select '{visible_text}' from {by}"):
            element = await self.finder.find_element(by)
            await element.select_option(label=visible_text)

    async def select_option_from_drop_down(self, by: ElementLocator) -> None:
        """Select the second option (the first is usually a placeholder)."""
        await self.click_on(by)
        element = await self.finder.find_element(by)
        if await element.locator(By.tag_name("option").selector).count() > 1:
            await element.select_option(index=1)

    async def drop_down_has_options(self, by: ElementLocator) -> bool:
        await self.click_on(by)
        element = await self.finder.find_element(by)
        return await element.locator(By.tag_name("option").selector).count() > 0

    async def select_option_by_javascript(self, by: ElementLocator) -> None:
        """
        Force-open a React-style select and pick its first option.

        The JavaScript click opens the menu; keys are sent once the control
        holds focus.
        """
        element = await self.finder.find_element(by)
        await element.evaluate(JS_CLICK_SCRIPT)

        async def focused() -> bool:
            return await element.evaluate(HAS_FOCUS_SCRIPT)

        await poll_until(focused, self.session.wait_config, description=f"{by} to take focus")
        for key in ("ArrowDown", "Enter", "Enter"):
            await element.press(key)

    async def select_option_by_action(self, by: ElementLocator, value: ElementLocator) -> None:
        element = await self.finder.find_element(by)
        await element.hover()
        await element.click()
        option = await self.finder.find_element(value)
        await option.click()

    # =========================================================================
    # Attributes and state
    # =========================================================================

    async def get_attribute(self, by: ElementLocator, name: str) -> Optional[str]:
        element = await self.finder.find_element(by)
        return await element.evaluate(ATTRIBUTE_SCRIPT, name)

    async def get_value(self, by: ElementLocator) -> Optional[str]:
        return await self.get_attribute(by, "value")

    async def get_value_without_wait(self, by: ElementLocator) -> str:
        """Value of an optional field, "" when it is absent."""
        element = await self.finder.find_element_without_wait(by)
        if element is None:
            return ""
        return await element.evaluate(ATTRIBUTE_SCRIPT, "value") or ""

    async def get_class(self, by: ElementLocator) -> Optional[str]:
        return await self.get_attribute(by, "class")

    async def get_style(self, by: ElementLocator) -> Optional[str]:
        return await self.get_attribute(by, "style")

    async def is_disabled(self, by: ElementLocator) -> bool:
        return await self.get_attribute(by, "disabled") == "true"

    async def is_checked(self, by: ElementLocator) -> bool:
        return await self.get_attribute(by, "checked") == "true"

    async def get_validation_errors(self) -> List[str]:
        """Non-blank texts of every visible element styled as a validation error."""
        validation_errors: List[str] = []
        for css_class in VALIDATION_ERROR_CLASSES:
            for element in await self.finder.get_elements_if_existing(By.class_name(css_class)):
                # hidden message templates still carry their text
                if not await element.is_visible():
                    continue
                text = (await element.inner_text()).strip()
                if text:
                    validation_errors.append(text)
        if validation_errors:
            logger.debug(f"Validation errors on page: {validation_errors}")
        return validation_errors

    async def query_js_for_attribute(self, css_handle: str, attribute: str):
        return await self.page.evaluate(QUERY_ATTRIBUTE_SCRIPT, [css_handle, attribute])

    async def set_attribute_with_js(self, css_handle: str, attribute: str, value: str) -> None:
        await self.page.evaluate(SET_ATTRIBUTE_SCRIPT, [css_handle, attribute, value])

    # =========================================================================
    # Native dialogs
    # =========================================================================

    async def _wait_for_dialog(self, dialog_type: Optional[str] = None) -> "Dialog":
        return await self.session.dialogs.wait_for(self.session.wait_config, dialog_type)

    async def accept_alert(self) -> None:
        dialog = await self._wait_for_dialog()
        logger.debug(f"Accepting {dialog.type}: {dialog.message}")
        await self.session.dialogs.accept(dialog)

    async def dismiss_alert(self) -> None:
        dialog = await self._wait_for_dialog()
        logger.debug(f"Dismissing {dialog.type}: {dialog.message}")
        await self.session.dialogs.dismiss(dialog)

    async def alert_present(self, timeout: Optional[float] = None) -> bool:
        """True if any native dialog shows up within the probe window."""
        return await self._dialog_present(None, timeout)

    async def prompt_present(self, timeout: Optional[float] = None) -> bool:
        """True if a prompt() dialog shows up within the probe window."""
        return await self._dialog_present("prompt", timeout)

    async def _dialog_present(self, dialog_type: Optional[str], timeout: Optional[float]) -> bool:
        seconds = self.session.properties.dialog_probe_seconds if timeout is None else timeout
        try:
            await self.session.dialogs.wait_for(
                self.session.wait_config.with_timeout(seconds),
                dialog_type,
                timeout_log_level="DEBUG",
            )
        except WaitTimeoutError:
            return False
        return True


__all__ = [
    "ATTRIBUTE_SCRIPT",
    "ElementActions",
    "HAS_FOCUS_SCRIPT",
    "JS_CLICK_SCRIPT",
    "VALIDATION_ERROR_CLASSES",
]
