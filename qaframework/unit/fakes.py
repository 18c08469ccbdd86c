"""
In-memory stand-ins for the slice of the Playwright async API the framework
uses, so page objects can be exercised without a browser.

Elements are registered per selector string (use `ElementLocator.selector`);
script results are registered per expression and may be callables taking the
evaluate() argument.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from qaframework.ui_testing.framework.element_actions import (
    ATTRIBUTE_SCRIPT,
    HAS_FOCUS_SCRIPT,
    JS_CLICK_SCRIPT,
)
from qaframework.ui_testing.framework.locators import IS_CONNECTED_SCRIPT, ElementLocator
from qaframework.ui_testing.framework.readiness import READY_STATE_SCRIPT


class FakeElement:
    def __init__(
        self,
        text: str = "",
        attributes: Optional[Dict[str, Any]] = None,
        visible: bool = True,
        enabled: bool = True,
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        on_click: Optional[Callable[[], None]] = None,
    ):
        self.text = text
        self.attributes = dict(attributes or {})
        self.value = self.attributes.pop("value", "")
        self.visible = visible
        self.enabled = enabled
        self.children = children or {}
        self.on_click = on_click
        self.connected = True
        self.focused = False
        self.clicks = 0
        self.js_clicks = 0
        self.hovered = False
        self.pressed: List[str] = []
        self.selected: Any = None

    def attribute(self, name: str) -> Optional[str]:
        if name == "value":
            return self.value
        if name in ("disabled", "checked"):
            return "true" if self.attributes.get(name) else None
        return self.attributes.get(name)


class FakeElementHandle:
    def __init__(self, element: FakeElement, page: "FakeBrowserPage"):
        self._element = element
        self._page = page
        self._navigation_count = page.navigation_count

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if script != IS_CONNECTED_SCRIPT:
            raise AssertionError(f"Unexpected handle script: {script}")
        if self._page.navigation_count != self._navigation_count:
            raise PlaywrightError("Execution context was destroyed, most likely because of a navigation")
        return self._element.connected


class FakeLocator:
    def __init__(self, page: "FakeBrowserPage", resolve: Callable[[], List[FakeElement]], index: Optional[int] = None):
        self._page = page
        self._resolve = resolve
        self._index = index

    def _matches(self) -> List[FakeElement]:
        elements = self._resolve()
        if self._index is None:
            return elements
        try:
            return [elements[self._index]]
        except IndexError:
            return []

    def _element_or_none(self) -> Optional[FakeElement]:
        matches = self._matches()
        return matches[0] if matches else None

    def _element(self) -> FakeElement:
        element = self._element_or_none()
        if element is None:
            raise PlaywrightError("Element is not attached to the DOM")
        return element

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._page, self._resolve, 0)

    @property
    def last(self) -> "FakeLocator":
        return FakeLocator(self._page, self._resolve, -1)

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self._page, lambda: self._element().children.get(selector, []))

    async def count(self) -> int:
        return len(self._matches())

    async def all(self) -> List["FakeLocator"]:
        return [FakeLocator(self._page, self._resolve, i) for i in range(len(self._resolve()))]

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        element = self._element_or_none()
        reached = {
            "attached": element is not None,
            "detached": element is None,
            "visible": element is not None and element.visible,
            "hidden": element is None or not element.visible,
        }[state]
        if not reached:
            self._page.wait_calls.append((state, timeout))
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {state}")

    async def click(self, **kwargs: Any) -> None:
        element = self._element()
        element.clicks += 1
        if element.on_click:
            element.on_click()

    async def fill(self, value: str, **kwargs: Any) -> None:
        self._element().value = value

    async def clear(self, **kwargs: Any) -> None:
        self._element().value = ""

    async def press(self, key: str, **kwargs: Any) -> None:
        self._element().pressed.append(key)

    async def hover(self, **kwargs: Any) -> None:
        self._element().hovered = True

    async def select_option(self, value: Any = None, index: Any = None, label: Any = None, **kwargs: Any) -> List[str]:
        element = self._element()
        element.selected = label if label is not None else (index if index is not None else value)
        return [str(element.selected)]

    async def inner_text(self, **kwargs: Any) -> str:
        return self._element().text

    async def is_visible(self) -> bool:
        element = self._element_or_none()
        return element is not None and element.visible

    async def is_enabled(self, **kwargs: Any) -> bool:
        return self._element().enabled

    async def element_handle(self, **kwargs: Any) -> FakeElementHandle:
        return FakeElementHandle(self._element(), self._page)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        element = self._element()
        if script == ATTRIBUTE_SCRIPT:
            return element.attribute(arg)
        if script == JS_CLICK_SCRIPT:
            element.js_clicks += 1
            element.focused = True
            if element.on_click:
                element.on_click()
            return None
        if script == HAS_FOCUS_SCRIPT:
            return element.focused
        raise AssertionError(f"Unexpected element script: {script}")


class FakeDialog:
    def __init__(self, dialog_type: str = "alert", message: str = ""):
        self.type = dialog_type
        self.message = message
        self.accepted = False
        self.dismissed = False
        self.prompt_text: Optional[str] = None

    async def accept(self, prompt_text: Optional[str] = None) -> None:
        self.accepted = True
        self.prompt_text = prompt_text

    async def dismiss(self) -> None:
        self.dismissed = True


class FakeBrowserPage:
    """Playwright `Page` double recording navigations."""

    def __init__(self, url: str = "about:blank"):
        self.url = url
        self.elements: Dict[str, List[FakeElement]] = {}
        self.script_results: Dict[str, Any] = {READY_STATE_SCRIPT: "complete"}
        self.visits: List[str] = []
        self.handlers: Dict[str, List[Callable]] = {}
        self.wait_calls: List[Any] = []
        self.evaluated: List[Any] = []
        self.html = ""
        self.page_title = ""
        self.reloads = 0
        self.navigation_count = 0
        self.on_goto: Optional[Callable[[str], None]] = None

    # ------------------------------------------------------------------ setup

    def add(self, by: ElementLocator, *elements: FakeElement) -> None:
        self.elements[by.selector] = list(elements)

    def remove(self, by: ElementLocator) -> None:
        self.elements.pop(by.selector, None)

    def set_ready_state(self, state: Any) -> None:
        self.script_results[READY_STATE_SCRIPT] = state

    def navigate_to(self, url: str, ready_state: str = "complete") -> None:
        """Simulate a navigation the page performs on its own (form submit, link)."""
        self.url = url
        self.navigation_count += 1
        self.set_ready_state(ready_state)

    def fire_dialog(self, dialog: FakeDialog) -> None:
        for handler in self.handlers.get("dialog", []):
            handler(dialog)

    # ------------------------------------------------------- Playwright API

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, lambda: self.elements.get(selector, []))

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.visits.append(url)
        self.navigate_to(url)
        if self.on_goto:
            self.on_goto(url)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.evaluated.append((expression, arg))
        if expression not in self.script_results:
            raise AssertionError(f"Unexpected page script: {expression}")
        result = self.script_results[expression]
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(arg)
        return result

    async def content(self) -> str:
        return self.html

    async def title(self) -> str:
        return self.page_title

    async def reload(self, **kwargs: Any) -> None:
        self.reloads += 1
        self.navigation_count += 1

    async def screenshot(self, path: Optional[str] = None, **kwargs: Any) -> bytes:
        data = b"\x89PNG fake"
        if path:
            with open(path, "wb") as f:
                f.write(data)
        return data
