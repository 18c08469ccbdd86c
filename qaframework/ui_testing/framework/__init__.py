"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based page-object framework for the facility registry web
applications (EMR, Lab, Facility).

Components:
    - readiness: Poll-until engine and page readiness predicate
    - locators: Locator vocabulary and bounded-wait element lookup
    - element_actions: Form interaction helpers and native dialogs
    - endpoints: Server group base URLs
    - browser_manager: Browser lifecycle and navigation sessions
    - page_base: Base page object

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager, DialogMonitor, NavigationSession
from .element_actions import ElementActions
from .endpoints import InvalidServerUrlError, ServerEndpoints
from .locators import By, ElementFinder, ElementLocator
from .page_base import BasePage, SamePageTransitionError
from .readiness import PageDescriptor, WaitConfig, WaitTimeoutError, poll_until

__all__ = [
    "BasePage",
    "BrowserManager",
    "By",
    "DialogMonitor",
    "ElementActions",
    "ElementFinder",
    "ElementLocator",
    "InvalidServerUrlError",
    "NavigationSession",
    "PageDescriptor",
    "SamePageTransitionError",
    "ServerEndpoints",
    "WaitConfig",
    "WaitTimeoutError",
    "poll_until",
]
