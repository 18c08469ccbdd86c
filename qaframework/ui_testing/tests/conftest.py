"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for end-to-end tests: one browser per test, an isolated context and
a NavigationSession bound to the shared test properties.

Key Features:
- Browser and session lifecycle management
- Page Object fixtures for the Lab pages
- Screenshot capture on failure

================================================================================
"""

from typing import AsyncGenerator

import allure
import pytest
from loguru import logger
from playwright.async_api import Error as PlaywrightError

from qaframework.common.test_properties import TestProperties
from qaframework.ui_testing.framework.browser_manager import BrowserManager, NavigationSession
from qaframework.ui_testing.pages import LabHomePage, LabLoginPage


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
def properties() -> TestProperties:
    return TestProperties.instance()


@pytest.fixture
async def browser_manager(properties: TestProperties) -> AsyncGenerator[BrowserManager, None]:
    """
    Browser manager fixture.

    Launches the configured browser (`browser.type`, `browser.headless`) and
    closes it with every context it opened after the test.
    """
    async with BrowserManager(properties=properties) as manager:
        yield manager


@pytest.fixture
async def session(request, browser_manager: BrowserManager) -> AsyncGenerator[NavigationSession, None]:
    """
    Navigation session on a fresh, isolated browser context.

    Attaches a full-page screenshot to the Allure report when the test failed.
    """
    session = await browser_manager.new_session()
    yield session

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        try:
            screenshot = await session.page.screenshot(full_page=True)
            allure.attach(
                screenshot,
                name="failure_screenshot",
                attachment_type=allure.attachment_type.PNG,
            )
            allure.attach(
                session.current_url,
                name="failure_url",
                attachment_type=allure.attachment_type.TEXT,
            )
        except PlaywrightError as e:
            logger.warning(f"Failed to capture screenshot on failure: {e}")


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(session: NavigationSession) -> LabLoginPage:
    """
    Provides the Lab LoginPage instance (not yet opened).
    """
    return LabLoginPage(session)


@pytest.fixture
async def home_page(login_page: LabLoginPage) -> LabHomePage:
    """
    Provides the Lab HomePage, signed in with the configured lab credentials.
    """
    return await login_page.go_to_home_page()


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Keep each phase's report on the item.

    The `session` fixture reads `rep_call` during teardown to decide whether
    to capture a failure screenshot.
    """
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


# ================================================================================
# Utility Fixtures
# ================================================================================

@pytest.fixture
def test_data(properties: TestProperties):
    """
    Provides common test data for UI tests.
    """
    return {
        "valid_user": {
            "username": properties.lab_username,
            "password": properties.lab_password,
        },
        "invalid_user": {
            "username": "invalid_user",
            "password": "wrong_password",
        },
    }
