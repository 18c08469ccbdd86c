"""
================================================================================
Root Pytest Configuration
================================================================================

Registers the project-wide markers and the `--run-e2e` switch, and sets up
logging once per test session.

End-to-end tests need live EMR / Lab / Facility servers (see
config/config.yaml); they are collected but skipped unless `--run-e2e` is
given.

================================================================================
"""

from __future__ import annotations

from pathlib import Path

import pytest

from qaframework.common import init_logger


def pytest_addoption(parser):
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests against the configured servers",
    )


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests driving a real browser against live servers"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Browser UI tests"
    )
    config.addinivalue_line(
        "markers", "unit: Framework tests run against an in-memory browser double"
    )
    config.addinivalue_line(
        "markers", "lab: Tests of the Lab sub-system pages"
    )


def pytest_collection_modifyitems(config, items):
    """Tag tests by directory and skip e2e tests unless --run-e2e is given."""
    skip_e2e = pytest.mark.skip(reason="needs --run-e2e and live servers")
    run_e2e = config.getoption("--run-e2e")

    for item in items:
        path = str(item.fspath)

        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
            item.add_marker(pytest.mark.e2e)

        if f"{Path('qaframework', 'unit')}" in path:
            item.add_marker(pytest.mark.unit)

        if not run_e2e and "e2e" in item.keywords:
            item.add_marker(skip_e2e)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Facility Registry QA Framework",
        "=" * 60,
        "",
    ]


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _configure_logging() -> None:
    init_logger()
