"""
Unit test fixtures: a fake Playwright page wrapped in a real NavigationSession,
with short timeouts so negative waits finish quickly.
"""

import pytest

from qaframework.common.test_properties import TestProperties
from qaframework.ui_testing.framework.browser_manager import NavigationSession
from qaframework.unit.fakes import FakeBrowserPage


EMR_URL = "https://emr.example.org/openmrs"
LAB_URL = "https://lab.example.org/OpenELIS-Global"
FACILITY_URL = "https://facility.example.org"


@pytest.fixture
def property_values():
    return {
        "servers.emr_url": EMR_URL + "/",
        "servers.lab_url": LAB_URL + "/",
        "servers.facility_url": FACILITY_URL,
        "credentials.lab_username": "labadmin",
        "credentials.lab_password": "s3cret",
        "timeouts.max_wait_seconds": 0.3,
        "timeouts.poll_interval_seconds": 0.01,
        "timeouts.optional_element_seconds": 0.05,
        "timeouts.dialog_probe_seconds": 0.05,
    }


@pytest.fixture
def properties(tmp_path, property_values):
    return TestProperties(config_path=tmp_path / "absent.yaml", values=property_values)


@pytest.fixture
def fake_page():
    return FakeBrowserPage()


@pytest.fixture
def session(fake_page, properties):
    return NavigationSession(fake_page, properties)
