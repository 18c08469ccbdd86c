"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the facility registry applications,
grouped by server (lab, ...).

Each page class encapsulates:
    - Page identity (URL_PATH, optional alias/reject paths, ready indicator)
    - Element locators
    - Page-specific actions returning the next page object

================================================================================
"""

from .lab import HomePage as LabHomePage
from .lab import LoginPage as LabLoginPage

__all__ = [
    "LabHomePage",
    "LabLoginPage",
]
