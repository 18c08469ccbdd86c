"""
Facility registry QA framework.

Page objects and readiness waits for browser-driven end-to-end testing of the
EMR, Lab and Facility web applications.
"""

__version__ = "1.0.0"
