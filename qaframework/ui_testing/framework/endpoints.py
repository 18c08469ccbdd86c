"""
================================================================================
Server Endpoints
================================================================================

Base URLs of the three server groups under test (EMR, Lab, Facility) and the
URL builders page objects navigate with.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlparse

if TYPE_CHECKING:
    from qaframework.common.test_properties import TestProperties


SERVER_GROUPS = ("emr", "lab", "facility")


class InvalidServerUrlError(ValueError):
    """Raised when a configured server URL is not an absolute http(s) URL."""
    pass


def format_url(url: str) -> str:
    """Strip a single trailing slash."""
    if url.endswith("/"):
        url = url[:-1]
    return url


def append_slash(page_url: str) -> str:
    """Make sure a page path starts with '/'."""
    if not page_url.startswith("/"):
        page_url = "/" + page_url
    return page_url


def _validate(setting: str, url: str) -> str:
    parsed = urlparse(url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidServerUrlError(f"{setting} {url!r} is not a valid URL")
    return format_url(url)


@dataclass(frozen=True)
class ServerEndpoints:
    """
    Normalized base URLs for every server group.

    Attributes:
        emr_url: Primary application base URL
        lab_url: Lab sub-system base URL
        facility_url: Facility sub-system base URL
    """
    emr_url: str
    lab_url: str
    facility_url: str

    def __post_init__(self) -> None:
        for group in SERVER_GROUPS:
            setting = f"{group}_url"
            object.__setattr__(self, setting, _validate(setting, getattr(self, setting)))

    @classmethod
    def from_properties(cls, properties: "TestProperties") -> "ServerEndpoints":
        return cls(
            emr_url=properties.emr_url,
            lab_url=properties.lab_url,
            facility_url=properties.facility_url,
        )

    @property
    def context_path(self) -> str:
        """Path component of the EMR base URL (the webapp context)."""
        return urlparse(self.emr_url).path

    def base_url(self, server: str) -> str:
        if server not in SERVER_GROUPS:
            raise ValueError(f"Unknown server group: {server!r} (expected one of {SERVER_GROUPS})")
        return getattr(self, f"{server}_url")

    def absolute(self, server: str, page_url: str) -> str:
        return self.base_url(server) + append_slash(page_url)

    def context(self, page_url: str) -> str:
        return self.context_path + append_slash(page_url)


__all__ = [
    "InvalidServerUrlError",
    "SERVER_GROUPS",
    "ServerEndpoints",
    "append_slash",
    "format_url",
]
