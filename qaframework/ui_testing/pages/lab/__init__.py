"""Lab sub-system page objects."""

from .home_page import HomePage
from .login_page import LoginPage

__all__ = [
    "HomePage",
    "LoginPage",
]
