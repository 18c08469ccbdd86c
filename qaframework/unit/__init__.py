"""Unit tests that run without a browser."""
