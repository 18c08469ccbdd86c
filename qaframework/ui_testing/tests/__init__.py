"""End-to-end UI tests against live servers."""
