"""Shared fixtures for the main-branch test suite."""

from main_branch.testing.conftest import (  # noqa: F401
    acme_widgets,
    fake_gateway,
    log_entries,
    orchestrator,
    sleeps,
)
