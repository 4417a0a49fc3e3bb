"""
Pytest plugin for main-branch testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["main_branch.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from main_branch.testing.fixtures import (
    acme_widgets,
    fake_gateway,
    log_entries,
    orchestrator,
    sleeps,
)

__all__ = [
    "fake_gateway",
    "acme_widgets",
    "log_entries",
    "sleeps",
    "orchestrator",
]
