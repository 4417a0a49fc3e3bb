"""main-branch testing utilities.

Provides an in-memory gateway and fixtures for testing code that runs
branch migrations.
"""

from main_branch.testing.fake import FakeCall, FakeGateway, FakeRepository
from main_branch.testing.fixtures import (
    MASTER_SHA,
    OTHER_SHA,
    RecordingSink,
    RecordingSleep,
    create_fake_repository,
)

__all__ = [
    # Fake gateway
    "FakeGateway",
    "FakeRepository",
    "FakeCall",
    # Helpers
    "create_fake_repository",
    "RecordingSink",
    "RecordingSleep",
    "MASTER_SHA",
    "OTHER_SHA",
]
