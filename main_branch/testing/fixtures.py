"""
Pytest fixtures for main-branch testing.

Provides a fake gateway seeded with one repository, a recording log sink,
and an orchestrator that never sleeps.
"""

from collections.abc import Generator

import pytest

from main_branch.logging import LogEntry, LogType
from main_branch.orchestrator import Orchestrator
from main_branch.testing.fake import FakeGateway, FakeRepository
from main_branch.types.repos import RepositoryIdentity

MASTER_SHA = "6dcb09b5b57875f334f61aebed695e2e4193db5e"
OTHER_SHA = "c5b97d5ae6c19d5c5df71a34c7fbeeda2479ccbc"


def create_fake_repository(
    full_name: str = "acme/widgets",
    default_branch: str = "master",
    branches: dict[str, str] | None = None,
    protected: set[str] | None = None,
    pages_branch: str | None = None,
    pull_bases: list[str] | None = None,
) -> FakeRepository:
    """
    Create a FakeRepository with sensible defaults.

    Args:
        full_name: ``owner/name``
        default_branch: Default branch name
        branches: Branch name to SHA (default: the default branch at MASTER_SHA)
        protected: Names of protected branches
        pages_branch: Branch a Pages site is published from
        pull_bases: One open pull request is created per entry, with that base
    """
    repository = FakeRepository(
        identity=RepositoryIdentity.parse(full_name),
        default_branch=default_branch,
        branches=dict(branches) if branches is not None else {default_branch: MASTER_SHA},
        protected=set(protected or ()),
        pages_branch=pages_branch,
    )
    for base in pull_bases or []:
        repository.add_pull(base)
    return repository


class RecordingSink:
    """Log sink that keeps every entry."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def __call__(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def texts(self, log_type: LogType | None = None) -> list[str]:
        return [
            entry.text
            for entry in self.entries
            if log_type is None or entry.log_type is log_type
        ]

    def operations(self) -> list[str]:
        return [entry.operation for entry in self.entries]


class RecordingSleep:
    """Sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_gateway() -> Generator[FakeGateway, None, None]:
    """Provide an empty FakeGateway."""
    gateway = FakeGateway()
    yield gateway
    gateway.reset()


@pytest.fixture
def acme_widgets(fake_gateway: FakeGateway) -> FakeRepository:
    """``acme/widgets`` with default branch ``master`` and nothing else."""
    return fake_gateway.add(create_fake_repository("acme/widgets"))


@pytest.fixture
def log_entries() -> RecordingSink:
    """Provide a sink that records log entries."""
    return RecordingSink()


@pytest.fixture
def sleeps() -> RecordingSleep:
    """Provide a sleep function that records its delays."""
    return RecordingSleep()


@pytest.fixture
def orchestrator(
    fake_gateway: FakeGateway, log_entries: RecordingSink, sleeps: RecordingSleep
) -> Orchestrator:
    """Provide an Orchestrator over the fake gateway."""
    return Orchestrator(fake_gateway, sink=log_entries, settle_delay=1.0, sleep=sleeps)
