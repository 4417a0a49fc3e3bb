"""Repository entity: default branch access and operation-scoped logging."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from main_branch.branch import Branch
from main_branch.gateway import RepositoryGateway
from main_branch.logging import LogEntry, LogSink, LogType, logging_sink
from main_branch.types.repos import RepositoryIdentity


class Repository:
    """
    One hosted repository, as seen through a gateway.

    Nothing is cached: every query goes to the gateway, so values are always
    as fresh as the remote service reports them.
    """

    def __init__(
        self,
        identity: RepositoryIdentity,
        gateway: RepositoryGateway,
        sink: LogSink = logging_sink,
    ) -> None:
        self.identity = identity
        self.gateway = gateway
        self.sink = sink
        self._operations: list[str] = []

    @property
    def name(self) -> str:
        return self.identity.full_name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Repository({self.name!r})"

    def branch(self, name: str) -> Branch:
        return Branch(self, name)

    def default_branch(self) -> Branch:
        info = self.gateway.get_repository(self.identity)
        return Branch(self, info.default_branch)

    def set_default_branch(self, branch: Branch) -> None:
        self.gateway.set_default_branch(self.identity, branch.name)

    @contextmanager
    def operation(self, name: str) -> Iterator[None]:
        """Log under ``name`` for the duration of the block."""
        self._operations.append(name)
        try:
            yield
        finally:
            self._operations.pop()

    @property
    def current_operation(self) -> str:
        return self._operations[-1] if self._operations else "-"

    def log(self, log_type: LogType, *messages: Any) -> None:
        self.sink(LogEntry(self.name, self.current_operation, log_type, messages))
