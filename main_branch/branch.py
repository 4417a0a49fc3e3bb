"""Branch entity over the remote repository gateway."""

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from main_branch.exceptions import NotFoundError

if TYPE_CHECKING:
    from main_branch.gateway import RepositoryGateway
    from main_branch.repository import Repository
    from main_branch.types.repos import RepositoryIdentity


class Branch:
    """
    A named branch of a repository.

    Every fact about the branch is fetched from the gateway on each call. A
    "not found" answer from the gateway means the branch (or the queried
    feature) is absent and is never raised to the caller.
    """

    def __init__(self, repository: "Repository", name: str) -> None:
        self.repository = repository
        self.name = name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Branch({self.repository.name!r}, {self.name!r})"

    @property
    def _gateway(self) -> "RepositoryGateway":
        return self.repository.gateway

    @property
    def _identity(self) -> "RepositoryIdentity":
        return self.repository.identity

    def matches_name_in(self, branches: Iterable["Branch"]) -> bool:
        return any(branch.name == self.name for branch in branches)

    def sha(self) -> str | None:
        try:
            return self._gateway.get_branch_sha(self._identity, self.name)
        except NotFoundError:
            return None

    def exists(self) -> bool:
        return self.sha() is not None

    def create(self, sha: str) -> None:
        self._gateway.create_branch_ref(self._identity, self.name, sha)

    def delete(self) -> None:
        self._gateway.delete_branch_ref(self._identity, self.name)

    def is_default(self) -> bool:
        return self.repository.default_branch().name == self.name

    def is_protected(self) -> bool:
        try:
            return self._gateway.is_branch_protected(self._identity, self.name)
        except NotFoundError:
            return False

    def is_published_pages_branch(self) -> bool:
        try:
            return self._gateway.get_pages_branch(self._identity) == self.name
        except NotFoundError:
            return False

    def first_open_pull_request_link(self) -> str | None:
        """
        Return a link to one open pull request based on this branch, if any.

        The listing is filtered by base, so the first page answers the
        question on its own.
        """
        page = self._gateway.probe_open_pull_requests(self._identity, base=self.name)
        for pull in page.pulls:
            if pull.base_branch == self.name:
                return pull.link
        return None

    def all_open_pull_request_links(self) -> list[str]:
        return [
            pull.link
            for pull in self._gateway.iter_open_pull_requests(self._identity, base=self.name)
            if pull.base_branch == self.name
        ]

    def adopt_pull_requests(
        self, old_base: "Branch", on_each: Callable[[str], None]
    ) -> None:
        """
        Re-base every open pull request based on ``old_base`` onto this branch.

        ``on_each`` receives each pull request's link before its base is
        changed, in listing order.
        """
        # Re-basing shrinks a listing filtered by base, so pages would shift
        pulls = [
            pull
            for pull in self._gateway.iter_open_pull_requests(
                self._identity, base=old_base.name
            )
            if pull.base_branch == old_base.name
        ]
        for pull in pulls:
            on_each(pull.link)
            self._gateway.update_pull_request_base(self._identity, pull.number, self.name)
