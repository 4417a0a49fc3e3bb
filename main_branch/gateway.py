"""
Remote repository gateway.

``RepositoryGateway`` lists the remote capabilities a branch migration
needs; ``GitHubGateway`` maps them onto the GitHub REST API. Every method
raises ``NotFoundError`` when the remote resource does not exist.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from main_branch.types.pulls import PullRequest, PullRequestPage
from main_branch.types.repos import RepositoryIdentity, RepositoryInfo

if TYPE_CHECKING:
    from main_branch.transport import HTTPTransport


class RepositoryGateway(ABC):
    """Abstract base class for a hosted version-control service."""

    @abstractmethod
    def get_branch_sha(self, repo: RepositoryIdentity, branch: str) -> str:
        """Return the commit SHA the branch points at."""
        pass

    @abstractmethod
    def create_branch_ref(self, repo: RepositoryIdentity, branch: str, sha: str) -> None:
        """Create a branch pointing at ``sha``."""
        pass

    @abstractmethod
    def delete_branch_ref(self, repo: RepositoryIdentity, branch: str) -> None:
        """Delete a branch."""
        pass

    @abstractmethod
    def get_repository(self, repo: RepositoryIdentity) -> RepositoryInfo:
        """Return repository metadata, including the default branch name."""
        pass

    @abstractmethod
    def set_default_branch(self, repo: RepositoryIdentity, branch: str) -> None:
        """Make ``branch`` the repository's default branch."""
        pass

    @abstractmethod
    def is_branch_protected(self, repo: RepositoryIdentity, branch: str) -> bool:
        """Return whether branch protection is enabled for ``branch``."""
        pass

    @abstractmethod
    def get_pages_branch(self, repo: RepositoryIdentity) -> str | None:
        """Return the branch a Pages site is published from."""
        pass

    @abstractmethod
    def probe_open_pull_requests(
        self, repo: RepositoryIdentity, base: str | None = None
    ) -> PullRequestPage:
        """
        Return only the first page of open pull requests.

        With ``base``, only pull requests based on that branch are listed.
        """
        pass

    @abstractmethod
    def iter_open_pull_requests(
        self, repo: RepositoryIdentity, base: str | None = None
    ) -> Iterator[PullRequest]:
        """Lazily iterate over every open pull request (based on ``base``, if given)."""
        pass

    @abstractmethod
    def update_pull_request_base(
        self, repo: RepositoryIdentity, number: int, base: str
    ) -> None:
        """Change the base branch of pull request ``number``."""
        pass


def _parse_pull_request(data: dict[str, Any]) -> PullRequest:
    """Parse pull request data from API response."""
    return PullRequest(
        number=data["number"],
        base_branch=data["base"]["ref"],
        link=data["html_url"],
    )


class GitHubGateway(RepositoryGateway):
    """RepositoryGateway backed by the GitHub REST API."""

    def __init__(self, transport: "HTTPTransport", page_size: int = 100) -> None:
        """
        Initialize the gateway.

        Args:
            transport: HTTP transport for making requests
            page_size: Items requested per page when listing pull requests
        """
        self.transport = transport
        self.page_size = page_size

    @staticmethod
    def _repo_path(repo: RepositoryIdentity) -> str:
        return f"/repos/{quote(repo.owner, safe='')}/{quote(repo.name, safe='')}"

    @staticmethod
    def _branch(branch: str) -> str:
        # Branch names may contain "/", which stays a path separator here
        return quote(branch, safe="/")

    def get_branch_sha(self, repo: RepositoryIdentity, branch: str) -> str:
        """
        Get the SHA of a branch.

        Raises:
            NotFoundError: If the branch does not exist
        """
        data = self.transport.request(
            "GET", f"{self._repo_path(repo)}/git/ref/heads/{self._branch(branch)}"
        )
        return data["object"]["sha"]

    def create_branch_ref(self, repo: RepositoryIdentity, branch: str, sha: str) -> None:
        self.transport.request(
            "POST",
            f"{self._repo_path(repo)}/git/refs",
            body={"ref": f"refs/heads/{branch}", "sha": sha},
        )

    def delete_branch_ref(self, repo: RepositoryIdentity, branch: str) -> None:
        self.transport.request(
            "DELETE", f"{self._repo_path(repo)}/git/refs/heads/{self._branch(branch)}"
        )

    def get_repository(self, repo: RepositoryIdentity) -> RepositoryInfo:
        data = self.transport.request("GET", self._repo_path(repo))
        return RepositoryInfo(
            full_name=data.get("full_name", repo.full_name),
            default_branch=data["default_branch"],
            html_url=data.get("html_url"),
        )

    def set_default_branch(self, repo: RepositoryIdentity, branch: str) -> None:
        self.transport.request(
            "PATCH", self._repo_path(repo), body={"default_branch": branch}
        )

    def is_branch_protected(self, repo: RepositoryIdentity, branch: str) -> bool:
        data = self.transport.request(
            "GET", f"{self._repo_path(repo)}/branches/{self._branch(branch)}"
        )
        return bool(data.get("protected", False))

    def get_pages_branch(self, repo: RepositoryIdentity) -> str | None:
        """
        Get the branch GitHub Pages publishes from.

        Raises:
            NotFoundError: If the repository has no Pages site
        """
        data = self.transport.request("GET", f"{self._repo_path(repo)}/pages")
        source = data.get("source") or {}
        return source.get("branch")

    def _pull_params(self, base: str | None) -> dict[str, Any]:
        params: dict[str, Any] = {"state": "open", "per_page": self.page_size}
        if base:
            params["base"] = base
        return params

    def probe_open_pull_requests(
        self, repo: RepositoryIdentity, base: str | None = None
    ) -> PullRequestPage:
        page, next_url = self.transport.request_page(
            f"{self._repo_path(repo)}/pulls", params=self._pull_params(base)
        )
        return PullRequestPage(
            pulls=[_parse_pull_request(pr) for pr in page],
            has_next=next_url is not None,
        )

    def iter_open_pull_requests(
        self, repo: RepositoryIdentity, base: str | None = None
    ) -> Iterator[PullRequest]:
        for pr in self.transport.paginate(
            f"{self._repo_path(repo)}/pulls", params=self._pull_params(base)
        ):
            yield _parse_pull_request(pr)

    def update_pull_request_base(
        self, repo: RepositoryIdentity, number: int, base: str
    ) -> None:
        self.transport.request(
            "PATCH", f"{self._repo_path(repo)}/pulls/{number}", body={"base": base}
        )
