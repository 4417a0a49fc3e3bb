"""Repository-related data models."""

from dataclasses import dataclass

from main_branch.exceptions import MalformedIdentityError

GITHUB_HTTPS_PREFIX = "https://github.com/"


@dataclass(frozen=True)
class RepositoryIdentity:
    """An ``owner/name`` pair identifying one hosted repository."""

    owner: str
    name: str

    @classmethod
    def parse(cls, text: str) -> "RepositoryIdentity":
        """
        Parse a repository identity.

        Accepts ``owner/name`` or a web URL such as
        ``https://github.com/owner/name``.

        Args:
            text: Identity in either textual form

        Returns:
            RepositoryIdentity for the given text

        Raises:
            MalformedIdentityError: If the text is not exactly two
                non-empty ``/``-delimited segments after the URL prefix
        """
        path = text
        if path.startswith(GITHUB_HTTPS_PREFIX):
            path = path[len(GITHUB_HTTPS_PREFIX):]

        parts = path.split("/")
        if len(parts) != 2 or not all(parts):
            raise MalformedIdentityError(text)

        owner, name = parts
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass
class RepositoryInfo:
    """Repository metadata as reported by the remote service."""

    full_name: str
    default_branch: str
    html_url: str | None = None
