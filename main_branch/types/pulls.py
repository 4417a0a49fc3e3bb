"""Pull request-related data models."""

from dataclasses import dataclass, field


@dataclass
class PullRequest:
    """An open pull request, reduced to what a branch migration needs."""

    number: int
    base_branch: str
    link: str


@dataclass
class PullRequestPage:
    """First page of an open pull request listing."""

    pulls: list[PullRequest] = field(default_factory=list)
    has_next: bool = False
