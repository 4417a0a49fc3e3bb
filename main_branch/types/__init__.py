"""main-branch type definitions.

This module exports all data model types used by the package.
"""

from main_branch.types.pulls import PullRequest, PullRequestPage
from main_branch.types.repos import RepositoryIdentity, RepositoryInfo

__all__ = [
    # Repository types
    "RepositoryIdentity",
    "RepositoryInfo",
    # Pull request types
    "PullRequest",
    "PullRequestPage",
]
