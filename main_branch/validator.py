"""
Precondition checks for branch operations.

Each check either returns (sometimes logging a confirmation) or logs the
reason it failed and raises ``ValidationFailure``.
"""

from typing import NoReturn

from main_branch.branch import Branch
from main_branch.exceptions import ValidationFailure
from main_branch.logging import LogType
from main_branch.repository import Repository


class Validator:
    """Named checks over one repository and its pre-/post-branch."""

    def __init__(self, repository: Repository, pre: Branch, post: Branch) -> None:
        self.repository = repository
        self.pre = pre
        self.post = post

    def _fail(self, *messages: str) -> NoReturn:
        for message in messages:
            self.repository.log(LogType.ERROR, message)
        raise ValidationFailure()

    def _good(self, message: str) -> None:
        self.repository.log(LogType.SUCCESS, message)

    def pre_and_post_must_differ(self) -> None:
        if self.pre.name == self.post.name:
            self._fail(
                f"Pre-branch and post-branch must not have the same name (both are {self.pre})."
            )

    def pre_must_be_default(self) -> None:
        """Passing also means that the pre-branch exists."""
        if not self.pre.is_default():
            self._fail(f"Pre-branch {self.pre} is not the default branch.")
        self._good(f"Pre-branch {self.pre} is the default.")

    def post_must_be_default(self) -> None:
        """Passing also means that the post-branch exists."""
        if not self.post.is_default():
            self._fail(f"Post-branch {self.post} is not the default branch.")
        self._good(f"Post-branch {self.post} is the default.")

    def pre_or_post_must_be_default(self) -> None:
        default = self.repository.default_branch()
        if not default.matches_name_in([self.pre, self.post]):
            self._fail(
                f"Default branch {default} is not the pre-branch or post-branch."
            )

    def pre_must_exist(self) -> None:
        if not self.pre.exists():
            self._fail(f"Pre-branch does not exist: {self.pre}")
        self._good(f"Pre-branch exists: {self.pre}")

    def post_must_exist(self) -> None:
        if not self.post.exists():
            self._fail(f"Post-branch does not exist: {self.post}")
        self._good(f"Post-branch exists: {self.post}")

    def pre_and_post_sha_must_match(self) -> None:
        pre_sha = self.pre.sha()
        post_sha = self.post.sha()
        if pre_sha is None or post_sha is None or pre_sha != post_sha:
            self._fail(
                "Pre-branch and post-branch SHAs do not match.",
                f"Pre-branch SHA: {pre_sha}",
                f"Post-branch SHA: {post_sha}",
            )
        self._good(f"Pre-branch and post-branch SHAs match: {pre_sha}")

    def post_must_have_sha(self, expected_sha: str) -> None:
        actual_sha = self.post.sha()
        if actual_sha != expected_sha:
            self._fail(
                "Post-branch SHA does not match expected value.",
                f"Expected: {expected_sha}",
                f"Actual: {actual_sha}",
            )

    def pre_must_not_be_protected(self) -> None:
        if self.pre.is_protected():
            self._fail(f"Pre-branch is protected: {self.pre}")
        self._good(f"Pre-branch is not protected: {self.pre}")

    def pre_must_not_be_pages_branch(self) -> None:
        if self.pre.is_published_pages_branch():
            self._fail(
                f"Pre-branch publishes the GitHub Pages site: {self.pre}",
                "Please change the Pages source branch first.",
            )
        self._good(f"Pre-branch is not a Pages branch: {self.pre}")
