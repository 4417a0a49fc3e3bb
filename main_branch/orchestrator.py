"""
Default branch migration operations.

Each operation validates its preconditions, performs at most one kind of
remote mutation, then reads the remote state back to confirm the mutation
took effect. None of them can be rolled back; failures are reported.

Operations:
    info          report on both branches (read-only)
    create        create the post-branch at the pre-branch's SHA
    set           make the post-branch the default
    update-pulls  re-base open pull requests from pre- to post-branch
    delete        delete the pre-branch
    replace       create, set, update-pulls and delete, in that order
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from main_branch.branch import Branch
from main_branch.exceptions import ValidationFailure
from main_branch.gateway import RepositoryGateway
from main_branch.logging import LogSink, LogType, get_logger, logging_sink
from main_branch.outcome import Outcome
from main_branch.repository import Repository
from main_branch.types.repos import RepositoryIdentity
from main_branch.validator import Validator

DEFAULT_PRE_BRANCH = "master"
DEFAULT_POST_BRANCH = "main"
DEFAULT_SETTLE_DELAY = 1.0

COMMAND_PREFIX = "main-branch"

logger = get_logger("orchestrator")


@dataclass
class Migration:
    """Everything one operation works on."""

    repository: Repository
    pre: Branch
    post: Branch
    validator: Validator

    def log(self, log_type: LogType, *messages: object) -> None:
        self.repository.log(log_type, *messages)


Body = Callable[[Migration], Outcome]


class Orchestrator:
    """
    Runs branch migration operations against one gateway.

    Example:
        ```python
        from main_branch import MainBranchClient

        with MainBranchClient.from_env() as client:
            outcome = client.orchestrator.replace("acme/widgets", "master", "main")
        ```
    """

    def __init__(
        self,
        gateway: RepositoryGateway,
        sink: LogSink = logging_sink,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            gateway: Remote repository gateway
            sink: Receives every operation log entry
            settle_delay: Seconds to wait before reading back a created or
                deleted branch
            sleep: Sleep function (replaced in tests)
        """
        self.gateway = gateway
        self.sink = sink
        self.settle_delay = settle_delay
        self._sleep = sleep

        self.commands: dict[str, Callable[..., Outcome]] = {
            "info": self.info,
            "create": self.create,
            "set": self.set_default,
            "update-pulls": self.update_pulls,
            "delete": self.delete,
            "replace": self.replace,
        }

    def run(
        self,
        command: str,
        repo: RepositoryIdentity | str,
        pre: str = DEFAULT_PRE_BRANCH,
        post: str = DEFAULT_POST_BRANCH,
    ) -> Outcome:
        """Run an operation by its command name (e.g. "update-pulls")."""
        try:
            operation = self.commands[command]
        except KeyError:
            raise ValueError(f"Unknown command: {command}") from None
        return operation(repo, pre, post)

    # Public operations

    def info(
        self,
        repo: RepositoryIdentity | str,
        pre: str = DEFAULT_PRE_BRANCH,
        post: str = DEFAULT_POST_BRANCH,
    ) -> Outcome:
        return self._run("info", self._repository(repo), pre, post, self._info)

    def create(
        self,
        repo: RepositoryIdentity | str,
        pre: str = DEFAULT_PRE_BRANCH,
        post: str = DEFAULT_POST_BRANCH,
    ) -> Outcome:
        return self._run("create", self._repository(repo), pre, post, self._create)

    def set_default(
        self,
        repo: RepositoryIdentity | str,
        pre: str = DEFAULT_PRE_BRANCH,
        post: str = DEFAULT_POST_BRANCH,
    ) -> Outcome:
        return self._run("set", self._repository(repo), pre, post, self._set_default)

    def update_pulls(
        self,
        repo: RepositoryIdentity | str,
        pre: str = DEFAULT_PRE_BRANCH,
        post: str = DEFAULT_POST_BRANCH,
    ) -> Outcome:
        return self._run("update-pulls", self._repository(repo), pre, post, self._update_pulls)

    def delete(
        self,
        repo: RepositoryIdentity | str,
        pre: str = DEFAULT_PRE_BRANCH,
        post: str = DEFAULT_POST_BRANCH,
    ) -> Outcome:
        return self._run("delete", self._repository(repo), pre, post, self._delete)

    def replace(
        self,
        repo: RepositoryIdentity | str,
        pre: str = DEFAULT_PRE_BRANCH,
        post: str = DEFAULT_POST_BRANCH,
    ) -> Outcome:
        return self._run("replace", self._repository(repo), pre, post, self._replace)

    # Plumbing

    def _repository(self, repo: RepositoryIdentity | str) -> Repository:
        if isinstance(repo, str):
            repo = RepositoryIdentity.parse(repo)
        return Repository(repo, self.gateway, self.sink)

    def _run(
        self,
        name: str,
        repository: Repository,
        pre_name: str,
        post_name: str,
        body: Body,
    ) -> Outcome:
        pre = repository.branch(pre_name)
        post = repository.branch(post_name)
        migration = Migration(repository, pre, post, Validator(repository, pre, post))

        with repository.operation(name):
            try:
                migration.validator.pre_and_post_must_differ()
                outcome = body(migration)
            except ValidationFailure:
                outcome = Outcome.FAILURE

        logger.debug("%s %s (%s -> %s): %s", name, repository, pre, post, outcome.name)
        return outcome

    def _settle(self, migration: Migration) -> None:
        migration.log(
            LogType.PLAN, f"Waiting {int(self.settle_delay * 1000)}ms before verifying."
        )
        self._sleep(self.settle_delay)

    # Operation bodies

    def _info(self, m: Migration) -> Outcome:
        m.log(LogType.PLAN, f"Getting info about {m.pre} and {m.post}.")
        default = m.repository.default_branch()
        m.log(LogType.INFO, f"Default branch: {default}")

        branches = [m.pre, m.post]
        if not default.matches_name_in(branches):
            branches.append(default)

        for branch in branches:
            m.log(LogType.SEPARATOR)
            self._report_branch(m, branch, is_default=branch.name == default.name)
        return Outcome.NO_OP

    def _report_branch(self, m: Migration, branch: Branch, is_default: bool) -> None:
        sha = branch.sha()
        if sha is None:
            m.log(LogType.INFO, f"{branch} does not exist.")
            return

        m.log(LogType.INFO, f"SHA for {branch}: {sha}")
        m.log(LogType.INFO, f"{branch} {'IS' if is_default else 'IS NOT'} the default branch.")
        m.log(LogType.INFO, f"{branch} {'IS' if branch.is_protected() else 'IS NOT'} protected.")
        m.log(
            LogType.INFO,
            f"{branch} {'IS' if branch.is_published_pages_branch() else 'IS NOT'} the GitHub Pages branch.",
        )
        link = branch.first_open_pull_request_link()
        if link:
            m.log(LogType.INFO, f"There are open PRs with {branch} as a base.")
            m.log(LogType.INFO, f"Link to an example PR with this base: {link}")
        else:
            m.log(LogType.INFO, f"There are no open PRs with {branch} as a base.")

    def _create(self, m: Migration) -> Outcome:
        m.log(LogType.PLAN, f"Planning to create branch {m.post} from {m.pre}.")

        if m.post.exists():
            m.log(LogType.OK, f"Post-branch {m.post} already exists.")
            if not m.pre.exists():
                m.log(LogType.OK, f"Pre-branch {m.pre} no longer exists.")
                m.log(LogType.INFO, "Nothing new to do.")
                return Outcome.NO_OP
            m.validator.pre_and_post_sha_must_match()
            m.log(LogType.INFO, "Nothing new to do.")
            return Outcome.NO_OP

        m.validator.pre_must_be_default()
        source_sha = m.pre.sha()
        if source_sha is None:
            m.log(LogType.ERROR, f"Pre-branch {m.pre} disappeared before it could be copied.")
            return Outcome.FAILURE

        m.log(LogType.SEPARATOR)
        m.log(LogType.PLAN, f"Creating branch {m.post} with SHA {source_sha}.")
        m.post.create(source_sha)
        m.log(LogType.SUCCESS, f"Created branch {m.post} from {m.pre}.")

        m.log(LogType.SEPARATOR)
        m.log(LogType.PLAN, f"Verifying that {m.post} has been created.")
        self._settle(m)
        if not m.post.exists():
            m.log(LogType.ERROR, f"Branch creation failed: {m.post} does not exist.")
            return Outcome.FAILURE
        m.validator.post_must_have_sha(source_sha)
        m.log(LogType.SUCCESS, f"Verified that {m.post} exists with SHA {source_sha}.")
        return Outcome.SUCCESS

    def _set_default(self, m: Migration) -> Outcome:
        m.log(LogType.PLAN, f"Planning to set the default branch to {m.post}.")

        m.validator.post_must_exist()
        if m.post.is_default():
            m.log(LogType.OK, f"The default branch is already {m.post}.")
            m.log(LogType.INFO, "Nothing new to do.")
            return Outcome.NO_OP
        m.validator.pre_must_be_default()

        m.log(LogType.SEPARATOR)
        m.log(LogType.PLAN, f"Setting {m.post} as the default branch.")
        m.repository.set_default_branch(m.post)
        m.log(LogType.SUCCESS, "Default branch updated.")

        m.log(LogType.SEPARATOR)
        m.log(LogType.PLAN, f"Verifying that {m.post} is the new default branch.")
        actual = m.repository.default_branch()
        if actual.name != m.post.name:
            m.log(LogType.ERROR, "The default branch was not set successfully.")
            m.log(LogType.ERROR, f"Expected: {m.post}")
            m.log(LogType.ERROR, f"Actual: {actual}")
            return Outcome.FAILURE
        m.log(LogType.SUCCESS, "Verified the new default branch.")
        return Outcome.SUCCESS

    def _update_pulls(self, m: Migration) -> Outcome:
        m.log(LogType.PLAN, f"Planning to move open PRs from {m.pre} to {m.post}.")

        m.validator.pre_must_exist()
        m.validator.post_must_exist()
        m.validator.pre_or_post_must_be_default()

        moved: list[str] = []

        def on_each(link: str) -> None:
            moved.append(link)
            m.log(LogType.INFO, f"Changing base to {m.post}: {link}")

        m.log(LogType.SEPARATOR)
        m.post.adopt_pull_requests(m.pre, on_each)
        if moved:
            m.log(LogType.SUCCESS, f"Changed the base of {len(moved)} open PR(s).")
        else:
            m.log(LogType.OK, f"There are no open PRs with {m.pre} as a base.")

        m.log(LogType.SEPARATOR)
        m.log(LogType.PLAN, f"Verifying that no open PRs have {m.pre} as a base.")
        remaining = m.pre.first_open_pull_request_link()
        if remaining:
            m.log(LogType.ERROR, f"Some open PRs still have {m.pre} as a base.")
            m.log(LogType.ERROR, f"Example: {remaining}")
            return Outcome.FAILURE
        m.log(LogType.SUCCESS, f"No open PRs have {m.pre} as a base.")
        return Outcome.SUCCESS

    def _delete(self, m: Migration) -> Outcome:
        m.log(LogType.PLAN, f"Planning to delete branch {m.pre}.")

        m.validator.post_must_be_default()
        if not m.pre.exists():
            m.log(LogType.OK, f"Branch {m.pre} (already) does not exist.")
            m.log(LogType.INFO, "Nothing new to do.")
            return Outcome.NO_OP
        m.log(LogType.SUCCESS, f"Branch {m.pre} currently exists.")

        link = m.pre.first_open_pull_request_link()
        if link:
            m.log(LogType.ERROR, f"There are open PRs with {m.pre} as a base.")
            m.log(LogType.ERROR, f"Example: {link}")
            m.log(
                LogType.ERROR,
                f"Please change the base for these PRs before deleting {m.pre}: "
                f"{self._command_hint('update-pulls', m.repository, m.pre.name, m.post.name)}",
            )
            return Outcome.FAILURE
        m.log(LogType.SUCCESS, f"No open PRs have {m.pre} as a base.")

        m.validator.pre_must_not_be_protected()
        m.validator.pre_must_not_be_pages_branch()

        m.log(LogType.SEPARATOR)
        m.log(LogType.PLAN, f"Deleting branch {m.pre}.")
        m.pre.delete()
        m.log(LogType.SUCCESS, "Branch deleted.")

        m.log(LogType.SEPARATOR)
        m.log(LogType.PLAN, f"Verifying that {m.pre} is deleted.")
        self._settle(m)
        if m.pre.exists():
            m.log(LogType.ERROR, f"Branch deletion failed: {m.pre} still exists.")
            return Outcome.FAILURE
        m.log(LogType.SUCCESS, "Branch deletion verified.")
        return Outcome.SUCCESS

    def _replace(self, m: Migration) -> Outcome:
        m.log(
            LogType.PLAN,
            f"Planning to replace the default branch {m.pre} with {m.post}.",
        )

        if m.post.is_default():
            m.log(LogType.OK, f"The default branch is already {m.post}.")
            if m.pre.exists():
                m.log(LogType.INFO, f"The branch {m.pre} also exists.")
                m.log(
                    LogType.INFO,
                    f"To delete it, run: {self._command_hint('delete', m.repository, m.pre.name, m.post.name)}",
                )
            return Outcome.NO_OP

        try:
            m.validator.pre_must_be_default()
        except ValidationFailure:
            current = m.repository.default_branch()
            m.log(
                LogType.ERROR,
                f"To run `replace` for this repo, please set {m.pre} as the default first: "
                f"{self._command_hint('set', m.repository, current.name, m.pre.name)}",
            )
            m.log(LogType.ERROR, f"Note that this will leave the {current} branch intact.")
            raise

        steps: list[tuple[str, Body]] = [
            ("create", self._create),
            ("set", self._set_default),
            ("update-pulls", self._update_pulls),
            ("delete", self._delete),
        ]
        for name, body in steps:
            m.log(LogType.SEPARATOR)
            outcome = self._run(name, m.repository, m.pre.name, m.post.name, body)
            if outcome.is_error:
                m.log(LogType.ERROR, f"Stopping: `{name}` did not succeed.")
                return Outcome.FAILURE

        m.log(LogType.SEPARATOR)
        m.log(LogType.SUCCESS, f"Replaced {m.pre} with {m.post} as the default branch.")
        return Outcome.SUCCESS

    @staticmethod
    def _command_hint(command: str, repository: Repository, pre: str, post: str) -> str:
        return f"{COMMAND_PREFIX} {command} {repository.name} --pre {pre} --post {post}"
