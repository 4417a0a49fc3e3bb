"""
Command line interface.

    main-branch info OWNER/REPO
    main-branch replace OWNER/REPO [--pre master] [--post main]
"""

import logging

import click

from main_branch.auth import ChainTokenProvider, EnvTokenProvider, FileTokenProvider
from main_branch.client import MainBranchClient
from main_branch.exceptions import MainBranchError, MalformedIdentityError
from main_branch.logging import LogEntry, LogType, configure_logging
from main_branch.orchestrator import (
    DEFAULT_POST_BRANCH,
    DEFAULT_PRE_BRANCH,
    DEFAULT_SETTLE_DELAY,
    Orchestrator,
)
from main_branch.types.repos import RepositoryIdentity

_PREFIXES = {
    LogType.PLAN: "🌐",
    LogType.INFO: "ℹ️ ",
    LogType.SUCCESS: "✅",
    LogType.OK: "🆗",
    LogType.ERROR: "❌",
    LogType.WARNING: "⚠️",
}

TOKEN_HELP = """
No personal access token found.
Please create a personal access token at: https://github.com/settings/tokens

`main-branch` uses a personal access token for:

• Edit access to repositories.
• Higher rate limits.
• Access to private repositories.

The token will be saved in plain text. You can revoke it on GitHub or
delete the file at any time.
"""


def render_entry(entry: LogEntry) -> str:
    """Render a log entry as ``[owner/repo] [operation] <emoji> message``."""
    parts = [f"[{entry.repository}]", f"[{entry.operation}]"]
    prefix = _PREFIXES.get(entry.log_type)
    if prefix:
        parts.append(prefix)
    if entry.messages:
        parts.append(entry.text)
    return " ".join(parts)


def echo_entry(entry: LogEntry) -> None:
    if entry.log_type is LogType.SEPARATOR:
        click.echo(f"[{entry.repository}] [{entry.operation}]")
        return
    click.echo(render_entry(entry), err=entry.log_type is LogType.ERROR)


def _prompt_for_token() -> str:
    click.echo(TOKEN_HELP, err=True)
    return click.prompt("Personal Access Token", hide_input=True, err=True)


def _parse_repo(ctx: click.Context, param: click.Parameter, value: str) -> RepositoryIdentity:
    try:
        return RepositoryIdentity.parse(value)
    except MalformedIdentityError as e:
        raise click.BadParameter(e.message) from e


def _orchestrator(ctx: click.Context) -> Orchestrator:
    gateway = ctx.obj.get("gateway")
    if gateway is not None:
        return Orchestrator(
            gateway,
            sink=echo_entry,
            settle_delay=ctx.obj.get("settle_delay", DEFAULT_SETTLE_DELAY),
        )

    client = MainBranchClient.from_env(
        sink=echo_entry,
        token_provider=ChainTokenProvider(
            EnvTokenProvider(), FileTokenProvider(prompt=_prompt_for_token)
        ),
    )
    ctx.call_on_close(client.close)
    return client.orchestrator


def _run(ctx: click.Context, command: str, repo: RepositoryIdentity, pre: str, post: str) -> None:
    try:
        outcome = _orchestrator(ctx).run(command, repo, pre, post)
    except MainBranchError as e:
        raise click.ClickException(str(e)) from e
    ctx.exit(outcome.exit_code)


def branch_options(f):
    f = click.option(
        "--post",
        default=DEFAULT_POST_BRANCH,
        show_default=True,
        help="Branch being migrated to.",
    )(f)
    f = click.option(
        "--pre",
        default=DEFAULT_PRE_BRANCH,
        show_default=True,
        help="Branch being migrated away from.",
    )(f)
    f = click.argument("repo", callback=_parse_repo)(f)
    return f


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every GitHub request.")
@click.version_option(package_name="main-branch")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """A tool to help set the main branch on GitHub.

    REPO is either owner/repo or https://github.com/owner/repo.
    """
    ctx.ensure_object(dict)
    if verbose:
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)


@main.command()
@branch_options
@click.pass_context
def info(ctx: click.Context, repo: RepositoryIdentity, pre: str, post: str) -> None:
    """Report on both branches and the current default branch."""
    _run(ctx, "info", repo, pre, post)


@main.command()
@branch_options
@click.pass_context
def create(ctx: click.Context, repo: RepositoryIdentity, pre: str, post: str) -> None:
    """Create the post-branch from the (default) pre-branch."""
    _run(ctx, "create", repo, pre, post)


@main.command(name="set")
@branch_options
@click.pass_context
def set_default(ctx: click.Context, repo: RepositoryIdentity, pre: str, post: str) -> None:
    """Set the existing post-branch as the default."""
    _run(ctx, "set", repo, pre, post)


@main.command(name="update-pulls")
@branch_options
@click.pass_context
def update_pulls(ctx: click.Context, repo: RepositoryIdentity, pre: str, post: str) -> None:
    """Change the base of open PRs from the pre-branch to the post-branch."""
    _run(ctx, "update-pulls", repo, pre, post)


@main.command()
@branch_options
@click.pass_context
def delete(ctx: click.Context, repo: RepositoryIdentity, pre: str, post: str) -> None:
    """Delete the pre-branch once the post-branch is the default."""
    _run(ctx, "delete", repo, pre, post)


@main.command()
@branch_options
@click.pass_context
def replace(ctx: click.Context, repo: RepositoryIdentity, pre: str, post: str) -> None:
    """Run create, set, update-pulls and delete in order."""
    _run(ctx, "replace", repo, pre, post)


if __name__ == "__main__":
    main()
