"""gitops CLI entrypoint.

Command-line interface sequencing repository operations through git.
"""

from __future__ import annotations

import contextlib
import functools
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from gitops.adapters.git_cmd import GitAdapter
    from gitops.core.progress import RichProgressCallback
    from gitops.domain.config import GitopsConfig
    from gitops.ports.credentials import CredentialProvider

from gitops.core.errors import GitopsCliError, use_case_failed
from gitops.domain.entities import Credentials, Signature, StatusEntry
from gitops.domain.exceptions import GitopsDomainError, IdentityNotConfiguredError
from gitops.version import __version__


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Domain errors keep their hint, RuntimeError gets a generic hint and
    anything else is reported as unexpected (with a traceback in verbose
    mode). GitopsCliError is re-raised to use its built-in formatting.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (GitopsCliError, click.Abort):
                raise
            except GitopsDomainError as e:
                raise GitopsCliError(e.message, hint=e.hint) from e
            except (RuntimeError, ValueError, OSError) as e:
                raise GitopsCliError(
                    str(e),
                    hint="Run with --verbose for more details",
                ) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise GitopsCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr (DEBUG with --verbose, WARNING otherwise)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _load_config(git_dir: Path | None = None) -> GitopsConfig:
    """Load merged global (and, inside a repository, local) configuration."""
    from gitops.adapters.factory import ConfigFactory

    return ConfigFactory().create_config_provider().load(git_dir)


def _open_repository(ctx: click.Context) -> GitAdapter:
    """Open the repository for the directory given with -C (or the CWD)."""
    from gitops.adapters.factory import RepositoryFactory

    start = ctx.obj.get("repo_path") or Path.cwd()
    return RepositoryFactory().open_git_adapter(start)


def _resolve_signature(config: GitopsConfig, name: str | None, email: str | None) -> Signature:
    """Build a signature from command-line overrides or the [identity] config.

    Raises:
        IdentityNotConfiguredError: If neither source provides name and email.
    """
    name = name or config.identity.name
    email = email or config.identity.email
    if not name or not email:
        raise IdentityNotConfiguredError()
    return Signature.now(name, email)


def _color_flag(config: GitopsConfig) -> bool | None:
    """Map display.color_scheme to click's color argument."""
    return {"always": True, "never": False}.get(config.display.color_scheme)


def _echo_status(entries: list[StatusEntry], color: bool | None) -> None:
    for entry in entries:
        # Staged changes in green, everything else in red, like git status
        fg = "green" if entry.status.endswith("I") else "red"
        click.echo(f"{click.style(entry.status, fg=fg)} {entry.path}", color=color)


def identity_options(func):
    """Add --author-name/--author-email options to a command."""
    func = click.option(
        "--author-email",
        default=None,
        help="Author email (overrides [identity] email).",
    )(func)
    func = click.option(
        "--author-name",
        default=None,
        help="Author name (overrides [identity] name).",
    )(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="gitops")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.option(
    "-C",
    "repo_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Run as if gitops was started in this directory.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, repo_path: Path | None) -> None:
    """gitops - repository operations on top of git.

    Initialize, stage, commit, branch, tag, clone and report short status.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["repo_path"] = repo_path
    _configure_logging(verbose)


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=Path))
@click.option("--bare", is_flag=True, help="Create a repository without a working tree.")
@click.pass_context
@handle_cli_errors("init")
def init(ctx: click.Context, path: Path, bare: bool) -> None:
    """Create a repository at PATH (or reinitialize an existing one)."""
    from gitops.adapters.factory import RepositoryFactory

    init_repository = RepositoryFactory().repository_initializer()
    repo = init_repository(path, bare=bare)
    if not ctx.obj.get("quiet"):
        click.echo(f"Initialized {'bare ' if bare else ''}repository at {repo.workdir}")


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.pass_context
@handle_cli_errors("add")
def add(ctx: click.Context, paths: tuple[str, ...]) -> None:
    """Stage PATHS into the index."""
    repo = _open_repository(ctx)
    for path in paths:
        repo.add_to_index(path)
        if not ctx.obj.get("quiet"):
            click.echo(f"staged {path}")


@cli.command()
@click.argument("paths", nargs=-1)
@click.option("--message", "-m", required=True, help="Commit message.")
@identity_options
@click.pass_context
@handle_cli_errors("commit")
def commit(
    ctx: click.Context,
    paths: tuple[str, ...],
    message: str,
    author_name: str | None,
    author_email: str | None,
) -> None:
    """Stage PATHS (if given) and commit the index on HEAD."""
    from gitops.core.commit.commit_usecase import CommitRequest, CommitUseCase

    repo = _open_repository(ctx)
    config = _load_config(repo.git_dir)
    author = _resolve_signature(config, author_name, author_email)

    response = CommitUseCase(repo).execute(
        CommitRequest(message=message, author=author, paths=list(paths))
    )
    if not response.success:
        use_case_failed("Commit", response.error, response.hint)

    click.echo(f"commit: {response.commit_id}")
    click.echo(f"HEAD: {response.head_id}")


@cli.command()
@click.option(
    "--ignored/--no-ignored",
    default=None,
    help="Include files matched by ignore rules (default from [status] config).",
)
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context, ignored: bool | None) -> None:
    """Show short status codes for changed files.

    Each line is '<codes> <path>', codes in this order:
    A new, M modified, R renamed, ? ignored, D deleted, C conflicted,
    I staged in the index.
    """
    from gitops.core.status.status_usecase import StatusRequest, StatusUseCase

    repo = _open_repository(ctx)
    config = _load_config(repo.git_dir)
    include_ignored = config.status.include_ignored if ignored is None else ignored

    response = StatusUseCase(repo).execute(StatusRequest(include_ignored=include_ignored))
    if not response.success:
        use_case_failed("Status", response.error, response.hint)

    if response.is_clean:
        if not ctx.obj.get("quiet"):
            click.echo("Nothing to report, working tree clean")
        return

    _echo_status(response.entries, _color_flag(config))


@cli.command()
@click.argument("name")
@click.option("--at", "target", default="HEAD", show_default=True, help="Commit to branch from.")
@click.option("--force", "-f", is_flag=True, help="Move the branch if it already exists.")
@click.option("--checkout", is_flag=True, help="Check out the new branch.")
@click.pass_context
@handle_cli_errors("branch")
def branch(ctx: click.Context, name: str, target: str, force: bool, checkout: bool) -> None:
    """Create branch NAME."""
    from gitops.core.refs.branch_usecase import CreateBranchRequest, CreateBranchUseCase

    repo = _open_repository(ctx)
    response = CreateBranchUseCase(repo).execute(
        CreateBranchRequest(name=name, target=target, force=force, checkout=checkout)
    )
    if not response.success:
        use_case_failed("Branch", response.error, response.hint)

    if not ctx.obj.get("quiet"):
        click.echo(f"Created {response.ref_name} at {response.commit_id}")
        if response.checked_out:
            click.echo(f"Switched to branch '{name}'")


@cli.command()
@click.argument("name")
@click.option("--force", "-f", is_flag=True, help="Discard local changes.")
@click.pass_context
@handle_cli_errors("checkout")
def checkout(ctx: click.Context, name: str, force: bool) -> None:
    """Check out branch NAME."""
    from gitops.core.refs.branch_usecase import CheckoutRequest, CheckoutUseCase

    repo = _open_repository(ctx)
    response = CheckoutUseCase(repo).execute(CheckoutRequest(name=name, force=force))
    if not response.success:
        use_case_failed("Checkout", response.error, response.hint)

    if not ctx.obj.get("quiet"):
        click.echo(f"Switched to branch '{name}'")
    click.echo(f"HEAD: {response.head_id}")


@cli.group()
def tag() -> None:
    """Create and delete annotated tags."""
    pass


@tag.command(name="create")
@click.argument("name")
@click.option("--message", "-m", required=True, help="Tag message.")
@click.option("--at", "target", default="HEAD", show_default=True, help="Object to tag.")
@click.option("--force", "-f", is_flag=True, help="Replace an existing tag.")
@identity_options
@click.pass_context
@handle_cli_errors("tag create")
def tag_create(
    ctx: click.Context,
    name: str,
    message: str,
    target: str,
    force: bool,
    author_name: str | None,
    author_email: str | None,
) -> None:
    """Create annotated tag NAME."""
    from gitops.core.refs.tag_usecase import CreateTagRequest, CreateTagUseCase

    repo = _open_repository(ctx)
    config = _load_config(repo.git_dir)
    tagger = _resolve_signature(config, author_name, author_email)

    response = CreateTagUseCase(repo).execute(
        CreateTagRequest(name=name, message=message, tagger=tagger, target=target, force=force)
    )
    if not response.success:
        use_case_failed("Tag", response.error, response.hint)

    click.echo(f"tag: {response.tag_id}")
    if not ctx.obj.get("quiet"):
        click.echo(f"Tagged {response.target_id} as {name}")


@tag.command(name="delete")
@click.argument("name")
@click.pass_context
@handle_cli_errors("tag delete")
def tag_delete(ctx: click.Context, name: str) -> None:
    """Delete tag NAME."""
    from gitops.core.refs.tag_usecase import DeleteTagRequest, DeleteTagUseCase

    repo = _open_repository(ctx)
    response = DeleteTagUseCase(repo).execute(DeleteTagRequest(name=name))
    if not response.success:
        use_case_failed("Tag deletion", response.error, response.hint)

    if not ctx.obj.get("quiet"):
        click.echo(f"Deleted tag '{name}'")


def _credential_provider(
    username: str | None,
    password: str | None,
    progress: RichProgressCallback | None = None,
) -> CredentialProvider:
    """Credential callback offering the given username, prompting for a missing password.

    The clone only calls it when the remote asks for authentication. The
    prompt runs with the progress display paused.
    """

    def provide(url: str, username_from_url: str | None) -> Credentials | None:
        user = username or username_from_url
        if not user:
            return None
        secret = password
        if secret is None:
            pause = progress.paused() if progress is not None else contextlib.nullcontext()
            with pause:
                secret = click.prompt(
                    f"Password for {user}@{url}", hide_input=True, err=True
                )
        return Credentials(username=user, password=secret)

    return provide


@cli.command()
@click.argument("url")
@click.argument("path", type=click.Path(file_okay=False, path_type=Path))
@click.option("--branch", "-b", default=None, help="Branch to check out.")
@click.option("--bare", is_flag=True, help="Create a bare clone.")
@click.option("--username", default=None, help="Username for http(s) remotes.")
@click.option("--password", default=None, help="Password or token for http(s) remotes.")
@click.option(
    "--verify-certificates/--no-verify-certificates",
    default=None,
    help="Verify TLS certificates (default from [clone] config).",
)
@click.pass_context
@handle_cli_errors("clone")
def clone(
    ctx: click.Context,
    url: str,
    path: Path,
    branch: str | None,
    bare: bool,
    username: str | None,
    password: str | None,
    verify_certificates: bool | None,
) -> None:
    """Clone URL into PATH."""
    from gitops.adapters.factory import RepositoryFactory
    from gitops.core.clone.clone_usecase import CloneRequest, CloneUseCase
    from gitops.core.progress import progress_context
    from gitops.ports.vcs import CloneOptions

    config = _load_config()
    use_case = CloneUseCase(RepositoryFactory().repository_cloner())
    with progress_context(quiet_mode=ctx.obj.get("quiet", False)) as progress:
        options = CloneOptions(
            verify_certificates=(
                config.clone.verify_certificates
                if verify_certificates is None
                else verify_certificates
            ),
            credentials=_credential_provider(
                username or config.clone.username or None, password, progress
            ),
            branch=branch,
            bare=bare,
        )
        request = CloneRequest(url=url, path=path, options=options)
        response = use_case.execute(request, progress=progress)

    if not response.success:
        use_case_failed("Clone", response.error, response.hint)

    if not ctx.obj.get("quiet"):
        click.echo(f"Cloned into {response.workdir}")
    click.echo(f"HEAD: {response.head_id or '(empty repository)'}")


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=Path), required=False)
@click.option("--message", "-m", default=None, help="Commit message (default from [scaffold]).")
@identity_options
@click.pass_context
@handle_cli_errors("scaffold")
def scaffold(
    ctx: click.Context,
    path: Path | None,
    message: str | None,
    author_name: str | None,
    author_email: str | None,
) -> None:
    """Create a repository at PATH, add src/index.js and commit it.

    PATH defaults to [scaffold] path. Prints the status after staging, the
    new commit id and HEAD.
    """
    from gitops.adapters.factory import RepositoryFactory
    from gitops.core.scaffold.scaffold_usecase import ScaffoldRequest, ScaffoldUseCase

    config = _load_config()
    author = _resolve_signature(config, author_name, author_email)
    target = path or Path(config.scaffold.path).expanduser()

    use_case = ScaffoldUseCase(RepositoryFactory().repository_initializer())
    response = use_case.execute(
        ScaffoldRequest(path=target, author=author, message=message or config.scaffold.message)
    )
    if not response.success:
        use_case_failed("Scaffold", response.error, response.hint)

    _echo_status(response.entries, _color_flag(config))
    click.echo(f"commit: {response.commit_id}")
    click.echo(f"HEAD: {response.head_id}")


# Configuration management commands
@cli.group()
def config() -> None:
    """Manage gitops configuration files.

    gitops uses a two-tier configuration system:
    - Local: <repo>/.git/gitops.toml (repo-specific settings)
    - Global: ~/.config/gitops/config.toml (user defaults)

    Local settings override global settings.
    """
    pass


def _local_git_dir(ctx: click.Context) -> Path | None:
    """Return the .git directory of the current repository, or None outside one."""
    from gitops.domain.exceptions import RepositoryNotFoundError

    try:
        return _open_repository(ctx).git_dir
    except RepositoryNotFoundError:
        return None


def _display_path_status(path: Path, label: str) -> None:
    if path.exists():
        status = click.style("exists", fg="green")
    else:
        status = click.style("not found", fg="yellow")
    click.echo(f"{label}: {path} ({status})")


@config.command(name="path")
@click.pass_context
@handle_cli_errors("config path")
def config_path(ctx: click.Context) -> None:
    """Show where config files are read from."""
    from gitops.shared.config_io import get_global_config_path, get_local_config_path

    _display_path_status(get_global_config_path(), "Global config")
    git_dir = _local_git_dir(ctx)
    if git_dir is None:
        click.echo("Local config: (not in a git repository)")
    else:
        _display_path_status(get_local_config_path(git_dir), "Local config")


@config.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Show the effective (merged) configuration."""
    import tomli_w

    from gitops.shared.config_io import config_to_data

    effective = _load_config(_local_git_dir(ctx))
    click.echo(tomli_w.dumps(config_to_data(effective)).rstrip())


@config.command(name="init")
@click.option(
    "--global",
    "use_global",
    is_flag=True,
    help="Write the global config instead of the repository-local one.",
)
@click.option("--name", required=True, help="Identity name for commits and tags.")
@click.option("--email", required=True, help="Identity email for commits and tags.")
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, use_global: bool, name: str, email: str) -> None:
    """Write [identity] into a config file, keeping its other settings."""
    from dataclasses import replace

    from gitops.domain.config import GitopsConfig, IdentityConfig
    from gitops.shared.config_io import (
        get_global_config_path,
        get_local_config_path,
        load_config,
        save_config,
    )

    if use_global:
        path = get_global_config_path()
    else:
        git_dir = _local_git_dir(ctx)
        if git_dir is None:
            raise GitopsCliError(
                "Not in a git repository",
                hint="Use --global, or run inside a repository",
            )
        path = get_local_config_path(git_dir)

    current = load_config(path) if path.exists() else GitopsConfig.default()
    updated = replace(current, identity=IdentityConfig(name=name, email=email))
    save_config(updated, path)

    if not ctx.obj.get("quiet"):
        click.echo(f"Wrote {path}")


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
