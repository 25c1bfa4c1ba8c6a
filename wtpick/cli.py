import click

from wtpick.config import (
    ConfigError,
    ResolvedConfig,
    global_config_path,
    load_config,
    load_toml,
    parse_config_value,
    project_config_path,
    save_project_config,
)
from wtpick.constants import NO_WORKTREES_MESSAGE
from wtpick.logging_config import setup_logging
from wtpick.notify import Notifier
from wtpick.router import create_git_worktree, git_worktree
from wtpick.services.repository import RepositoryContext
from wtpick.services.source import list_branches, list_worktrees
from wtpick.services.worktree import WorktreeService


def _load_config_or_exit(context: RepositoryContext) -> ResolvedConfig:
    context.setup_repository_info()
    try:
        return load_config(context.get_root())
    except ConfigError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1)


def _run_picker(lines, options):
    # Lazy import: Textual is slow to load and `list`/`config` never need it.
    from wtpick.app import run_picker

    return run_picker(lines, options)


def _prompter():
    from wtpick.screens import TextualPrompter

    return TextualPrompter()


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Write debug logs to ~/.config/wtpick/wtpick.log")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Fuzzy picker for git worktrees.

    With no command, opens the worktree picker: Enter switches (prints the
    path), Ctrl+D deletes, Ctrl+F toggles forced deletion.
    """
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        context = RepositoryContext()
        config = _load_config_or_exit(context)
        notifier = Notifier()
        service = WorktreeService(context, notifier)
        git_worktree(list_worktrees(context), _run_picker, service, notifier, _prompter(), config)
        if service.switched_to is not None:
            click.echo(str(service.switched_to))


@cli.command()
def create() -> None:
    """Pick or type a branch and create a worktree for it."""
    context = RepositoryContext()
    config = _load_config_or_exit(context)
    if config.repo_root is None:
        click.echo("Not inside a git repository", err=True)
        raise SystemExit(1)
    notifier = Notifier()
    service = WorktreeService(context, notifier)
    create_git_worktree(list_branches(context), _run_picker, service, _prompter(), config)


@cli.command("list")
def list_cmd() -> None:
    """Print worktrees as tab-separated branch, path, sha lines."""
    lines = list_worktrees(RepositoryContext())
    if not lines:
        click.echo(NO_WORKTREES_MESSAGE, err=True)
        return
    for line in lines:
        click.echo(line)


@cli.command()
@click.argument("key", required=False)
@click.argument("value", required=False)
def config(key: str | None, value: str | None) -> None:
    """View or edit project settings (.wtpick.toml).

    With no args: show current config.
    With KEY: show a specific value.
    With KEY VALUE: set a value (e.g. `wtpick config delete.confirm_deletions true`).
    """
    context = RepositoryContext()
    resolved = _load_config_or_exit(context)

    if key is None:
        click.echo(f"Project: {resolved.repo_root or '(not in a repository)'}")
        click.echo(f"Global:  {global_config_path()}")
        if resolved.repo_root:
            click.echo(f"Config:  {project_config_path(resolved.repo_root)}")
        click.echo("\n[picker]")
        click.echo(f"  prompt        = {resolved.prompt!r}")
        click.echo(f"  create_prompt = {resolved.create_prompt!r}")
        click.echo(f"  with_nth      = {resolved.with_nth}")
        click.echo("\n[keys]")
        click.echo(f"  delete       = {resolved.delete_key}")
        click.echo(f"  toggle_force = {resolved.toggle_force_key}")
        click.echo("\n[delete]")
        click.echo(f"  confirm_deletions           = {resolved.confirm_deletions}")
        click.echo(f"  confirm_telescope_deletions = {resolved.confirm_telescope_deletions}")
        click.echo(f"  (confirmation required: {resolved.confirm_policy.required})")
        return

    if "." not in key:
        click.echo("Key must be section.field (e.g. keys.delete)", err=True)
        raise SystemExit(1)

    if resolved.repo_root is None:
        click.echo("Not inside a git repository", err=True)
        raise SystemExit(1)

    project_cfg = load_toml(project_config_path(resolved.repo_root))
    section_name, field_name = key.split(".", 1)
    section = getattr(project_cfg, section_name) if section_name in type(project_cfg).model_fields else None
    if section is None or field_name not in type(section).model_fields:
        click.echo(f"Unknown config key: {key}", err=True)
        raise SystemExit(1)

    if value is None:
        click.echo(getattr(section, field_name))
        return

    try:
        parsed_value = parse_config_value(value, getattr(section, field_name))
    except ConfigError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1)
    setattr(section, field_name, parsed_value)
    path = save_project_config(resolved.repo_root, project_cfg)
    click.echo(f"Set {key} = {parsed_value}")
    click.echo(f"Saved to {path}")
