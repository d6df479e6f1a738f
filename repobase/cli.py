#!/usr/bin/env python3

import json
import functools

import click
from rich.console import Console
from rich.table import Table

from repobase.config import load_config, configure_logging
from repobase.domain import decode_resolution, sort_remotes
from repobase.exit_codes import CommandError, NoRemotesError
from repobase.infra import GitClient
from repobase.services import load_resolved_remotes

console = Console()


def handle_command_errors(func):
    """Turn CommandError into an error message and its exit code."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CommandError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(e.exit_code)
    return wrapper


def _git_client(ctx) -> GitClient:
    config = ctx.obj['config']
    return GitClient(
        ctx.obj['repo_path'],
        config_key=config['resolution'].get('config_key', 'repobase-resolved'),
    )


@click.group()
@click.version_option(package_name='repobase')
@click.option('-C', 'repo_path', default='.', type=click.Path(file_okay=False),
              help='Run as if started in this working copy')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
@handle_command_errors
def cli(ctx, repo_path, verbose):
    """repobase - Resolve the base repository of a git working copy.

    When several remotes point at forks of one GitLab project, repobase
    decides which one is the base (upstream) repository and remembers
    the choice in git config.
    """
    config = load_config()
    configure_logging(config, verbose)
    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['repo_path'] = repo_path


@cli.command('base')
@click.option('--repo', '-R', 'base', help='Use this [HOST/]OWNER/REPO instead of resolving')
@click.option('--no-prompt', is_flag=True, help='Never ask; fall back to the first remote')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSON')
@click.pass_context
@handle_command_errors
def base_cmd(ctx, base, no_prompt, json_output):
    """Print the base repository of the working copy.

    Examples:

    \b
        repobase base
        repobase base --no-prompt --json
        repobase base -R gitlab-org/cli
    """
    resolved = load_resolved_remotes(
        ctx.obj['config'],
        repo_path=ctx.obj['repo_path'],
        base=base,
        git_client=_git_client(ctx),
    )
    if not resolved.remotes and not base:
        raise NoRemotesError()

    result = resolved.base_repo(prompt=not no_prompt)

    if result.persist_error is not None:
        click.echo(f"Warning: could not save base repository choice: {result.persist_error}", err=True)

    if json_output:
        click.echo(json.dumps(result.to_dict()))
    else:
        click.echo(f"{result.repo.host}/{result.repo.full_name}")


@cli.command('heads')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSONL')
@click.pass_context
@handle_command_errors
def heads_cmd(ctx, json_output):
    """List the GitLab projects behind the configured remotes."""
    resolved = load_resolved_remotes(
        ctx.obj['config'],
        repo_path=ctx.obj['repo_path'],
        git_client=_git_client(ctx),
    )
    if not resolved.remotes:
        raise NoRemotesError()

    projects = resolved.head_repos()

    if json_output:
        for project in projects:
            click.echo(json.dumps(project.to_dict()))
        return

    if not projects:
        click.echo("No GitLab projects found for the configured remotes", err=True)
        return

    table = Table(title="Fork network")
    table.add_column("Project", style="cyan")
    table.add_column("Forked from")
    table.add_column("URL", style="dim")
    for project in projects:
        parent = project.forked_from_project
        table.add_row(
            project.path_with_namespace,
            parent.path_with_namespace if parent else "-",
            project.web_url or project.http_url_to_repo,
        )
    console.print(table)


@cli.command('remotes')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSONL')
@click.pass_context
@handle_command_errors
def remotes_cmd(ctx, json_output):
    """Show remotes in resolution order with their cached resolution."""
    remotes = sort_remotes(
        _git_client(ctx).list_remotes(),
        ctx.obj['config'].get('resolution', {}).get('remote_priority'),
    )

    if json_output:
        for remote in remotes:
            click.echo(json.dumps(remote.to_dict()))
        return

    if not remotes:
        click.echo("No git remotes found", err=True)
        return

    table = Table()
    table.add_column("Remote", style="cyan")
    table.add_column("Repository")
    table.add_column("Resolution", style="green")
    for remote in remotes:
        kind, _ = decode_resolution(remote.resolved)
        table.add_row(
            remote.name,
            f"{remote.host}/{remote.full_name}",
            remote.resolved if kind else "-",
        )
    console.print(table)


@cli.command('reset')
@click.argument('remote', required=False)
@click.pass_context
@handle_command_errors
def reset_cmd(ctx, remote):
    """Forget cached base repository decisions.

    REMOTE: Only reset this remote (default: all remotes)
    """
    git = _git_client(ctx)
    names = [remote] if remote else [r.name for r in git.list_remotes()]

    cleared = 0
    for name in names:
        if git.unset_remote_resolution(name):
            cleared += 1
            click.echo(f"Cleared resolution for {name}")

    if not cleared:
        click.echo("No cached resolutions found", err=True)


def main():
    cli()

if __name__ == "__main__":
    main()
