"""Command line interface for GitPort."""

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table

from .. import __version__
from ..config.config import Config
from ..migration.engine import MigrationEngine
from ..migration.results import MigrationStatus, MigrationSummary
from ..utils.logging import setup_logging

console = Console()

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_CONFIG_PATHS = ['config.yaml', 'config.yml', '.gitport.yaml']
MAX_LISTED_ERRORS = 5


def _banner(message: str, style: str) -> None:
    console.print(
        Panel.fit(f'[bold {style}]GitPort[/bold {style}]\n{message}', border_style=style)
    )


def _fail(ctx: click.Context, what: str, error: Exception) -> NoReturn:
    """Report a fatal error and exit."""
    console.print(f'[red]✗[/red] {what}: {error}')
    if ctx.obj.get('verbose'):
        console.print_exception()
    sys.exit(EXIT_FATAL)


@click.group()
@click.version_option(version=__version__, prog_name='gitport')
@click.option(
    '-c',
    '--config',
    'config_path',
    type=click.Path(exists=True, dir_okay=False),
    help='YAML configuration file (default: ./config.yaml, then environment)',
)
@click.option('-v', '--verbose', is_flag=True, help='Log at DEBUG level')
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], verbose: bool) -> None:
    """GitPort - Port Bitbucket Server repositories to GitLab and deprecate the originals."""
    ctx.ensure_object(dict)
    ctx.obj.update(config_path=config_path, verbose=verbose)

    # Console only until the configuration is loaded
    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '-o',
    '--output',
    default='config.yaml',
    show_default=True,
    help='Where to write the template',
)
@click.pass_context
def init(ctx: click.Context, output: str) -> None:
    """Write a configuration template to fill in."""
    _banner('Initializing configuration...', 'green')

    try:
        Config.create_template(output)
    except OSError as e:
        _fail(ctx, 'Failed to create configuration', e)

    console.print(f'[green]✓[/green] Configuration template created at: {output}')
    console.print(
        f'[yellow]Fill in the Bitbucket and GitLab details in {output}, '
        'then run "gitport validate"[/yellow]'
    )


@cli.command()
@click.option(
    '--dry-run',
    is_flag=True,
    help='Only report which repositories would be ported',
)
@click.pass_context
def migrate(ctx: click.Context, dry_run: bool) -> None:
    """Port the repositories and deprecate the originals.

    Exits with 2 when some repositories failed and 1 when the run could not
    complete at all.
    """
    _banner('Starting migration process...', 'blue')
    if dry_run:
        console.print(
            '[yellow]Running in dry-run mode - no changes will be made[/yellow]'
        )

    try:
        config = _load_config(ctx)
        _configure_logging(ctx, config)
        if dry_run:
            config.migration.dry_run = True

        summary = _run_migration(config, config.migration.dry_run)
    except Exception as e:
        _fail(ctx, 'Migration failed', e)

    if summary is not None and summary.failed:
        console.print(
            f'[red]✗[/red] {summary.failed} repo(s) failed; '
            'fix the cause and run again to retry them'
        )
        sys.exit(EXIT_PARTIAL_FAILURE)


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Check the configuration and that both hosts accept the credentials."""
    _banner('Validating configuration...', 'cyan')

    try:
        engine = MigrationEngine(_load_config(ctx))
        try:
            engine.test_connectivity()
        finally:
            engine.close()
    except Exception as e:
        _fail(ctx, 'Validation failed', e)

    console.print('[green]✓[/green] Connectivity validation passed')
    console.print('[green]✓[/green] Configuration validation completed')


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective configuration."""
    _banner('Migration Status', 'magenta')

    try:
        config = _load_config(ctx)
    except Exception as e:
        _fail(ctx, 'Failed to load status', e)

    console.print(_config_table(config))


def _config_table(config: Config) -> Table:
    """Render the settings that decide what a run will touch."""
    parent = config.target.parent_group_id
    rows = [
        ('Source URL', config.source.url),
        ('Source Project', config.source.project_key),
        ('Target URL', config.target.url),
        ('Target Group', config.target.group_name),
        ('Parent Group Id', '(top level)' if parent is None else str(parent)),
        ('Included Repos', ', '.join(config.migration.repos_to_include) or '(all)'),
        ('Excluded Repos', ', '.join(config.migration.repos_to_exclude) or '(none)'),
        ('Dry Run', 'yes' if config.migration.dry_run else 'no'),
    ]

    table = Table(title='Effective Configuration')
    table.add_column('Setting', style='cyan')
    table.add_column('Value', style='green')
    for name, value in rows:
        table.add_row(name, value)
    return table


def _load_config(ctx: click.Context) -> Config:
    """Load the configuration.

    Looks at ``--config`` first, then the default file names in the working
    directory, then the environment.
    """
    config_path = ctx.obj.get('config_path')
    if config_path:
        return Config.from_file(config_path)

    for candidate in DEFAULT_CONFIG_PATHS:
        if Path(candidate).is_file():
            return Config.from_file(candidate)

    try:
        return Config.from_env()
    except ValueError:
        raise FileNotFoundError(
            'No configuration found. Use --config to specify a file or run '
            '"gitport init" to create one.'
        )


def _configure_logging(ctx: click.Context, config: Config) -> None:
    level = 'DEBUG' if ctx.obj.get('verbose') else config.logging.level
    setup_logging(level=level, log_file=config.logging.file, log_format=config.logging.format)


def _run_migration(config: Config, dry_run: bool = False) -> MigrationSummary:
    """Run the engine behind a progress bar and print the summary."""
    engine = MigrationEngine(config)
    label = 'Dry run' if dry_run else 'Migration'
    run = engine.dry_run if dry_run else engine.migrate

    with Progress(
        SpinnerColumn(),
        TextColumn('[progress.description]{task.description}'),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(f'[blue]{label}: listing repositories...', total=None)

        def on_repo_done(done: int, total: int, repo_name: str) -> None:
            progress.update(
                task, completed=done, total=total, description=f'[blue]{label}: {repo_name}'
            )

        try:
            summary = run(progress_callback=on_repo_done)
        except Exception as e:
            progress.update(task, description=f'[red]{label} aborted: {e}')
            raise

        progress.update(task, description=f'[green]{label} completed')

    console.print(f'[green]✓[/green] {label} completed')
    _print_summary(summary)
    return summary


def _print_summary(summary: MigrationSummary) -> None:
    title, ported_label = 'Migration Summary', 'Ported'
    if summary.dry_run:
        title, ported_label = 'Dry Run Summary', 'Would Port'

    counts = Table(title=title)
    for column, style in (
        ('Repos', 'blue'),
        (ported_label, 'green'),
        ('Failed', 'red'),
        ('Skipped', 'yellow'),
    ):
        counts.add_column(column, style=style)
    counts.add_row(
        str(summary.total),
        str(summary.successful),
        str(summary.failed),
        str(summary.skipped),
    )
    console.print(counts)

    if summary.completed_at:
        console.print(
            f'\n[blue]Took:[/blue] {summary.completed_at - summary.started_at}'
        )

    ported = [r for r in summary.results if r.new_url]
    if ported:
        console.print(f'\n[green]Ported ({len(ported)}):[/green]')
        for result in ported:
            console.print(f'  • {result.repo_name} → {result.new_url}')

    failed = [r for r in summary.results if r.status == MigrationStatus.FAILED]
    if failed:
        console.print(f'\n[red]Failed ({len(failed)}):[/red]')
        for result in failed[:MAX_LISTED_ERRORS]:
            console.print(f'  • {result.repo_name}: {result.error_message}')
        if len(failed) > MAX_LISTED_ERRORS:
            console.print(f'  ... and {len(failed) - MAX_LISTED_ERRORS} more')


def main() -> None:
    """Entry point of the ``gitport`` script."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(EXIT_FATAL)


if __name__ == '__main__':
    main()
