"""Main CLI entry point for SVN Migration Tool."""

import sys
import asyncio
import os
from typing import Optional
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
)
from rich.table import Table

from ..config.config import Config, DEFAULT_CONFIG_PATHS
from ..models.project import Project
from ..utils.logging import setup_logging
from ..migration.engine import MigrationEngine

console = Console()


@click.group()
@click.version_option(version='0.1.0', prog_name='svn-migrate')
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """SVN Migration Tool - Convert Subversion repositories into Git repositories."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Basic logging until the configuration is loaded
    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '--output',
    '-o',
    default='projects.yaml',
    help='Output configuration file path',
)
@click.pass_context
def init(ctx: click.Context, output: str) -> None:
    """Initialize a new configuration file."""
    console.print(
        Panel.fit(
            '[bold green]SVN Migration Tool[/bold green]\n'
            'Initializing configuration...',
            border_style='green',
        )
    )

    try:
        Config.create_template(output)

        console.print(f'[green]✓[/green] Configuration template created at: {output}')
        console.print(
            f'[yellow]Please edit {output} with your base path and projects[/yellow]'
        )

    except Exception as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {e}')
        sys.exit(1)


@cli.command()
@click.pass_context
def migrate(ctx: click.Context) -> None:
    """Migrate every configured project."""
    console.print(
        Panel.fit(
            '[bold blue]SVN Migration Tool[/bold blue]\n'
            'Starting migration process...',
            border_style='blue',
        )
    )

    try:
        config = _load_config(ctx)

        _setup_logging_with_config(ctx, config)

        asyncio.run(_run_migration(config))

    except Exception as e:
        console.print(f'[red]✗[/red] Migration failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)

    console.print('Migration finished...')


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Check that git, bash and the authors file are usable."""
    console.print(
        Panel.fit(
            '[bold cyan]SVN Migration Tool[/bold cyan]\nValidating environment...',
            border_style='cyan',
        )
    )

    try:
        config = _load_config(ctx)

        engine = MigrationEngine(config)
        results = asyncio.run(engine.validate_prerequisites())

    except Exception as e:
        console.print(f'[red]✗[/red] Validation failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)

    labels = {
        'base_path_exists': f'Base path {config.base_path}',
        'users_file_exists': f'Authors file {config.users_path}',
        'git_available': f'Git executable {config.git_path}',
        'bash_available': f'Script interpreter {config.bash_path}',
    }
    for key, label in labels.items():
        if results.get(key):
            console.print(f'[green]✓[/green] {label}')
        else:
            console.print(f'[red]✗[/red] {label}')

    if not all(results.values()):
        console.print('[red]✗[/red] Validation failed')
        sys.exit(1)

    console.print('[green]✓[/green] Environment validation completed')


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configured projects and which ones are already migrated."""
    console.print(
        Panel.fit(
            '[bold magenta]SVN Migration Tool[/bold magenta]\nMigration Status',
            border_style='magenta',
        )
    )

    try:
        config = _load_config(ctx)

        _setup_logging_with_config(ctx, config)

        table = Table(title=f'Projects in {config.base_path}')
        table.add_column('Project', style='cyan')
        table.add_column('Layout', style='blue')
        table.add_column('SVN', style='white')
        table.add_column('State', style='green')

        for project in config.projects:
            table.add_row(
                project.display_name,
                'standard' if project.std else 'non-standard',
                project.svn,
                _project_state(config, project),
            )

        console.print(table)

    except Exception as e:
        console.print(f'[red]✗[/red] Failed to load status: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


def _project_state(config: Config, project: Project) -> str:
    """Describe whether a project has already been migrated."""
    if os.path.exists(config.project_path(project)):
        return 'migrated'
    return 'pending'


def _load_config(ctx: click.Context) -> Config:
    """Load configuration from the given file or a default location."""
    config_path = ctx.obj.get('config_path')

    if config_path:
        if not Path(config_path).exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')
        return Config.from_file(config_path)

    for path in DEFAULT_CONFIG_PATHS:
        if Path(path).exists():
            return Config.from_file(path)

    raise FileNotFoundError(
        'No configuration found. Use --config to specify a file or run "svn-migrate init" to create one.'
    )


def _setup_logging_with_config(ctx: click.Context, config: Config) -> None:
    """Setup logging with configuration from config file."""
    verbose = ctx.obj.get('verbose', False)

    # Verbose flag overrides the configured level
    log_level = 'DEBUG' if verbose else config.logging.level

    setup_logging(
        level=log_level,
        log_file=config.logging.file,
        log_format=config.logging.format,
    )


async def _run_migration(config: Config) -> None:
    """Run the migration with a progress bar and one line per project."""
    with Progress(
        SpinnerColumn(),
        TextColumn('[progress.description]{task.description}'),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(
            '[blue]Migrating projects...', total=len(config.projects)
        )

        def report(completed: int, total: int, project: Project) -> None:
            progress.update(task, completed=completed, total=total)
            progress.console.print(
                f'[{completed}/{total}] Finished migrating {project.display_name}',
                markup=False,
                highlight=False,
            )

        engine = MigrationEngine(config, on_progress=report)
        await engine.migrate()

        progress.update(task, description='[green]Migration completed')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)
    except Exception as e:
        console.print(f'[red]Error: {e}[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
