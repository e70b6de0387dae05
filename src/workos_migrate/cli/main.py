"""Main CLI entry point for WorkOS Migration Tool."""

import sys
import asyncio
from typing import Optional
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config.config import Config
from ..utils.logging import setup_logging
from ..migration.engine import MigrationEngine
from ..models.summary import MigrationSummary

console = Console()

DEFAULT_CONFIG_PATHS = ['config.yaml', 'config.yml', '.workos-migrate.yaml']


@click.group()
@click.version_option(version=__version__, prog_name='workos-migrate')
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
    """WorkOS Migration Tool - Copy WorkOS users and organizations into a better-auth database."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '--output',
    '-o',
    default='config.yaml',
    help='Output configuration file path',
)
@click.pass_context
def init(ctx: click.Context, output: str) -> None:
    """Initialize a new configuration file."""
    console.print(
        Panel.fit(
            '[bold green]WorkOS Migration Tool[/bold green]\n'
            'Initializing configuration...',
            border_style='green',
        )
    )

    try:
        Config.create_template(output)

        console.print(f'[green]✓[/green] Configuration template created at: {output}')
        console.print(
            f'[yellow]Please edit {output} with your WorkOS and database details[/yellow]'
        )

    except OSError as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {e}')
        sys.exit(1)


@cli.command()
@click.option(
    '--dry-run',
    is_flag=True,
    help='Read and transform everything without writing to the database',
)
@click.option(
    '--create-tables',
    is_flag=True,
    help='Create the destination tables before migrating',
)
@click.pass_context
def migrate(ctx: click.Context, dry_run: bool, create_tables: bool) -> None:
    """Start the migration process."""
    console.print(
        Panel.fit(
            '[bold blue]WorkOS Migration Tool[/bold blue]\n'
            'Starting migration process...',
            border_style='blue',
        )
    )

    if dry_run:
        console.print(
            '[yellow]Running in dry-run mode - no changes will be made[/yellow]'
        )

    try:
        config = _load_config(ctx)
        _setup_logging_with_config(ctx, config)

        if dry_run:
            config.migration.dry_run = True
        if create_tables:
            config.database.create_tables = True

        asyncio.run(_run_migration(config))

    except Exception as e:
        console.print(f'[red]✗[/red] Migration failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Check connectivity to WorkOS and the destination database."""
    console.print(
        Panel.fit(
            '[bold cyan]WorkOS Migration Tool[/bold cyan]\nValidating setup...',
            border_style='cyan',
        )
    )

    try:
        config = _load_config(ctx)

        MigrationEngine(config).validate()

        console.print('[green]✓[/green] Connectivity validation passed')
        console.print('[green]✓[/green] Configuration validation completed')

    except Exception as e:
        console.print(f'[red]✗[/red] Validation failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective migration configuration."""
    console.print(
        Panel.fit(
            '[bold magenta]WorkOS Migration Tool[/bold magenta]\nMigration Status',
            border_style='magenta',
        )
    )

    try:
        config = _load_config(ctx)
        _setup_logging_with_config(ctx, config)

        table = Table(title='Migration Configuration')
        table.add_column('Setting', style='cyan')
        table.add_column('Value', style='green')

        table.add_row('WorkOS API URL', config.workos.api_url)
        table.add_row('WorkOS Client ID', config.workos.client_id)
        table.add_row('WorkOS API Key', _mask(config.workos.api_key))
        table.add_row('Database URL', _mask_url(config.database.url))
        table.add_row(
            'Migrate Organizations', '✓' if config.migration.organizations else '✗'
        )
        table.add_row('Migrate Users', '✓' if config.migration.users else '✗')
        table.add_row('Page Size', str(config.migration.page_size))
        table.add_row('Dry Run', '✓' if config.migration.dry_run else '✗')

        console.print(table)

    except Exception as e:
        console.print(f'[red]✗[/red] Failed to load status: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return '****'
    return f'{secret[:4]}…{secret[-4:]}'


def _mask_url(url: str) -> str:
    """Hide the password part of a database URL."""
    scheme, sep, rest = url.partition('://')
    if not sep or '@' not in rest:
        return url
    credentials, host = rest.rsplit('@', 1)
    user = credentials.split(':', 1)[0]
    return f'{scheme}://{user}:****@{host}'


def _load_config(ctx: click.Context) -> Config:
    """Load configuration from file or environment."""
    config_path = ctx.obj.get('config_path')

    if config_path:
        if not Path(config_path).exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')
        return Config.from_file(config_path)

    for path in DEFAULT_CONFIG_PATHS:
        if Path(path).exists():
            return Config.from_file(path)

    # Fall back to environment variables
    return Config.from_env()


def _setup_logging_with_config(ctx: click.Context, config: Config) -> None:
    """Setup logging with configuration from config file."""
    verbose = ctx.obj.get('verbose', False)

    log_level = 'DEBUG' if verbose else config.logging.level
    setup_logging(
        level=log_level, log_file=config.logging.file, log_format=config.logging.format
    )


async def _run_migration(config: Config) -> MigrationSummary:
    """Run the migration and print its summary."""
    engine = MigrationEngine(config)
    operation = 'Dry run' if config.migration.dry_run else 'Migration'

    with console.status(f'[blue]{operation} in progress...'):
        summary = await engine.migrate()

    console.print(f'[green]✓[/green] {operation} completed')
    _display_migration_summary(summary)
    return summary


def _display_migration_summary(summary: MigrationSummary) -> None:
    """Display migration summary results."""
    table = Table(title='Migration Summary')
    table.add_column('Entity Type', style='cyan')
    table.add_column('Total', style='blue')
    table.add_column('Migrated', style='green')
    table.add_column('Failed', style='red')

    for entity_type, counts in summary.results_by_type.items():
        table.add_row(
            entity_type.title(),
            str(counts['total']),
            str(counts['migrated']),
            str(counts['failed']),
        )

    console.print(table)

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'\n[blue]Migration Duration:[/blue] {duration}')

    if summary.failed:
        console.print(
            f'[yellow]{summary.failed} record(s) failed; see the log for details[/yellow]'
        )


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
