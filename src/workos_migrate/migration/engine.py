"""Migration engine - main entry point for migration operations."""

from datetime import datetime

from loguru import logger

from ..api.client import WorkOSClient
from ..config.config import Config
from ..destination.adapter import DatabaseAdapter, DryRunAdapter
from ..models.summary import MigrationSummary
from .runner import MigrationRunner


class MigrationEngine:
    """Wires the WorkOS client and destination adapter into a runner."""

    def __init__(self, config: Config):
        """Initialize migration engine.

        Args:
            config: Migration configuration
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.source_client = WorkOSClient(config.workos)

        adapter_class = DryRunAdapter if config.migration.dry_run else DatabaseAdapter
        self.destination = adapter_class(config.database.url, echo=config.database.echo)

        self.runner = MigrationRunner(
            self.source_client,
            self.destination,
            page_size=config.migration.page_size,
            dry_run=config.migration.dry_run,
        )

    async def migrate(self) -> MigrationSummary:
        """Run the organization phase, then the user phase.

        Returns:
            Migration summary
        """
        mode = 'dry run' if self.config.migration.dry_run else 'migration'
        self.logger.info(f'Starting WorkOS {mode}')

        try:
            self._test_connectivity()

            if self.config.database.create_tables and not self.config.migration.dry_run:
                self.destination.create_tables()

            organization_mapping = {}
            if self.config.migration.organizations:
                organization_mapping = await self.runner.migrate_organizations()
            else:
                self.logger.info('Skipping organization migration (disabled)')

            if self.config.migration.users:
                await self.runner.migrate_users(organization_mapping)
            else:
                self.logger.info('Skipping user migration (disabled)')

            summary = self.runner.summary
            summary.completed_at = datetime.now()
            self.logger.info(f'WorkOS {mode} completed')
            return summary

        except Exception as e:
            self.logger.error(f'Migration failed: {e}')
            raise
        finally:
            self.source_client.close()
            self.destination.close()

    def _test_connectivity(self) -> None:
        """Test connectivity to WorkOS and the destination database.

        Raises:
            ConnectionError: If connectivity test fails
        """
        self.logger.info('Testing connectivity')

        if not self.source_client.test_connection():
            raise ConnectionError('Cannot connect to the WorkOS API')

        if self.config.migration.dry_run:
            # No destination connection is opened in a dry run
            self.logger.info('Dry run: skipping destination connectivity check')
        elif not self.destination.test_connection():
            raise ConnectionError('Cannot connect to the destination database')

        self.logger.info('Connectivity tests passed')

    def validate(self) -> None:
        """Check connectivity without migrating anything."""
        try:
            self._test_connectivity()
        finally:
            self.source_client.close()
            self.destination.close()
