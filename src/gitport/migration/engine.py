"""Migration engine - main entry point for migration operations."""

from typing import Optional

from loguru import logger

from ..api.factory import ClientFactory
from ..config.config import Config
from .coordinator import MigrationCoordinator, ProgressCallback
from .results import MigrationSummary


class MigrationEngine:
    """Builds the clients from configuration and runs the coordinator."""

    def __init__(self, config: Config):
        """Initialize migration engine.

        Args:
            config: Migration configuration
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.source_client = ClientFactory.create_source_client(config.source)
        self.logger.info(f'Created Bitbucket client for {config.source.url}')
        self.target_client = ClientFactory.create_target_client(config.target)
        self.logger.info(f'Created GitLab client for {config.target.url}')

        self.coordinator = MigrationCoordinator(
            config, self.source_client, self.target_client
        )

    def migrate(
        self, progress_callback: Optional[ProgressCallback] = None
    ) -> MigrationSummary:
        """Port and deprecate all selected repositories.

        Returns:
            Migration summary
        """
        return self._run(self.config.migration.dry_run, progress_callback)

    def dry_run(
        self, progress_callback: Optional[ProgressCallback] = None
    ) -> MigrationSummary:
        """Report what :meth:`migrate` would do without changing anything.

        Returns:
            Migration summary (dry run results)
        """
        return self._run(True, progress_callback)

    def _run(
        self, dry_run: bool, progress_callback: Optional[ProgressCallback]
    ) -> MigrationSummary:
        label = 'dry run' if dry_run else 'migration'
        self.logger.info(f'Starting {label}')

        try:
            self.test_connectivity()
            summary = self.coordinator.run(
                dry_run=dry_run, progress_callback=progress_callback
            )

            self.logger.info(f'{label.capitalize()} finished')
            return summary

        except Exception as e:
            self.logger.error(f'{label.capitalize()} failed: {e}')
            raise
        finally:
            self.close()

    def test_connectivity(self) -> None:
        """Test connectivity to both hosts.

        Raises:
            ConnectionError: If connectivity test fails
        """
        self.logger.info('Testing connectivity to source and target hosts')

        if not self.source_client.test_connection():
            raise ConnectionError('Cannot connect to source Bitbucket instance')

        if not self.target_client.test_connection():
            raise ConnectionError('Cannot connect to target GitLab instance')

        self.logger.info('Connectivity tests passed')

    def close(self) -> None:
        """Close both client sessions."""
        self.source_client.close()
        self.target_client.close()
