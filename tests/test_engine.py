"""Tests for the migration engine."""

import pytest
from unittest.mock import Mock, patch

from gitport.api.exceptions import AuthenticationError
from gitport.api.factory import ClientFactory
from gitport.config.config import BitbucketInstanceConfig
from gitport.migration.engine import MigrationEngine


@pytest.fixture
def clients():
    source, target = Mock(), Mock()
    source.test_connection.return_value = True
    target.test_connection.return_value = True
    target.find_group_id.return_value = 42
    source.list_repositories.return_value = {}
    with patch.object(
        ClientFactory, 'create_source_client', return_value=source
    ), patch.object(ClientFactory, 'create_target_client', return_value=target):
        yield source, target


class TestMigrationEngine:
    """Test engine wiring."""

    def test_migrate_closes_clients(self, config, clients):
        source, target = clients

        summary = MigrationEngine(config).migrate()

        assert summary.total == 0
        assert summary.dry_run is False
        source.close.assert_called_once()
        target.close.assert_called_once()

    def test_dry_run_overrides_config(self, config, clients):
        _, target = clients

        summary = MigrationEngine(config).dry_run()

        assert summary.dry_run is True
        target.create_group.assert_not_called()

    def test_connectivity_failure(self, config, clients):
        source, target = clients
        target.test_connection.return_value = False

        with pytest.raises(ConnectionError):
            MigrationEngine(config).migrate()

        source.list_repositories.assert_not_called()
        target.close.assert_called_once()


class TestClientFactory:
    """Test client creation."""

    def test_create_clients(self, config):
        source = ClientFactory.create_source_client(config.source)
        target = ClientFactory.create_target_client(config.target)

        assert source.url == 'https://bitbucket.example.com'
        assert target.url == 'https://gitlab.example.com'

    def test_source_requires_credentials(self):
        config = BitbucketInstanceConfig.model_construct(
            url='https://bitbucket.example.com',
            username='porter',
            token='',
            project_key='PROJ',
            timeout=30,
        )

        with pytest.raises(AuthenticationError):
            ClientFactory.create_source_client(config)
