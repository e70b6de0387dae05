"""Tests for CLI interface."""

import os
import tempfile
import warnings
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner
from pydantic.warnings import PydanticDeprecatedSince20

from workos_migrate.cli.main import (
    _display_migration_summary,
    _load_config,
    _mask_url,
    cli,
    init,
    status,
)
from workos_migrate.config.config import Config
from workos_migrate.models.summary import MigrationSummary, PhaseSummary

CONFIG_YAML = """
workos:
  api_key: sk_test_supersecretkey
  client_id: client_123

database:
  url: postgresql+psycopg2://auth:hunter2@db:5432/auth
"""


def make_config(**migration):
    return Config(
        workos={'api_key': 'sk_test_abc', 'client_id': 'client_abc'},
        migration=migration,
    )


class TestCLI:
    """Test CLI commands."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_cli_help(self):
        result = self.runner.invoke(cli, ['--help'])

        assert result.exit_code == 0
        assert 'WorkOS Migration Tool' in result.output
        for command in ('init', 'migrate', 'validate', 'status'):
            assert command in result.output

    def test_cli_version(self):
        result = self.runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_init_command(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, 'test_config.yaml')

            result = self.runner.invoke(init, ['--output', config_path])

            assert result.exit_code == 0
            assert 'Configuration template created' in result.output
            with open(config_path, 'r') as f:
                content = f.read()
            assert 'workos:' in content
            assert 'database:' in content
            assert 'migration:' in content

    @patch('workos_migrate.cli.main._load_config')
    @patch('workos_migrate.cli.main._run_migration')
    def test_migrate_command_success(self, mock_run_migration, mock_load_config):
        config = make_config()
        mock_load_config.return_value = config

        result = self.runner.invoke(cli, ['migrate'])

        assert result.exit_code == 0
        assert 'Starting migration process' in result.output
        mock_run_migration.assert_called_once_with(config)
        assert config.migration.dry_run is False

    @patch('workos_migrate.cli.main._load_config')
    @patch('workos_migrate.cli.main._run_migration')
    def test_migrate_command_flags(self, mock_run_migration, mock_load_config):
        config = make_config()
        mock_load_config.return_value = config

        result = self.runner.invoke(cli, ['migrate', '--dry-run', '--create-tables'])

        assert result.exit_code == 0
        assert 'dry-run mode' in result.output
        assert config.migration.dry_run is True
        assert config.database.create_tables is True

    @patch('workos_migrate.cli.main._load_config')
    @patch('workos_migrate.cli.main._run_migration')
    def test_migrate_command_failure(self, mock_run_migration, mock_load_config):
        mock_load_config.return_value = make_config()
        mock_run_migration.side_effect = ConnectionError('Cannot connect to the WorkOS API')

        result = self.runner.invoke(cli, ['migrate'])

        assert result.exit_code == 1
        assert 'Migration failed' in result.output
        assert 'Cannot connect to the WorkOS API' in result.output

    @patch('workos_migrate.config.config.load_dotenv')
    @patch('workos_migrate.cli.main.MigrationEngine')
    def test_migrate_without_credentials_stops_early(
        self, mock_engine_class, mock_load_dotenv, monkeypatch
    ):
        """Missing WorkOS credentials fail before any client is built."""
        monkeypatch.delenv('WORKOS_API_KEY', raising=False)
        monkeypatch.delenv('WORKOS_CLIENT_ID', raising=False)

        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli, ['migrate'])

        assert result.exit_code == 1
        assert 'WORKOS_API_KEY' in result.output
        mock_engine_class.assert_not_called()

    @patch('workos_migrate.cli.main._load_config')
    @patch('workos_migrate.cli.main.MigrationEngine')
    def test_validate_command_success(self, mock_engine_class, mock_load_config):
        mock_load_config.return_value = make_config()

        result = self.runner.invoke(cli, ['validate'])

        assert result.exit_code == 0
        assert 'Connectivity validation passed' in result.output
        mock_engine_class.return_value.validate.assert_called_once()

    @patch('workos_migrate.cli.main._load_config')
    @patch('workos_migrate.cli.main.MigrationEngine')
    def test_validate_command_failure(self, mock_engine_class, mock_load_config):
        mock_load_config.return_value = make_config()
        mock_engine_class.return_value.validate.side_effect = ConnectionError(
            'Cannot connect to the destination database'
        )

        result = self.runner.invoke(cli, ['validate'])

        assert result.exit_code == 1
        assert 'Validation failed' in result.output

    def test_status_masks_secrets(self):
        with self.runner.isolated_filesystem():
            with open('settings.yaml', 'w') as f:
                f.write(CONFIG_YAML)

            result = self.runner.invoke(cli, ['--config', 'settings.yaml', 'status'])

        assert result.exit_code == 0
        assert 'Migration Configuration' in result.output
        assert 'client_123' in result.output
        assert 'supersecretkey' not in result.output
        assert 'hunter2' not in result.output

    @patch('workos_migrate.cli.main._load_config')
    def test_status_command_failure(self, mock_load_config):
        mock_load_config.side_effect = FileNotFoundError('Configuration file not found')

        result = self.runner.invoke(status)

        assert result.exit_code == 1
        assert 'Failed to load status' in result.output

    @patch('workos_migrate.cli.main.console.print_exception')
    def test_error_handling_with_verbose(self, mock_print_exception):
        with patch(
            'workos_migrate.cli.main._load_config',
            side_effect=Exception('Test error'),
        ):
            result = self.runner.invoke(cli, ['--verbose', 'migrate'])

        assert result.exit_code == 1
        mock_print_exception.assert_called_once()


class TestConfigLoading:
    """Test configuration loading functions."""

    @patch('workos_migrate.config.config.Config.from_file')
    def test_load_config_with_file(self, mock_from_file):
        mock_config = Mock(spec=Config)
        mock_from_file.return_value = mock_config
        mock_ctx = Mock()
        mock_ctx.obj = {'config_path': '/path/to/config.yaml'}

        with patch('pathlib.Path.exists', return_value=True):
            config = _load_config(mock_ctx)

        assert config == mock_config
        mock_from_file.assert_called_once_with('/path/to/config.yaml')

    @patch('workos_migrate.config.config.Config.from_env')
    def test_load_config_from_env(self, mock_from_env):
        mock_config = Mock(spec=Config)
        mock_from_env.return_value = mock_config
        mock_ctx = Mock()
        mock_ctx.obj = {}

        with patch('pathlib.Path.exists', return_value=False):
            config = _load_config(mock_ctx)

        assert config == mock_config
        mock_from_env.assert_called_once()


class TestSummaryDisplay:
    def test_results_by_type(self):
        summary = MigrationSummary(users=PhaseSummary(total=3, migrated=2, failed=1))

        with warnings.catch_warnings():
            warnings.simplefilter('error', PydanticDeprecatedSince20)
            results = summary.results_by_type

        assert results['users'] == {'total': 3, 'migrated': 2, 'failed': 1}
        assert results['organizations'] == {'total': 0, 'migrated': 0, 'failed': 0}
        assert summary.failed == 1

    def test_summary_table(self):
        summary = MigrationSummary(
            organizations=PhaseSummary(total=2, migrated=2, failed=0),
            users=PhaseSummary(total=5, migrated=4, failed=1),
        )

        with patch('workos_migrate.cli.main.console') as mock_console:
            _display_migration_summary(summary)

        printed = [str(c.args[0]) for c in mock_console.print.call_args_list]
        assert any('1 record(s) failed' in line for line in printed)


@pytest.mark.parametrize(
    'url, masked',
    [
        ('postgresql://auth:pw@db/auth', 'postgresql://auth:****@db/auth'),
        ('sqlite:///better-auth.db', 'sqlite:///better-auth.db'),
    ],
)
def test_mask_url(url, masked):
    assert _mask_url(url) == masked
