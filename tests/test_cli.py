"""Tests for CLI interface."""

import pytest
from unittest.mock import Mock, patch
from click.testing import CliRunner
import tempfile
import os

from svn_migrate.cli.main import cli, init, migrate, validate, status
from svn_migrate.config.config import Config
from svn_migrate.exceptions import MigrationSetupError
from svn_migrate.models.project import Project


def _write_config(directory, base_path, users_path):
    config_path = os.path.join(directory, 'projects.yaml')
    with open(config_path, 'w', encoding='utf-8') as f:
        f.write(
            f'base_path: {base_path}\n'
            f'users_path: {users_path}\n'
            'projects:\n'
            '  - name: alpha\n'
            '    svn: https://svn.example.com/alpha\n'
            '    std: true\n'
            '  - name: beta\n'
            '    svn: https://svn.example.com/beta\n'
            '    title: Beta Tools\n'
        )
    return config_path


class TestCLI:
    """Test CLI commands."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_cli_help(self):
        """Test CLI help command."""
        result = self.runner.invoke(cli, ['--help'])

        assert result.exit_code == 0
        assert 'SVN Migration Tool' in result.output
        assert 'init' in result.output
        assert 'migrate' in result.output
        assert 'validate' in result.output
        assert 'status' in result.output

    def test_cli_version(self):
        """Test CLI version command."""
        result = self.runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_init_command(self):
        """Test init command."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = os.path.join(temp_dir, 'test_projects.yaml')

            result = self.runner.invoke(init, ['--output', config_path])

            assert result.exit_code == 0
            assert 'Configuration template created' in result.output
            assert os.path.exists(config_path)

            with open(config_path, 'r') as f:
                content = f.read()
                assert 'base_path:' in content
                assert 'users_path:' in content
                assert 'projects:' in content

    def test_init_command_default_output(self, tmp_path, monkeypatch):
        """Test init command with default output."""
        monkeypatch.chdir(tmp_path)

        result = self.runner.invoke(init)

        assert result.exit_code == 0
        assert 'Configuration template created' in result.output
        assert os.path.exists('projects.yaml')

    @patch('svn_migrate.cli.main._load_config')
    @patch('svn_migrate.cli.main._run_migration')
    def test_migrate_command_success(self, mock_run_migration, mock_load_config):
        """Test successful migrate command."""
        mock_config = Mock(spec=Config)
        mock_config.logging = Mock(level='INFO', file=None, format=None)
        mock_load_config.return_value = mock_config

        async def fake_run(config):
            return None

        mock_run_migration.side_effect = fake_run

        result = self.runner.invoke(migrate, obj={})

        assert result.exit_code == 0
        assert 'Starting migration process' in result.output
        assert 'Migration finished...' in result.output
        mock_load_config.assert_called_once()
        mock_run_migration.assert_called_once_with(mock_config)

    @patch('svn_migrate.cli.main._load_config')
    def test_migrate_command_config_not_found(self, mock_load_config):
        """Test migrate command when config is not found."""
        mock_load_config.side_effect = FileNotFoundError('Configuration file not found')

        result = self.runner.invoke(migrate, obj={})

        assert result.exit_code == 1
        assert 'Migration failed' in result.output
        assert 'Migration finished...' not in result.output

    @patch('svn_migrate.cli.main._load_config')
    @patch('svn_migrate.cli.main._run_migration')
    def test_migrate_command_setup_failure(self, mock_run_migration, mock_load_config):
        """Test fatal setup errors exit with a failure status."""
        mock_config = Mock(spec=Config)
        mock_config.logging = Mock(level='INFO', file=None, format=None)
        mock_load_config.return_value = mock_config

        async def fake_run(config):
            raise MigrationSetupError('Could not change directory: missing')

        mock_run_migration.side_effect = fake_run

        result = self.runner.invoke(migrate, obj={})

        assert result.exit_code == 1
        assert 'Could not change directory' in result.output

    @patch('svn_migrate.cli.main._load_config')
    def test_validate_command_success(self, mock_load_config, tmp_path):
        """Test successful validate command."""
        mock_load_config.return_value = Config(
            base_path=str(tmp_path), users_path=str(tmp_path / 'authors.txt')
        )
        mock_engine = Mock()
        mock_engine.validate_prerequisites.return_value = None

        with patch(
            'svn_migrate.cli.main.MigrationEngine', return_value=mock_engine
        ), patch(
            'svn_migrate.cli.main.asyncio.run',
            return_value={
                'base_path_exists': True,
                'users_file_exists': True,
                'git_available': True,
                'bash_available': True,
            },
        ):
            result = self.runner.invoke(validate, obj={})

        assert result.exit_code == 0
        assert 'Environment validation completed' in result.output

    @patch('svn_migrate.cli.main._load_config')
    def test_validate_command_missing_tools(self, mock_load_config, tmp_path):
        """Test validate command reports unusable tools."""
        mock_load_config.return_value = Config(
            base_path=str(tmp_path),
            users_path=str(tmp_path / 'authors.txt'),
            git_path='/nonexistent/git',
        )

        result = self.runner.invoke(validate, obj={})

        assert result.exit_code == 1
        assert 'Git executable /nonexistent/git' in result.output
        assert 'Validation failed' in result.output

    @patch('svn_migrate.cli.main._load_config')
    def test_validate_command_failure(self, mock_load_config):
        """Test validate command failure."""
        mock_load_config.side_effect = Exception('Validation failed')

        result = self.runner.invoke(validate, obj={})

        assert result.exit_code == 1
        assert 'Validation failed' in result.output

    @patch('svn_migrate.cli.main._load_config')
    def test_status_command_success(self, mock_load_config, tmp_path):
        """Test successful status command."""
        (tmp_path / 'alpha').mkdir()
        mock_load_config.return_value = Config(
            base_path=str(tmp_path),
            users_path=str(tmp_path / 'authors.txt'),
            projects=[
                Project(name='alpha', svn='svn://alpha', std=True),
                Project(name='beta', svn='svn://beta'),
            ],
        )

        result = self.runner.invoke(status, obj={})

        assert result.exit_code == 0
        assert 'alpha' in result.output
        assert 'migrated' in result.output
        assert 'pending' in result.output
        assert 'non-standard' in result.output

    @patch('svn_migrate.cli.main._load_config')
    def test_status_command_failure(self, mock_load_config):
        """Test status command failure."""
        mock_load_config.side_effect = Exception('Failed to load status')

        result = self.runner.invoke(status, obj={})

        assert result.exit_code == 1
        assert 'Failed to load status' in result.output

    def test_verbose_flag(self):
        """Test verbose flag."""
        result = self.runner.invoke(cli, ['--verbose', '--help'])

        assert result.exit_code == 0


class TestConfigLoading:
    """Test configuration loading functions."""

    @patch('svn_migrate.config.config.Config.from_file')
    def test_load_config_with_file(self, mock_from_file):
        """Test loading config from specified file."""
        from svn_migrate.cli.main import _load_config

        mock_config = Mock(spec=Config)
        mock_from_file.return_value = mock_config

        mock_ctx = Mock()
        mock_ctx.obj = {'config_path': '/path/to/projects.yaml'}

        with patch('pathlib.Path.exists', return_value=True):
            config = _load_config(mock_ctx)

            assert config == mock_config
            mock_from_file.assert_called_once_with('/path/to/projects.yaml')

    @patch('svn_migrate.config.config.Config.from_file')
    def test_load_config_default_locations(self, mock_from_file, tmp_path, monkeypatch):
        """Test loading config from default locations."""
        from svn_migrate.cli.main import _load_config

        monkeypatch.chdir(tmp_path)
        (tmp_path / 'projects.yml').write_text('', encoding='utf-8')
        mock_config = Mock(spec=Config)
        mock_from_file.return_value = mock_config

        mock_ctx = Mock()
        mock_ctx.obj = {}

        config = _load_config(mock_ctx)

        assert config == mock_config
        mock_from_file.assert_called_once_with('projects.yml')

    def test_load_config_not_found(self, tmp_path, monkeypatch):
        """Test loading config when no config is found."""
        from svn_migrate.cli.main import _load_config

        monkeypatch.chdir(tmp_path)
        mock_ctx = Mock()
        mock_ctx.obj = {}

        with pytest.raises(FileNotFoundError):
            _load_config(mock_ctx)


class TestCLIIntegration:
    """Test CLI integration scenarios."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_full_migration_run(self, tmp_path, monkeypatch):
        """Test a complete run with the runner replaced by a fake."""
        from conftest import FakeRunner

        monkeypatch.chdir(tmp_path)
        for key in ['SVN_MIGRATE_BASE_PATH', 'SVN_MIGRATE_USERS_PATH', 'LOG_FILE']:
            monkeypatch.delenv(key, raising=False)
        base = tmp_path / 'base'
        base.mkdir()
        users = tmp_path / 'authors.txt'
        users.write_text('jdoe = John Doe <jdoe@example.com>\n', encoding='utf-8')
        config_path = _write_config(str(tmp_path), str(base), str(users))

        with patch('svn_migrate.migration.migrator.JobRunner', FakeRunner):
            result = self.runner.invoke(cli, ['--config', config_path, 'migrate'])

        assert result.exit_code == 0, result.output
        assert '[1/2] Finished migrating' in result.output
        assert '[2/2] Finished migrating' in result.output
        assert 'Beta Tools' in result.output
        assert result.output.rstrip().endswith('Migration finished...')
        assert (base / 'alpha.log').exists()
        assert (base / 'beta.log').exists()

    def test_missing_base_path_exits_with_failure(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        for key in ['SVN_MIGRATE_BASE_PATH', 'SVN_MIGRATE_USERS_PATH', 'LOG_FILE']:
            monkeypatch.delenv(key, raising=False)
        users = tmp_path / 'authors.txt'
        users.write_text('', encoding='utf-8')
        config_path = _write_config(str(tmp_path), str(tmp_path / 'nope'), str(users))

        result = self.runner.invoke(cli, ['--config', config_path, 'migrate'])

        assert result.exit_code == 1
        assert 'Could not change directory' in result.output
        assert 'Finished migrating' not in result.output

    @patch('svn_migrate.cli.main.console.print_exception')
    def test_error_handling_with_verbose(self, mock_print_exception):
        """Test error handling with verbose flag."""
        with patch(
            'svn_migrate.cli.main._load_config',
            side_effect=Exception('Test error'),
        ):
            result = self.runner.invoke(cli, ['--verbose', 'migrate'])

            assert result.exit_code == 1
            mock_print_exception.assert_called_once()
