"""Tests for configuration management."""

import pytest
import tempfile
import yaml
from pathlib import Path
from config.config_manager import ConfigManager, StorageConfig, SecurityConfig, BoardsConfig


class TestConfigManager:
    """Test suite for ConfigManager."""

    @pytest.fixture
    def temp_config_dir(self):
        """Create temporary directory for test configuration."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.fixture
    def sample_config(self):
        """Sample configuration dictionary."""
        return {
            'storage': {
                'db_path': '~/.community_board/data/community.db',
                'media_dir': '~/.community_board/media',
                'max_image_size': 10485760
            },
            'security': {
                'strict_password_check': False
            },
            'boards': {
                'default_names': ['Free', 'Dev', 'Daily', 'Incidents']
            },
            'web': {
                'host': '127.0.0.1',
                'port': 8080,
                'debug': False
            },
            'logging': {
                'level': 'INFO',
                'log_path': '~/.community_board/logs/app.log',
                'max_log_size': 10485760,
                'backup_count': 5
            }
        }

    @pytest.fixture
    def config_path(self, temp_config_dir, sample_config):
        """Write the sample configuration and return its path."""
        path = temp_config_dir / "settings.yaml"
        with open(path, 'w') as f:
            yaml.dump(sample_config, f)
        return path

    def test_load_config(self, config_path):
        """Test loading configuration from file."""
        manager = ConfigManager(config_path)

        assert manager.get_config('web', 'port') == 8080
        assert manager.get_config('security', 'strict_password_check') is False
        assert manager.get_config('boards', 'default_names') == ['Free', 'Dev', 'Daily', 'Incidents']

    def test_bundled_defaults_used_when_missing(self, temp_config_dir):
        """Test that a missing user file falls back to bundled defaults and is created."""
        config_path = temp_config_dir / "nested" / "settings.yaml"

        manager = ConfigManager(config_path)

        assert config_path.exists()
        assert manager.get_config('storage', 'max_image_size') == 10485760
        assert len(manager.get_config('boards', 'default_names')) == 4

    def test_get_config_section(self, config_path):
        """Test getting entire configuration section."""
        manager = ConfigManager(config_path)
        web_config = manager.get_config('web')

        assert isinstance(web_config, dict)
        assert web_config['host'] == '127.0.0.1'

    def test_get_missing_key(self, config_path):
        """Test that unknown sections and keys raise KeyError."""
        manager = ConfigManager(config_path)

        with pytest.raises(KeyError):
            manager.get_config('network')
        with pytest.raises(KeyError):
            manager.get_config('web', 'workers')

    def test_set_and_save_config(self, config_path):
        """Test setting a value and persisting it."""
        manager = ConfigManager(config_path)
        manager.set_config('web', 'port', 9002)
        manager.save_config()

        with open(config_path, 'r') as f:
            saved_config = yaml.safe_load(f)

        assert saved_config['web']['port'] == 9002
        assert ConfigManager(config_path).get_config('web', 'port') == 9002

    def test_env_override(self, config_path, monkeypatch):
        """Test environment variable overrides."""
        monkeypatch.setenv('COMMUNITY_WEB__PORT', '9003')
        monkeypatch.setenv('COMMUNITY_SECURITY__STRICT_PASSWORD_CHECK', 'true')

        manager = ConfigManager(config_path)

        assert manager.get_config('web', 'port') == 9003
        assert manager.get_config('security', 'strict_password_check') is True

    def test_env_override_unknown_section_ignored(self, config_path, monkeypatch):
        """Test that overrides for unknown sections are skipped."""
        monkeypatch.setenv('COMMUNITY_NETWORK__PORT', '1')

        manager = ConfigManager(config_path)

        with pytest.raises(KeyError):
            manager.get_config('network')

    def test_merge_configs(self, temp_config_dir):
        """Test merging a partial user config over defaults."""
        config_path = temp_config_dir / "settings.yaml"
        with open(config_path, 'w') as f:
            yaml.dump({'web': {'port': 9999}, 'security': {'strict_password_check': True}}, f)

        manager = ConfigManager(config_path)

        assert manager.get_config('web', 'port') == 9999
        assert manager.get_config('security', 'strict_password_check') is True
        # Defaults remain for non-overridden values
        assert manager.get_config('web', 'host') == '127.0.0.1'
        assert 'logging' in manager._config

    def test_validation_invalid_type(self, temp_config_dir, sample_config):
        """Test validation fails with invalid field type."""
        sample_config['security']['strict_password_check'] = "sometimes"
        config_path = temp_config_dir / "settings.yaml"
        with open(config_path, 'w') as f:
            yaml.dump(sample_config, f)

        with pytest.raises(ValueError, match="must be of type"):
            ConfigManager(config_path)

    def test_validation_bool_is_not_int(self, temp_config_dir, sample_config):
        """Test that a boolean is rejected for an integer field."""
        sample_config['web']['port'] = True
        config_path = temp_config_dir / "settings.yaml"
        with open(config_path, 'w') as f:
            yaml.dump(sample_config, f)

        with pytest.raises(ValueError, match="must be of type int"):
            ConfigManager(config_path)

    def test_validation_out_of_range(self, temp_config_dir, sample_config):
        """Test validation fails with out of range value."""
        sample_config['web']['port'] = 99999
        config_path = temp_config_dir / "settings.yaml"
        with open(config_path, 'w') as f:
            yaml.dump(sample_config, f)

        with pytest.raises(ValueError, match="must be <="):
            ConfigManager(config_path)

    def test_validation_empty_board_name(self, temp_config_dir, sample_config):
        """Test that blank default board names are rejected."""
        sample_config['boards']['default_names'] = ['Free', '']
        config_path = temp_config_dir / "settings.yaml"
        with open(config_path, 'w') as f:
            yaml.dump(sample_config, f)

        with pytest.raises(ValueError, match="default_names"):
            ConfigManager(config_path)

    def test_invalid_yaml(self, temp_config_dir):
        """Test that malformed YAML raises ValueError."""
        config_path = temp_config_dir / "settings.yaml"
        config_path.write_text("web: [unclosed", encoding='utf-8')

        with pytest.raises(ValueError, match="Invalid YAML"):
            ConfigManager(config_path)

    def test_dataclass_accessors(self, config_path):
        """Test getting sections as dataclasses."""
        manager = ConfigManager(config_path)

        storage = manager.get_storage_config()
        assert isinstance(storage, StorageConfig)
        assert storage.max_image_size == 10485760

        security = manager.get_security_config()
        assert isinstance(security, SecurityConfig)
        assert security.strict_password_check is False

        boards = manager.get_boards_config()
        assert isinstance(boards, BoardsConfig)
        assert boards.default_names[0] == 'Free'

        assert manager.get_web_config().port == 8080
        assert manager.get_logging_config().backup_count == 5

    def test_expand_path(self, config_path, monkeypatch):
        """Test path expansion with ~ and environment variables."""
        manager = ConfigManager(config_path)

        expanded = manager.expand_path("~/.community_board/data")
        assert str(expanded).startswith(str(Path.home()))

        monkeypatch.setenv('COMMUNITY_TEST_ROOT', '/srv/board')
        assert manager.expand_path("$COMMUNITY_TEST_ROOT/media") == Path("/srv/board/media")
