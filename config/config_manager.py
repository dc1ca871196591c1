"""Configuration manager for the community bulletin board.

Settings come from three layers, later ones winning: the bundled
``settings.yaml``, the user's YAML file, and ``COMMUNITY_<SECTION>__<KEY>``
environment variables. The merged result is validated against ``SCHEMA``
and exposed per section as dataclasses.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field


@dataclass
class StorageConfig:
    """Storage configuration settings."""
    db_path: str = "~/.community_board/data/community.db"
    media_dir: str = "~/.community_board/media"
    max_image_size: int = 10485760  # 10 MB


@dataclass
class SecurityConfig:
    """Security configuration settings."""
    strict_password_check: bool = False


@dataclass
class BoardsConfig:
    """Default board seeding settings."""
    default_names: list = field(default_factory=lambda: [
        "자유 게시판",
        "개발 게시판",
        "일상 게시판",
        "사건사고 게시판",
    ])


@dataclass
class WebConfig:
    """HTTP server configuration settings."""
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_path: str = "~/.community_board/logs/app.log"
    max_log_size: int = 10485760  # 10 MB
    backup_count: int = 5


# section -> field -> (type, min, max)
SCHEMA = {
    'storage': {
        'db_path': (str, None, None),
        'media_dir': (str, None, None),
        'max_image_size': (int, 1, 104857600),
    },
    'security': {
        'strict_password_check': (bool, None, None),
    },
    'boards': {
        'default_names': (list, None, None),
    },
    'web': {
        'host': (str, None, None),
        'port': (int, 1, 65535),
        'debug': (bool, None, None),
    },
    'logging': {
        'level': (str, None, None),
        'log_path': (str, None, None),
        'max_log_size': (int, 1024, 104857600),
        'backup_count': (int, 0, 100),
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_env_value(value: str) -> Any:
    """Turn an environment string into a bool, an int, or leave it as text."""
    lowered = value.lower()
    if lowered in ('true', 'yes'):
        return True
    if lowered in ('false', 'no'):
        return False
    try:
        return int(value)
    except ValueError:
        return value


def _check_field(section: Dict[str, Any], name: str, expected_type: type,
                 min_val: Optional[int], max_val: Optional[int]) -> None:
    if name not in section:
        raise ValueError(f"Missing required field: {name}")

    value = section[name]

    # bool is an int subclass
    if not isinstance(value, expected_type) or (expected_type is int and isinstance(value, bool)):
        raise ValueError(
            f"Field {name} must be of type {expected_type.__name__}, "
            f"got {type(value).__name__}"
        )

    if min_val is not None and value < min_val:
        raise ValueError(f"Field {name} must be >= {min_val}, got {value}")
    if max_val is not None and value > max_val:
        raise ValueError(f"Field {name} must be <= {max_val}, got {value}")


class ConfigManager:
    """Manages application configuration with validation and persistence."""

    DEFAULT_CONFIG_PATH = Path.home() / ".community_board" / "config" / "settings.yaml"
    BUNDLED_CONFIG_PATH = Path(__file__).parent / "settings.yaml"
    ENV_PREFIX = "COMMUNITY_"

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional custom path to configuration file.
                        If None, uses default user config path. A missing
                        file is created from the bundled defaults.
        """
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH

        self._config: Dict[str, Any] = self._read_yaml(self.BUNDLED_CONFIG_PATH)
        if self.config_path.exists():
            self._config = _deep_merge(self._config, self._read_yaml(self.config_path))
        else:
            self.save_config()

        self._apply_env_overrides()
        self._validate()

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            return {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {path}: {e}")

    def _apply_env_overrides(self) -> None:
        # COMMUNITY_WEB__PORT=9000 sets web.port; unknown sections are ignored
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(self.ENV_PREFIX):
                continue

            parts = env_key[len(self.ENV_PREFIX):].lower().split("__")
            if len(parts) == 2 and parts[0] in self._config:
                section, key = parts
                self._config[section][key] = _parse_env_value(env_value)

    def _validate(self) -> None:
        for section_name, fields in SCHEMA.items():
            if section_name not in self._config:
                raise ValueError(f"Missing required configuration section: {section_name}")
            for name, (expected_type, min_val, max_val) in fields.items():
                _check_field(self._config[section_name], name, expected_type, min_val, max_val)

        names = self._config['boards']['default_names']
        if not all(isinstance(name, str) and name for name in names):
            raise ValueError("Field default_names must contain non-empty strings")

    def save_config(self) -> None:
        """Save current configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self._config, f, default_flow_style=False, sort_keys=False,
                      allow_unicode=True)

    def get_config(self, section: str, key: Optional[str] = None) -> Any:
        """Get a whole section, or one key within it.

        Raises:
            KeyError: If section or key doesn't exist
        """
        if section not in self._config:
            raise KeyError(f"Configuration section not found: {section}")

        if key is None:
            return self._config[section]

        if key not in self._config[section]:
            raise KeyError(f"Configuration key not found: {section}.{key}")

        return self._config[section][key]

    def set_config(self, section: str, key: str, value: Any) -> None:
        """Set one key within an existing section (not persisted until save_config)."""
        if section not in self._config:
            raise KeyError(f"Configuration section not found: {section}")

        self._config[section][key] = value

    def get_storage_config(self) -> StorageConfig:
        return StorageConfig(**self._config['storage'])

    def get_security_config(self) -> SecurityConfig:
        return SecurityConfig(**self._config['security'])

    def get_boards_config(self) -> BoardsConfig:
        return BoardsConfig(**self._config['boards'])

    def get_web_config(self) -> WebConfig:
        return WebConfig(**self._config['web'])

    def get_logging_config(self) -> LoggingConfig:
        return LoggingConfig(**self._config['logging'])

    @staticmethod
    def expand_path(path: str) -> Path:
        """Expand ``~`` and environment variables in a configured path."""
        return Path(os.path.expanduser(os.path.expandvars(path)))
