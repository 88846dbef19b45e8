"""Configuration management module.

This module handles persistent configuration storage using TOML format.
Stores which VM hosts the server, where its status can be queried and
where the console stop directive goes.

Resolution order for every value: CLI option, then CRAFTVM_<FIELD>
environment variable, then the config file, then the built-in default.

Security:
- Config file permissions: 0600 (owner read/write only)
- Webhook token read from the environment only
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import tomli
import tomlkit

from craftvm.exceptions import ConfigError
from craftvm.server_status import DEFAULT_STATUS_API_URL

logger = logging.getLogger(__name__)

ENV_PREFIX = "CRAFTVM_"
TEST_MODE_ENV_VAR = "CRAFTVM_TEST_MODE"
PRODUCTION_CONFIG_FILE = Path.home() / ".craftvm" / "config.toml"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class CraftVMConfig:
    """craftvm configuration data."""

    resource_group: str | None = None
    vm_name: str | None = None
    server_address: str | None = None
    status_api_url: str = DEFAULT_STATUS_API_URL
    console_webhook_url: str | None = None  # Enables the graceful stop on power-off
    stop_directive: str = "stop"
    deallocate: bool = True  # Deallocate on power-off (no compute charges)
    az_timeout: int = 180
    http_timeout: int = 10

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        data = asdict(self)
        # Filter out None values as TOML doesn't support them
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CraftVMConfig":
        """Create from dictionary, converting values to the field types."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        config = cls()
        for key in known & set(data):
            setattr(config, key, _coerce(key, data[key]))
        return config


def _field_type(key: str) -> Any:
    for f in fields(CraftVMConfig):
        if f.name == key:
            return f.type
    raise ConfigError(f"Unknown config key: {key}")


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw value (TOML, env var or CLI string) to the field's type."""
    field_type = _field_type(key)

    if value is None:
        return None

    if field_type is bool:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ConfigError(f"Invalid boolean for {key}: {value!r}")

    if field_type is int:
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid integer for {key}: {value!r}") from e
        if number <= 0:
            raise ConfigError(f"{key} must be positive, got {number}")
        return number

    return str(value)


class ConfigManager:
    """Manage the craftvm configuration file.

    Configuration is stored at ~/.craftvm/config.toml with secure permissions.
    """

    DEFAULT_CONFIG_DIR = PRODUCTION_CONFIG_FILE.parent
    DEFAULT_CONFIG_FILE = PRODUCTION_CONFIG_FILE

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file

        Raises:
            ConfigError: If a custom path was given and does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> CraftVMConfig:
        """Load configuration from file.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            CraftVMConfig object (defaults when no file exists)

        Raises:
            ConfigError: If loading fails
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return CraftVMConfig()

        try:
            mode = config_path.stat().st_mode & 0o777
            if mode & 0o077:  # Check if group/other have any permissions
                logger.warning(
                    f"Config file has insecure permissions: {oct(mode)}. Fixing to 0600..."
                )
                os.chmod(config_path, 0o600)

            with open(config_path, "rb") as f:
                data = tomli.load(f)

        except (OSError, tomli.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        return CraftVMConfig.from_dict(data)

    @classmethod
    def save_config(cls, config: CraftVMConfig, custom_path: str | None = None) -> Path:
        """Save configuration to file.

        Existing comments and formatting are kept. The file is written to a
        temporary path and renamed into place.

        Args:
            config: Configuration to save
            custom_path: Custom config file path (optional)

        Returns:
            Path the configuration was written to

        Raises:
            ConfigError: If saving fails
        """
        if custom_path:
            config_path = Path(custom_path).expanduser().resolve()
        else:
            config_path = cls.DEFAULT_CONFIG_FILE

        # CRITICAL: Prevent tests from modifying production config
        if os.getenv(TEST_MODE_ENV_VAR) == "true" and config_path == PRODUCTION_CONFIG_FILE:
            raise ConfigError(
                "Cannot save to production config during tests. "
                "Tests must point ConfigManager at a tmp_path config file. "
                "This protects ~/.craftvm/config.toml from being overwritten."
            )

        temp_path = config_path.with_suffix(".tmp")
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)

            if config_path.exists():
                with open(config_path) as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()

            for key, value in config.to_dict().items():
                doc[key] = value

            with open(temp_path, "w") as f:
                tomlkit.dump(doc, f)

            # Set secure permissions before moving
            os.chmod(temp_path, 0o600)
            temp_path.replace(config_path)

        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config: {e}") from e

        logger.debug(f"Saved config to: {config_path}")
        return config_path

    @classmethod
    def update_config(cls, custom_path: str | None = None, **updates: Any) -> CraftVMConfig:
        """Update configuration values and save.

        A custom path that does not exist yet starts from the defaults and
        is created on save.

        Raises:
            ConfigError: If a key is unknown, a value is invalid, or saving fails
        """
        if custom_path and not Path(custom_path).expanduser().exists():
            config = CraftVMConfig()
        else:
            config = cls.load_config(custom_path)

        for key, value in updates.items():
            setattr(config, key, _coerce(key, value))

        cls.save_config(config, custom_path)
        return config

    @classmethod
    def resolve(
        cls, custom_path: str | None = None, environ: dict[str, str] | None = None, **overrides: Any
    ) -> CraftVMConfig:
        """Load configuration and apply environment and CLI overrides.

        Args:
            custom_path: Custom config file path (optional)
            environ: Environment mapping (defaults to os.environ)
            **overrides: CLI values; None means "not given"

        Returns:
            Effective CraftVMConfig
        """
        config = cls.load_config(custom_path)
        env = os.environ if environ is None else environ

        for f in fields(CraftVMConfig):
            env_value = env.get(f"{ENV_PREFIX}{f.name.upper()}")
            if env_value:
                setattr(config, f.name, _coerce(f.name, env_value))

        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, _coerce(key, value))

        return config

    @staticmethod
    def require(config: CraftVMConfig, *names: str) -> None:
        """Raise ConfigError naming every required value that is missing."""
        missing = [name for name in names if not getattr(config, name)]
        if missing:
            hints = ", ".join(f"{name} (or ${ENV_PREFIX}{name.upper()})" for name in missing)
            raise ConfigError(
                f"Missing required configuration: {hints}. "
                "Set it with 'craftvm config set KEY VALUE'."
            )


__all__ = ["CraftVMConfig", "ConfigManager", "ENV_PREFIX"]
