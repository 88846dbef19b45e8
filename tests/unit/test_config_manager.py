"""Unit tests for config_manager module."""

import os

import pytest

from craftvm import config_manager
from craftvm.config_manager import TEST_MODE_ENV_VAR, ConfigManager, CraftVMConfig
from craftvm.exceptions import ConfigError
from craftvm.server_status import DEFAULT_STATUS_API_URL


class TestCraftVMConfig:
    """Tests for CraftVMConfig dataclass."""

    def test_default_values(self):
        config = CraftVMConfig()
        assert config.resource_group is None
        assert config.vm_name is None
        assert config.server_address is None
        assert config.status_api_url == DEFAULT_STATUS_API_URL
        assert config.console_webhook_url is None
        assert config.stop_directive == "stop"
        assert config.deallocate is True
        assert config.az_timeout == 180

    def test_to_dict_excludes_none(self):
        data = CraftVMConfig(vm_name="mc-vm").to_dict()
        assert data["vm_name"] == "mc-vm"
        assert "resource_group" not in data
        assert "console_webhook_url" not in data

    def test_from_dict_partial(self):
        config = CraftVMConfig.from_dict({"vm_name": "mc-vm", "deallocate": False})
        assert config.vm_name == "mc-vm"
        assert config.deallocate is False
        assert config.stop_directive == "stop"  # Default

    def test_from_dict_ignores_unknown_keys(self):
        config = CraftVMConfig.from_dict({"vm_name": "mc-vm", "region": "westus2"})
        assert config.vm_name == "mc-vm"
        assert not hasattr(config, "region")

    def test_from_dict_invalid_int(self):
        with pytest.raises(ConfigError, match="Invalid integer for az_timeout"):
            CraftVMConfig.from_dict({"az_timeout": "soon"})


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_load_missing_file_returns_defaults(self, mock_config_path):
        config = ConfigManager.load_config()
        assert config == CraftVMConfig()

    def test_save_and_load(self, mock_config_path):
        ConfigManager.save_config(
            CraftVMConfig(resource_group="games-rg", vm_name="mc-vm", deallocate=False)
        )

        config = ConfigManager.load_config()

        assert config.resource_group == "games-rg"
        assert config.vm_name == "mc-vm"
        assert config.deallocate is False
        assert mock_config_path.stat().st_mode & 0o777 == 0o600

    def test_save_preserves_comments(self, mock_config_path):
        mock_config_path.write_text('# my server\nvm_name = "old-vm"\n')
        os.chmod(mock_config_path, 0o600)

        ConfigManager.update_config(vm_name="new-vm")

        text = mock_config_path.read_text()
        assert "# my server" in text
        assert 'vm_name = "new-vm"' in text

    def test_load_fixes_insecure_permissions(self, mock_config_path):
        mock_config_path.write_text('vm_name = "mc-vm"\n')
        os.chmod(mock_config_path, 0o644)

        ConfigManager.load_config()

        assert mock_config_path.stat().st_mode & 0o777 == 0o600

    def test_load_invalid_toml(self, mock_config_path):
        mock_config_path.write_text("vm_name = [unterminated\n")
        os.chmod(mock_config_path, 0o600)

        with pytest.raises(ConfigError, match="Failed to load config"):
            ConfigManager.load_config()

    def test_custom_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            ConfigManager.load_config(str(tmp_path / "missing.toml"))

    def test_update_config_creates_missing_custom_path(self, tmp_path):
        config_file = tmp_path / "servers" / "new.toml"

        config = ConfigManager.update_config(str(config_file), vm_name="mc-vm")

        assert config.vm_name == "mc-vm"
        assert config_file.exists()
        assert config_file.stat().st_mode & 0o777 == 0o600
        assert ConfigManager.load_config(str(config_file)).vm_name == "mc-vm"

    def test_update_config_coerces_strings(self, mock_config_path):
        config = ConfigManager.update_config(deallocate="no", http_timeout="5")

        assert config.deallocate is False
        assert config.http_timeout == 5

    def test_update_config_unknown_key(self, mock_config_path):
        with pytest.raises(ConfigError, match="Unknown config key"):
            ConfigManager.update_config(region="westus2")

    def test_update_config_invalid_bool(self, mock_config_path):
        with pytest.raises(ConfigError, match="Invalid boolean"):
            ConfigManager.update_config(deallocate="maybe")


class TestResolve:
    """Tests for ConfigManager.resolve() precedence."""

    def test_environment_overrides_file(self, mock_config_path):
        ConfigManager.save_config(CraftVMConfig(vm_name="file-vm", resource_group="file-rg"))

        config = ConfigManager.resolve(environ={"CRAFTVM_VM_NAME": "env-vm"})

        assert config.vm_name == "env-vm"
        assert config.resource_group == "file-rg"

    def test_cli_overrides_environment(self, mock_config_path):
        config = ConfigManager.resolve(
            environ={"CRAFTVM_VM_NAME": "env-vm", "CRAFTVM_DEALLOCATE": "true"},
            vm_name="cli-vm",
            deallocate=False,
        )

        assert config.vm_name == "cli-vm"
        assert config.deallocate is False

    def test_none_overrides_are_ignored(self, mock_config_path):
        config = ConfigManager.resolve(
            environ={"CRAFTVM_SERVER_ADDRESS": "mc.example.com"}, server_address=None
        )

        assert config.server_address == "mc.example.com"

    def test_require_names_missing_values(self):
        with pytest.raises(ConfigError) as exc_info:
            ConfigManager.require(CraftVMConfig(vm_name="mc-vm"), "vm_name", "resource_group")

        message = str(exc_info.value)
        assert "resource_group" in message
        assert "CRAFTVM_RESOURCE_GROUP" in message
        assert "vm_name (" not in message

    def test_require_passes(self):
        ConfigManager.require(CraftVMConfig(vm_name="mc-vm"), "vm_name")


class TestProductionConfigGuard:
    """Tests for the test-mode guard on the real config file."""

    @pytest.fixture
    def production_config(self, tmp_path, monkeypatch):
        """Stand in a tmp file for ~/.craftvm/config.toml."""
        config_file = tmp_path / ".craftvm" / "config.toml"
        monkeypatch.setattr(config_manager, "PRODUCTION_CONFIG_FILE", config_file)
        monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_DIR", config_file.parent)
        monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", config_file)
        return config_file

    def test_save_refused_in_test_mode(self, production_config, monkeypatch):
        monkeypatch.setenv(TEST_MODE_ENV_VAR, "true")

        with pytest.raises(ConfigError, match="Cannot save to production config"):
            ConfigManager.save_config(CraftVMConfig(vm_name="mc-vm"))

        assert not production_config.exists()

    def test_update_refused_in_test_mode(self, production_config, monkeypatch):
        monkeypatch.setenv(TEST_MODE_ENV_VAR, "true")

        with pytest.raises(ConfigError, match="Cannot save to production config"):
            ConfigManager.update_config(vm_name="mc-vm")

        assert not production_config.exists()

    def test_save_allowed_outside_test_mode(self, production_config, monkeypatch):
        monkeypatch.delenv(TEST_MODE_ENV_VAR, raising=False)

        ConfigManager.save_config(CraftVMConfig(vm_name="mc-vm"))

        assert production_config.exists()

    def test_custom_path_allowed_in_test_mode(self, production_config, tmp_path, monkeypatch):
        monkeypatch.setenv(TEST_MODE_ENV_VAR, "true")

        path = ConfigManager.save_config(CraftVMConfig(vm_name="mc-vm"), str(tmp_path / "c.toml"))

        assert path.exists()
        assert not production_config.exists()
