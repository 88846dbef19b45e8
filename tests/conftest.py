"""
Shared test fixtures and configuration for craftvm tests.

This module provides common fixtures used across all test types:
- Isolated config files
- Environment without CRAFTVM_* overrides
- Mocked collaborators for CLI tests
"""

import os
from unittest.mock import MagicMock, patch

import pytest

from craftvm.models import LifecycleResult

# ============================================================================
# CONFIG FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def clean_craftvm_env(monkeypatch):
    """Remove CRAFTVM_* variables so the developer's shell cannot leak into tests."""
    for key in list(os.environ):
        if key.startswith("CRAFTVM_") and key != "CRAFTVM_TEST_MODE":
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def isolated_config(tmp_path):
    """Provide isolated config directory for tests.

    Use this fixture instead of modifying ~/.craftvm/config.toml.
    """
    config_dir = tmp_path / ".craftvm"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def mock_config_path(isolated_config, monkeypatch):
    """Point ConfigManager at an isolated config file instead of ~/.craftvm.

    Example:
        def test_something(mock_config_path):
            ConfigManager.save_config(config)  # Safe!
    """
    config_file = isolated_config / "config.toml"

    from craftvm.config_manager import ConfigManager

    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_DIR", isolated_config)
    monkeypatch.setattr(ConfigManager, "DEFAULT_CONFIG_FILE", config_file)

    return config_file


@pytest.fixture
def configured(mock_config_path, monkeypatch):
    """Required configuration supplied through the environment."""
    monkeypatch.setenv("CRAFTVM_RESOURCE_GROUP", "games-rg")
    monkeypatch.setenv("CRAFTVM_VM_NAME", "mc-vm")
    monkeypatch.setenv("CRAFTVM_SERVER_ADDRESS", "mc.example.com")
    return mock_config_path


# ============================================================================
# COLLABORATOR MOCKING FIXTURES
# ============================================================================


@pytest.fixture
def mock_collaborators():
    """Patch the Azure client, status probe and notifier used by the CLI.

    Yields a dict of the mock instances. Defaults: server offline,
    VM deallocated, start/stop succeed.
    """
    with (
        patch("craftvm.cli_helpers.AzureVMClient") as azure_cls,
        patch("craftvm.cli_helpers.MinecraftStatusProbe") as probe_cls,
        patch("craftvm.cli_helpers.ConsoleWebhookNotifier") as notifier_cls,
    ):
        azure = MagicMock()
        azure.get_status.return_value = "Deallocated"
        azure.start.return_value = LifecycleResult(
            "mc-vm", True, "VM started successfully", "start"
        )
        azure.stop.return_value = LifecycleResult(
            "mc-vm", True, "VM deallocated successfully", "deallocate"
        )
        azure_cls.return_value = azure

        probe = MagicMock()
        probe.get_info.return_value = None
        probe_cls.return_value = probe

        notifier = MagicMock()
        notifier_cls.return_value = notifier

        yield {
            "azure_cls": azure_cls,
            "azure": azure,
            "probe_cls": probe_cls,
            "probe": probe,
            "notifier_cls": notifier_cls,
            "notifier": notifier,
        }
