"""Pytest configuration and fixtures for craftvm tests.

CRITICAL: Protects production configuration from test modifications.
"""

import os
import shutil
from pathlib import Path

import pytest


@pytest.fixture(scope="session", autouse=True)
def protect_production_config():
    """Protect ~/.craftvm/config.toml from being modified by tests.

    Backs up the real config.toml before any tests run and restores it
    after all tests complete.
    """
    config_path = Path.home() / ".craftvm" / "config.toml"
    backup_path = Path.home() / ".craftvm" / ".config.toml.pytest-backup"

    config_existed = config_path.exists()
    if config_existed:
        shutil.copy2(config_path, backup_path)
        print(f"\n[PYTEST] Protected config.toml - backup at {backup_path}")

    yield

    if config_existed and backup_path.exists():
        shutil.copy2(backup_path, config_path)
        backup_path.unlink()
        print("\n[PYTEST] Restored config.toml from backup")
    elif backup_path.exists():
        backup_path.unlink()


@pytest.fixture(scope="session", autouse=True)
def mark_test_mode():
    """Mark test mode so ConfigManager refuses to write ~/.craftvm/config.toml."""
    os.environ["CRAFTVM_TEST_MODE"] = "true"

    yield

    if "CRAFTVM_TEST_MODE" in os.environ:
        del os.environ["CRAFTVM_TEST_MODE"]
