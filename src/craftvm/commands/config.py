"""Configuration commands for craftvm CLI."""

import sys
from dataclasses import fields

import click

from craftvm.cli_helpers import EXIT_ERROR
from craftvm.config_manager import ConfigManager, CraftVMConfig
from craftvm.exceptions import ConfigError

CONFIG_KEYS = [f.name for f in fields(CraftVMConfig)]


@click.group(name="config")
def config_group() -> None:
    """Show or change stored configuration."""


@config_group.command(name="show")
@click.option("--config", help="Config file path", type=click.Path())
def show_config(config: str | None) -> None:
    """Show the stored configuration (file values and defaults)."""
    try:
        cfg = ConfigManager.load_config(config)
        path = ConfigManager.get_config_path(config)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    click.echo(f"Config file: {path}")
    for key in CONFIG_KEYS:
        value = getattr(cfg, key)
        click.echo(f"  {key:<20} {value if value is not None else '(not set)'}")


@config_group.command(name="set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value", type=str)
@click.option("--config", help="Config file path", type=click.Path())
def set_config(key: str, value: str, config: str | None) -> None:
    """Store a configuration value.

    \b
    Examples:
        craftvm config set vm_name mc-vm
        craftvm config set resource_group games
        craftvm config set server_address mc.example.com
        craftvm config set deallocate false
    """
    try:
        cfg = ConfigManager.update_config(config, **{key: value})
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    click.echo(f"Set {key} = {getattr(cfg, key)}")
