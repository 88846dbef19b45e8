"""Power commands for craftvm CLI.

This module provides the commands that act on the VM:
- on: Start the VM unless the server is already online
- off: Ask the server to stop, then stop/deallocate the VM
- status: Show both signals without changing anything
"""

import logging
import sys
from collections.abc import Callable
from typing import Any

import click

from craftvm.cli_helpers import (
    EXIT_ERROR,
    EXIT_INCONSISTENT,
    build_reconciler,
    run_power_operation,
)
from craftvm.config_manager import ConfigManager
from craftvm.exceptions import CraftVMError
from craftvm.status_dashboard import StatusDashboard

logger = logging.getLogger(__name__)


def target_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that targets the VM."""
    func = click.option("--config", help="Config file path", type=click.Path())(func)
    func = click.option("--server", help="Minecraft server address (host[:port])", type=str)(func)
    func = click.option("--resource-group", "--rg", help="Resource group", type=str)(func)
    func = click.option("--vm", "vm_name", help="VM name", type=str)(func)
    return func


@click.command(name="on")
@target_options
def power_on(
    vm_name: str | None, resource_group: str | None, server: str | None, config: str | None
) -> None:
    """Start the VM unless the Minecraft server is already online.

    Refuses (exit 3) when the server is down but the VM is running.

    \b
    Examples:
        craftvm on
        craftvm on --vm mc-vm --rg games --server mc.example.com
    """
    try:
        cfg = ConfigManager.resolve(
            config, vm_name=vm_name, resource_group=resource_group, server_address=server
        )
        reconciler = build_reconciler(cfg)
    except CraftVMError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    click.echo(f"Powering on VM '{cfg.vm_name}'...")
    result = run_power_operation(reconciler.power_on)
    click.echo(f"Success! {getattr(result, 'message', result)}")


@click.command(name="off")
@target_options
@click.option("--webhook", help="Console webhook URL for the stop directive", type=str)
@click.option("--no-notify", is_flag=True, help="Skip the graceful stop directive")
@click.option(
    "--no-deallocate", is_flag=True, help="Stop without deallocating (still incurs compute costs)"
)
def power_off(
    vm_name: str | None,
    resource_group: str | None,
    server: str | None,
    config: str | None,
    webhook: str | None,
    no_notify: bool,
    no_deallocate: bool,
) -> None:
    """Ask the server to stop, then deallocate the VM.

    The stop directive is sent only when a console webhook is configured.
    If it cannot be delivered the VM is left running.

    \b
    Examples:
        craftvm off
        craftvm off --no-notify
        craftvm off --no-deallocate
    """
    try:
        cfg = ConfigManager.resolve(
            config,
            vm_name=vm_name,
            resource_group=resource_group,
            server_address=server,
            console_webhook_url=webhook,
            deallocate=False if no_deallocate else None,
        )
        notify = bool(cfg.console_webhook_url) and not no_notify
        reconciler = build_reconciler(cfg, notify=notify)
    except CraftVMError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if notify:
        click.echo(f"Sending '{cfg.stop_directive}' to the server console...")
    click.echo(f"{'Deallocating' if cfg.deallocate else 'Stopping'} VM '{cfg.vm_name}'...")
    result = run_power_operation(reconciler.power_off)
    click.echo(f"Success! {getattr(result, 'message', result)}")


@click.command()
@target_options
def status(
    vm_name: str | None, resource_group: str | None, server: str | None, config: str | None
) -> None:
    """Show VM power state and server liveness.

    Exits 3 when the server is down but the VM is running.

    \b
    Examples:
        craftvm status
    """
    try:
        cfg = ConfigManager.resolve(
            config, vm_name=vm_name, resource_group=resource_group, server_address=server
        )
        snapshot = build_reconciler(cfg).status()
    except CraftVMError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    StatusDashboard().display(snapshot, cfg.vm_name, cfg.server_address)

    if not snapshot.consistent:
        sys.exit(EXIT_INCONSISTENT)
