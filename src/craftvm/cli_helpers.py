"""CLI helper functions.

Builds the reconciler and its collaborators from resolved configuration,
and maps power-operation outcomes to messages and exit codes.
"""

import logging
import sys
from collections.abc import Callable
from typing import Any

import click

from craftvm.azure_vm_client import AzureVMClient
from craftvm.config_manager import ConfigManager, CraftVMConfig
from craftvm.console_notifier import ConsoleWebhookNotifier
from craftvm.exceptions import AlreadyRunningError, CraftVMError, InconsistentStateError
from craftvm.reconciler import Reconciler
from craftvm.server_status import MinecraftStatusProbe

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INCONSISTENT = 3


def build_reconciler(config: CraftVMConfig, notify: bool = False) -> Reconciler:
    """Create a Reconciler wired to Azure, the status API and (optionally) the console.

    Args:
        config: Effective configuration
        notify: Attach the console notifier (requires console_webhook_url)

    Raises:
        ConfigError: If a required value is missing
    """
    ConfigManager.require(config, "resource_group", "vm_name", "server_address")

    infrastructure = AzureVMClient(
        vm_name=config.vm_name,
        resource_group=config.resource_group,
        deallocate=config.deallocate,
        timeout=config.az_timeout,
    )
    probe = MinecraftStatusProbe(
        address=config.server_address,
        api_url=config.status_api_url,
        timeout=config.http_timeout,
    )

    notifier = None
    if notify:
        ConfigManager.require(config, "console_webhook_url")
        notifier = ConsoleWebhookNotifier(
            webhook_url=config.console_webhook_url,
            directive=config.stop_directive,
            timeout=config.http_timeout,
        )

    return Reconciler(infrastructure, probe, notifier)


def run_power_operation(operation: Callable[[], Any]) -> Any:
    """Run power_on/power_off and exit with the code matching its outcome.

    AlreadyRunningError is a refusal, not a failure, and exits 0.
    InconsistentStateError exits 3 so schedulers can tell drift apart.
    """
    try:
        return operation()
    except AlreadyRunningError as e:
        click.echo(f"Nothing to do: {e}")
        sys.exit(EXIT_OK)
    except InconsistentStateError as e:
        click.echo("", err=True)
        click.echo("!" * 70, err=True)
        click.echo(f"{e}", err=True)
        click.echo("Operator attention required: the VM and server disagree.", err=True)
        click.echo("!" * 70, err=True)
        sys.exit(EXIT_INCONSISTENT)
    except CraftVMError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)
