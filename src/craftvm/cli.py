"""craftvm CLI entry point.

Commands:
    on       Start the VM unless the server is already online
    off      Ask the server to stop, then deallocate the VM
    status   Show VM power state and server liveness side by side
    config   Show or change stored configuration
"""

import logging

import click

from craftvm import __version__
from craftvm.click_group import CraftVMGroup
from craftvm.commands.config import config_group
from craftvm.commands.power import power_off, power_on, status

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool, debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
        )
    elif verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(message)s")


@click.group(cls=CraftVMGroup, invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Show what craftvm is doing")
@click.option("--debug", is_flag=True, help="Show az commands and HTTP details")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Power a Minecraft server VM on Azure up and down safely.

    \b
    EXAMPLES:
        $ craftvm on
        $ craftvm off
        $ craftvm off --no-notify
        $ craftvm status

    \b
    CONFIGURATION:
        Config file: ~/.craftvm/config.toml
        Required: resource_group, vm_name, server_address
        Environment overrides: CRAFTVM_<KEY>, e.g. CRAFTVM_VM_NAME
    """
    _configure_logging(verbose, debug)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


main.add_command(power_on)
main.add_command(power_off)
main.add_command(status)
main.add_command(config_group)


if __name__ == "__main__":
    main()
