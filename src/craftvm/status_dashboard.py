"""Power status dashboard.

Renders both observed signals (VM power state and Minecraft server
liveness) side by side so drift between them is visible at a glance.
"""

from rich.console import Console
from rich.table import Table

from craftvm.models import PowerSnapshot, PowerState


class StatusDashboard:
    """Displays a PowerSnapshot as a table."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    @staticmethod
    def _color_power_state(power_state: str) -> str:
        if power_state == PowerState.RUNNING:
            return f"[green]{power_state}[/green]"
        if power_state in (PowerState.STOPPED, PowerState.DEALLOCATED):
            return f"[red]{power_state}[/red]"
        return f"[yellow]{power_state}[/yellow]"

    def display(self, snapshot: PowerSnapshot, vm_name: str, server_address: str) -> None:
        """Print the snapshot, with a drift warning when the layers disagree."""
        table = Table(title="Minecraft Server Power Status", show_header=True)
        table.add_column("Layer", style="cyan", no_wrap=True)
        table.add_column("Target", style="magenta")
        table.add_column("State")
        table.add_column("Details", style="white")

        table.add_row(
            "VM",
            vm_name,
            self._color_power_state(snapshot.vm_status),
            "",
        )

        info = snapshot.server_info
        if snapshot.server_online and info is not None:
            details = f"{info.players_display} players"
            if info.version:
                details += f", version {info.version}"
            table.add_row("Server", server_address, "[green]online[/green]", details)
        else:
            table.add_row("Server", server_address, "[red]offline[/red]", "")

        self.console.print(table)

        if not snapshot.consistent:
            self.console.print(
                "[bold red]Drift detected: the server is down but the VM is running. "
                "Check the server process before powering on or off.[/bold red]"
            )
