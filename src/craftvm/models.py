"""Data models shared by the collaborators and the reconciler."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class PowerState(str, Enum):
    """Well-known Azure VM power states.

    Values match what AzureVMClient.get_status() returns. Any other
    provider state is passed through as a plain string.
    """

    RUNNING = "Running"
    STARTING = "Starting"
    STOPPING = "Stopping"
    STOPPED = "Stopped"
    DEALLOCATING = "Deallocating"
    DEALLOCATED = "Deallocated"
    UNKNOWN = "Unknown"


@dataclass
class ServerInfo:
    """Liveness record of the Minecraft server.

    A probe returns None when no record exists, so an instance is always
    truthy; callers still check `online`.
    """

    online: bool
    host: str | None = None
    port: int | None = None
    version: str | None = None
    motd: str | None = None
    players_online: int | None = None
    players_max: int | None = None

    @property
    def players_display(self) -> str:
        if self.players_online is None:
            return "N/A"
        if self.players_max is None:
            return str(self.players_online)
        return f"{self.players_online}/{self.players_max}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServerInfo":
        """Create from a server status API payload."""
        players = data.get("players") or {}
        motd = data.get("motd") or {}
        motd_lines = motd.get("clean") if isinstance(motd, dict) else None
        return cls(
            online=bool(data.get("online")),
            host=data.get("hostname") or data.get("ip"),
            port=data.get("port"),
            version=data.get("version"),
            motd=" ".join(motd_lines) if motd_lines else None,
            players_online=players.get("online"),
            players_max=players.get("max"),
        )


@dataclass
class LifecycleResult:
    """Acknowledgement of a VM power command (start/stop/deallocate)."""

    vm_name: str
    success: bool
    message: str
    operation: str  # 'start', 'stop', 'deallocate'

    def __repr__(self) -> str:
        status = "SUCCESS" if self.success else "FAILED"
        return f"[{status}] {self.vm_name}: {self.message}"


def is_online(server_info: Any) -> bool:
    """Read the online flag of a liveness record.

    Accepts ServerInfo, a raw status payload (mapping) or None. A record
    without an online flag counts as offline.
    """
    if not server_info:
        return False
    if isinstance(server_info, Mapping):
        return bool(server_info.get("online"))
    return bool(getattr(server_info, "online", False))


@dataclass
class PowerSnapshot:
    """Both observed signals at one point in time."""

    vm_status: str
    server_info: ServerInfo | None = None

    @property
    def server_online(self) -> bool:
        return is_online(self.server_info)

    @property
    def consistent(self) -> bool:
        """False when the server is down but the VM is running."""
        return self.server_online or self.vm_status != PowerState.RUNNING


__all__ = ["LifecycleResult", "PowerSnapshot", "PowerState", "ServerInfo", "is_online"]
