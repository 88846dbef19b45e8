"""Custom exceptions for craftvm.

Every failure a power operation can end in has its own type, so callers
can tell a refusal apart from a broken dependency without matching on
message text.
"""


class CraftVMError(Exception):
    """Base exception for craftvm errors."""

    pass


class ConfigError(CraftVMError):
    """Configuration is missing, unreadable or invalid."""

    pass


class ProbeUnavailableError(CraftVMError):
    """Server status could not be queried. Nothing was changed."""

    pass


class InfrastructureError(CraftVMError):
    """An Azure VM query or power command failed."""

    pass


class NotifierError(CraftVMError):
    """The stop directive could not be delivered to the server console."""

    pass


class AlreadyRunningError(CraftVMError):
    """Power-on refused: the Minecraft server is already online."""

    def __init__(self, message: str = "The server is already up and running") -> None:
        super().__init__(message)


class InconsistentStateError(CraftVMError):
    """The server reports down while the VM reports running.

    This is drift between the two layers and needs an operator; retrying
    will not fix it.
    """

    def __init__(self, vm_status: str, message: str | None = None) -> None:
        self.vm_status = vm_status
        super().__init__(
            message
            or (
                "Internal Error: The server appears to be down but the virtual "
                f"machine appears to be running (VM status: {vm_status})"
            )
        )


__all__ = [
    "AlreadyRunningError",
    "ConfigError",
    "CraftVMError",
    "InconsistentStateError",
    "InfrastructureError",
    "NotifierError",
    "ProbeUnavailableError",
]
