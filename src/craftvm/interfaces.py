"""Collaborator protocols the reconciler is built against.

The reconciler only ever talks to these three narrow interfaces. The
concrete Azure, status API and webhook implementations live in their own
modules; tests pass in mocks.
"""

from typing import Any, Protocol, runtime_checkable

from craftvm.models import ServerInfo


@runtime_checkable
class InfrastructureClient(Protocol):
    """Reports and changes the power state of the VM."""

    def get_status(self) -> str:
        """Return the current VM power state (e.g. "Running", "Deallocated")."""
        ...

    def start(self) -> Any:
        """Start the VM and return an acknowledgement."""
        ...

    def stop(self) -> Any:
        """Stop the VM and return an acknowledgement."""
        ...


@runtime_checkable
class LivenessProbe(Protocol):
    """Reports whether the hosted server is serving."""

    def get_info(self) -> ServerInfo | None:
        """Return the server record, or None when there is none."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """Delivers a graceful-stop directive to the server console."""

    def send_stop_directive(self) -> None: ...


__all__ = ["InfrastructureClient", "LivenessProbe", "Notifier"]
