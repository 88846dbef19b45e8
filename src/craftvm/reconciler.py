"""Power reconciliation between the VM and the Minecraft server.

The reconciler decides, from two independently observed signals, whether
a power transition is needed, redundant, or unsafe:

    server online            -> power on refused (AlreadyRunningError)
    server down, VM Running  -> drift between layers (InconsistentStateError)
    server down, VM not up   -> start the VM

The server's own liveness decides redundancy; the VM status is only used
to catch impossible combinations. When either signal cannot be read,
nothing is changed.

Each call re-reads both signals. Calls are strictly sequential and hold no
state, so concurrent power_on/power_off calls are not coordinated.
"""

import logging
from typing import Any

from craftvm.exceptions import (
    AlreadyRunningError,
    CraftVMError,
    InconsistentStateError,
    InfrastructureError,
    NotifierError,
    ProbeUnavailableError,
)
from craftvm.interfaces import InfrastructureClient, LivenessProbe, Notifier
from craftvm.models import PowerSnapshot, PowerState, ServerInfo, is_online

logger = logging.getLogger(__name__)


class Reconciler:
    """Validates and performs VM power transitions.

    Collaborators are injected; the reconciler never builds its own.
    Without a notifier, power_off() goes straight to the VM stop.
    """

    def __init__(
        self,
        infrastructure: InfrastructureClient,
        probe: LivenessProbe,
        notifier: Notifier | None = None,
    ) -> None:
        self.infrastructure = infrastructure
        self.probe = probe
        self.notifier = notifier

    def power_on(self) -> Any:
        """Start the VM unless the server is already verified running.

        Returns:
            The acknowledgement from the VM start command, unchanged

        Raises:
            AlreadyRunningError: Server is online, nothing to do
            InconsistentStateError: Server down but VM running
            ProbeUnavailableError: Server status could not be read
            InfrastructureError: VM status or start command failed
        """
        self.validate_power_on_attempt()

        logger.info("Power-on validated, starting VM")
        return self._call_infrastructure("start", self.infrastructure.start)

    def power_off(self) -> Any:
        """Ask the server to stop (if a notifier is set), then stop the VM.

        Returns:
            The acknowledgement from the VM stop command, unchanged

        Raises:
            NotifierError: Stop directive not delivered; VM left untouched
            ProbeUnavailableError: Server status could not be read
            InfrastructureError: VM stop command failed
        """
        if self.notifier is not None:
            try:
                self.notifier.send_stop_directive()
            except CraftVMError:
                raise
            except Exception as e:
                raise NotifierError(str(e)) from e

        # Observed only; a stop is always considered safe to attempt
        server_info = self._get_server_info()
        if is_online(server_info):
            logger.warning("Server still reports online, stopping VM anyway")

        logger.info("Stopping VM")
        return self._call_infrastructure("stop", self.infrastructure.stop)

    def validate_power_on_attempt(self) -> PowerSnapshot:
        """Check that powering on is both needed and safe.

        Returns:
            The snapshot the decision was made on

        Raises:
            AlreadyRunningError: Server is online
            InconsistentStateError: Server down but VM running
            ProbeUnavailableError: Server status could not be read
            InfrastructureError: VM status could not be read
        """
        snapshot = self.status()

        if snapshot.server_online:
            logger.info("Server is already online, nothing to power on")
            raise AlreadyRunningError()

        if not snapshot.consistent:
            logger.error(
                f"Server is down but VM reports {snapshot.vm_status}, refusing to power on"
            )
            raise InconsistentStateError(snapshot.vm_status)

        return snapshot

    def status(self) -> PowerSnapshot:
        """Read both signals without changing anything.

        Raises:
            ProbeUnavailableError: Server status could not be read
            InfrastructureError: VM status could not be read
        """
        server_info = self._get_server_info()
        vm_status = self._call_infrastructure("get_status", self.infrastructure.get_status)
        logger.debug(
            f"Observed VM status {vm_status}, server online={is_online(server_info)}"
        )

        snapshot = PowerSnapshot(vm_status=vm_status, server_info=server_info)
        if not snapshot.consistent:
            logger.warning(f"Drift: server is down but VM is {PowerState.RUNNING.value}")
        return snapshot

    def _get_server_info(self) -> ServerInfo | None:
        try:
            return self.probe.get_info()
        except CraftVMError:
            raise
        except Exception as e:
            raise ProbeUnavailableError(f"Unable to get server info: {e}") from e

    @staticmethod
    def _call_infrastructure(operation: str, func: Any) -> Any:
        try:
            return func()
        except CraftVMError:
            raise
        except Exception as e:
            raise InfrastructureError(f"VM {operation} failed: {e}") from e


__all__ = ["Reconciler"]
