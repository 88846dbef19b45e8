"""Azure VM power control for the machine hosting the Minecraft server.

This module wraps the handful of `az vm` commands craftvm needs:
- Read the VM power state from its instance view
- Start the VM
- Stop or deallocate the VM

Authentication is whatever the local `az` CLI is logged in as.

Security:
- Argument lists only, no shell=True
- Timeouts on every command
"""

import json
import logging
import subprocess

from craftvm.exceptions import InfrastructureError
from craftvm.models import LifecycleResult, PowerState

logger = logging.getLogger(__name__)


class AzureVMClient:
    """Power control for a single Azure VM.

    Every failure (non-zero exit, timeout, missing `az`, unparsable output)
    is raised as InfrastructureError; nothing is retried here.
    """

    STATUS_TIMEOUT = 30

    def __init__(
        self,
        vm_name: str,
        resource_group: str,
        deallocate: bool = True,
        timeout: int = 180,
    ) -> None:
        """Initialize the client.

        Args:
            vm_name: VM name
            resource_group: Resource group name
            deallocate: If True, stop() deallocates (no compute charges).
                        If False, stop() only powers off.
            timeout: Timeout in seconds for start/stop commands
        """
        self.vm_name = vm_name
        self.resource_group = resource_group
        self.deallocate = deallocate
        self.timeout = timeout

    def get_status(self) -> str:
        """Get the current power state of the VM.

        Returns:
            Power state string (e.g. "Running", "Deallocated")

        Raises:
            InfrastructureError: If the instance view cannot be read
        """
        vm_info = self._get_instance_view()
        power_state = self._get_power_state(vm_info)
        logger.debug(f"VM {self.vm_name} power state: {power_state}")
        return power_state

    def start(self) -> LifecycleResult:
        """Start a stopped or deallocated VM.

        Returns:
            LifecycleResult acknowledging the start

        Raises:
            InfrastructureError: If the start command fails
        """
        logger.info(f"Starting VM '{self.vm_name}'")
        self._run(["start"], operation="start", timeout=self.timeout)
        logger.info(f"VM started successfully: {self.vm_name}")
        return LifecycleResult(
            vm_name=self.vm_name,
            success=True,
            message="VM started successfully",
            operation="start",
        )

    def stop(self) -> LifecycleResult:
        """Stop or deallocate the VM.

        Returns:
            LifecycleResult acknowledging the stop

        Raises:
            InfrastructureError: If the stop command fails
        """
        operation = "deallocate" if self.deallocate else "stop"
        logger.info(f"Stopping VM '{self.vm_name}' ({operation})")
        self._run([operation], operation=operation, timeout=self.timeout)

        message = f"VM {'deallocated' if self.deallocate else 'stopped'} successfully"
        logger.info(f"{message}: {self.vm_name}")
        return LifecycleResult(
            vm_name=self.vm_name,
            success=True,
            message=message,
            operation=operation,
        )

    def _get_instance_view(self) -> dict:
        """Get VM details from Azure including instance view.

        Raises:
            InfrastructureError: If the VM does not exist or the query fails
        """
        result = self._run(
            ["get-instance-view", "--output", "json"],
            operation="get-instance-view",
            timeout=self.STATUS_TIMEOUT,
        )
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise InfrastructureError("Failed to parse VM details") from e

    def _run(
        self, args: list[str], operation: str, timeout: int
    ) -> subprocess.CompletedProcess:
        cmd = [
            "az",
            "vm",
            *args[:1],
            "--name",
            self.vm_name,
            "--resource-group",
            self.resource_group,
            *args[1:],
        ]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            return subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=True)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            if "ResourceNotFound" in stderr:
                error_msg = (
                    f"VM '{self.vm_name}' not found in resource group '{self.resource_group}'"
                )
            else:
                error_msg = f"Failed to {operation}: {stderr}"
            logger.error(f"VM {self.vm_name}: {error_msg}")
            raise InfrastructureError(error_msg) from e
        except subprocess.TimeoutExpired as e:
            error_msg = f"{operation} operation timed out after {timeout}s"
            logger.error(f"VM {self.vm_name}: {error_msg}")
            raise InfrastructureError(error_msg) from e
        except FileNotFoundError as e:
            raise InfrastructureError(
                "Azure CLI (az) not found. Install it and run 'az login'."
            ) from e

    @staticmethod
    def _get_power_state(vm_info: dict) -> str:
        """Extract power state from VM instance view.

        Args:
            vm_info: VM instance view dictionary from get-instance-view

        Returns:
            Power state string, "Unknown" when none is reported
        """
        # get-instance-view returns statuses at the root level
        statuses = vm_info.get("statuses") or vm_info.get("instanceView", {}).get("statuses", [])

        for status in statuses:
            code = status.get("code", "")
            if code.startswith("PowerState/"):
                return code.split("/", 1)[1].capitalize()

        return PowerState.UNKNOWN.value


__all__ = ["AzureVMClient"]
