"""Minecraft server liveness probe.

Queries a public server status API (mcsrvstat.us compatible) for the
configured server address. An offline server and a server the API knows
nothing about both come back as None; only a failure to ask at all is an
error.
"""

import logging

import requests

from craftvm.exceptions import ProbeUnavailableError
from craftvm.models import ServerInfo

logger = logging.getLogger(__name__)

DEFAULT_STATUS_API_URL = "https://api.mcsrvstat.us/3/"


class MinecraftStatusProbe:
    """Liveness probe backed by a server status HTTP API."""

    def __init__(
        self,
        address: str,
        api_url: str = DEFAULT_STATUS_API_URL,
        timeout: int = 10,
    ) -> None:
        """Initialize the probe.

        Args:
            address: Server address, "host" or "host:port"
            api_url: Base URL of the status API, the address is appended
            timeout: HTTP timeout in seconds
        """
        self.address = address
        self.api_url = api_url if api_url.endswith("/") else f"{api_url}/"
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.api_url}{self.address}"

    def get_info(self) -> ServerInfo | None:
        """Fetch the current server record.

        Returns:
            ServerInfo when the server is online, None otherwise

        Raises:
            ProbeUnavailableError: If the status API cannot be queried
        """
        logger.debug(f"Querying server status: {self.url}")

        try:
            response = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Server status query failed for {self.address}: {e}")
            raise ProbeUnavailableError(f"Unable to get server info: {e}") from e

        if response.status_code != 200:
            raise ProbeUnavailableError(
                f"Server status API returned {response.status_code} for {self.address}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProbeUnavailableError("Server status API returned invalid JSON") from e

        if not isinstance(data, dict) or not data.get("online"):
            logger.info(f"Server {self.address} is offline")
            return None

        info = ServerInfo.from_dict(data)
        logger.info(f"Server {self.address} is online ({info.players_display} players)")
        return info


__all__ = ["DEFAULT_STATUS_API_URL", "MinecraftStatusProbe"]
