"""Graceful-stop directive delivery.

Posts a console command (by default `stop`) to a webhook feeding a chat
channel that is bridged to the Minecraft server console, so the server
saves the world and exits before the VM loses power.
"""

import logging
import os

import requests

from craftvm.exceptions import NotifierError

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "CRAFTVM_CONSOLE_WEBHOOK_TOKEN"


class ConsoleWebhookNotifier:
    """Sends the stop directive to the server console channel."""

    ACCEPTED_STATUS_CODES = (200, 204)

    def __init__(
        self,
        webhook_url: str,
        directive: str = "stop",
        token: str | None = None,
        timeout: int = 10,
    ) -> None:
        """Initialize notifier.

        Args:
            webhook_url: Console channel webhook URL
            directive: Console command to post
            token: Bearer token (defaults to CRAFTVM_CONSOLE_WEBHOOK_TOKEN)
            timeout: HTTP timeout in seconds
        """
        self.webhook_url = webhook_url
        self.directive = directive
        # Token comes from the environment, never from the config file
        self.token = token if token is not None else os.environ.get(TOKEN_ENV_VAR, "")
        self.timeout = timeout

    def send_stop_directive(self) -> None:
        """Post the stop directive to the console channel.

        Raises:
            NotifierError: If the webhook cannot be reached or rejects the post
        """
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        payload = {"content": self.directive}
        logger.info(f"Sending '{self.directive}' to server console")

        try:
            response = requests.post(
                self.webhook_url, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Console webhook unreachable: {e}")
            raise NotifierError(f"Cannot trigger stop: {e}") from e

        if response.status_code not in self.ACCEPTED_STATUS_CODES:
            raise NotifierError(
                f"Cannot trigger stop: console webhook returned {response.status_code}"
            )

        logger.debug("Stop directive accepted by console webhook")


__all__ = ["ConsoleWebhookNotifier", "TOKEN_ENV_VAR"]
