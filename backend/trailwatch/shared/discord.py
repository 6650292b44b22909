"""
Discord webhook sender.

Posts embeds to a Discord channel webhook for trail notifications.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class DiscordWebhook:
    """
    Async Discord webhook sender.

    Fails silently (logs errors) so a Discord outage never breaks the
    beacon loop. Each message gets exactly one attempt.
    """

    USERNAME = "TOTT"

    def __init__(
        self,
        webhook_url: Optional[str],
        client: httpx.AsyncClient,
        host_uri: str,
    ):
        self.webhook_url = webhook_url
        self.client = client
        self.avatar_url = f"{host_uri}/assets/android-chrome-192x192.png"
        self._enabled = bool(webhook_url)

        if not self._enabled:
            logger.info("DiscordWebhook disabled: DISCORD_WEBHOOK_URL not set")

    @property
    def enabled(self) -> bool:
        """Check if webhook is configured."""
        return self._enabled

    def build_payload(self, embed: dict) -> dict:
        """Wrap an embed into a webhook message with footer and avatar."""
        embed = {
            **embed,
            "footer": {
                "text": "Powered by troyonthetrails.com",
                "icon_url": self.avatar_url,
            },
        }
        return {
            "content": None,
            "username": self.USERNAME,
            "avatar_url": self.avatar_url,
            "embeds": [embed],
        }

    async def send_embed(self, embed: dict) -> bool:
        """
        Send one embed.

        Returns:
            True if sent successfully, False otherwise
        """
        if not self._enabled:
            logger.debug("No Discord webhook URL found, skipping")
            return False

        try:
            response = await self.client.post(
                self.webhook_url,
                json=self.build_payload(embed)
            )
        except httpx.TimeoutException:
            logger.warning("Discord webhook timeout")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to send Discord webhook: {e}")
            return False

        if response.is_success:
            logger.debug("Successfully sent Discord webhook")
            return True

        logger.warning(
            f"Discord API error: {response.status_code} - {response.text}"
        )
        return False
