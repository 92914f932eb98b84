"""
Telegram Notification Service Implementation.

Sends operator notifications via the Telegram Bot API.
"""
import logging
import aiohttp

from artmarket.application.interfaces import INotificationService
from artmarket.settings.sections import TelegramSettings


logger = logging.getLogger(__name__)


class TelegramNotificationService(INotificationService):
    """
    Telegram implementation of notification service.

    Everything goes to the operator chat; customer-facing events are
    posted as a summary line.
    """

    def __init__(self, settings: TelegramSettings):
        """
        Initialize Telegram notification service.

        Args:
            settings: Telegram settings with bot token and chat ID
        """
        self.settings = settings
        self.bot_token = settings.token
        self.chat_id = settings.chat_id
        self.prefix = settings.prefix
        self.min_severity = settings.min_severity
        self.api_url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
        logger.info("TelegramNotificationService initialized")

    async def notify_order_shipped(self, email: str, order_id: str, tracking_id: str) -> None:
        text = (
            f"📦 *Order shipped*\n"
            f"Order: `{order_id}`\n"
            f"Customer: {email}\n"
            f"Tracking: `{tracking_id}`"
        )
        await self._send_message(text)

    async def notify_admin_payment_complete(self, order_id: str) -> None:
        text = (
            f"✅ *Payment complete*\n"
            f"Order: `{order_id}` is paid and ready to ship"
        )
        await self._send_message(text)

    async def notify_payment_received(self, email: str, order_id: str) -> None:
        await self._send_message(f"💳 Payment received from {email} for order `{order_id}`")

    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        # Check minimum severity threshold
        if severity < self.min_severity:
            logger.debug(f"Notification severity {severity} below threshold {self.min_severity}, skipping")
            return

        emoji = "🔴" if severity >= 80 else "🟡" if severity >= 50 else "🟢"
        await self._send_message(f"{emoji} {message}")

    async def _send_message(self, text: str) -> None:
        """
        Send message to Telegram.

        Args:
            text: Message text (supports Markdown)
        """
        if not self.bot_token or not self.chat_id:
            logger.warning("Telegram bot_token or chat_id not configured, skipping notification")
            return

        payload = {
            "chat_id": self.chat_id,
            "text": f"{self.prefix} {text}",
            "parse_mode": "Markdown",
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.api_url, json=payload) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Telegram API error: {response.status} - {error_text}")
                    else:
                        logger.info("Telegram notification sent successfully")
        except aiohttp.ClientError as e:
            logger.error(f"Failed to send Telegram notification: {e}", exc_info=True)
