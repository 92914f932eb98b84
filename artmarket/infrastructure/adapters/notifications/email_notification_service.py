"""
Email Notification Service Implementation.

Sends customer and admin emails over SMTP. The blocking smtplib calls run
in a worker thread so the event loop is never held up.
"""
from email.message import EmailMessage
from typing import Optional
import asyncio
import logging
import smtplib

from artmarket.application.interfaces import INotificationService
from artmarket.settings.sections import SmtpSettings


logger = logging.getLogger(__name__)


def build_message(sender: str, to: str, subject: str, body: str) -> EmailMessage:
    """Build a plain-text email."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body)
    return message


class EmailNotificationService(INotificationService):
    """
    SMTP implementation of notification service.

    Generic operator messages are forwarded to `operator_channel` when one
    is given (e.g. Telegram), otherwise emailed to the admin address.
    """

    def __init__(
        self,
        settings: SmtpSettings,
        admin_email: str,
        operator_channel: Optional[INotificationService] = None,
    ):
        self.settings = settings
        self.admin_email = admin_email
        self.operator_channel = operator_channel
        logger.info(f"EmailNotificationService initialized (host={settings.host}:{settings.port})")

    async def notify_order_shipped(self, email: str, order_id: str, tracking_id: str) -> None:
        await self._send(
            email,
            "Your order has been shipped",
            f"Hi there,\n\nYour order {order_id} is on its way.\n"
            f"Tracking ID: {tracking_id}\n",
        )

    async def notify_admin_payment_complete(self, order_id: str) -> None:
        if not self.admin_email:
            logger.warning(f"ADMIN_EMAIL not configured; skipping payment-complete email for order {order_id}")
            return
        await self._send(
            self.admin_email,
            "Order paid and ready to ship",
            f"Payment for order {order_id} has been completed. The order is ready to ship.\n",
        )

    async def notify_payment_received(self, email: str, order_id: str) -> None:
        await self._send(
            email,
            "Payment received",
            f"Hi there,\n\nWe have received your payment for order {order_id}. "
            f"We will let you know when it ships.\n",
        )

    async def notify(self, message: str, severity: int = 50) -> None:
        if self.operator_channel is not None:
            await self.operator_channel.notify(message, severity)
            return
        if self.admin_email:
            await self._send(self.admin_email, f"[severity {severity}] Marketplace alert", message)

    async def _send(self, to: str, subject: str, body: str) -> None:
        message = build_message(self.settings.sender, to, subject, body)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Failed to send email '{subject}' to {to}: {e}")
            raise
        logger.info(f"✅ Email '{subject}' sent to {to}")

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.host, self.settings.port, timeout=30) as client:
            if self.settings.use_tls:
                client.starttls()
            if self.settings.username:
                client.login(self.settings.username, self.settings.password)
            client.send_message(message)
