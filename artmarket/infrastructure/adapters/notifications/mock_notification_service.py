"""
Mock Notification Service Implementation.

This simulates notifications for testing and demos.
"""
from typing import Any, Dict, List
import logging

from artmarket.application.interfaces import INotificationService


logger = logging.getLogger(__name__)


class MockNotificationService(INotificationService):
    """
    Mock implementation of notification service.

    Logs notifications instead of actually sending them.
    Useful for testing and demos.
    """

    def __init__(self):
        """Initialize mock notification service."""
        self.notifications_sent: List[Dict[str, Any]] = []
        logger.info("MockNotificationService initialized (console logging)")

    async def notify_order_shipped(self, email: str, order_id: str, tracking_id: str) -> None:
        self.notifications_sent.append(
            {"type": "order_shipped", "email": email, "order_id": order_id, "tracking_id": tracking_id}
        )
        logger.info(
            f"📦 🔔 ORDER SHIPPED:\n"
            f"   To: {email}\n"
            f"   Order: {order_id}\n"
            f"   Tracking: {tracking_id}"
        )

    async def notify_admin_payment_complete(self, order_id: str) -> None:
        self.notifications_sent.append({"type": "admin_payment_complete", "order_id": order_id})
        logger.info(f"✅ 🔔 PAYMENT COMPLETE (admin): order {order_id} is ready to ship")

    async def notify_payment_received(self, email: str, order_id: str) -> None:
        self.notifications_sent.append({"type": "payment_received", "email": email, "order_id": order_id})
        logger.info(f"✅ 🔔 PAYMENT RECEIVED: {email} paid for order {order_id}")

    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        self.notifications_sent.append({"type": "generic", "message": message, "severity": severity})

        severity_emoji = "🔴" if severity >= 80 else "🟡" if severity >= 50 else "🟢"
        logger.info(
            f"{severity_emoji} 🔔 NOTIFICATION (severity={severity}):\n"
            f"   {message}"
        )

    def get_notifications(self) -> List[Dict[str, Any]]:
        """Get all sent notifications (for testing)."""
        return self.notifications_sent

    def clear(self) -> None:
        """Clear notifications (for testing)."""
        self.notifications_sent.clear()
