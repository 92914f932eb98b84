"""
FastAPI Dependencies.

Provides dependency injection for services, adapters and the request actor.
"""
import logging
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from fastapi import Header

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from artmarket.application.interfaces import INotificationService
from artmarket.application.services import (
    CheckoutService,
    OrderApplicationService,
    PaymentSettlementService,
)
from artmarket.domain.enums import Role
from artmarket.domain.exceptions import Unauthorized
from artmarket.domain.value_objects import Actor
from artmarket.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from artmarket.infrastructure.database.config import get_session_factory
from artmarket.infrastructure.event_bus import get_event_bus
from artmarket.settings import get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_session_factory = None
_payment_gateway = None
_carrier = None
_notification_service = None
_order_service = None
_checkout_service = None
_payment_service = None


# =============================================================================
# ACTOR
# =============================================================================

def get_actor(
    x_profile_id: str = Header(..., alias="X-Profile-Id"),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_role: str = Header(Role.CUSTOMER.value, alias="X-User-Role"),
    x_user_email: Optional[str] = Header(None, alias="X-User-Email"),
) -> Actor:
    """Build the acting identity from headers set by the authenticating proxy."""
    try:
        role = Role(x_user_role.upper())
    except ValueError:
        raise Unauthorized(f"Unknown role: {x_user_role}", profile_id=x_profile_id)
    return Actor(profile_id=x_profile_id, user_id=x_user_id, role=role, email=x_user_email)


# =============================================================================
# INFRASTRUCTURE
# =============================================================================

def get_db_session_factory():
    global _session_factory
    if _session_factory is None:
        _session_factory = get_session_factory()
    return _session_factory


def get_payment_gateway():
    global _payment_gateway
    if _payment_gateway is None:
        from artmarket.infrastructure.adapters.payments.paystack_gateway import PaystackGateway
        settings = get_app_settings()
        _payment_gateway = PaystackGateway(settings.paystack, settings.marketplace.http_timeout_seconds)
        logger.info("Created PaystackGateway instance")
    return _payment_gateway


def get_carrier():
    """Topship client; serves both shipping quotes and wallet payments."""
    global _carrier
    if _carrier is None:
        from artmarket.infrastructure.adapters.shipping.topship_client import TopshipClient
        settings = get_app_settings()
        _carrier = TopshipClient(settings.topship, settings.marketplace.http_timeout_seconds)
        logger.info("Created TopshipClient instance")
    return _carrier


def get_notification_service() -> INotificationService:
    global _notification_service

    if _notification_service is None:
        settings = get_app_settings()

        operator_channel = None
        if settings.telegram.enabled:
            from artmarket.infrastructure.adapters.notifications.telegram_notification_service import (
                TelegramNotificationService,
            )
            operator_channel = TelegramNotificationService(settings.telegram)
            logger.info("Created TelegramNotificationService instance")

        if settings.smtp.enabled:
            from artmarket.infrastructure.adapters.notifications.email_notification_service import (
                EmailNotificationService,
            )
            _notification_service = EmailNotificationService(
                settings.smtp,
                admin_email=settings.marketplace.admin_email,
                operator_channel=operator_channel,
            )
            logger.info("Created EmailNotificationService instance")
        elif operator_channel is not None:
            _notification_service = operator_channel
        else:
            _notification_service = MockNotificationService()
            logger.info("Using MockNotificationService (notifications disabled)")

    return _notification_service


# =============================================================================
# SERVICES
# =============================================================================

def get_order_service() -> OrderApplicationService:
    global _order_service
    if _order_service is None:
        _order_service = OrderApplicationService(get_db_session_factory(), event_bus=get_event_bus())
        logger.info("Created OrderApplicationService instance")
    return _order_service


def get_checkout_service() -> CheckoutService:
    global _checkout_service
    if _checkout_service is None:
        _checkout_service = CheckoutService(
            get_db_session_factory(),
            shipping_rates=get_carrier(),
            event_bus=get_event_bus(),
        )
        logger.info("Created CheckoutService instance")
    return _checkout_service


def get_payment_service() -> PaymentSettlementService:
    global _payment_service
    if _payment_service is None:
        settings = get_app_settings()
        _payment_service = PaymentSettlementService(
            get_db_session_factory(),
            gateway=get_payment_gateway(),
            carrier=get_carrier(),
            notification_service=get_notification_service(),
            referral_percentage=settings.marketplace.referral_percentage,
            currency=settings.paystack.currency,
            event_bus=get_event_bus(),
            verify_webhooks=settings.paystack.verify_webhooks,
        )
        logger.info("Created PaymentSettlementService instance")
    return _payment_service


def get_webhook_secret() -> str:
    return get_app_settings().paystack.webhook_secret


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _session_factory, _payment_gateway, _carrier, _notification_service
    global _order_service, _checkout_service, _payment_service

    _session_factory = None
    _payment_gateway = None
    _carrier = None
    _notification_service = None
    _order_service = None
    _checkout_service = None
    _payment_service = None

    logger.info("Dependencies reset")
