"""
Paystack payment gateway adapter.

Talks to the Paystack REST API over aiohttp with a bearer secret key.
"""
from typing import Any, Dict, Optional
import asyncio
import logging
import aiohttp

from artmarket.application.interfaces import GatewayTransaction, IPaymentGateway
from artmarket.domain.exceptions import UpstreamUnavailable
from artmarket.settings.sections import PaystackSettings


logger = logging.getLogger(__name__)

SERVICE_NAME = "Paystack"


def parse_initialize_response(body: Any) -> GatewayTransaction:
    """
    Extract reference and authorization URL from /transaction/initialize.

    Raises:
        UpstreamUnavailable: If the response does not carry both fields
    """
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict):
        raise UpstreamUnavailable(SERVICE_NAME, "initialize response has no data object")

    reference = data.get("reference")
    redirect_url = data.get("authorization_url")
    if not reference or not redirect_url:
        raise UpstreamUnavailable(SERVICE_NAME, "initialize response missing reference or authorization_url")

    return GatewayTransaction(reference=str(reference), redirect_url=str(redirect_url))


def parse_verify_response(body: Any) -> str:
    """Extract the transaction status string from /transaction/verify."""
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict) or not data.get("status"):
        raise UpstreamUnavailable(SERVICE_NAME, "verify response has no transaction status")
    return str(data["status"])


class PaystackGateway(IPaymentGateway):
    """
    Paystack implementation of the payment gateway.

    Every transport error, timeout, non-2xx status and malformed body is
    raised as UpstreamUnavailable.
    """

    def __init__(self, settings: PaystackSettings, timeout_seconds: float = 15.0):
        """
        Initialize Paystack gateway.

        Args:
            settings: Paystack settings with API key and base URL
            timeout_seconds: Total timeout per request
        """
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        logger.info("PaystackGateway initialized")

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

    async def initialize_transaction(
        self,
        email: str,
        amount_minor_units: int,
        currency: str
    ) -> GatewayTransaction:
        payload = {"email": email, "amount": amount_minor_units, "currency": currency}
        body = await self._request("POST", "/transaction/initialize", json=payload)
        transaction = parse_initialize_response(body)
        logger.info(f"✅ Paystack transaction initialized: {transaction.reference}")
        return transaction

    async def verify_transaction(self, reference: str) -> str:
        body = await self._request("GET", f"/transaction/verify/{reference}")
        return parse_verify_response(body)

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(method, url, json=json, headers=self._headers) as response:
                    if response.status >= 400:
                        error_text = await response.text()
                        logger.error(f"❌ Paystack API error: {response.status} - {error_text}")
                        raise UpstreamUnavailable(SERVICE_NAME, f"HTTP {response.status}")
                    return await response.json(content_type=None)
        except asyncio.TimeoutError:
            logger.error(f"❌ Paystack request timed out: {method} {path}")
            raise UpstreamUnavailable(SERVICE_NAME, "request timed out")
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"❌ Paystack request failed: {method} {path}: {e}")
            raise UpstreamUnavailable(SERVICE_NAME, str(e)) from e
