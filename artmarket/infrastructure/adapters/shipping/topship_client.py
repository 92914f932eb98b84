"""
Topship carrier adapter.

Quotes shipping rates at checkout and pays for shipments from the
merchant's Topship wallet.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional
import asyncio
import json
import logging
import aiohttp

from artmarket.application.interfaces import ICarrierPaymentService, IShippingRateService
from artmarket.domain.exceptions import UpstreamUnavailable
from artmarket.settings.sections import TopshipSettings


logger = logging.getLogger(__name__)

SERVICE_NAME = "Topship"


def parse_rate_response(body: Any) -> Decimal:
    """
    Read the shipping cost from a /get-shipment-rate response.

    Topship answers with a list of rate options (first one wins), either
    bare or wrapped in a ``data`` field.

    Raises:
        UpstreamUnavailable: If no non-negative numeric cost is present
    """
    if isinstance(body, dict):
        body = body.get("data")
    if not isinstance(body, list) or not body or not isinstance(body[0], dict):
        raise UpstreamUnavailable(SERVICE_NAME, "rate response has no rate options")

    raw_cost = body[0].get("cost")
    if raw_cost is None or isinstance(raw_cost, bool):
        raise UpstreamUnavailable(SERVICE_NAME, "rate option has no cost")
    try:
        cost = Decimal(str(raw_cost))
    except InvalidOperation:
        raise UpstreamUnavailable(SERVICE_NAME, f"rate cost is not numeric: {raw_cost!r}")

    if not cost.is_finite() or cost < 0:
        raise UpstreamUnavailable(SERVICE_NAME, f"rate cost is invalid: {raw_cost!r}")
    return cost


class TopshipClient(IShippingRateService, ICarrierPaymentService):
    """Topship REST client (shipping quotes and wallet payments)."""

    def __init__(self, settings: TopshipSettings, timeout_seconds: float = 15.0):
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        logger.info("TopshipClient initialized")

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.settings.api_key}"}

    async def quote(self, shipment_detail: Dict[str, Any]) -> Decimal:
        params = {"shipmentDetail": json.dumps(shipment_detail)}
        body = await self._request("GET", "/get-shipment-rate", params=params)
        cost = parse_rate_response(body)
        logger.info(f"Topship quoted {cost} for shipment to {shipment_detail.get('receiverDetail', {}).get('country')}")
        return cost

    async def pay_from_wallet(self, shipment_id: str) -> None:
        await self._request("POST", "/pay-from-wallet", json={"detail": {"shipmentId": shipment_id}})
        logger.info(f"✅ Paid Topship shipment {shipment_id} from wallet")

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(
                    method, url, params=params, json=json, headers=self._headers
                ) as response:
                    if response.status >= 400:
                        error_text = await response.text()
                        logger.error(f"❌ Topship API error: {response.status} - {error_text}")
                        raise UpstreamUnavailable(SERVICE_NAME, f"HTTP {response.status}")
                    return await response.json(content_type=None)
        except asyncio.TimeoutError:
            logger.error(f"❌ Topship request timed out: {method} {path}")
            raise UpstreamUnavailable(SERVICE_NAME, "request timed out")
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"❌ Topship request failed: {method} {path}: {e}")
            raise UpstreamUnavailable(SERVICE_NAME, str(e)) from e
