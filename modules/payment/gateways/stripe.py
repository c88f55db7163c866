"""
Stripe Gateway
===============
Checkout sessions are opened by the order service, which answers with the
hosted Stripe page URL. Stripe returns the shopper with ?session_id=...
"""

import logging
from typing import Dict, Any

import httpx

from config.api import request_json
from common.exceptions import RemoteServiceError
from modules.payment.gateways import (
    BaseGateway, GatewayVerifyResult, PaymentProvider, register_gateway,
)

logger = logging.getLogger("storefront.gateway.stripe")


class StripeGateway(BaseGateway):
    provider = PaymentProvider.STRIPE
    missing_url_message = "Stripe did not return a checkout page."

    def verify_payment(self, api: httpx.Client, params: Dict[str, Any]) -> GatewayVerifyResult:
        session_id = params.get("session_id", "")
        if not session_id:
            return GatewayVerifyResult(success=False, error_message="Missing Stripe session.")
        try:
            data = request_json(api, "GET", f"/payment/verify/{session_id}") or {}
        except RemoteServiceError as e:
            return GatewayVerifyResult(success=False, error_message=e.message)

        status = str(data.get("status") or "")
        logger.info(f"Stripe verify [{session_id}]: {status}")
        return GatewayVerifyResult(
            success=status.upper() == "SUCCEEDED",
            status=status,
            order_id=(data.get("shopOrder") or {}).get("id"),
        )


register_gateway(StripeGateway())
