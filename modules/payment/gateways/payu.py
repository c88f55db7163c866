"""
PayU Gateway
=============
The order service registers the order with PayU and answers with the
redirect URL. PayU sends the shopper back with ?order_id=...
"""

import logging
from typing import Dict, Any

import httpx

from config.api import request_json
from common.exceptions import RemoteServiceError
from modules.payment.gateways import (
    BaseGateway, GatewayVerifyResult, PaymentProvider, register_gateway,
)

logger = logging.getLogger("storefront.gateway.payu")


class PayUGateway(BaseGateway):
    provider = PaymentProvider.PAYU
    missing_url_message = "PayU did not return a redirect URL."

    def verify_payment(self, api: httpx.Client, params: Dict[str, Any]) -> GatewayVerifyResult:
        order_id = params.get("order_id", "")
        if not order_id:
            return GatewayVerifyResult(success=False, error_message="Missing PayU order.")
        try:
            data = request_json(api, "GET", f"/payment/verify/payu/{order_id}") or {}
        except RemoteServiceError as e:
            return GatewayVerifyResult(success=False, error_message=e.message)

        status = str(data.get("status") or "")
        logger.info(f"PayU verify [{order_id}]: {status}")
        return GatewayVerifyResult(
            success=status.upper() == "SUCCEEDED",
            status=status,
            order_id=(data.get("shopOrder") or {}).get("id") or order_id,
        )


register_gateway(PayUGateway())
