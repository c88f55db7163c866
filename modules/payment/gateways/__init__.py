"""
Payment Gateway Abstraction
=============================
Gateways share create_checkout() and pay_again(); each implements verify_payment().
Registry pattern for gateway lookup by provider.

Payment types carry a free-text label ("Stripe Checkout", "PayU Express").
resolve_provider() maps that label onto a known provider through a
case-insensitive substring match; anything else is rejected before any
request is sent.
"""

import enum
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass

import httpx

from config.api import request_json
from config.settings import BASE_URL
from common.exceptions import RemoteServiceError, UnsupportedProviderError

logger = logging.getLogger("storefront.gateway")


class PaymentProvider(str, enum.Enum):
    STRIPE = "stripe"
    PAYU = "payu"


@dataclass
class CheckoutSessionResult:
    """Result of create_checkout() / pay_again()."""
    success: bool
    checkout_url: Optional[str] = None
    order_id: Optional[int] = None
    error_message: Optional[str] = None


@dataclass
class GatewayVerifyResult:
    """Result of verify_payment()."""
    success: bool
    status: str = ""
    order_id: Optional[int] = None
    error_message: Optional[str] = None


class BaseGateway:
    """
    Checkout sessions and pay-again links are opened by the order service,
    which answers with {checkoutUrl, orderId}. Only the return-page
    verification differs per provider.
    """
    provider: PaymentProvider
    missing_url_message: str = "The payment provider did not return a checkout page."

    @property
    def name(self) -> str:
        return self.provider.value

    @property
    def checkout_path(self) -> str:
        return f"/payment/{self.provider.value}/checkout"

    @property
    def pay_again_path(self) -> str:
        return f"/payment/{self.provider.value}/pay-again"

    def _open_session(self, api: httpx.Client, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        # No client-side timeout: the session either opens or fails
        return request_json(api, "POST", path, json=body, timeout=None) or {}

    def create_checkout(self, api: httpx.Client, body: Dict[str, Any]) -> CheckoutSessionResult:
        try:
            data = self._open_session(api, self.checkout_path, body)
        except RemoteServiceError as e:
            return CheckoutSessionResult(success=False, error_message=e.message)

        logger.info(f"{self.name} checkout session: order {data.get('orderId')}")
        if not data.get("checkoutUrl"):
            return CheckoutSessionResult(success=False, error_message=self.missing_url_message)
        return CheckoutSessionResult(
            success=True,
            checkout_url=data["checkoutUrl"],
            order_id=data.get("orderId"),
        )

    def pay_again(self, api: httpx.Client, order_id: int) -> CheckoutSessionResult:
        """New checkout session for an unpaid order."""
        try:
            data = self._open_session(api, self.pay_again_path, {
                "orderId": order_id,
                "successUrl": f"{BASE_URL}/payment/success",
                "cancelUrl": f"{BASE_URL}/payment/failure",
            })
        except RemoteServiceError as e:
            return CheckoutSessionResult(success=False, error_message=e.message)

        if not data.get("checkoutUrl"):
            return CheckoutSessionResult(success=False, error_message=self.missing_url_message)
        return CheckoutSessionResult(success=True, checkout_url=data["checkoutUrl"], order_id=order_id)

    def verify_payment(self, api: httpx.Client, params: Dict[str, Any]) -> GatewayVerifyResult:
        raise NotImplementedError


# ── Registry ──

_GATEWAYS: Dict[PaymentProvider, BaseGateway] = {}


def register_gateway(gw: BaseGateway):
    _GATEWAYS[gw.provider] = gw


def get_gateway(provider: PaymentProvider) -> Optional[BaseGateway]:
    return _GATEWAYS.get(provider)


def resolve_provider(provider_name: str) -> PaymentProvider:
    """Map a payment type label onto a provider. Raises UnsupportedProviderError."""
    label = (provider_name or "").lower()
    for provider in PaymentProvider:
        if provider.value in label:
            return provider
    logger.warning(f"This payment method is not supported: {provider_name!r}")
    raise UnsupportedProviderError(provider_name)


def resolve_gateway(provider_name: str) -> BaseGateway:
    provider = resolve_provider(provider_name)
    gateway = get_gateway(provider)
    if gateway is None:
        logger.warning(f"No gateway registered for {provider.value}")
        raise UnsupportedProviderError(provider_name)
    return gateway
