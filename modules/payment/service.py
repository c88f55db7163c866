"""
Payment Service
=================
Order submission dispatcher: assembles one OrderSubmissionRequest from the
checkout draft and the current cart, then opens a checkout session with the
single gateway the selected payment type maps to.

Rules:
  * One submission in flight per checkout session; a second attempt is
    rejected without sending anything.
  * Every guard (address, shipping, payment, stock) is re-checked here.
  * Unsupported providers fail closed: no request is sent.
  * A failed attempt leaves the draft untouched so it can be retried as-is.
"""

import logging
from typing import Dict, Any, Optional

import httpx

from common.exceptions import (
    InsufficientStockError, ProviderError, SubmissionInProgressError,
)
from common.helpers import format_order_date
from modules.cart.models import Cart
from modules.checkout.draft import CheckoutDraft
from modules.checkout.session import CheckoutSession, DraftStore, draft_store
from modules.inventory.validator import insufficient_variants
from modules.pricing.calculator import PricingResult, price_cart
from modules.payment.models import OrderSubmissionRequest

# Import gateway modules to trigger register_gateway() calls
from modules.payment.gateways import (  # noqa: F401
    CheckoutSessionResult, GatewayVerifyResult, PaymentProvider,
    get_gateway, resolve_gateway,
)
import modules.payment.gateways.stripe  # noqa: F401
import modules.payment.gateways.payu    # noqa: F401

logger = logging.getLogger("storefront.payment")


class PaymentService:

    def __init__(self, store: DraftStore = draft_store):
        self.store = store

    # ==========================================
    # 🧾 Request assembly
    # ==========================================

    def build_request(
        self,
        user_id: str,
        draft: CheckoutDraft,
        cart: Cart,
        pricing: Optional[PricingResult] = None,
    ) -> OrderSubmissionRequest:
        pricing = pricing or price_cart(cart)
        shipping = draft.shipping_method
        shipping_price = shipping.price if shipping else 0
        return OrderSubmissionRequest(
            user_id=str(user_id),
            order_date=format_order_date(),
            address=draft.address_request(),
            shipping_method_id=shipping.id if shipping else 0,
            order_total=pricing.subtotal,
            final_order_total=pricing.order_total(shipping_price),
            applied_discount_value=pricing.total_discount_percent,
            provider_id=draft.provider_id,
            cart=cart.raw,
        )

    # ==========================================
    # 🏦 Submission
    # ==========================================

    def submit(self, api: httpx.Client, session: CheckoutSession, cart: Cart) -> CheckoutSessionResult:
        """
        Submit the order and open a checkout session.
        Returns the result carrying checkout_url; the caller redirects to it.
        """
        if not self.store.try_begin_submission(session):
            logger.warning(f"Re-entrant submission rejected for user {session.user_id}")
            raise SubmissionInProgressError()

        try:
            short = insufficient_variants(cart)
            if short:
                raise InsufficientStockError(short)

            session.controller.ensure_submittable(cart)
            gateway = resolve_gateway(session.draft.provider_name)

            order_request = self.build_request(session.user_id, session.draft, cart)
            result = gateway.create_checkout(api, order_request.to_body())
            if not result.success:
                logger.error(f"{gateway.name} checkout failed for user {session.user_id}: {result.error_message}")
                raise ProviderError(result.error_message or "Payment provider error.")

            logger.info(f"Order submitted via {gateway.name}: order {result.order_id}, user {session.user_id}")
        finally:
            self.store.finish_submission(session)

        self.store.discard(session.sid)
        return result

    # ==========================================
    # ✅ Return from provider
    # ==========================================

    def verify_payment(self, api: httpx.Client, params: Dict[str, Any]) -> GatewayVerifyResult:
        """Stripe returns with session_id, PayU with order_id."""
        if params.get("session_id"):
            gateway = get_gateway(PaymentProvider.STRIPE)
        elif params.get("order_id"):
            gateway = get_gateway(PaymentProvider.PAYU)
        else:
            return GatewayVerifyResult(success=False, error_message="Missing payment reference.")
        return gateway.verify_payment(api, params)

    def pay_again(self, api: httpx.Client, provider_name: str, order_id: int) -> CheckoutSessionResult:
        gateway = resolve_gateway(provider_name)
        result = gateway.pay_again(api, order_id)
        if not result.success:
            logger.error(f"{gateway.name} pay-again failed for order {order_id}: {result.error_message}")
            raise ProviderError(result.error_message or "Payment provider error.")
        logger.info(f"Pay-again session opened via {gateway.name} for order {order_id}")
        return result


# Singleton
payment_service = PaymentService()
