"""Tests for the order submission payload and provider label resolution."""

from decimal import Decimal

import pytest

from common.exceptions import UnsupportedProviderError
from modules.cart.models import Cart
from modules.checkout.draft import CheckoutDraft
from modules.checkout.models import Address, PaymentType, ShippingMethod, UserPaymentMethod
from modules.payment.gateways import PaymentProvider, resolve_provider
from modules.payment.models import OrderSubmissionRequest, PaymentVerification
from modules.payment.service import PaymentService
from tests.fakes import SAVED_ADDRESS, make_cart, make_code, make_item


def _draft(payment_type=PaymentType(id=2, provider="PayU Express")):
    draft = CheckoutDraft()
    draft.select_saved_address(Address.from_api(SAVED_ADDRESS))
    draft.select_shipping(ShippingMethod(id=1, name="Courier", price=Decimal("15")))
    draft.select_payment_type(payment_type)
    return draft


class TestOrderSubmissionRequest:
    def test_totals(self):
        cart = Cart.from_api(make_cart([make_item(1, 2, 100)], [make_code("SAVE10", 10)]))
        request = PaymentService().build_request("user-1", _draft(), cart)
        assert request.order_total == Decimal("200")
        assert request.final_order_total == Decimal("195")
        assert request.applied_discount_value == Decimal("10")
        assert request.provider_id == 2
        assert request.shipping_method_id == 1

    def test_payload_keys(self):
        raw = make_cart([make_item(1, 1, 19.99)])
        request = PaymentService().build_request("user-1", _draft(), Cart.from_api(raw))
        body = request.to_body()
        payload = body["orderRequest"]
        assert set(payload) == {
            "userId", "orderDate", "addressRequest", "shippingMethodId", "orderTotal",
            "finalOrderTotal", "appliedDiscountValue", "providerId", "cart",
        }
        assert payload["orderTotal"] == 19.99
        assert payload["finalOrderTotal"] == 34.99
        assert payload["cart"] is raw
        assert payload["addressRequest"]["id"] == 7
        assert payload["addressRequest"]["firstName"] == "Anna"

    def test_edited_saved_address_is_sent_as_new(self):
        draft = _draft()
        draft.update_address({"street": "Dluga 5"})
        request = PaymentService().build_request("user-1", draft, Cart.from_api(make_cart([make_item(1, 1, 10)])))
        assert request.to_payload()["addressRequest"]["id"] is None
        assert request.to_payload()["addressRequest"]["street"] == "Dluga 5"

    def test_order_date_format(self):
        request = OrderSubmissionRequest(
            user_id="u", order_date="2026-10-19T14:03:59", address=Address(),
            shipping_method_id=1, order_total=Decimal("1"), final_order_total=Decimal("1"),
            applied_discount_value=Decimal("0"), provider_id=1,
        )
        assert request.to_payload()["orderDate"] == "2026-10-19T14:03:59"

    def test_saved_payment_method_sends_its_payment_type_id(self):
        draft = _draft()
        draft.select_user_payment_method(
            UserPaymentMethod(id=4, payment_type=PaymentType(id=1, provider="Stripe Checkout")),
        )
        request = PaymentService().build_request("user-1", draft, Cart.from_api(make_cart([make_item(1, 1, 10)])))
        assert request.provider_id == 1


class TestResolveProvider:
    @pytest.mark.parametrize("label, provider", [
        ("Stripe Checkout", PaymentProvider.STRIPE),
        ("STRIPE", PaymentProvider.STRIPE),
        ("PayU Express", PaymentProvider.PAYU),
        ("pay with payu", PaymentProvider.PAYU),
    ])
    def test_known_labels(self, label, provider):
        assert resolve_provider(label) == provider

    @pytest.mark.parametrize("label", ["Bank Transfer", "", "PayPal"])
    def test_unknown_labels(self, label):
        with pytest.raises(UnsupportedProviderError):
            resolve_provider(label)

    def test_unsupported_provider_maps_to_422(self):
        with pytest.raises(UnsupportedProviderError) as exc_info:
            resolve_provider("Bank Transfer")
        assert exc_info.value.status_code == 422
        assert exc_info.value.provider_name == "Bank Transfer"


class TestPaymentVerification:
    def test_from_api(self):
        result = PaymentVerification.from_api({"status": "succeeded", "shopOrder": {"id": 9}})
        assert result.succeeded
        assert result.order_id == 9

    def test_pending(self):
        assert not PaymentVerification.from_api({"status": "PENDING"}).succeeded
